# Commission storage backend tests
from datetime import datetime, timezone

import pytest

from freight_rates.core.exceptions import CommissionStorageError
from freight_rates.schemas.commission import CommissionRecord
from freight_rates.services.commission.ledger import CommissionLedger
from freight_rates.services.commission.storage import (
    InMemoryCommissionStorage,
    JsonFileCommissionStorage,
    SqlCommissionStorage,
    get_commission_storage,
)


@pytest.fixture
def records():
    return [
        CommissionRecord(
            id="comm_1",
            timestamp=datetime(2024, 6, 1, 10, 30, tzinfo=timezone.utc),
            provider="shippo",
            carrier_name="Royal Mail",
            service_name="Tracked 48",
            customer_price=10.0,
            commission=0.75,
            commission_percentage=7.5,
            currency="GBP",
            shipment_id="SHP-1",
            customer_email="jo@example.com",
            route="London -> Leeds",
        ),
        CommissionRecord(
            id="comm_2",
            timestamp=datetime(2024, 6, 2, 8, 0, tzinfo=timezone.utc),
            provider="sendcloud",
            carrier_name="DPD",
            service_name="Classic",
            customer_price=20.0,
            commission=1.5,
            commission_percentage=7.5,
            currency="EUR",
        ),
    ]


def test_json_storage_save_and_load(tmp_path, records):
    storage = JsonFileCommissionStorage(tmp_path / "nested" / "commissions.json")

    storage.save(records)

    assert JsonFileCommissionStorage(storage.path).load() == records


def test_json_storage_missing_or_empty_file(tmp_path):
    path = tmp_path / "commissions.json"
    assert JsonFileCommissionStorage(path).load() == []

    path.write_text("  ", encoding="utf-8")
    assert JsonFileCommissionStorage(path).load() == []


def test_json_storage_corrupt_file(tmp_path):
    path = tmp_path / "commissions.json"
    path.write_text("{not json", encoding="utf-8")

    with pytest.raises(CommissionStorageError):
        JsonFileCommissionStorage(path).load()


def test_json_storage_clear(tmp_path, records):
    storage = JsonFileCommissionStorage(tmp_path / "commissions.json")
    storage.save(records)

    storage.clear()
    storage.clear()

    assert not storage.path.exists()


def test_sql_storage_save_and_load(tmp_path, records):
    url = f"sqlite:///{tmp_path / 'db' / 'commissions.db'}"
    SqlCommissionStorage(url).save(records)

    loaded = SqlCommissionStorage(url).load()

    assert [record.id for record in loaded] == ["comm_1", "comm_2"]
    assert loaded == records
    assert loaded[0].timestamp.tzinfo is not None


def test_sql_storage_save_replaces_collection(tmp_path, records):
    storage = SqlCommissionStorage(f"sqlite:///{tmp_path / 'commissions.db'}")
    storage.save(records)
    storage.save(records[:1])

    assert [record.id for record in storage.load()] == ["comm_1"]

    storage.clear()
    assert storage.load() == []


def test_in_memory_storage_copies(records):
    storage = InMemoryCommissionStorage()
    storage.save(records)
    records.pop()

    assert len(storage.load()) == 2


def test_get_commission_storage(settings, tmp_path):
    assert isinstance(get_commission_storage(settings), InMemoryCommissionStorage)

    json_settings = settings.model_copy(update={
        "COMMISSION_STORAGE_BACKEND": "JSON",
        "COMMISSION_STORAGE_PATH": str(tmp_path / "c.json"),
    })
    assert isinstance(get_commission_storage(json_settings), JsonFileCommissionStorage)

    sql_settings = settings.model_copy(update={
        "COMMISSION_STORAGE_BACKEND": "sql",
        "COMMISSION_DATABASE_URL": f"sqlite:///{tmp_path / 'c.db'}",
    })
    assert isinstance(get_commission_storage(sql_settings), SqlCommissionStorage)

    with pytest.raises(ValueError):
        get_commission_storage(settings.model_copy(update={"COMMISSION_STORAGE_BACKEND": "redis"}))


def test_corrupt_json_store_gives_empty_ledger(tmp_path):
    path = tmp_path / "commissions.json"
    path.write_text("[{\"id\": 1}]", encoding="utf-8")

    ledger = CommissionLedger(JsonFileCommissionStorage(path))

    assert ledger.records == ()


def test_corrupt_sql_store_gives_empty_ledger(tmp_path, settings, records):
    db_path = tmp_path / "commissions.db"
    db_path.write_bytes(b"\x00\xffthis is not a sqlite database" * 64)
    sql_settings = settings.model_copy(update={
        "COMMISSION_STORAGE_BACKEND": "sql",
        "COMMISSION_DATABASE_URL": f"sqlite:///{db_path}",
    })

    storage = get_commission_storage(sql_settings)

    with pytest.raises(CommissionStorageError):
        storage.load()

    ledger = CommissionLedger(storage)
    assert ledger.records == ()

    with pytest.raises(CommissionStorageError):
        storage.save(records)
