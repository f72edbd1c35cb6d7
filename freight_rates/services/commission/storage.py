"""
Storage backends for the commission ledger.

Every backend reads and writes the whole collection: `load()` on ledger start
up, `save()` after each append. Failures surface as CommissionStorageError;
the ledger decides what to do about them.
"""

import json
import logging
from abc import ABC, abstractmethod
from datetime import timezone
from pathlib import Path
from typing import List, Optional, Sequence

from pydantic import TypeAdapter, ValidationError
from sqlalchemy import delete, select
from sqlalchemy.exc import SQLAlchemyError

from freight_rates.core.config import Settings, get_settings
from freight_rates.core.exceptions import CommissionStorageError
from freight_rates.database import Base, create_db_engine, create_session_factory
from freight_rates.models.commission import CommissionRecordRow
from freight_rates.schemas.commission import CommissionRecord

logger = logging.getLogger(__name__)

_records_adapter = TypeAdapter(List[CommissionRecord])


class CommissionStorage(ABC):
    """Key-value style port: one named collection of commission records"""

    @abstractmethod
    def load(self) -> List[CommissionRecord]:
        pass

    @abstractmethod
    def save(self, records: Sequence[CommissionRecord]) -> None:
        pass

    @abstractmethod
    def clear(self) -> None:
        pass


class InMemoryCommissionStorage(CommissionStorage):
    """Process-local storage, used for tests and throwaway sessions"""

    def __init__(self, records: Optional[Sequence[CommissionRecord]] = None):
        self._records = list(records or [])

    def load(self) -> List[CommissionRecord]:
        return list(self._records)

    def save(self, records: Sequence[CommissionRecord]) -> None:
        self._records = list(records)

    def clear(self) -> None:
        self._records = []


class JsonFileCommissionStorage(CommissionStorage):
    """All records as one JSON array in a file"""

    def __init__(self, path):
        self.path = Path(path)

    def load(self) -> List[CommissionRecord]:
        if not self.path.exists():
            return []
        try:
            raw = self.path.read_text(encoding="utf-8")
            if not raw.strip():
                return []
            return _records_adapter.validate_json(raw)
        except (OSError, ValidationError, ValueError) as e:
            raise CommissionStorageError(f"Could not load commission records from {self.path}: {e}")

    def save(self, records: Sequence[CommissionRecord]) -> None:
        payload = [record.model_dump(mode="json") for record in records]
        tmp_path = self.path.with_suffix(self.path.suffix + ".tmp")
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            tmp_path.write_text(json.dumps(payload, indent=2), encoding="utf-8")
            tmp_path.replace(self.path)
        except OSError as e:
            raise CommissionStorageError(f"Could not save commission records to {self.path}: {e}")

    def clear(self) -> None:
        try:
            self.path.unlink(missing_ok=True)
        except OSError as e:
            raise CommissionStorageError(f"Could not remove {self.path}: {e}")


class SqlCommissionStorage(CommissionStorage):
    """Embedded database storage via SQLAlchemy (SQLite by default)"""

    def __init__(self, database_url: str):
        self.database_url = database_url
        if database_url.startswith("sqlite:///"):
            db_path = Path(database_url[len("sqlite:///"):])
            if db_path.parent and str(db_path) != ":memory:":
                db_path.parent.mkdir(parents=True, exist_ok=True)
        self.engine = create_db_engine(database_url)
        self.session_factory = create_session_factory(self.engine)
        self._table_ready = False

    def _ensure_table(self) -> None:
        if self._table_ready:
            return
        try:
            Base.metadata.create_all(self.engine, tables=[CommissionRecordRow.__table__])
        except SQLAlchemyError as e:
            raise CommissionStorageError(f"Could not prepare commission table at {self.database_url}: {e}")
        self._table_ready = True

    def load(self) -> List[CommissionRecord]:
        self._ensure_table()
        try:
            with self.session_factory() as session:
                rows = session.execute(
                    select(CommissionRecordRow).order_by(CommissionRecordRow.position)
                ).scalars().all()
                records = []
                for row in rows:
                    record = CommissionRecord.from_orm_model(row)
                    if record.timestamp.tzinfo is None:
                        # SQLite drops the offset; everything is stored as UTC
                        record = record.model_copy(update={"timestamp": record.timestamp.replace(tzinfo=timezone.utc)})
                    records.append(record)
                return records
        except (SQLAlchemyError, ValidationError) as e:
            raise CommissionStorageError(f"Could not load commission records: {e}")

    def save(self, records: Sequence[CommissionRecord]) -> None:
        self._ensure_table()
        try:
            with self.session_factory() as session:
                with session.begin():
                    session.execute(delete(CommissionRecordRow))
                    session.add_all(
                        CommissionRecordRow(position=index, **record.model_dump())
                        for index, record in enumerate(records)
                    )
        except SQLAlchemyError as e:
            raise CommissionStorageError(f"Could not save commission records: {e}")

    def clear(self) -> None:
        self._ensure_table()
        try:
            with self.session_factory() as session:
                with session.begin():
                    session.execute(delete(CommissionRecordRow))
        except SQLAlchemyError as e:
            raise CommissionStorageError(f"Could not clear commission records: {e}")


def get_commission_storage(settings: Optional[Settings] = None) -> CommissionStorage:
    """
    Storage backend selected by COMMISSION_STORAGE_BACKEND

    Raises:
        ValueError: If the backend name is not supported
    """
    settings = settings or get_settings()
    backend = settings.COMMISSION_STORAGE_BACKEND.lower()

    if backend == "memory":
        return InMemoryCommissionStorage()
    if backend == "json":
        return JsonFileCommissionStorage(settings.COMMISSION_STORAGE_PATH)
    if backend == "sql":
        return SqlCommissionStorage(settings.COMMISSION_DATABASE_URL)

    raise ValueError(f"Commission storage backend '{settings.COMMISSION_STORAGE_BACKEND}' is not supported")
