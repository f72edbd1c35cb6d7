# tests/integration/test_cli.py
import json

import pytest
from click.testing import CliRunner

from freight_rates.cli.main import cli


@pytest.fixture
def runner():
    """Provides a CliRunner instance."""
    return CliRunner()


@pytest.fixture
def sandbox_settings(mocker, settings):
    sandbox = settings.model_copy(update={"SHIPPING_SANDBOX_MODE": True})
    mocker.patch("freight_rates.cli.main.get_settings", return_value=sandbox)
    return sandbox


@pytest.fixture
def request_file(tmp_path):
    path = tmp_path / "shipment.json"
    path.write_text(json.dumps({
        "sender": {"name": "Rock Shop", "street1": "12 Denmark St", "city": "London", "postal_code": "WC2H 8NE"},
        "recipient": {"name": "Jo", "street1": "1 High St", "city": "Leeds", "postal_code": "LS1 1AA"},
        "parcel": {"weight_kg": 2.5},
    }), encoding="utf-8")
    return path


def test_quote_lists_labelled_rates(runner, sandbox_settings, request_file):
    result = runner.invoke(cli, ["quote", str(request_file)])

    assert result.exit_code == 0, result.output
    assert "Evri - Economy [sandbox]  (cheapest)" in result.output
    # DPD: 10.25 + 1 * 10 beats the cheaper but slower services
    assert "DPD - Next Day [sandbox]  (fastest, recommended)" in result.output
    assert "Savings vs most expensive: 5.50" in result.output


def test_quote_json_output(runner, sandbox_settings, request_file):
    result = runner.invoke(cli, ["quote", str(request_file), "--json-output"])

    assert result.exit_code == 0, result.output
    data = json.loads(result.output)
    assert data["cheapest"]["carrier_name"] == "Evri"
    assert data["fastest"]["carrier_name"] == "DPD"


def test_quote_rejects_invalid_request(runner, sandbox_settings, tmp_path):
    path = tmp_path / "bad.json"
    path.write_text(json.dumps({"sender": {}}), encoding="utf-8")

    result = runner.invoke(cli, ["quote", str(path)])

    assert result.exit_code != 0


def test_commissions_status_empty(runner, sandbox_settings):
    result = runner.invoke(cli, ["commissions", "status"])

    assert result.exit_code == 0, result.output
    assert "Status: NONE" in result.output
    assert "Total records: 0" in result.output


def test_commissions_export_to_file(runner, sandbox_settings, tmp_path):
    output = tmp_path / "commissions.csv"

    result = runner.invoke(cli, ["commissions", "export", "--output", str(output)])

    assert result.exit_code == 0, result.output
    assert output.read_text(encoding="utf-8").startswith("Date,Time,Provider")
    assert result.output.rstrip().endswith("UTC")
