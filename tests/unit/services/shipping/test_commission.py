# Commission rule unit tests
import pytest
from pydantic import ValidationError

from freight_rates.core.config import DEFAULT_COMMISSION_RULES
from freight_rates.services.shipping.commission import CommissionConfig, get_commission_config


@pytest.mark.parametrize("provider,price,expected", [
    ("shippo", 10.00, 0.75),
    ("sendcloud", 10.00, 1.00),
    ("searates", 10.00, 1.00),
    ("shippo", 200.00, 9.30),
])
def test_calculate(commission_config, provider, price, expected):
    assert commission_config.calculate(price, provider) == pytest.approx(expected)


def test_default_rule_is_required():
    with pytest.raises(ValidationError):
        CommissionConfig.from_mapping({"shippo": {"percentage": 4.5, "fixed_fee": 0.30}})


def test_negative_percentage_rejected():
    with pytest.raises(ValidationError):
        CommissionConfig.from_mapping({"default": {"percentage": -1}})


def test_custom_rules_are_injected():
    config = get_commission_config({"default": {"percentage": 10}})
    assert config.calculate(50.0, "shippo") == pytest.approx(5.0)


def test_get_commission_config_falls_back_to_settings(mocker):
    mocker.patch(
        "freight_rates.services.shipping.commission.get_settings",
        return_value=mocker.MagicMock(COMMISSION_RULES=DEFAULT_COMMISSION_RULES),
    )
    config = get_commission_config()
    assert set(config.rules) == {"sendcloud", "shippo", "default"}
