"""
Platform commission calculations.

Each provider has a configurable percentage plus a fixed fee on top of the
quoted price. Providers without their own rule use the "default" rule.
"""

from typing import Dict, Optional, Any

from pydantic import BaseModel, Field, model_validator

from freight_rates.core.config import get_settings, DEFAULT_COMMISSION_RULES


class CommissionRule(BaseModel):
    percentage: float = Field(ge=0)
    fixed_fee: float = Field(default=0.0, ge=0)


class CommissionConfig(BaseModel):
    """Per-provider commission rules, injected into the aggregator and ledger"""
    rules: Dict[str, CommissionRule]

    @model_validator(mode='after')
    def require_default(self):
        if "default" not in self.rules:
            raise ValueError("Commission rules must include a 'default' entry")
        return self

    @classmethod
    def from_mapping(cls, mapping: Dict[str, Dict[str, Any]]) -> "CommissionConfig":
        return cls(rules={name: CommissionRule(**rule) for name, rule in mapping.items()})

    def rule_for(self, provider: str) -> CommissionRule:
        return self.rules.get(provider) or self.rules["default"]

    def calculate(self, price: float, provider: str) -> float:
        """
        Commission for a single rate.

        Examples (default rules):
            shippo, 10.00 -> 10.00 * 4.5 / 100 + 0.30 = 0.75
            unknown, 10.00 -> 10.00 * 5.0 / 100 + 0.50 = 1.00
        """
        rule = self.rule_for(provider)
        return price * rule.percentage / 100 + rule.fixed_fee


def get_commission_config(rules: Optional[Dict[str, Dict[str, Any]]] = None) -> CommissionConfig:
    """Build the commission config from explicit rules or from settings"""
    if rules is None:
        rules = get_settings().COMMISSION_RULES or DEFAULT_COMMISSION_RULES
    return CommissionConfig.from_mapping(rules)
