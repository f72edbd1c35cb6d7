"""
Multi-provider rate aggregation.

Fans a shipment out to every configured provider at once, merges whatever
comes back, and labels the result for the customer:

- cheapest:    lowest price
- fastest:     fewest estimated days
- recommended: lowest `price + estimated_days * 10` (price dominates, each
               transit day costs 10 currency units)

Ties go to the first rate seen (provider order, then the provider's own
order). One provider failing or returning nothing never fails the whole
comparison; no rates at all is a normal, empty result.
"""

import asyncio
import logging
from typing import List, Optional, Sequence

from freight_rates.schemas.shipping import (
    RateComparison,
    RateCommissionSummary,
    ShipmentRequest,
    UnifiedRate,
)
from freight_rates.services.shipping.base import BaseRateProvider
from freight_rates.services.shipping.commission import CommissionConfig, get_commission_config

logger = logging.getLogger(__name__)

# Cost of one transit day when scoring the recommended rate
SPEED_WEIGHT = 10


def recommendation_score(rate: UnifiedRate) -> float:
    return rate.price + rate.estimated_days * SPEED_WEIGHT


class RateAggregator:
    """Compare rates across providers and pick the best options."""

    def __init__(
        self,
        providers: Sequence[BaseRateProvider],
        commission_config: Optional[CommissionConfig] = None,
    ):
        self.providers = list(providers)
        self.commission_config = commission_config or get_commission_config()

    async def get_best_rates(self, request: ShipmentRequest) -> RateComparison:
        """
        Get rates from all providers and return the best options for customers.

        Args:
            request: Shipment to quote

        Returns:
            RateComparison with all_rates sorted ascending by price
        """
        logger.info(f"Starting rate comparison across {len(self.providers)} providers")

        results = await asyncio.gather(
            *(provider.get_rates(request) for provider in self.providers),
            return_exceptions=True,
        )

        collected: List[UnifiedRate] = []
        for provider, result in zip(self.providers, results):
            if isinstance(result, BaseException):
                logger.warning(f"{provider.provider_name} rates failed: {result!r}")
                continue
            collected.extend(result)

        comparison = self.analyze_rates(collected)

        if comparison.cheapest is None:
            logger.info("No rates found")
        else:
            logger.info(
                f"Analysis complete: {len(comparison.all_rates)} rates, "
                f"cheapest {comparison.cheapest.carrier_name} {comparison.cheapest.price:.2f}, "
                f"fastest {comparison.fastest.carrier_name} {comparison.fastest.estimated_days} days, "
                f"recommended {comparison.recommended.carrier_name}, "
                f"total commission {comparison.total_commission:.2f}"
            )

        return comparison

    def analyze_rates(self, rates: List[UnifiedRate]) -> RateComparison:
        """Filter, attach commission, rank and label a merged rate list"""
        rates = [rate for rate in rates if rate.price is not None and rate.price > 0]
        if not rates:
            return RateComparison()

        for rate in rates:
            self.attach_commission(rate)

        # min() keeps the first of equal keys
        cheapest = min(rates, key=lambda rate: rate.price)
        fastest = min(rates, key=lambda rate: rate.estimated_days)
        recommended = min(rates, key=recommendation_score)
        most_expensive = max(rates, key=lambda rate: rate.price)

        for rate in rates:
            rate.is_cheapest = rate is cheapest
            rate.is_fastest = rate is fastest
            rate.is_recommended = rate is recommended

        all_rates = sorted(rates, key=lambda rate: rate.price)

        return RateComparison(
            cheapest=cheapest,
            fastest=fastest,
            recommended=recommended,
            all_rates=all_rates,
            savings=most_expensive.price - cheapest.price,
            total_commission=sum(rate.commission for rate in all_rates),
        )

    def attach_commission(self, rate: UnifiedRate) -> UnifiedRate:
        """Set the commission unless the rate already carries one"""
        if rate.commission is None:
            rate.commission = self.commission_config.calculate(rate.price, rate.provider)
        return rate


def summarize_rate_commissions(rates: List[UnifiedRate]) -> RateCommissionSummary:
    """
    Commission the platform would earn across a set of rates.

    average_margin is total commission as a percentage of total price.
    """
    summary = RateCommissionSummary()
    total_revenue = 0.0

    for rate in rates:
        commission = rate.commission or 0.0
        summary.total += commission
        summary.by_provider[rate.provider] = summary.by_provider.get(rate.provider, 0.0) + commission
        total_revenue += rate.price

    if total_revenue > 0:
        summary.average_margin = summary.total / total_revenue * 100

    return summary
