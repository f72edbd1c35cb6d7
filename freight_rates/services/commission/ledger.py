"""
Commission ledger.

Append-only log of the commission earned on each customer-confirmed booking,
plus the read side used by the admin dashboard and accounting:
summaries, top performers, CSV export and a tracking health check.

Persistence goes through a CommissionStorage. Storage problems are logged
and never stop a commission from being recorded: if loading fails the ledger
starts empty, if saving fails the in-memory records stay authoritative.
"""

import logging
import time
import uuid
from datetime import datetime, timedelta, timezone
from typing import Dict, List, Optional, Tuple

import pandas as pd

from freight_rates.core.enums import CommissionHealth
from freight_rates.core.exceptions import CommissionStorageError
from freight_rates.schemas.commission import (
    BreakdownEntry,
    CommissionRecord,
    CommissionStatusReport,
    CommissionSummary,
    CustomerContext,
    DailyTrend,
    Performer,
    TopPerformers,
)
from freight_rates.schemas.shipping import UnifiedRate
from freight_rates.services.commission.storage import CommissionStorage
from freight_rates.services.shipping.commission import CommissionConfig

logger = logging.getLogger(__name__)

CSV_COLUMNS = [
    'Date',
    'Time',
    'Provider',
    'Carrier',
    'Service',
    'Customer Price',
    'Commission',
    'Commission %',
    'Currency',
    'Route',
    'Shipment ID',
    'Customer Email',
]

STATUS_WINDOW_DAYS = 30
HEALTHY_DAILY_COMMISSION = 10
LOW_DAILY_COMMISSION = 1


def _as_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


def _new_record_id() -> str:
    return f"comm_{int(time.time() * 1000)}_{uuid.uuid4().hex[:9]}"


class CommissionLedger:
    """Append-only commission records with derived analytics."""

    def __init__(self, storage: CommissionStorage, commission_config: Optional[CommissionConfig] = None):
        """
        Args:
            storage: Where the full record collection is persisted
            commission_config: Used only for rates that arrive without a commission
        """
        self.storage = storage
        self.commission_config = commission_config
        self._records: List[CommissionRecord] = self._load()

    @property
    def records(self) -> Tuple[CommissionRecord, ...]:
        return tuple(self._records)

    def record(self, rate: UnifiedRate, customer: Optional[CustomerContext] = None) -> CommissionRecord:
        """
        Record the commission for a rate the customer has selected.

        Args:
            rate: The confirmed rate
            customer: Optional email / shipment id / route

        Returns:
            The stored CommissionRecord
        """
        customer = customer or CustomerContext()

        commission = rate.commission
        if commission is None:
            if self.commission_config is not None:
                commission = self.commission_config.calculate(rate.price, rate.provider)
            else:
                logger.warning(f"Rate {rate.id} has no commission attached, recording 0")
                commission = 0.0

        percentage = commission / rate.price * 100 if rate.price > 0 else 0.0

        record = CommissionRecord(
            id=_new_record_id(),
            timestamp=_utcnow(),
            provider=rate.provider,
            carrier_name=rate.carrier_name,
            service_name=rate.service_name,
            customer_price=rate.price,
            commission=commission,
            commission_percentage=percentage,
            currency=rate.currency,
            shipment_id=customer.shipment_id,
            customer_email=customer.email,
            route=customer.route or "Unknown",
        )

        # Read-modify-write with no await in between
        self._records.append(record)
        self._save()

        logger.info(
            f"Commission recorded: {record.id} {record.provider}/{record.carrier_name} "
            f"{record.commission:.2f} {record.currency}"
        )
        return record

    def summarize(
        self,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        provider: Optional[str] = None,
    ) -> CommissionSummary:
        """
        Totals, per-provider and per-carrier breakdowns and daily trends.

        Args:
            start_date: Inclusive lower bound (naive values are taken as UTC)
            end_date: Inclusive upper bound
            provider: Only records from this provider
        """
        records = self._filter(start_date, end_date, provider)

        summary = CommissionSummary(transaction_count=len(records))
        daily: Dict[str, DailyTrend] = {}

        for record in records:
            summary.total_commission += record.commission
            summary.total_revenue += record.customer_price

            for breakdown, key in ((summary.by_provider, record.provider), (summary.by_carrier, record.carrier_name)):
                entry = breakdown.setdefault(key, BreakdownEntry())
                entry.commission += record.commission
                entry.revenue += record.customer_price
                entry.count += 1

            day = _as_utc(record.timestamp).date().isoformat()
            trend = daily.setdefault(day, DailyTrend(date=day))
            trend.commission += record.commission
            trend.revenue += record.customer_price
            trend.count += 1

        for entry in list(summary.by_provider.values()) + list(summary.by_carrier.values()):
            entry.average_commission = entry.commission / entry.count

        if summary.total_revenue > 0:
            summary.average_margin = summary.total_commission / summary.total_revenue * 100

        summary.daily_trends = [daily[day] for day in sorted(daily)]
        return summary

    def top_performers(self, limit: int = 5) -> TopPerformers:
        """Providers and carriers ranked by commission earned, all time"""
        summary = self.summarize()

        def rank(breakdown: Dict[str, BreakdownEntry]) -> List[Performer]:
            performers = [
                Performer(name=name, commission=entry.commission, count=entry.count)
                for name, entry in breakdown.items()
            ]
            performers.sort(key=lambda performer: performer.commission, reverse=True)
            return performers[:limit]

        return TopPerformers(
            top_providers=rank(summary.by_provider),
            top_carriers=rank(summary.by_carrier),
        )

    def export_csv(self, start_date: Optional[datetime] = None, end_date: Optional[datetime] = None) -> str:
        """
        Commission records as CSV for accounting.

        Dates and times are UTC; money to 2 decimals; the percentage column
        carries a trailing '%'.
        """
        rows = []
        for record in self._filter(start_date, end_date):
            timestamp = _as_utc(record.timestamp)
            rows.append([
                timestamp.strftime('%Y-%m-%d'),
                timestamp.strftime('%H:%M:%S'),
                record.provider,
                record.carrier_name,
                record.service_name,
                f"{record.customer_price:.2f}",
                f"{record.commission:.2f}",
                f"{record.commission_percentage:.2f}%",
                record.currency,
                record.route,
                record.shipment_id or '',
                record.customer_email or '',
            ])

        df = pd.DataFrame(rows, columns=CSV_COLUMNS, dtype=str)
        return df.to_csv(index=False, lineterminator='\n').rstrip('\n')

    def status(self) -> CommissionStatusReport:
        """
        Is commission tracking alive? Based on the trailing 30 days, always
        averaged over the full window.
        """
        now = _utcnow()
        recent = self.summarize(now - timedelta(days=STATUS_WINDOW_DAYS), now)
        average_daily = recent.total_commission / STATUS_WINDOW_DAYS

        if average_daily > HEALTHY_DAILY_COMMISSION:
            status = CommissionHealth.HEALTHY
        elif average_daily > LOW_DAILY_COMMISSION:
            status = CommissionHealth.LOW
        else:
            status = CommissionHealth.NONE

        return CommissionStatusReport(
            is_tracking=len(self._records) > 0,
            total_records=len(self._records),
            last_record=self._records[-1] if self._records else None,
            average_daily_commission=average_daily,
            status=status,
        )

    def clear(self) -> None:
        """Remove all records, in memory and in storage (use with caution)"""
        self._records = []
        try:
            self.storage.clear()
        except CommissionStorageError as e:
            logger.warning(f"Failed to clear commission records: {e}")
        logger.warning("Commission records cleared")

    def _filter(
        self,
        start_date: Optional[datetime] = None,
        end_date: Optional[datetime] = None,
        provider: Optional[str] = None,
    ) -> List[CommissionRecord]:
        start = _as_utc(start_date) if start_date else None
        end = _as_utc(end_date) if end_date else None

        filtered = []
        for record in self._records:
            timestamp = _as_utc(record.timestamp)
            if start and timestamp < start:
                continue
            if end and timestamp > end:
                continue
            if provider and record.provider != provider:
                continue
            filtered.append(record)
        return filtered

    def _load(self) -> List[CommissionRecord]:
        try:
            records = self.storage.load()
        except CommissionStorageError as e:
            logger.warning(f"Failed to load commission records, starting empty: {e}")
            return []
        logger.info(f"Loaded {len(records)} commission records")
        return list(records)

    def _save(self) -> None:
        try:
            self.storage.save(self._records)
        except CommissionStorageError as e:
            logger.warning(f"Failed to save commission records: {e}")
