# freight_rates/cli/main.py
import asyncio
import json
import logging
from datetime import datetime, timezone
from pathlib import Path

import click
from pydantic import ValidationError

from freight_rates.core.config import get_settings
from freight_rates.core.logging_config import configure_logging
from freight_rates.schemas.shipping import ShipmentRequest
from freight_rates.services.commission.ledger import CommissionLedger
from freight_rates.services.commission.storage import get_commission_storage
from freight_rates.services.shipping.aggregator import RateAggregator
from freight_rates.services.shipping.commission import get_commission_config
from freight_rates.services.shipping.factory import get_configured_providers

logger = logging.getLogger(__name__)


def _ledger() -> CommissionLedger:
    settings = get_settings()
    return CommissionLedger(get_commission_storage(settings), get_commission_config(settings.COMMISSION_RULES))


@click.group()
@click.option('--verbose', is_flag=True, help='Enable debug logging')
def cli(verbose):
    """Freight rate comparison and commission tools"""
    if verbose:
        logging.getLogger().setLevel(logging.DEBUG)
        logging.getLogger("freight_rates").setLevel(logging.DEBUG)


@cli.command()
@click.argument('request_file', type=click.Path(exists=True, dir_okay=False, path_type=Path))
@click.option('--json-output', is_flag=True, help='Print the full comparison as JSON')
def quote(request_file, json_output):
    """Compare rates for the shipment described in REQUEST_FILE (JSON)"""
    try:
        shipment = ShipmentRequest.model_validate_json(request_file.read_text(encoding="utf-8"))
    except ValidationError as e:
        raise click.BadParameter(str(e), param_hint='REQUEST_FILE')

    settings = get_settings()
    aggregator = RateAggregator(
        get_configured_providers(settings),
        get_commission_config(settings.COMMISSION_RULES),
    )
    comparison = asyncio.run(aggregator.get_best_rates(shipment))

    if json_output:
        click.echo(comparison.model_dump_json(indent=2))
        return

    if not comparison.all_rates:
        click.echo("No quotes available")
        return

    for rate in comparison.all_rates:
        labels = [name for name, flag in (
            ('cheapest', rate.is_cheapest),
            ('fastest', rate.is_fastest),
            ('recommended', rate.is_recommended),
        ) if flag]
        click.echo(
            f"{rate.price:>10.2f} {rate.currency}  {rate.estimated_days:>3}d  "
            f"{rate.carrier_name} - {rate.service_name} [{rate.provider}]"
            + (f"  ({', '.join(labels)})" if labels else "")
        )
    click.echo(f"\nSavings vs most expensive: {comparison.savings:.2f}")


@cli.group()
def commissions():
    """Commission ledger reports"""


@commissions.command()
@click.option('--start', 'start_date', type=click.DateTime(), default=None, help='Inclusive start (UTC)')
@click.option('--end', 'end_date', type=click.DateTime(), default=None, help='Inclusive end (UTC)')
@click.option('--provider', default=None, help='Only this provider')
def summary(start_date, end_date, provider):
    """Print a commission summary"""
    result = _ledger().summarize(start_date, end_date, provider)
    click.echo(json.dumps(result.model_dump(mode="json"), indent=2))


@commissions.command()
@click.option('--start', 'start_date', type=click.DateTime(), default=None, help='Inclusive start (UTC)')
@click.option('--end', 'end_date', type=click.DateTime(), default=None, help='Inclusive end (UTC)')
@click.option('--output', type=click.Path(dir_okay=False, path_type=Path), default=None,
              help='Write to this file instead of stdout')
def export(start_date, end_date, output):
    """Export commission records as CSV"""
    csv_text = _ledger().export_csv(start_date, end_date)
    if output is None:
        click.echo(csv_text)
        return
    output.write_text(csv_text + "\n", encoding="utf-8")
    click.echo(f"Exported to {output} at {datetime.now(timezone.utc):%Y-%m-%d %H:%M:%S} UTC")


@commissions.command()
def status():
    """Show whether commissions are being tracked"""
    report = _ledger().status()
    click.echo(f"Status: {report.status.value.upper()}")
    click.echo(f"Average daily commission (30d): {report.average_daily_commission:.2f}")
    click.echo(f"Total records: {report.total_records}")
    if report.last_record:
        last = report.last_record
        click.echo(
            f"Latest: {last.carrier_name} - {last.service_name} "
            f"{last.commission:.2f} {last.currency} at {last.timestamp:%Y-%m-%d %H:%M:%S}"
        )


def main():
    configure_logging()
    cli()


if __name__ == '__main__':
    main()
