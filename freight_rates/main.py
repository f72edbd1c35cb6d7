# freight_rates/main.py

import logging
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from freight_rates.core.config import Settings, get_settings
from freight_rates.core.logging_config import configure_logging
from freight_rates.routes import commissions, health, shipping
from freight_rates.services.commission.ledger import CommissionLedger
from freight_rates.services.commission.storage import get_commission_storage
from freight_rates.services.shipping.aggregator import RateAggregator
from freight_rates.services.shipping.commission import get_commission_config
from freight_rates.services.shipping.factory import get_configured_providers

logger = logging.getLogger(__name__)


def build_services(settings: Settings):
    """Aggregator and ledger sharing one commission config"""
    commission_config = get_commission_config(settings.COMMISSION_RULES)
    aggregator = RateAggregator(get_configured_providers(settings), commission_config)
    ledger = CommissionLedger(get_commission_storage(settings), commission_config)
    return aggregator, ledger


def create_app(settings: Optional[Settings] = None) -> FastAPI:
    """Create and configure the FastAPI application"""
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        if not hasattr(app.state, "rate_aggregator"):
            app.state.rate_aggregator, app.state.commission_ledger = build_services(settings)
        logger.info(
            f"Freight rates service started ({settings.ENVIRONMENT}), providers: "
            f"{[p.provider_code for p in app.state.rate_aggregator.providers]}"
        )
        yield

    app = FastAPI(
        title="Freight Rates API",
        description="Multi-provider shipping rate comparison and commission tracking",
        version="1.0.0",
        debug=settings.DEBUG,
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],  # In production, replace with specific origins
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(shipping.router)
    app.include_router(commissions.router)

    return app


configure_logging()
app = create_app()
