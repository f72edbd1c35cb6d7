from .aggregator import RateAggregator, summarize_rate_commissions
from .base import BaseRateProvider
from .commission import CommissionConfig, CommissionRule, get_commission_config
from .factory import get_configured_providers, get_rate_provider
