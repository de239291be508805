"""
Customs FX Data Providers Module

Fallback hierarchy: Customs API -> prior snapshot -> mock
"""

from customs_fx.providers.base import BaseRateProvider, RateProviderError
from customs_fx.providers.customs import CustomsApiClient
from customs_fx.providers.snapshot import PriorSnapshotProvider
from customs_fx.providers.mock import MockRateProvider
from customs_fx.providers.manager import FallbackExhaustedError, ProviderManager

__all__ = [
    "BaseRateProvider",
    "RateProviderError",
    "CustomsApiClient",
    "PriorSnapshotProvider",
    "MockRateProvider",
    "FallbackExhaustedError",
    "ProviderManager",
]
