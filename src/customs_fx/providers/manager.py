"""
Provider Manager with Fallback Hierarchy

Fallback order per week and direction: Customs API -> prior snapshot -> mock.
"""

import logging
import time
from datetime import date

import httpx

from customs_fx.config import Settings, get_settings
from customs_fx.models import Dataset, RateRecord, RateType
from customs_fx.providers.base import BaseRateProvider, RateProviderError
from customs_fx.providers.customs import CustomsApiClient
from customs_fx.providers.mock import MockRateProvider
from customs_fx.providers.snapshot import PriorSnapshotProvider

logger = logging.getLogger(__name__)


class FallbackExhaustedError(RuntimeError):
    """No provider in the chain had data for a week and direction."""

    def __init__(self, anchor: date, rate_type: RateType, errors: list[RateProviderError]):
        super().__init__(
            f"No data for {anchor.isoformat()} ({rate_type.value}). "
            f"Errors: {[(e.provider, e.error_type) for e in errors]}"
        )
        self.anchor = anchor
        self.rate_type = rate_type
        self.errors = errors


class ProviderManager:
    """Evaluates providers in order until one returns records."""

    def __init__(self, providers: list[BaseRateProvider]):
        self.providers = providers

    @classmethod
    def from_settings(
        cls,
        settings: Settings | None = None,
        previous: Dataset | None = None,
        client: httpx.AsyncClient | None = None
    ) -> "ProviderManager":
        settings = settings or get_settings()

        providers: list[BaseRateProvider] = [CustomsApiClient(settings, client)]
        if settings.snapshot_fallback_enabled:
            providers.append(PriorSnapshotProvider(previous))
        if settings.mock_fallback_enabled:
            providers.append(MockRateProvider())

        return cls(providers)

    async def fetch_with_fallback(
        self,
        anchor: date,
        rate_type: RateType
    ) -> tuple[list[RateRecord], str]:
        """
        Attempt providers in order.

        Returns:
            Tuple of (records, provider_name_used)

        Raises:
            FallbackExhaustedError: If no provider has data
        """
        errors: list[RateProviderError] = []
        label = f"{anchor.isoformat()} ({rate_type.value})"

        for provider in self.providers:
            name = provider.PROVIDER_NAME
            if not provider.available:
                logger.debug(f"Skipping {name} for {label}: not available")
                continue

            start_time = time.monotonic()
            try:
                records = await provider.fetch_week(anchor, rate_type)
            except RateProviderError as e:
                errors.append(e)
                logger.warning(f"{name} failed for {label}: {e}")
                continue

            if not records:
                logger.info(f"{name} has no data for {label}")
                continue

            latency_ms = int((time.monotonic() - start_time) * 1000)
            logger.info(f"Using {name} for {label} ({len(records)} rates, {latency_ms}ms)")
            return records, name

        raise FallbackExhaustedError(anchor, rate_type, errors)
