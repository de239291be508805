"""
Base Rate Provider Interface

A provider yields the records of one week and one direction, or raises
RateProviderError. An empty list means "no data" and lets the next
provider in the fallback chain take over.
"""

import math
from abc import ABC, abstractmethod
from datetime import date
from typing import Any

from customs_fx.models import RateRecord, RateType


class RateProviderError(Exception):
    """Base exception for rate provider errors."""

    def __init__(
        self,
        message: str,
        provider: str,
        error_type: str = "UNKNOWN",
        details: dict[str, Any] | None = None
    ):
        super().__init__(message)
        self.provider = provider
        self.error_type = error_type
        self.details = details or {}


class BaseRateProvider(ABC):
    """Abstract base class for weekly customs rate sources."""

    PROVIDER_NAME: str = "base"

    @property
    def available(self) -> bool:
        """Whether the provider can be asked at all (credentials, data loaded)."""
        return True

    @abstractmethod
    async def fetch_week(self, anchor: date, rate_type: RateType) -> list[RateRecord]:
        """
        Fetch all currency rates for the week starting on *anchor*.

        Args:
            anchor: Sunday the week starts on
            rate_type: Export or import rates

        Returns:
            Records dated *anchor*; empty when the source has nothing

        Raises:
            RateProviderError: If fetching fails
        """
        pass

    @staticmethod
    def _to_rate(value: Any) -> float | None:
        """Parse a rate; None unless it is a finite, non-negative number."""
        if value is None:
            return None
        try:
            rate = float(str(value).strip())
        except ValueError:
            return None
        if not math.isfinite(rate) or rate < 0:
            return None
        return rate
