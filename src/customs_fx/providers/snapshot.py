"""
Prior Snapshot Provider (Fallback 1)

Serves weeks from the previously written snapshot so that last-known-good
data survives transient upstream outages.
"""

import logging
from datetime import date

from customs_fx.models import Dataset, RateRecord, RateType, WeekBucket
from customs_fx.providers.base import BaseRateProvider

logger = logging.getLogger(__name__)


class PriorSnapshotProvider(BaseRateProvider):
    """Read-only lookup of the last persisted snapshot, keyed by start date."""

    PROVIDER_NAME = "snapshot"

    def __init__(self, previous: Dataset | None = None):
        self._weeks: dict[date, WeekBucket] = {}
        if previous is not None:
            for week in previous.weeks:
                # First occurrence wins if a hand-edited file repeats a week
                self._weeks.setdefault(week.start_date, week)

    @property
    def available(self) -> bool:
        return bool(self._weeks)

    async def fetch_week(self, anchor: date, rate_type: RateType) -> list[RateRecord]:
        week = self._weeks.get(anchor)
        if week is None:
            return []

        records = list(week.records(rate_type))
        if records:
            logger.info(
                f"Reusing {len(records)} {rate_type.value} rates "
                f"for {anchor.isoformat()} from prior snapshot"
            )
        return records
