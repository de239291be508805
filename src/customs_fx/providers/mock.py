"""
Synthetic Rate Provider (Fallback 2)

Deterministic stand-in data for a fixed set of major currencies, used when
neither the API nor a prior snapshot has the week. Rates wobble slightly
from week to week along a sine wave seeded by the anchor date, so repeated
runs produce identical, plausible-looking but clearly non-authoritative
values.
"""

import logging
import math
from datetime import date

from customs_fx.anchors import to_api_date
from customs_fx.models import RateRecord, RateType
from customs_fx.providers.base import BaseRateProvider

logger = logging.getLogger(__name__)

# (country code, currency code, currency name, base KRW rate)
MOCK_CURRENCIES: list[tuple[str, str, str, float]] = [
    ("US", "USD", "US Dollar", 1330.0),
    ("EU", "EUR", "Euro", 1450.0),
    ("JP", "JPY", "Japanese Yen (100)", 905.0),
    ("CN", "CNY", "Chinese Yuan", 183.5),
    ("GB", "GBP", "British Pound", 1690.0),
    ("AU", "AUD", "Australian Dollar", 880.0),
]

AMPLITUDE = 0.015
IMPORT_SPREAD = 0.004


class MockRateProvider(BaseRateProvider):
    """Low-amplitude sinusoidal rates around fixed base values."""

    PROVIDER_NAME = "mock"

    async def fetch_week(self, anchor: date, rate_type: RateType) -> list[RateRecord]:
        records = self.generate(anchor, rate_type)
        logger.info(
            f"Generated {len(records)} mock {rate_type.value} rates "
            f"for {anchor.isoformat()}"
        )
        return records

    @staticmethod
    def generate(anchor: date, rate_type: RateType) -> list[RateRecord]:
        week_index = anchor.toordinal() / 7
        spread = IMPORT_SPREAD if rate_type is RateType.IMPORT else 0.0

        records = []
        for idx, (country, code, name, base) in enumerate(MOCK_CURRENCIES):
            wave = math.sin(week_index * 0.35 + idx * 1.3)
            rate = round(base * (1 + AMPLITUDE * wave) * (1 + spread), 2)
            records.append(RateRecord(
                id=f"{to_api_date(anchor)}-{code}-{rate_type.api_code}",
                country_code=country,
                currency_name=name,
                currency_code=code,
                rate=rate,
                date=anchor,
                type=rate_type,
            ))
        return records
