"""
Dashboard Reader

Derives the dashboard views from a loaded snapshot: flattened records per
direction, current vs previous week, chart series for the major currencies
and stat-card comparisons. Everything here is a pure function of the
dataset.
"""

import json
import logging
import math
from datetime import date
from pathlib import Path
from typing import Any

from pydantic import BaseModel, Field

from customs_fx.anchors import period_range
from customs_fx.export.json_exporter import SnapshotError
from customs_fx.models import Dataset, RateRecord, RateType, WeekBucket

logger = logging.getLogger(__name__)

CHART_CODES = ["USD", "JPY", "EUR", "CNY"]
STAT_CARD_CODES = ["USD", "EUR", "CNY", "JPY"]


# === Views ===

class StatCard(BaseModel):
    currency_code: str
    currency_name: str = ""
    rate: float | None = None
    previous_rate: float | None = None
    change: float | None = None
    change_percent: float | None = None


class ChartPoint(BaseModel):
    date: date
    rates: dict[str, float] = Field(default_factory=dict)


class DashboardView(BaseModel):
    rate_type: RateType
    generated_at: str | None = None
    source: str | None = None
    current_period: str = ""
    all_records: list[RateRecord] = Field(default_factory=list)
    current_week: list[RateRecord] = Field(default_factory=list)
    previous_week: list[RateRecord] = Field(default_factory=list)
    chart: list[ChartPoint] = Field(default_factory=list)
    stat_cards: list[StatCard] = Field(default_factory=list)


# === Normalization ===

def _coerce_rate(value: Any) -> float:
    if isinstance(value, bool):
        return 0.0
    try:
        rate = float(value or 0)
    except (TypeError, ValueError):
        return 0.0
    return rate if math.isfinite(rate) and rate >= 0 else 0.0


def _coerce_text(*values: Any) -> str:
    """First non-empty value as text."""
    for value in values:
        if value is not None and value != "":
            return str(value)
    return ""


def _normalize_entry(entry: dict[str, Any], rate_type: RateType, start_date: date) -> RateRecord:
    code = _coerce_text(entry.get("currencyCode"), entry.get("currSgn"))
    return RateRecord(
        id=_coerce_text(entry.get("id")) or f"{start_date.isoformat()}-{code or 'UNKNOWN'}-{rate_type.value}",
        country_code=_coerce_text(entry.get("countryCode"), entry.get("cntySgn")),
        currency_name=_coerce_text(entry.get("currencyName"), entry.get("mtryUtNm")),
        currency_code=code,
        rate=_coerce_rate(entry.get("rate", entry.get("fxrt"))),
        date=start_date,
        type=rate_type,
    )


def normalize_dataset(raw: dict[str, Any]) -> Dataset:
    """
    Build a Dataset from loosely shaped snapshot JSON.

    Accepts ``startDate`` or ``date`` for the week, camelCase or upstream
    field names for records. Weeks without a parseable start date are
    dropped.
    """
    weeks: list[WeekBucket] = []
    weeks_raw = raw.get("weeks") if isinstance(raw, dict) else None

    for week in weeks_raw if isinstance(weeks_raw, list) else []:
        if not isinstance(week, dict):
            continue
        try:
            start_date = date.fromisoformat(str(week.get("startDate") or week.get("date") or ""))
        except ValueError:
            logger.warning(f"Dropping week with invalid start date: {week.get('startDate')!r}")
            continue

        lists = {}
        for rate_type in RateType:
            entries = week.get(rate_type.value)
            lists[rate_type] = [
                _normalize_entry(entry, rate_type, start_date)
                for entry in (entries if isinstance(entries, list) else [])
                if isinstance(entry, dict)
            ]

        weeks.append(WeekBucket(
            start_date=start_date,
            export_rates=lists[RateType.EXPORT],
            import_rates=lists[RateType.IMPORT],
        ))

    generated_at = raw.get("generatedAt") if isinstance(raw, dict) else None
    source = raw.get("source") if isinstance(raw, dict) else None
    return Dataset(
        generated_at=generated_at if isinstance(generated_at, str) else "",
        source=source if isinstance(source, str) else None,
        weeks=weeks,
    )


def load_snapshot(path: str | Path) -> Dataset:
    """
    Read the snapshot file once and normalize it.

    Raises:
        SnapshotError: If the file is missing or is not valid JSON
    """
    path = Path(path)
    try:
        with open(path, encoding="utf-8") as f:
            raw = json.load(f)
    except FileNotFoundError as e:
        raise SnapshotError(f"Snapshot not generated yet: {path.name}") from e
    except (OSError, json.JSONDecodeError) as e:
        logger.error(f"Failed to load rate dataset {path}: {e}")
        raise SnapshotError(f"Unreadable snapshot: {path.name}") from e
    return normalize_dataset(raw)


# === Derivations ===

def sort_weeks(dataset: Dataset) -> list[WeekBucket]:
    """Weeks newest first, whatever order the file had."""
    return sorted(dataset.weeks, key=lambda w: w.start_date, reverse=True)


def pick_rates_by_type(dataset: Dataset, rate_type: RateType) -> list[list[RateRecord]]:
    return [week.records(rate_type) for week in sort_weeks(dataset)]


def find_rate(records: list[RateRecord], code: str) -> RateRecord | None:
    return next((r for r in records if r.currency_code == code), None)


def build_chart(records: list[RateRecord], codes: list[str] = CHART_CODES) -> list[ChartPoint]:
    """One point per date, oldest first, with rates of the charted currencies."""
    points: dict[date, ChartPoint] = {}
    for record in records:
        point = points.setdefault(record.date, ChartPoint(date=record.date))
        if record.currency_code in codes:
            point.rates[record.currency_code] = record.rate
    return sorted(points.values(), key=lambda p: p.date)


def build_stat_card(code: str, current: list[RateRecord], previous: list[RateRecord]) -> StatCard:
    now = find_rate(current, code)
    before = find_rate(previous, code)

    card = StatCard(
        currency_code=code,
        currency_name=now.currency_name if now else "",
        rate=now.rate if now else None,
        previous_rate=before.rate if before else None,
    )
    if card.rate is not None and card.previous_rate is not None:
        card.change = round(card.rate - card.previous_rate, 4)
        if card.previous_rate:
            card.change_percent = round(card.change / card.previous_rate * 100, 4)
    return card


def build_dashboard(dataset: Dataset, rate_type: RateType = RateType.IMPORT) -> DashboardView:
    """All views the dashboard renders for one direction."""
    per_week = pick_rates_by_type(dataset, rate_type)
    current = per_week[0] if per_week else []
    previous = per_week[1] if len(per_week) > 1 else []
    flattened = [record for week in per_week for record in week]

    return DashboardView(
        rate_type=rate_type,
        generated_at=dataset.generated_at,
        source=dataset.source,
        current_period=period_range(current[0].date) if current else "",
        all_records=flattened,
        current_week=current,
        previous_week=previous,
        chart=build_chart(flattened),
        stat_cards=[build_stat_card(code, current, previous) for code in STAT_CARD_CODES],
    )
