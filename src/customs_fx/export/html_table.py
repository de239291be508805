"""
Latest-Week HTML Table

Static, dependency-free table of the most recent week for a short list
of major currencies, one table per direction.
"""

import logging
from pathlib import Path

from jinja2 import Environment, PackageLoader

from customs_fx.config import Settings, get_settings
from customs_fx.export.json_exporter import SnapshotError, SnapshotStore
from customs_fx.models import Dataset, RateRecord, RateType

logger = logging.getLogger(__name__)

IMPORTANT_CODES = ["USD", "EUR", "CNY", "JPY"]

SECTION_TITLES = {
    RateType.EXPORT: "수출 환율",
    RateType.IMPORT: "수입 환율",
}


def format_rate(value: float) -> str:
    """Shortest exact text for a rate (1300.0 -> "1300", 1300.5 -> "1300.5")."""
    if float(value).is_integer():
        return str(int(value))
    return repr(float(value))


_env = Environment(
    loader=PackageLoader("customs_fx", "templates"),
    autoescape=True,
    trim_blocks=True,
)
_env.filters["rate"] = format_rate


def pick_important_rates(
    records: list[RateRecord],
    codes: list[str] = IMPORTANT_CODES
) -> list[RateRecord]:
    """First record per shortlisted code, in shortlist order; missing codes are skipped."""
    picked = []
    for code in codes:
        hit = next((r for r in records if r.currency_code.upper() == code), None)
        if hit is not None:
            picked.append(hit)
    return picked


def render_latest_table(dataset: Dataset) -> str | None:
    """Render the newest week of *dataset*, or None when it has no weeks."""
    latest = dataset.latest_week
    if latest is None:
        return None

    sections = [
        {"title": SECTION_TITLES[rate_type], "rates": pick_important_rates(latest.records(rate_type))}
        for rate_type in (RateType.EXPORT, RateType.IMPORT)
    ]

    template = _env.get_template("rates_table.html.j2")
    return template.render(
        start_date=latest.start_date.isoformat(),
        generated_at=dataset.generated_at or "",
        sections=sections,
    )


def write_table_html(dataset: Dataset, targets: list[Path]) -> list[Path]:
    """
    Write the latest-week table to every target path.

    Returns:
        Paths written; empty when the dataset has no weeks
    """
    html = render_latest_table(dataset)
    if html is None:
        logger.warning("No weeks available, skipping table.html write.")
        return []

    written = []
    for target in targets:
        target = Path(target)
        target.parent.mkdir(parents=True, exist_ok=True)
        target.write_text(html, encoding="utf-8")
        logger.info(f"Wrote latest table view to {target}")
        written.append(target)
    return written


def build_table_from_snapshot(settings: Settings | None = None) -> list[Path]:
    """
    Re-render the table from the persisted snapshot.

    Raises:
        SnapshotError: If the snapshot is missing or holds no weeks
    """
    settings = settings or get_settings()
    store = SnapshotStore(settings.snapshot_path)

    if not store.exists():
        raise SnapshotError(f"Missing source file: {store.path}")

    dataset = store.load()
    if not dataset.weeks:
        raise SnapshotError(f"No weeks found in {store.path}")

    return write_table_html(dataset, settings.table_paths)
