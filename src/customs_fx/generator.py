"""
Customs FX Dataset Generator

Batch job: compute recent anchors, resolve both directions of every week
through the provider fallback chain, write the JSON snapshot and the
latest-week HTML table.
"""

import asyncio
import logging
from datetime import date, datetime
from typing import Any

import httpx

from customs_fx.anchors import recent_sundays
from customs_fx.config import Settings, get_settings
from customs_fx.export.html_table import write_table_html
from customs_fx.export.json_exporter import SnapshotStore, content_fingerprint
from customs_fx.models import Dataset, RateType, WeekBucket
from customs_fx.providers.manager import FallbackExhaustedError, ProviderManager

logger = logging.getLogger(__name__)


async def build_week(manager: ProviderManager, anchor: date) -> tuple[WeekBucket, dict[str, str]] | None:
    """
    Resolve export and import for one anchor concurrently.

    Returns:
        (bucket, provider used per direction), or None when either
        direction has no data at all
    """
    results = await asyncio.gather(
        manager.fetch_with_fallback(anchor, RateType.EXPORT),
        manager.fetch_with_fallback(anchor, RateType.IMPORT),
        return_exceptions=True,
    )

    missing = [r for r in results if isinstance(r, FallbackExhaustedError)]
    for result in results:
        if isinstance(result, BaseException) and not isinstance(result, FallbackExhaustedError):
            raise result

    if missing:
        directions = ", ".join(e.rate_type.value for e in missing)
        logger.warning(f"No data available for {anchor.isoformat()} ({directions}). Skipping week.")
        return None

    (export_rates, export_provider), (import_rates, import_provider) = results
    bucket = WeekBucket(
        start_date=anchor,
        export_rates=export_rates,
        import_rates=import_rates,
    )
    return bucket, {"export": export_provider, "import": import_provider}


async def build_dataset(
    settings: Settings | None = None,
    now: datetime | None = None,
    client: httpx.AsyncClient | None = None,
    previous: Dataset | None = None,
) -> tuple[Dataset, dict[str, dict[str, str]]]:
    """
    Assemble the dataset for the configured week window.

    Anchors are processed one at a time to bound outbound requests.

    Args:
        settings: Settings to use. Defaults to the cached environment settings.
        now: Reference instant for the anchor window
        client: Shared HTTP client for the customs API
        previous: Prior snapshot. Loaded from disk when omitted.

    Returns:
        Tuple of (dataset without generatedAt, provider used per week)
    """
    settings = settings or get_settings()

    if previous is None:
        previous = SnapshotStore(settings.snapshot_path).load()

    anchors = recent_sundays(
        settings.weeks_to_fetch,
        now=now,
        tz=settings.anchor_timezone,
        include_upcoming=settings.include_upcoming_week,
    )
    logger.info(
        f"Building {len(anchors)} weeks: {anchors[-1].isoformat()} .. {anchors[0].isoformat()}"
    )

    if not settings.customs_api_key:
        logger.info("Customs API key not configured; using fallback data only")

    async def _run(http_client: httpx.AsyncClient):
        manager = ProviderManager.from_settings(settings, previous, http_client)
        weeks: list[WeekBucket] = []
        provenance: dict[str, dict[str, str]] = {}

        for anchor in anchors:
            built = await build_week(manager, anchor)
            if built is None:
                continue
            bucket, providers = built
            weeks.append(bucket)
            provenance[anchor.isoformat()] = providers

        return weeks, provenance

    if client is not None:
        weeks, provenance = await _run(client)
    else:
        async with httpx.AsyncClient(timeout=settings.request_timeout) as http_client:
            weeks, provenance = await _run(http_client)

    dataset = Dataset(source=settings.source_label, weeks=weeks)
    return dataset, provenance


async def run_generator(
    settings: Settings | None = None,
    now: datetime | None = None,
    client: httpx.AsyncClient | None = None,
) -> dict[str, Any]:
    """
    Build, persist and render the snapshot.

    Filesystem errors propagate and abort the run.

    Returns:
        Dictionary with run results
    """
    settings = settings or get_settings()
    store = SnapshotStore(settings.snapshot_path)
    previous = store.load()

    dataset, provenance = await build_dataset(settings, now=now, client=client, previous=previous)

    changed = content_fingerprint(dataset) != content_fingerprint(previous)
    written = store.write(dataset)
    if not changed:
        logger.info("Snapshot content unchanged since last run")

    tables = []
    if settings.table_enabled:
        tables = write_table_html(written, settings.table_paths)

    return {
        "weeks": len(written.weeks),
        "generated_at": written.generated_at,
        "providers": provenance,
        "changed": changed,
        "snapshot": str(store.path),
        "tables": [str(t) for t in tables],
    }
