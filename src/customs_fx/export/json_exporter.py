"""
Customs FX Snapshot Store

Reads and writes the JSON snapshot the dashboard frontend loads:

{
    "generatedAt": "2024-01-08T00:00:05.123Z",
    "source": "Korea Customs Service (static snapshot)",
    "weeks": [
        {"startDate": "2024-01-07", "export": [...], "import": [...]}
    ]
}

Writes are full overwrites. The previous file is only consulted through
load(), as a fallback source for weeks the API could not deliver.
"""

import hashlib
import json
import logging
from datetime import datetime, timezone
from pathlib import Path

from pydantic import ValidationError

from customs_fx.models import Dataset, WeekBucket

logger = logging.getLogger(__name__)


class SnapshotError(Exception):
    """Snapshot missing or unusable where one is required."""


def utc_timestamp(now: datetime | None = None) -> str:
    """ISO-8601 UTC timestamp with milliseconds, e.g. 2024-01-08T00:00:05.123Z."""
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def content_fingerprint(dataset: Dataset) -> str:
    """SHA-256 over source and weeks, ignoring the generation timestamp."""
    payload = dataset.to_json_dict()
    payload.pop("generatedAt", None)
    canonical = json.dumps(payload, sort_keys=True, separators=(",", ":"), ensure_ascii=False)
    return hashlib.sha256(canonical.encode("utf-8")).hexdigest()


class SnapshotStore:
    """Persisted snapshot at a fixed path."""

    def __init__(self, path: str | Path):
        self.path = Path(path)

    def exists(self) -> bool:
        return self.path.is_file()

    def load(self) -> Dataset:
        """
        Load the snapshot, tolerating damage.

        A missing or unreadable file yields an empty dataset. Weeks that fail
        validation are skipped individually.
        """
        if not self.exists():
            return Dataset()

        try:
            with open(self.path, encoding="utf-8") as f:
                raw = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            logger.warning(f"Failed to load existing snapshot {self.path}: {e}")
            return Dataset()

        if not isinstance(raw, dict):
            logger.warning(f"Ignoring snapshot {self.path}: top level is not an object")
            return Dataset()

        weeks: list[WeekBucket] = []
        weeks_raw = raw.get("weeks")
        for entry in weeks_raw if isinstance(weeks_raw, list) else []:
            try:
                weeks.append(WeekBucket.model_validate(entry))
            except ValidationError as e:
                start = entry.get("startDate") if isinstance(entry, dict) else None
                logger.warning(f"Skipping invalid week {start!r} in {self.path}: {e.error_count()} errors")

        generated_at = raw.get("generatedAt")
        source = raw.get("source")
        return Dataset(
            generated_at=generated_at if isinstance(generated_at, str) else None,
            source=source if isinstance(source, str) else None,
            weeks=weeks,
        )

    def write(self, dataset: Dataset, now: datetime | None = None) -> Dataset:
        """
        Stamp ``generatedAt`` and overwrite the snapshot file.

        Returns:
            The dataset as written

        Raises:
            OSError: If the file cannot be written
        """
        stamped = dataset.model_copy(update={"generated_at": utc_timestamp(now)})

        self.path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.path, "w", encoding="utf-8") as f:
            json.dump(stamped.to_json_dict(), f, indent=2, ensure_ascii=False)

        logger.info(f"Wrote {len(stamped.weeks)} weeks to {self.path}")
        return stamped
