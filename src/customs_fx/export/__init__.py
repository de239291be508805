"""
Customs FX Export Module

JSON snapshot persistence and the static latest-week HTML table.
"""

from customs_fx.export.json_exporter import (
    SnapshotError,
    SnapshotStore,
    content_fingerprint,
    utc_timestamp,
)
from customs_fx.export.html_table import (
    IMPORTANT_CODES,
    build_table_from_snapshot,
    render_latest_table,
    write_table_html,
)

__all__ = [
    "SnapshotError",
    "SnapshotStore",
    "content_fingerprint",
    "utc_timestamp",
    "IMPORTANT_CODES",
    "build_table_from_snapshot",
    "render_latest_table",
    "write_table_html",
]
