"""
Snapshot Store and HTML Table Tests
"""

import json
import re
from datetime import date, datetime, timezone

import pytest

from customs_fx.export import (
    SnapshotError,
    SnapshotStore,
    build_table_from_snapshot,
    content_fingerprint,
    render_latest_table,
    utc_timestamp,
    write_table_html,
)
from customs_fx.export.html_table import format_rate, pick_important_rates
from customs_fx.models import Dataset, RateType


class TestSnapshotStore:
    """Tests for SnapshotStore."""

    def test_missing_file_loads_empty(self, tmp_path):
        dataset = SnapshotStore(tmp_path / "nope.json").load()

        assert dataset.weeks == []

    def test_corrupt_file_loads_empty(self, tmp_path, caplog):
        path = tmp_path / "exchange-rates.json"
        path.write_text("{not json", encoding="utf-8")

        dataset = SnapshotStore(path).load()

        assert dataset.weeks == []
        assert "Failed to load existing snapshot" in caplog.text

    def test_invalid_week_is_skipped(self, tmp_path, sample_dataset):
        payload = sample_dataset.to_json_dict()
        payload["weeks"][1]["export"][0]["rate"] = "not a number"
        path = tmp_path / "exchange-rates.json"
        path.write_text(json.dumps(payload), encoding="utf-8")

        dataset = SnapshotStore(path).load()

        assert [w.start_date for w in dataset.weeks] == [date(2024, 1, 7)]

    def test_write_then_load_preserves_records(self, tmp_path, sample_dataset):
        store = SnapshotStore(tmp_path / "public" / "exchange-rates.json")

        written = store.write(sample_dataset)
        loaded = store.load()

        assert loaded.weeks == sample_dataset.weeks
        assert loaded.generated_at == written.generated_at
        assert loaded.source == sample_dataset.source

    def test_write_layout(self, tmp_path, sample_dataset):
        """Top-level and week keys in frontend order, indent 2, non-ASCII kept."""
        store = SnapshotStore(tmp_path / "exchange-rates.json")
        week = sample_dataset.weeks[0]
        week.export_rates[0] = week.export_rates[0].model_copy(update={"currency_name": "미국 달러"})

        store.write(sample_dataset, now=datetime(2024, 1, 8, 0, 0, 5, 123000, tzinfo=timezone.utc))
        text = store.path.read_text(encoding="utf-8")
        data = json.loads(text)

        assert list(data) == ["generatedAt", "source", "weeks"]
        assert list(data["weeks"][0]) == ["startDate", "export", "import"]
        assert list(data["weeks"][0]["export"][0]) == [
            "id", "countryCode", "currencyName", "currencyCode", "rate", "date", "type",
        ]
        assert data["generatedAt"] == "2024-01-08T00:00:05.123Z"
        assert "미국 달러" in text
        assert text.startswith('{\n  "generatedAt"')

    def test_write_is_full_overwrite(self, tmp_path, sample_dataset):
        store = SnapshotStore(tmp_path / "exchange-rates.json")
        store.write(sample_dataset)

        store.write(Dataset(source="x", weeks=sample_dataset.weeks[1:]))

        assert [w.start_date for w in store.load().weeks] == [date(2023, 12, 31)]

    def test_write_failure_propagates(self, tmp_path, sample_dataset):
        blocker = tmp_path / "blocker"
        blocker.write_text("file, not a directory")

        with pytest.raises(OSError):
            SnapshotStore(blocker / "exchange-rates.json").write(sample_dataset)


class TestFingerprint:

    def test_ignores_generated_at(self, sample_dataset):
        restamped = sample_dataset.model_copy(update={"generated_at": "2030-01-01T00:00:00.000Z"})

        assert content_fingerprint(restamped) == content_fingerprint(sample_dataset)

    def test_detects_rate_change(self, sample_dataset):
        changed = sample_dataset.model_copy(deep=True)
        changed.weeks[0].export_rates[0] = changed.weeks[0].export_rates[0].model_copy(update={"rate": 1.0})

        assert content_fingerprint(changed) != content_fingerprint(sample_dataset)

    def test_timestamp_format(self):
        assert re.fullmatch(r"\d{4}-\d{2}-\d{2}T\d{2}:\d{2}:\d{2}\.\d{3}Z", utc_timestamp())


class TestHtmlTable:
    """Tests for the latest-week table."""

    def test_rendering_is_idempotent(self, sample_dataset):
        assert render_latest_table(sample_dataset) == render_latest_table(sample_dataset)

    def test_uses_latest_week_and_shortlist_order(self, sample_dataset):
        html = render_latest_table(sample_dataset)

        assert "적용 시작일: 2024-01-07" in html
        assert "2024-01-08T00:00:05.123Z" in html
        assert "GBP" not in html
        export_section = html.split("수출 환율")[1].split("수입 환율")[0]
        positions = [export_section.index(f"<td>{code}</td>") for code in ["USD", "EUR", "CNY", "JPY"]]
        assert positions == sorted(positions)
        assert '<td class="number">1300.5</td>' in export_section
        assert '<td class="number">912</td>' in export_section

    def test_export_section_comes_first(self, sample_dataset):
        html = render_latest_table(sample_dataset)

        assert html.index("수출 환율") < html.index("수입 환율")

    def test_values_are_escaped(self, sample_dataset):
        week = sample_dataset.weeks[0]
        week.export_rates[0] = week.export_rates[0].model_copy(update={"currency_name": "<script>alert('x')</script>"})

        html = render_latest_table(sample_dataset)

        assert "<script>" not in html
        assert "&lt;script&gt;" in html

    def test_missing_currencies_are_omitted(self, record_factory):
        start = date(2024, 1, 7)
        records = [
            record_factory("jpy", 900.0, start, RateType.EXPORT),
            record_factory("USD", 1300.0, start, RateType.EXPORT),
            record_factory("USD", 9999.0, start, RateType.EXPORT),
        ]

        picked = pick_important_rates(records)

        assert [(r.currency_code, r.rate) for r in picked] == [("USD", 1300.0), ("jpy", 900.0)]

    def test_empty_dataset(self, tmp_path):
        assert render_latest_table(Dataset()) is None
        assert write_table_html(Dataset(), [tmp_path / "table.html"]) == []
        assert not (tmp_path / "table.html").exists()

    def test_writes_all_targets(self, tmp_path, sample_dataset):
        targets = [tmp_path / "table.html", tmp_path / "table" / "index.html"]

        written = write_table_html(sample_dataset, targets)

        assert written == targets
        assert targets[0].read_text(encoding="utf-8") == targets[1].read_text(encoding="utf-8")

    def test_format_rate(self):
        assert format_rate(1300.0) == "1300"
        assert format_rate(1300.5) == "1300.5"
        assert format_rate(0.1234) == "0.1234"


class TestBuildTableFromSnapshot:

    def test_missing_snapshot(self, make_settings):
        with pytest.raises(SnapshotError, match="Missing source file"):
            build_table_from_snapshot(make_settings())

    def test_snapshot_without_weeks(self, make_settings):
        settings = make_settings()
        SnapshotStore(settings.snapshot_path).write(Dataset(source="x"))

        with pytest.raises(SnapshotError, match="No weeks"):
            build_table_from_snapshot(settings)

    def test_rebuilds_from_persisted_snapshot(self, make_settings, sample_dataset):
        settings = make_settings()
        written = SnapshotStore(settings.snapshot_path).write(sample_dataset)

        paths = build_table_from_snapshot(settings)

        assert paths == settings.table_paths
        assert paths[0].read_text(encoding="utf-8") == render_latest_table(written)

    def test_out_of_order_snapshot_uses_newest_week(self, make_settings, sample_dataset):
        settings = make_settings()
        SnapshotStore(settings.snapshot_path).write(Dataset(weeks=list(reversed(sample_dataset.weeks))))

        paths = build_table_from_snapshot(settings)

        assert "적용 시작일: 2024-01-07" in paths[0].read_text(encoding="utf-8")
