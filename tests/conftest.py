"""Shared fixtures for the customs FX tests."""

from datetime import date, datetime, timezone

import httpx
import pytest

from customs_fx.config import Settings
from customs_fx.models import Dataset, RateRecord, RateType, WeekBucket

# Wednesday 2024-01-10 12:00 KST
NOW = datetime(2024, 1, 10, 3, 0, tzinfo=timezone.utc)


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def make_settings(tmp_path):
    """Settings isolated from the environment, writing under tmp_path."""
    def _make(**overrides) -> Settings:
        values = {
            "customs_api_key": "",
            "weeks_to_fetch": 3,
            "anchor_timezone": "Asia/Seoul",
            "include_upcoming_week": False,
            "snapshot_fallback_enabled": True,
            "mock_fallback_enabled": True,
            "table_enabled": True,
            "output_dir": str(tmp_path / "public"),
        }
        values.update(overrides)
        return Settings(_env_file=None, **values)
    return _make


@pytest.fixture
def response_xml():
    """Build a data.go.kr style XML payload from item dicts."""
    def _build(items: list[dict[str, str]], result_code: str = "00") -> str:
        rows = "".join(
            "<item>" + "".join(f"<{k}>{v}</{k}>" for k, v in item.items()) + "</item>"
            for item in items
        )
        return (
            '<?xml version="1.0" encoding="UTF-8" standalone="yes"?>'
            "<response>"
            f"<header><resultCode>{result_code}</resultCode><resultMsg>NORMAL SERVICE.</resultMsg></header>"
            f"<body><items>{rows}</items><numOfRows>{len(items)}</numOfRows>"
            f"<pageNo>1</pageNo><totalCount>{len(items)}</totalCount></body>"
            "</response>"
        )
    return _build


@pytest.fixture
def upstream(response_xml):
    """
    MockTransport answering every request with USD and EUR for the
    requested week and direction. Requests are recorded on ``.calls``.
    """
    class Upstream:
        def __init__(self):
            self.calls: list[httpx.Request] = []
            self.status_code = 200

        def handler(self, request: httpx.Request) -> httpx.Response:
            self.calls.append(request)
            if self.status_code != 200:
                return httpx.Response(self.status_code, text="error")
            anchor = request.url.params["aplyBgnDt"]
            direction = request.url.params["weekFxrtTpcd"]
            items = [
                {"cntySgn": "US", "mtryUtNm": "US Dollar", "fxrt": "1300.5",
                 "currSgn": "USD", "aplyBgnDt": anchor, "imexTp": direction},
                {"cntySgn": "EU", "mtryUtNm": "Euro", "fxrt": "1420.25",
                 "currSgn": "EUR", "aplyBgnDt": anchor, "imexTp": direction},
            ]
            return httpx.Response(200, text=response_xml(items))

        def client(self) -> httpx.AsyncClient:
            return httpx.AsyncClient(transport=httpx.MockTransport(self.handler))

    return Upstream()


def make_record(
    code: str,
    rate: float,
    start: date,
    rate_type: RateType,
    name: str = "",
) -> RateRecord:
    return RateRecord(
        id=f"{start.strftime('%Y%m%d')}-{code}-{rate_type.api_code}",
        country_code=code[:2],
        currency_name=name or code,
        currency_code=code,
        rate=rate,
        date=start,
        type=rate_type,
    )


def make_week(start: date, rates: dict[str, float]) -> WeekBucket:
    return WeekBucket(
        start_date=start,
        export_rates=[make_record(c, r, start, RateType.EXPORT) for c, r in rates.items()],
        import_rates=[make_record(c, r + 1, start, RateType.IMPORT) for c, r in rates.items()],
    )


@pytest.fixture
def sample_dataset():
    """Two weeks of real-looking data, most recent first."""
    return Dataset(
        generated_at="2024-01-08T00:00:05.123Z",
        source="Korea Customs Service (static snapshot)",
        weeks=[
            make_week(date(2024, 1, 7), {"USD": 1300.5, "EUR": 1420.25, "JPY": 912.0, "CNY": 182.7, "GBP": 1650.1}),
            make_week(date(2023, 12, 31), {"USD": 1290.0, "EUR": 1410.0, "JPY": 915.5, "CNY": 181.9}),
        ],
    )


@pytest.fixture
def week_factory():
    return make_week


@pytest.fixture
def record_factory():
    return make_record
