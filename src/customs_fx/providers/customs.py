"""
Korea Customs Service API Client (Primary Provider)

Weekly customs exchange rates from the data.go.kr open API
(retrieveTrifFxrtInfo). Response format: XML with
response/body/items/item elements.

Each (week, direction) is requested exactly once. Failures are reported
to the fallback chain instead of being retried.
"""

import logging
import xml.etree.ElementTree as ET
from datetime import date

import httpx

from customs_fx.anchors import to_api_date
from customs_fx.config import Settings, get_settings
from customs_fx.models import RateRecord, RateType
from customs_fx.providers.base import BaseRateProvider, RateProviderError

logger = logging.getLogger(__name__)

SUCCESS_RESULT_CODES = {"0", "00", "000"}


class CustomsApiClient(BaseRateProvider):
    """
    Client for the KCS weekly customs exchange rate API.

    Item fields: cntySgn (country code), mtryUtNm (currency name),
    currSgn (currency code), fxrt (rate as text), aplyBgnDt (YYYYMMDD),
    imexTp (1=export, 2=import).
    """

    PROVIDER_NAME = "customs"

    def __init__(
        self,
        settings: Settings | None = None,
        client: httpx.AsyncClient | None = None
    ):
        self.settings = settings or get_settings()
        self.base_url = self.settings.customs_base_url
        self.api_key = self.settings.customs_api_key
        self._client = client

    @property
    def available(self) -> bool:
        return bool(self.api_key)

    async def fetch_week(self, anchor: date, rate_type: RateType) -> list[RateRecord]:
        """
        Fetch one week of rates for one direction.

        Raises:
            RateProviderError: On missing key, HTTP/transport failure,
                malformed XML, API error envelope, or no valid records
        """
        if not self.api_key:
            raise RateProviderError(
                message="Service key not configured",
                provider=self.PROVIDER_NAME,
                error_type="MISSING_CREDENTIAL"
            )

        params = {
            "serviceKey": self.api_key,
            "aplyBgnDt": to_api_date(anchor),
            "weekFxrtTpcd": rate_type.api_code,
        }

        try:
            response = await self._get(params)
            response.raise_for_status()
            root = ET.fromstring(response.content)

        except ET.ParseError as e:
            raise RateProviderError(
                message=f"XML parse error: {e}",
                provider=self.PROVIDER_NAME,
                error_type="PARSE_ERROR"
            ) from e

        except httpx.HTTPStatusError as e:
            raise RateProviderError(
                message=f"HTTP error: {e.response.status_code}",
                provider=self.PROVIDER_NAME,
                error_type=f"HTTP_{e.response.status_code}",
                details={"url": self.base_url}
            ) from e

        except httpx.TimeoutException as e:
            raise RateProviderError(
                message="Request timeout",
                provider=self.PROVIDER_NAME,
                error_type="TIMEOUT",
                details={"timeout_seconds": self.settings.request_timeout}
            ) from e

        except httpx.HTTPError as e:
            raise RateProviderError(
                message=f"Network error: {e}",
                provider=self.PROVIDER_NAME,
                error_type="NETWORK"
            ) from e

        self._check_envelope(root)

        records = self.parse_items(root, anchor, rate_type)
        if not records:
            raise RateProviderError(
                message=f"No valid rates for {anchor.isoformat()} ({rate_type.value})",
                provider=self.PROVIDER_NAME,
                error_type="EMPTY_RESPONSE"
            )

        logger.info(
            f"Customs API fetched {len(records)} {rate_type.value} rates "
            f"for {anchor.isoformat()}"
        )
        return records

    async def _get(self, params: dict[str, str]) -> httpx.Response:
        if self._client is not None:
            return await self._client.get(self.base_url, params=params)
        async with httpx.AsyncClient(timeout=self.settings.request_timeout) as client:
            return await client.get(self.base_url, params=params)

    def _check_envelope(self, root: ET.Element) -> None:
        """Reject data.go.kr error payloads, which arrive with HTTP 200."""
        if root.tag == "OpenAPI_ServiceResponse":
            reason = root.findtext(".//returnAuthMsg") or root.findtext(".//errMsg") or ""
            raise RateProviderError(
                message=f"Gateway error: {reason.strip()}",
                provider=self.PROVIDER_NAME,
                error_type="API_ERROR",
                details={"reason_code": root.findtext(".//returnReasonCode")}
            )

        result_code = root.findtext("header/resultCode")
        if result_code is not None and result_code.strip() not in SUCCESS_RESULT_CODES:
            raise RateProviderError(
                message=f"API error {result_code.strip()}: {root.findtext('header/resultMsg') or ''}",
                provider=self.PROVIDER_NAME,
                error_type="API_ERROR",
                details={"result_code": result_code.strip()}
            )

    def parse_items(
        self,
        root: ET.Element,
        anchor: date,
        rate_type: RateType
    ) -> list[RateRecord]:
        """Normalize response items, dropping any whose rate is not a number."""
        records: list[RateRecord] = []

        for item in root.iterfind("body/items/item"):
            rate = self._to_rate(item.findtext("fxrt"))
            if rate is None:
                logger.debug(f"Skipping item with invalid rate: {item.findtext('currSgn')}")
                continue

            currency_code = (item.findtext("currSgn") or "").strip()
            apply_date = (item.findtext("aplyBgnDt") or "").strip()
            direction = (item.findtext("imexTp") or "").strip()

            records.append(RateRecord(
                id=f"{apply_date}-{currency_code}-{direction}",
                country_code=(item.findtext("cntySgn") or "").strip(),
                currency_name=(item.findtext("mtryUtNm") or "").strip(),
                currency_code=currency_code,
                rate=rate,
                date=anchor,
                type=rate_type,
            ))

        return records
