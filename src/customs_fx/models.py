"""
Customs FX Data Models

Snapshot schema shared by the generator, the HTML table and the reader.
All models serialize with the camelCase keys the dashboard frontend reads.
"""

from datetime import date
from enum import Enum

from pydantic import BaseModel, ConfigDict, Field, model_validator


# === Enums ===

class RateType(str, Enum):
    """Declaration direction a customs rate applies to."""
    EXPORT = "export"
    IMPORT = "import"

    @property
    def api_code(self) -> str:
        """Value of the upstream ``weekFxrtTpcd`` / ``imexTp`` field."""
        return "1" if self is RateType.EXPORT else "2"

    @classmethod
    def from_api_code(cls, code: str) -> "RateType":
        if code == "1":
            return cls.EXPORT
        if code == "2":
            return cls.IMPORT
        raise ValueError(f"Unknown direction code: {code!r}")


# === Records ===

class RateRecord(BaseModel):
    """One currency's customs rate for one direction and one week."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    id: str
    country_code: str = Field(default="", alias="countryCode")
    currency_name: str = Field(default="", alias="currencyName")
    currency_code: str = Field(alias="currencyCode")
    rate: float = Field(ge=0, allow_inf_nan=False, description="KRW per unit")
    date: date
    type: RateType


class WeekBucket(BaseModel):
    """
    One reporting week anchored on Sunday.

    Every record carries the bucket's start date and sits in the list
    matching its direction.
    """

    model_config = ConfigDict(populate_by_name=True)

    start_date: date = Field(alias="startDate")
    export_rates: list[RateRecord] = Field(default_factory=list, alias="export")
    import_rates: list[RateRecord] = Field(default_factory=list, alias="import")

    @model_validator(mode="after")
    def _check_records(self) -> "WeekBucket":
        for rate_type in RateType:
            for record in self.records(rate_type):
                if record.date != self.start_date:
                    raise ValueError(
                        f"Record {record.id} dated {record.date} "
                        f"in week {self.start_date}"
                    )
                if record.type is not rate_type:
                    raise ValueError(
                        f"Record {record.id} of type {record.type.value} "
                        f"in {rate_type.value} list"
                    )
        return self

    def records(self, rate_type: RateType) -> list[RateRecord]:
        if rate_type is RateType.EXPORT:
            return self.export_rates
        return self.import_rates


class Dataset(BaseModel):
    """Full snapshot: weeks ordered most recent first."""

    model_config = ConfigDict(populate_by_name=True)

    generated_at: str | None = Field(default=None, alias="generatedAt")
    source: str | None = None
    weeks: list[WeekBucket] = Field(default_factory=list)

    @property
    def latest_week(self) -> WeekBucket | None:
        return max(self.weeks, key=lambda w: w.start_date, default=None)

    def week_for(self, start_date: date) -> WeekBucket | None:
        for week in self.weeks:
            if week.start_date == start_date:
                return week
        return None

    def to_json_dict(self) -> dict:
        """Serialize with frontend key names (``startDate``, ``import``...)."""
        return self.model_dump(mode="json", by_alias=True)
