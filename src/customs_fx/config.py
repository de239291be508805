"""
Customs FX Configuration Management

The customs API key is read from the environment or a local .env file.
A missing key is a supported state: the generator falls back to prior
snapshot data and synthetic rates.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import AliasChoices, Field
from pydantic_settings import BaseSettings


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # === Upstream API Configuration ===
    customs_api_key: str = Field(
        default="",
        validation_alias=AliasChoices(
            "CUSTOMS_API_KEY",
            "VITE_SERVICE_KEY",
            "REACT_APP_SERVICE_KEY",
            "SERVICE_KEY",
        ),
        description="data.go.kr service key for the KCS weekly rate API"
    )
    customs_base_url: str = Field(
        default="https://apis.data.go.kr/1220000/retrieveTrifFxrtInfo/getRetrieveTrifFxrtInfo",
        description="KCS weekly customs exchange rate endpoint"
    )
    request_timeout: float = Field(default=10.0, gt=0)

    # === Week Window ===
    weeks_to_fetch: int = Field(default=12, ge=1)
    anchor_timezone: str = Field(default="Asia/Seoul")
    include_upcoming_week: bool = Field(
        default=False,
        description="Anchor on the upcoming Sunday instead of the last one"
    )

    # === Fallback Policy ===
    snapshot_fallback_enabled: bool = Field(default=True)
    mock_fallback_enabled: bool = Field(default=True)

    # === Output Configuration ===
    output_dir: str = Field(default="./public")
    snapshot_filename: str = Field(default="exchange-rates.json")
    table_enabled: bool = Field(default=True)
    table_outputs: list[str] = Field(
        default_factory=lambda: ["table.html", "table/index.html"]
    )
    source_label: str = Field(default="Korea Customs Service (static snapshot)")

    # === Preview Server ===
    api_host: str = Field(default="127.0.0.1")
    api_port: int = Field(default=8000)

    # === Logging ===
    log_level: str = Field(default="INFO")

    @property
    def snapshot_path(self) -> Path:
        return Path(self.output_dir) / self.snapshot_filename

    @property
    def table_paths(self) -> list[Path]:
        return [Path(self.output_dir) / target for target in self.table_outputs]

    model_config = {
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "case_sensitive": False,
        "extra": "ignore",
        "populate_by_name": True,
    }


@lru_cache
def get_settings() -> Settings:
    """Get cached settings instance."""
    return Settings()
