"""
Customs FX API Response Schemas
"""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response schema for /api/v1/health."""
    status: str = Field(description="'healthy' when a snapshot with weeks is present")
    version: str
    snapshot_present: bool
    generated_at: str | None = None
    weeks: int = 0
    latest_week: str | None = None


class ErrorDetail(BaseModel):
    code: str
    message: str


class ErrorResponse(BaseModel):
    """Body of 404 responses, as raised through HTTPException."""
    detail: ErrorDetail
