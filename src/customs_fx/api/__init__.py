"""
Customs FX Preview API Module
"""

from customs_fx.api.routes import router
from customs_fx.api.schemas import (
    HealthResponse,
    ErrorResponse,
)

__all__ = [
    "router",
    "HealthResponse",
    "ErrorResponse",
]
