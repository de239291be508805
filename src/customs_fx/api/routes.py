"""
Customs FX Preview Routes

Serves the generated files the way the static host does, plus the reader
views as JSON. The snapshot is read from disk on every request; there is
no path to the upstream API.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, Query, status
from fastapi.responses import FileResponse, HTMLResponse

from customs_fx import __version__
from customs_fx.api.schemas import ErrorResponse, HealthResponse
from customs_fx.config import Settings, get_settings
from customs_fx.dashboard import DashboardView, build_dashboard, load_snapshot
from customs_fx.export.html_table import render_latest_table
from customs_fx.export.json_exporter import SnapshotError, SnapshotStore
from customs_fx.models import Dataset, RateType

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Customs FX"])

NO_STORE = {"Cache-Control": "no-store"}


def _not_found(message: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_404_NOT_FOUND,
        detail={"code": "SNAPSHOT_NOT_FOUND", "message": message},
    )


def _load_dataset(settings: Settings) -> Dataset:
    store = SnapshotStore(settings.snapshot_path)
    if not store.exists():
        raise _not_found(f"Snapshot not generated yet: {store.path.name}")
    return store.load()


@router.get(
    "/exchange-rates.json",
    summary="Raw snapshot file",
    responses={404: {"model": ErrorResponse}},
)
async def get_snapshot(settings: Settings = Depends(get_settings)) -> FileResponse:
    """The snapshot exactly as written, never cached."""
    path = settings.snapshot_path
    if not path.is_file():
        raise _not_found(f"Snapshot not generated yet: {path.name}")
    return FileResponse(path, media_type="application/json", headers=NO_STORE)


@router.get(
    "/table.html",
    response_class=HTMLResponse,
    summary="Latest-week table",
    responses={404: {"model": ErrorResponse}},
)
async def get_table(settings: Settings = Depends(get_settings)) -> HTMLResponse:
    html = render_latest_table(_load_dataset(settings))
    if html is None:
        raise _not_found("Snapshot has no weeks")
    return HTMLResponse(html, headers=NO_STORE)


@router.get(
    "/api/v1/dashboard",
    response_model=DashboardView,
    summary="Dashboard views for one direction",
    responses={404: {"model": ErrorResponse}},
)
async def get_dashboard(
    rate_type: RateType = Query(default=RateType.IMPORT, alias="type"),
    settings: Settings = Depends(get_settings),
) -> DashboardView:
    try:
        dataset = load_snapshot(settings.snapshot_path)
    except SnapshotError as e:
        raise _not_found(str(e))
    return build_dashboard(dataset, rate_type)


@router.get("/api/v1/health", response_model=HealthResponse)
async def get_health(settings: Settings = Depends(get_settings)) -> HealthResponse:
    store = SnapshotStore(settings.snapshot_path)
    present = store.exists()
    dataset = store.load() if present else Dataset()
    latest = dataset.latest_week

    return HealthResponse(
        status="healthy" if dataset.weeks else "degraded",
        version=__version__,
        snapshot_present=present,
        generated_at=dataset.generated_at,
        weeks=len(dataset.weeks),
        latest_week=latest.start_date.isoformat() if latest else None,
    )
