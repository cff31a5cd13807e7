"""HTTP route definitions for the service."""

from __future__ import annotations

from typing import List, Optional

from fastapi import APIRouter, Depends, Header, HTTPException, Query, status

from app.schemas import (
    ActivityResponse,
    DashboardSnapshot,
    DeviceSummary,
    SensorDataResponse,
    TimeRange,
)
from services.dashboard import DashboardService, build_default_dashboard
from services.errors import AuthError
from settings import Settings, get_settings

router = APIRouter()


def get_dashboard() -> DashboardService:
    return build_default_dashboard()


def check_api_key(api_key: Optional[str], settings: Settings) -> str:
    """Accept either configured key; scopes are not enforced."""
    if not api_key or api_key not in {settings.read_api_key, settings.write_api_key}:
        raise AuthError("Invalid API key")
    return api_key


def require_api_key(
    x_api_key: Optional[str] = Header(default=None, alias="X-API-Key"),
) -> str:
    try:
        return check_api_key(x_api_key, get_settings())
    except AuthError as exc:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(exc),
        ) from exc


mock_router = APIRouter(prefix="/api", dependencies=[Depends(require_api_key)])


@mock_router.get(
    "/devices",
    response_model=List[DeviceSummary],
    summary="List mock streetlight devices.",
)
async def list_devices(
    dashboard: DashboardService = Depends(get_dashboard),
) -> List[DeviceSummary]:
    snapshot = dashboard.build_synthetic_snapshot(TimeRange.day)
    return list(snapshot.devices)


@mock_router.get(
    "/sensorData",
    response_model=SensorDataResponse,
    summary="Mock bulb status and current series for a time range.",
)
async def sensor_data(
    time_range: TimeRange = Query(TimeRange.day, alias="timeRange"),
    dashboard: DashboardService = Depends(get_dashboard),
) -> SensorDataResponse:
    snapshot = dashboard.build_synthetic_snapshot(time_range)
    return SensorDataResponse(time_range=snapshot.time_range, charts=snapshot.charts)


@mock_router.get(
    "/activity",
    response_model=ActivityResponse,
    summary="Mock failover and failure activity for a time range.",
)
async def activity(
    time_range: TimeRange = Query(TimeRange.day, alias="timeRange"),
    dashboard: DashboardService = Depends(get_dashboard),
) -> ActivityResponse:
    return dashboard.build_activity(time_range)


@router.get(
    "/dashboard",
    response_model=DashboardSnapshot,
    summary="Latest dashboard snapshot; refreshes when missing or the range changed.",
)
def get_snapshot(
    time_range: Optional[TimeRange] = Query(None, alias="timeRange"),
    dashboard: DashboardService = Depends(get_dashboard),
) -> DashboardSnapshot:
    return dashboard.current(time_range)


@router.post(
    "/dashboard/refresh",
    response_model=DashboardSnapshot,
    summary="Run a fetch cycle immediately.",
)
def refresh_snapshot(
    time_range: Optional[TimeRange] = Query(None, alias="timeRange"),
    dashboard: DashboardService = Depends(get_dashboard),
) -> DashboardSnapshot:
    return dashboard.refresh(time_range)


@router.get(
    "/health",
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get(
    "/",
    summary="Root endpoint mirrors health information.",
    status_code=status.HTTP_200_OK,
)
async def root() -> dict[str, str]:
    return {"status": "ok", "detail": "See /dashboard for the latest snapshot."}
