from __future__ import annotations

from pathlib import Path
from typing import Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates

from app.schemas import TimeRange
from services.classifier import describe
from services.dashboard import DashboardService, build_default_dashboard


templates = Jinja2Templates(directory=str(Path(__file__).resolve().parent / "templates"))
templates.env.filters["describe"] = describe


def get_dashboard() -> DashboardService:
    return build_default_dashboard()


router = APIRouter(include_in_schema=False)


@router.get("/ui", name="ui_index", response_class=HTMLResponse)
def ui_index(
    request: Request,
    time_range: Optional[TimeRange] = Query(None, alias="timeRange"),
    dashboard: DashboardService = Depends(get_dashboard),
) -> HTMLResponse:
    snapshot = dashboard.current(time_range)
    return templates.TemplateResponse(
        request,
        "ui/dashboard.html",
        {
            "snapshot": snapshot,
            "time_ranges": list(TimeRange),
        },
    )
