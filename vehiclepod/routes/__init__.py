"""Route package - assembles the report sub-routers into one APIRouter.

The surrounding service mounts everything with::

    from vehiclepod.routes import create_router
    app.include_router(create_router(config))
"""

from __future__ import annotations

from fastapi import APIRouter

from ..config import ReportConfig
from .reports import create_report_routes


def create_router(config: ReportConfig | None = None) -> APIRouter:
    """Assemble all report route groups into one router."""
    router = APIRouter()
    router.include_router(create_report_routes(config))
    return router
