"""Proof-of-delivery report endpoints."""

from __future__ import annotations

import asyncio
import logging

from fastapi import APIRouter, HTTPException
from fastapi.responses import Response

from ..api_models import ComparisonRequest, ComparisonResponse, PodReportRequest
from ..comparison import compare
from ..config import ReportConfig, default_config
from ..errors import (
    LayoutError,
    MissingMetadataError,
    MissingSnapshotError,
    ReportGenerationError,
)
from ..report.pdf_builder import assemble, validate_snapshots
from ._helpers import contract_error_to_422, safe_filename

LOGGER = logging.getLogger(__name__)


def create_report_routes(config: ReportConfig | None = None) -> APIRouter:
    router = APIRouter()
    report_config = config or default_config()

    @router.post("/api/reports/pod.pdf")
    async def render_pod_pdf(req: PodReportRequest) -> Response:
        collection = req.collection.to_domain()
        delivery = req.delivery.to_domain()
        job = req.job.to_domain()
        try:
            pdf = await asyncio.to_thread(
                assemble, collection, delivery, job, config=report_config
            )
        except (MissingSnapshotError, MissingMetadataError) as exc:
            raise contract_error_to_422(exc) from exc
        except (LayoutError, ReportGenerationError) as exc:
            LOGGER.warning("PDF generation failed for job %s", job.job_number, exc_info=True)
            raise HTTPException(status_code=500, detail="PDF generation failed") from exc
        pdf_name = f"{safe_filename(job.job_number)}_proof_of_delivery.pdf"
        return Response(
            content=pdf,
            media_type="application/pdf",
            headers={"Content-Disposition": f'attachment; filename="{pdf_name}"'},
        )

    @router.post("/api/reports/comparison", response_model=ComparisonResponse)
    async def compare_snapshots(req: ComparisonRequest) -> ComparisonResponse:
        collection = req.collection.to_domain()
        delivery = req.delivery.to_domain()
        try:
            validate_snapshots(collection, delivery)
        except MissingSnapshotError as exc:
            raise contract_error_to_422(exc) from exc
        result = compare(collection, delivery)
        return ComparisonResponse(**result.to_dict())

    return router
