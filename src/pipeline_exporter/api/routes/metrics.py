"""Prometheus scrape endpoint."""

from fastapi import APIRouter, Response

from pipeline_exporter.api.dependencies import MetricStoreDep

router = APIRouter(tags=["metrics"])


@router.get("/metrics")
async def scrape(store: MetricStoreDep) -> Response:
    """Render all pipeline series in the Prometheus text format."""
    return Response(content=store.render(), media_type=store.content_type)
