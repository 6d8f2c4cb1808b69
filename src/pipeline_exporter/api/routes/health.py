"""Liveness and readiness probes."""

from fastapi import APIRouter, status
from fastapi.responses import JSONResponse

from pipeline_exporter.api.dependencies import HealthCheckerDep
from pipeline_exporter.api.health import CheckResult
from pipeline_exporter.api.models import APIResponse, HealthResponse

router = APIRouter(prefix="/health", tags=["health"])


def _to_response(result: CheckResult) -> JSONResponse:
    body = APIResponse[HealthResponse](
        data=HealthResponse(check=result.check, healthy=result.healthy, detail=result.detail),
        error=None if result.healthy else result.detail,
    )
    return JSONResponse(
        status_code=status.HTTP_200_OK if result.healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
        content=body.model_dump(),
    )


@router.get("/live", response_model=APIResponse[HealthResponse])
async def live(checker: HealthCheckerDep) -> JSONResponse:
    """Liveness probe."""
    return _to_response(checker.check_live())


@router.get("/ready", response_model=APIResponse[HealthResponse])
async def ready(checker: HealthCheckerDep) -> JSONResponse:
    """Readiness probe: GitLab must be reachable."""
    return _to_response(await checker.check_ready())
