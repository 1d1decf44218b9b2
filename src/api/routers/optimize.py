from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Request, status

from src.api.dependencies import get_orchestrator
from src.api.disconnect import run_until_disconnected
from src.api.gateway_examples import (
    OPTIMIZE_REQUEST_EXAMPLE,
    OPTIMIZE_SUCCESS_EXAMPLE,
    error_responses,
)
from src.core.models import NormalizedOptimizeResponse
from src.core.orchestrator import GatewayOrchestrator

router = APIRouter(prefix="/api")


@router.post(
    "/optimize",
    response_model=NormalizedOptimizeResponse,
    status_code=status.HTTP_200_OK,
    tags=["Optimization"],
    summary="Optimize a Portfolio",
    description=(
        "Validates an optimization request, forwards it to the solver (or serves the mock "
        "fixture when `MOCK_MODE` is enabled) and returns the normalized allocation.\n\n"
        "Failures return `{error, kind, details?}` with status 422, 502, 504 or 500."
    ),
    responses={
        200: {
            "description": "Normalized optimization result.",
            "content": {"application/json": {"examples": {"ok": OPTIMIZE_SUCCESS_EXAMPLE}}},
        },
        **error_responses(),
    },
)
async def optimize(
    request: Request,
    payload: Annotated[
        Any,
        Body(
            description="OptimizationRequest contract (camelCase).",
            examples=[OPTIMIZE_REQUEST_EXAMPLE],
        ),
    ],
    orchestrator: Annotated[GatewayOrchestrator, Depends(get_orchestrator)],
) -> NormalizedOptimizeResponse:
    return await run_until_disconnected(request, orchestrator.optimize(payload))
