from typing import Annotated, Any

from fastapi import APIRouter, Body, Depends, Request, status

from src.api.dependencies import get_orchestrator
from src.api.disconnect import run_until_disconnected
from src.api.gateway_examples import (
    REBALANCE_REQUEST_EXAMPLE,
    REBALANCE_SUCCESS_EXAMPLE,
    error_responses,
)
from src.core.models import NormalizedRebalanceResponse
from src.core.orchestrator import GatewayOrchestrator

router = APIRouter(prefix="/api")


@router.post(
    "/rebalance",
    response_model=NormalizedRebalanceResponse,
    status_code=status.HTTP_200_OK,
    tags=["Optimization"],
    summary="Project a Rebalanced Portfolio",
    description=(
        "Returns a day-indexed comparison of the solver-rebalanced (`quantum`) and "
        "current (`classical`) portfolio values over the requested horizon."
    ),
    responses={
        200: {
            "description": "Normalized rebalance evolution.",
            "content": {"application/json": {"examples": {"ok": REBALANCE_SUCCESS_EXAMPLE}}},
        },
        **error_responses(),
    },
)
async def rebalance(
    request: Request,
    payload: Annotated[
        Any,
        Body(
            description="RebalanceRequest contract (camelCase).",
            examples=[REBALANCE_REQUEST_EXAMPLE],
        ),
    ],
    orchestrator: Annotated[GatewayOrchestrator, Depends(get_orchestrator)],
) -> NormalizedRebalanceResponse:
    return await run_until_disconnected(request, orchestrator.rebalance(payload))
