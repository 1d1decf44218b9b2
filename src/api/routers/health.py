from typing import Annotated, Any, Dict

from fastapi import APIRouter, Depends

from src.api.dependencies import get_orchestrator
from src.core.orchestrator import GatewayOrchestrator

router = APIRouter(tags=["Health"])


@router.get("/health", summary="Service Health")
async def health() -> Dict[str, str]:
    return {"status": "ok"}


@router.get("/health/live", summary="Liveness Probe")
async def health_live() -> Dict[str, str]:
    return {"status": "live"}


@router.get("/health/ready", summary="Readiness Probe")
async def health_ready() -> Dict[str, str]:
    return {"status": "ready"}


@router.get(
    "/api/solver/health",
    summary="Solver Reachability",
    description="Reports mock mode, or probes `GET {SOLVER_BASE_URL}/health` once.",
)
async def solver_health(
    orchestrator: Annotated[GatewayOrchestrator, Depends(get_orchestrator)],
) -> Dict[str, Any]:
    return await orchestrator.solver_health()
