from fastapi import Request

from src.api.gateway_config import load_gateway_config
from src.core.config import GatewayConfig
from src.core.orchestrator import GatewayOrchestrator
from src.infrastructure.solver import MockSolverProvider, SolverClient


def build_orchestrator(config: GatewayConfig) -> GatewayOrchestrator:
    return GatewayOrchestrator(
        config=config,
        solver_client=SolverClient(config=config),
        mock_provider=MockSolverProvider(config=config),
    )


def get_orchestrator(request: Request) -> GatewayOrchestrator:
    state = request.app.state
    orchestrator = getattr(state, "orchestrator", None)
    if orchestrator is None:
        # app served without lifespan (plain TestClient); configure once on first use
        state.gateway_config = load_gateway_config()
        orchestrator = build_orchestrator(state.gateway_config)
        state.orchestrator = orchestrator
    return orchestrator
