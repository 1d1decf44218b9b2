"""
FILE: src/api/main.py
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from src.api.dependencies import build_orchestrator
from src.api.error_responses import register_error_handlers
from src.api.gateway_config import load_gateway_config
from src.api.observability import setup_observability
from src.api.routers.health import router as health_router
from src.api.routers.optimize import router as optimize_router
from src.api.routers.rebalance import router as rebalance_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def _app_lifespan(app: FastAPI):
    config = load_gateway_config()
    app.state.gateway_config = config
    app.state.orchestrator = build_orchestrator(config)
    logger.info(
        "gateway.configured",
        extra={
            "extra_fields": {
                "mock_mode": config.mock_mode,
                "solver_configured": bool(config.solver_base_url),
                "request_timeout_ms": config.request_timeout_ms,
            }
        },
    )
    yield


app = FastAPI(
    title="Portfolio Solver Gateway",
    version="0.1.0",
    description=(
        "Stable request/response contract in front of the portfolio optimization solver.\n\n"
        "Requests are validated, translated to the solver's native shape, sent under a bounded "
        "timeout and normalized. `MOCK_MODE=true` serves schema-valid fixtures instead."
    ),
    openapi_tags=[
        {
            "name": "Optimization",
            "description": "Optimize and rebalance operations proxied to the solver.",
        },
        {"name": "Health", "description": "Service and solver health endpoints."},
    ],
    lifespan=_app_lifespan,
)

setup_observability(app)
register_error_handlers(app)

app.include_router(health_router)
app.include_router(optimize_router)
app.include_router(rebalance_router)
