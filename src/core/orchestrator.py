"""
FILE: src/core/orchestrator.py
Per-request entry point for optimize and rebalance.

Each request moves through ``received -> validated -> {mocked | dispatched} ->
normalized -> returned`` or exits to ``failed(kind)``. Nothing is kept between
requests and nothing is retried.
"""

import asyncio
import logging
from typing import Any, Dict, Optional

from fastapi import status

from src.core.config import GatewayConfig
from src.core.errors import ErrorKind, GatewayError
from src.core.mapper import (
    to_normalized_rebalance_response,
    to_normalized_response,
    to_solver_rebalance_request,
    to_solver_request,
)
from src.core.models import (
    NormalizedOptimizeResponse,
    NormalizedRebalanceResponse,
    OptimizationRequest,
    RebalanceRequest,
)
from src.core.solver_backend import MockBackend, SolverBackend
from src.core.validation import validate_contract

logger = logging.getLogger(__name__)

SOLVER_SOURCE = "solver"

HTTP_422_UNPROCESSABLE = getattr(
    status,
    "HTTP_422_UNPROCESSABLE_CONTENT",
    status.HTTP_422_UNPROCESSABLE_ENTITY,
)

HTTP_STATUS_BY_ERROR_KIND: Dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: HTTP_422_UNPROCESSABLE,
    ErrorKind.UPSTREAM_TIMEOUT: status.HTTP_504_GATEWAY_TIMEOUT,
    ErrorKind.UPSTREAM_UNAVAILABLE: status.HTTP_502_BAD_GATEWAY,
    ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


def http_status_for(kind: ErrorKind) -> int:
    return HTTP_STATUS_BY_ERROR_KIND.get(kind, status.HTTP_500_INTERNAL_SERVER_ERROR)


class GatewayOrchestrator:
    def __init__(
        self,
        *,
        config: GatewayConfig,
        solver_client: SolverBackend,
        mock_provider: MockBackend,
    ) -> None:
        self._config = config
        self._solver_client = solver_client
        self._mock_provider = mock_provider

    @property
    def mock_mode(self) -> bool:
        return self._config.mock_mode

    async def optimize(self, payload: Any) -> NormalizedOptimizeResponse:
        deadline = self._deadline()
        _transition("optimize", "received")
        try:
            request = validate_contract(OptimizationRequest, payload)
            _transition("optimize", "validated")
            if self._config.mock_mode:
                _transition("optimize", "mocked")
                response = await self._mock_provider.optimize()
            else:
                _transition("optimize", "dispatched")
                raw = await self._solver_client.optimize(
                    to_solver_request(request), deadline=deadline
                )
                response = to_normalized_response(raw, source=SOLVER_SOURCE)
        except GatewayError as exc:
            _log_failure("optimize", exc)
            raise
        _transition("optimize", "normalized", run_id=response.run_id)
        _transition("optimize", "returned", run_id=response.run_id)
        return response

    async def rebalance(self, payload: Any) -> NormalizedRebalanceResponse:
        deadline = self._deadline()
        _transition("rebalance", "received")
        try:
            request = validate_contract(RebalanceRequest, payload)
            _transition("rebalance", "validated")
            if self._config.mock_mode:
                _transition("rebalance", "mocked")
                response = await self._mock_provider.rebalance()
            else:
                _transition("rebalance", "dispatched")
                raw = await self._solver_client.rebalance(
                    to_solver_rebalance_request(request), deadline=deadline
                )
                response = to_normalized_rebalance_response(raw, source=SOLVER_SOURCE)
        except GatewayError as exc:
            _log_failure("rebalance", exc)
            raise
        _transition("rebalance", "normalized", run_id=response.run_id)
        _transition("rebalance", "returned", run_id=response.run_id)
        return response

    async def solver_health(self) -> Dict[str, Any]:
        if self._config.mock_mode:
            return {"mockMode": True, "reachable": None, "message": "Mock mode: solver not called."}
        report = await self._solver_client.probe(deadline=self._deadline())
        return {"mockMode": False, **report}

    def _deadline(self) -> float:
        return asyncio.get_running_loop().time() + self._config.request_timeout_seconds


def _transition(operation: str, state: str, *, run_id: Optional[str] = None) -> None:
    logger.debug(
        "gateway.request.%s",
        state,
        extra={"extra_fields": {"operation": operation, "state": state, "run_id": run_id}},
    )


def _log_failure(operation: str, exc: GatewayError) -> None:
    level = logging.ERROR if exc.kind == ErrorKind.INTERNAL else logging.WARNING
    logger.log(
        level,
        "gateway.request.failed",
        extra={
            "extra_fields": {
                "operation": operation,
                "state": f"failed({exc.kind.value})",
                "error_kind": exc.kind.value,
                "error_message": exc.message,
                "details": exc.details,
            }
        },
    )
