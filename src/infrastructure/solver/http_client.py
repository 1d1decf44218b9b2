import asyncio
import logging
import time
from typing import Any, Dict, Optional, Type, TypeVar

import httpx
from pydantic import BaseModel, ValidationError

from src.core.config import GatewayConfig
from src.core.errors import (
    GatewayError,
    InternalGatewayError,
    UpstreamTimeoutError,
    UpstreamUnavailableError,
)
from src.core.solver_models import (
    SolverOptimizeRequest,
    SolverRawResponse,
    SolverRebalanceRawResponse,
    SolverRebalanceRequest,
)
from src.core.validation import collect_violations

logger = logging.getLogger(__name__)

ResponseT = TypeVar("ResponseT", bound=BaseModel)

_ERROR_BODY_PREVIEW_CHARS = 500


class SolverClient:
    """Single-shot HTTP calls to the solver with timeout discipline and error classification.

    Exactly one request is made per call and nothing is retried: the solver may
    have side effects, so retry policy belongs to the caller. ``deadline`` is an
    absolute event-loop time; the effective bound is the earlier of the deadline
    and the configured request timeout. Cancelling the awaiting task abandons
    the in-flight request.
    """

    def __init__(
        self,
        *,
        config: GatewayConfig,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._config = config
        self._transport = transport

    async def optimize(
        self, request: SolverOptimizeRequest, *, deadline: Optional[float] = None
    ) -> SolverRawResponse:
        return await self._post_contract(
            "/optimize",
            request.model_dump(mode="json", exclude_none=True),
            SolverRawResponse,
            deadline=deadline,
        )

    async def rebalance(
        self, request: SolverRebalanceRequest, *, deadline: Optional[float] = None
    ) -> SolverRebalanceRawResponse:
        return await self._post_contract(
            "/rebalance",
            request.model_dump(mode="json", exclude_none=True),
            SolverRebalanceRawResponse,
            deadline=deadline,
        )

    async def probe(self, *, deadline: Optional[float] = None) -> Dict[str, Any]:
        try:
            response = await self._send("GET", "/health", deadline=deadline)
        except GatewayError as exc:
            return {"reachable": False, "kind": exc.kind.value, "message": exc.message}
        return {
            "reachable": response.is_success,
            "httpStatus": response.status_code,
            "message": "Solver health endpoint responded.",
        }

    def _headers(self) -> Dict[str, str]:
        headers = {"Content-Type": "application/json", "Accept": "application/json"}
        if self._config.solver_api_key:
            headers["Authorization"] = f"Bearer {self._config.solver_api_key}"
        return headers

    def _timeout_seconds(self, deadline: Optional[float]) -> float:
        timeout_seconds = self._config.request_timeout_seconds
        if deadline is None:
            return timeout_seconds
        remaining = deadline - asyncio.get_running_loop().time()
        if remaining <= 0:
            raise UpstreamTimeoutError("Request deadline elapsed before the solver call started")
        return min(timeout_seconds, remaining)

    async def _send(
        self,
        method: str,
        path: str,
        *,
        json_body: Optional[Dict[str, Any]] = None,
        deadline: Optional[float] = None,
    ) -> httpx.Response:
        base_url = self._config.solver_base_url
        if not base_url:
            raise UpstreamUnavailableError("SOLVER_BASE_URL not set")

        timeout_seconds = self._timeout_seconds(deadline)
        started = time.perf_counter()
        try:
            async with asyncio.timeout(timeout_seconds):
                async with httpx.AsyncClient(
                    timeout=httpx.Timeout(timeout_seconds), transport=self._transport
                ) as client:
                    response = await client.request(
                        method, f"{base_url}{path}", headers=self._headers(), json=json_body
                    )
        except (httpx.TimeoutException, TimeoutError) as exc:
            self._log_failure(path, started, kind="upstream_timeout", reason=type(exc).__name__)
            raise UpstreamTimeoutError(
                f"Solver did not respond within {round(timeout_seconds * 1000)} ms"
            ) from exc
        except (httpx.HTTPError, httpx.InvalidURL) as exc:
            self._log_failure(path, started, kind="upstream_unavailable", reason=str(exc))
            raise UpstreamUnavailableError("Solver request failed: solver unreachable") from exc

        logger.info(
            "solver.call.completed",
            extra={
                "extra_fields": {
                    "solver_path": path,
                    "http_status": response.status_code,
                    "latency_ms": round((time.perf_counter() - started) * 1000, 2),
                }
            },
        )
        return response

    async def _post_contract(
        self,
        path: str,
        body: Dict[str, Any],
        model: Type[ResponseT],
        *,
        deadline: Optional[float],
    ) -> ResponseT:
        response = await self._send("POST", path, json_body=body, deadline=deadline)
        if not response.is_success:
            raise _classify_status(response)

        raw_text = _read_text(response)
        try:
            payload = response.json()
        except ValueError as exc:
            _log_contract_drift(path, raw_text, ["body: response is not valid JSON"])
            raise InternalGatewayError("Solver returned a non-JSON response") from exc
        try:
            return model.model_validate(payload)
        except ValidationError as exc:
            _log_contract_drift(path, raw_text, collect_violations(exc))
            raise InternalGatewayError("Solver response violated the agreed contract") from exc

    def _log_failure(self, path: str, started: float, *, kind: str, reason: str) -> None:
        logger.warning(
            "solver.call.failed",
            extra={
                "extra_fields": {
                    "solver_path": path,
                    "error_kind": kind,
                    "reason": reason,
                    "latency_ms": round((time.perf_counter() - started) * 1000, 2),
                }
            },
        )


def _read_text(response: httpx.Response) -> str:
    try:
        return response.text
    except (httpx.HTTPError, UnicodeDecodeError, LookupError):
        return ""


def _classify_status(response: httpx.Response) -> GatewayError:
    body_text = _read_text(response)[:_ERROR_BODY_PREVIEW_CHARS]
    message = f"Solver error {response.status_code}: {body_text or response.reason_phrase}"
    logger.warning(
        "solver.call.rejected",
        extra={"extra_fields": {"http_status": response.status_code, "body": body_text}},
    )
    if response.status_code == httpx.codes.GATEWAY_TIMEOUT:
        return UpstreamTimeoutError(message)
    return UpstreamUnavailableError(message)


def _log_contract_drift(path: str, raw_body: str, violations: list[str]) -> None:
    logger.error(
        "solver.contract.violation",
        extra={
            "extra_fields": {
                "solver_path": path,
                "violations": violations,
                "raw_body": raw_body,
            }
        },
    )
