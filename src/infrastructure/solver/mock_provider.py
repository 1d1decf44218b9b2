import asyncio
import json
import logging
from pathlib import Path
from typing import Any, Type, TypeVar

from pydantic import BaseModel

from src.core.config import GatewayConfig
from src.core.errors import InternalGatewayError
from src.core.ids import new_run_id
from src.core.mapper import to_normalized_rebalance_response, to_normalized_response
from src.core.models import NormalizedOptimizeResponse, NormalizedRebalanceResponse
from src.core.solver_models import SolverRawResponse, SolverRebalanceRawResponse
from src.core.validation import validate_contract

logger = logging.getLogger(__name__)

MOCK_SOURCE = "mock"

RawT = TypeVar("RawT", bound=BaseModel)


class MockSolverProvider:
    """Serves fixture responses through the live normalization path without network I/O."""

    def __init__(self, *, config: GatewayConfig) -> None:
        self._config = config

    async def optimize(self) -> NormalizedOptimizeResponse:
        raw = await self._load(self._config.optimize_fixture_path, SolverRawResponse)
        normalized = to_normalized_response(raw, source=MOCK_SOURCE)
        return normalized.model_copy(update={"run_id": new_run_id()})

    async def rebalance(self) -> NormalizedRebalanceResponse:
        raw = await self._load(self._config.rebalance_fixture_path, SolverRebalanceRawResponse)
        normalized = to_normalized_rebalance_response(raw, source=MOCK_SOURCE)
        return normalized.model_copy(update={"run_id": new_run_id()})

    async def _load(self, path: Path, model: Type[RawT]) -> RawT:
        payload = await self._read_fixture(path)
        try:
            return validate_contract(
                model,
                payload,
                error_type=InternalGatewayError,
                message=f"Mock fixture {path.name} violates the solver contract",
            )
        except InternalGatewayError as exc:
            logger.error(
                "mock.fixture.invalid",
                extra={"extra_fields": {"fixture_path": str(path), "violations": exc.details}},
            )
            raise

    async def _read_fixture(self, path: Path) -> Any:
        try:
            async with asyncio.timeout(self._config.request_timeout_seconds):
                text = await asyncio.to_thread(path.read_text, encoding="utf-8")
        except (OSError, TimeoutError) as exc:
            logger.error(
                "mock.fixture.unreadable",
                extra={"extra_fields": {"fixture_path": str(path), "reason": repr(exc)}},
            )
            raise InternalGatewayError(f"Mock fixture {path.name} could not be read") from exc
        try:
            return json.loads(text)
        except ValueError as exc:
            logger.error(
                "mock.fixture.invalid",
                extra={"extra_fields": {"fixture_path": str(path), "raw_body": text}},
            )
            raise InternalGatewayError(f"Mock fixture {path.name} is not valid JSON") from exc
