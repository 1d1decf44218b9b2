from typing import Any, Dict, Optional, Protocol

from src.core.models import NormalizedOptimizeResponse, NormalizedRebalanceResponse
from src.core.solver_models import (
    SolverOptimizeRequest,
    SolverRawResponse,
    SolverRebalanceRawResponse,
    SolverRebalanceRequest,
)


class SolverBackend(Protocol):
    async def optimize(
        self, request: SolverOptimizeRequest, *, deadline: Optional[float] = None
    ) -> SolverRawResponse: ...

    async def rebalance(
        self, request: SolverRebalanceRequest, *, deadline: Optional[float] = None
    ) -> SolverRebalanceRawResponse: ...

    async def probe(self, *, deadline: Optional[float] = None) -> Dict[str, Any]: ...


class MockBackend(Protocol):
    async def optimize(self) -> NormalizedOptimizeResponse: ...

    async def rebalance(self) -> NormalizedRebalanceResponse: ...
