from src.infrastructure.solver.http_client import SolverClient
from src.infrastructure.solver.mock_provider import MockSolverProvider

__all__ = ["MockSolverProvider", "SolverClient"]
