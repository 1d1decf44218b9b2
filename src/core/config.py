from dataclasses import dataclass, field
from pathlib import Path

DEFAULT_FIXTURE_DIR = (
    Path(__file__).resolve().parents[1] / "infrastructure" / "solver" / "mock_payloads"
)
DEFAULT_OPTIMIZE_FIXTURE_PATH = DEFAULT_FIXTURE_DIR / "sample-optimize.json"
DEFAULT_REBALANCE_FIXTURE_PATH = DEFAULT_FIXTURE_DIR / "sample-rebalance.json"
DEFAULT_REQUEST_TIMEOUT_MS = 60000


@dataclass(frozen=True)
class GatewayConfig:
    """Process-wide gateway settings, loaded once at startup and passed explicitly."""

    solver_base_url: str = ""
    solver_api_key: str = ""
    mock_mode: bool = False
    request_timeout_ms: int = DEFAULT_REQUEST_TIMEOUT_MS
    optimize_fixture_path: Path = field(default=DEFAULT_OPTIMIZE_FIXTURE_PATH)
    rebalance_fixture_path: Path = field(default=DEFAULT_REBALANCE_FIXTURE_PATH)

    @property
    def request_timeout_seconds(self) -> float:
        return self.request_timeout_ms / 1000
