import logging
import os
from pathlib import Path

from src.core.config import (
    DEFAULT_OPTIMIZE_FIXTURE_PATH,
    DEFAULT_REBALANCE_FIXTURE_PATH,
    DEFAULT_REQUEST_TIMEOUT_MS,
    GatewayConfig,
)

logger = logging.getLogger(__name__)


def env_flag(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in {"1", "true", "yes", "on"}


def env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    try:
        parsed = int(value)
    except ValueError:
        return default
    return parsed if parsed >= 1 else default


def env_path(name: str, default: Path) -> Path:
    value = os.getenv(name, "").strip()
    return Path(value) if value else default


def solver_base_url() -> str:
    return os.getenv("SOLVER_BASE_URL", "").strip().rstrip("/")


def load_gateway_config() -> GatewayConfig:
    config = GatewayConfig(
        solver_base_url=solver_base_url(),
        solver_api_key=os.getenv("SOLVER_API_KEY", "").strip(),
        mock_mode=env_flag("MOCK_MODE", False),
        request_timeout_ms=env_int("REQUEST_TIMEOUT_MS", DEFAULT_REQUEST_TIMEOUT_MS),
        optimize_fixture_path=env_path("MOCK_OPTIMIZE_FIXTURE_PATH", DEFAULT_OPTIMIZE_FIXTURE_PATH),
        rebalance_fixture_path=env_path(
            "MOCK_REBALANCE_FIXTURE_PATH", DEFAULT_REBALANCE_FIXTURE_PATH
        ),
    )
    if not config.mock_mode and not config.solver_base_url:
        logger.warning("SOLVER_BASE_URL not set; live solver calls will fail as unavailable")
    return config
