import uuid
from datetime import datetime, timezone


def new_run_id(now: datetime | None = None) -> str:
    """Timestamp-based run id with a random suffix so ids minted in the same tick differ."""
    stamp = (now or datetime.now(timezone.utc)).strftime("%Y%m%dT%H%M%S%fZ")
    return f"run_{stamp}_{uuid.uuid4().hex[:8]}"
