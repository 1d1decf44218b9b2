import asyncio
import logging
from typing import Awaitable, TypeVar

from fastapi import Request

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_DISCONNECT_POLL_SECONDS = 0.1


class ClientDisconnectedError(Exception):
    pass


async def run_until_disconnected(
    request: Request,
    awaitable: Awaitable[T],
    *,
    poll_interval_seconds: float = DEFAULT_DISCONNECT_POLL_SECONDS,
) -> T:
    """Await ``awaitable``, cancelling it if the HTTP client goes away first.

    Cancellation reaches the outbound solver call, so an abandoned request does
    not keep the solver connection open.
    """
    work = asyncio.ensure_future(awaitable)
    disconnected = False

    async def _watch() -> None:
        nonlocal disconnected
        while not work.done():
            if await request.is_disconnected():
                disconnected = True
                logger.info(
                    "request.client_disconnected",
                    extra={"extra_fields": {"endpoint": request.url.path}},
                )
                work.cancel()
                return
            await asyncio.sleep(poll_interval_seconds)

    watcher = asyncio.create_task(_watch())
    try:
        return await work
    except asyncio.CancelledError:
        if disconnected:
            raise ClientDisconnectedError(request.url.path) from None
        work.cancel()
        raise
    finally:
        watcher.cancel()
