"""
Action Router

Store middleware that routes marked actions to the orchestrators and passes
every other action through untouched.
"""

import asyncio
import logging
from typing import Any, Callable, Coroutine, Optional

from shared.config import Settings, load_settings
from shared.transport import HttpTransport
from request_orchestrator.chain import run_chain
from request_orchestrator.concurrent import run_concurrent
from request_orchestrator.executor import RequestExecutor
from request_orchestrator.markers import (
    CALL_API,
    CHAIN_API,
    CONCURRENT_API,
    chain_action,
    classify,
)

logger = logging.getLogger(__name__)

Dispatch = Callable[[Any], Any]


def schedule(coro: Coroutine[Any, Any, Any]) -> "asyncio.Task[Any]":
    """
    Start an orchestration on the running event loop.

    Raises:
        RuntimeError: If no event loop is running in this thread
    """
    try:
        return asyncio.create_task(coro)
    except RuntimeError:
        coro.close()
        raise RuntimeError("API actions must be dispatched from a running event loop")


class ApiMiddleware:
    """
    Store middleware ``store -> next -> action -> result``.

    Marked actions start running as soon as they are dispatched and return an
    ``asyncio.Task``; other actions return whatever ``next`` returns.

    The middleware owns the transport it builds from settings and releases it
    in ``aclose()``. A transport passed in by the caller is left open.
    """

    def __init__(self, transport: HttpTransport, owns_transport: bool = False):
        self.transport = transport
        self.owns_transport = owns_transport

    def __call__(self, store: Any) -> Callable[[Dispatch], Dispatch]:
        executor = RequestExecutor(
            transport=self.transport,
            dispatch=lambda action: store.dispatch(action),
            get_state=store.get_state
        )

        def wrap(next_dispatch: Dispatch) -> Dispatch:
            def handle(action: Any) -> Any:
                marker = classify(action)

                if marker is CALL_API:
                    # A single call runs as a chain of one
                    return store.dispatch(chain_action(lambda previous: action))

                if marker is CHAIN_API:
                    logger.debug("Routing chain action")
                    return schedule(run_chain(action[CHAIN_API], executor))

                if marker is CONCURRENT_API:
                    logger.debug("Routing concurrent action")
                    return schedule(run_concurrent(action[CONCURRENT_API], executor))

                return next_dispatch(action)

            return handle

        return wrap

    async def aclose(self):
        """Close the transport if this middleware created it"""
        if self.owns_transport:
            await self.transport.aclose()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.aclose()


def create_api_middleware(
    transport: Optional[HttpTransport] = None,
    settings: Optional[Settings] = None
) -> ApiMiddleware:
    """
    Create the API middleware.

    Args:
        transport: HTTP transport managed by the caller
        settings: Settings used to build a transport when none is passed
            (loaded from the environment when omitted). That transport is
            owned by the middleware: close it with ``await middleware.aclose()``
            on the event loop that used it.

    Returns:
        ApiMiddleware instance
    """
    if transport is not None:
        return ApiMiddleware(transport)

    logger.debug("Building default HTTP transport from settings")
    return ApiMiddleware(
        HttpTransport.from_settings(settings or load_settings()),
        owns_transport=True
    )
