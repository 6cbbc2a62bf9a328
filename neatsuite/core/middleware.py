"""Middleware chain wrapping the terminal transport call.

Middleware are ``async (context, next) -> TransportResponse`` callables.
They run in registration order on the way in and unwind in reverse order
on the way out.
"""

import logging
from typing import Iterable, List, Optional, Tuple

from neatsuite.domain.models.http import Middleware, NextHandler, RequestContext, TransportResponse

logger = logging.getLogger(__name__)


def _link(middleware: Middleware, context: RequestContext, downstream: NextHandler) -> NextHandler:
    """Binds one middleware to the rest of the chain."""
    called = False

    async def handler() -> TransportResponse:
        nonlocal called
        if called:
            raise RuntimeError(f"next() called more than once by middleware {middleware!r}")
        called = True
        return await downstream()

    async def invoke() -> TransportResponse:
        return await middleware(context, handler)

    return invoke


def build_chain(middlewares: Iterable[Middleware], context: RequestContext, terminal: NextHandler) -> NextHandler:
    """Folds ``middlewares`` right-to-left around ``terminal``.

    Returns a zero-argument coroutine function that runs the whole chain.
    """
    handler = terminal
    for middleware in reversed(tuple(middlewares)):
        handler = _link(middleware, context, handler)
    return handler


class MiddlewareChain:
    """Ordered registry of middleware.

    ``snapshot()`` freezes the current registrations; requests run against
    their snapshot, so middleware added mid-request only affects later calls.
    """

    def __init__(self) -> None:
        self._middlewares: List[Middleware] = []

    def __len__(self) -> int:
        return len(self._middlewares)

    def use(self, middleware: Middleware) -> None:
        """Appends ``middleware`` to the end of the chain."""
        self._middlewares.append(middleware)
        logger.debug(f"Registered middleware #{len(self._middlewares)}: {middleware!r}")

    def snapshot(self) -> Tuple[Middleware, ...]:
        return tuple(self._middlewares)

    async def run(
        self,
        context: RequestContext,
        terminal: NextHandler,
        middlewares: Optional[Tuple[Middleware, ...]] = None,
    ) -> TransportResponse:
        """Runs ``context`` through the chain, ending at ``terminal``.

        Args:
            context: Request context shared by every link.
            terminal: The innermost call (transport + retry).
            middlewares: Snapshot to run; defaults to the current registrations.
        """
        links = self.snapshot() if middlewares is None else middlewares
        return await build_chain(links, context, terminal)()
