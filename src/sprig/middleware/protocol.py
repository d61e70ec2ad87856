"""Middleware protocol and Next type alias.

A middleware is any callable matching one of::

    async def my_mw(ctx: Context, next: Next) -> Context: ...
    def my_step(ctx: Context) -> Context: ...

Either form may be ``def`` or ``async def``. The two-argument form
decides whether to forward by calling ``next``; the one-argument form
always forwards the context it returns.

No base class required. The pipeline checks the shape, not the lineage.
"""

from collections.abc import Awaitable, Callable
from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from sprig.context import Context

# The rest of the chain, as seen from inside a middleware
type Next = Callable[["Context"], Awaitable["Context"]]

# Either middleware shape; kept loose because sync and async are both fine
type Middleware = Callable[..., Any]


class OnionMiddleware(Protocol):
    """Protocol for two-argument middleware.

    Accepts both functions and callable objects::

        # Function middleware
        async def timing(ctx: Context, next: Next) -> Context:
            start = time.monotonic()
            ctx = await next(ctx)
            ctx.response.set_header("X-Time", f"{time.monotonic() - start:.3f}")
            return ctx

        # Class middleware
        class RequireToken:
            async def __call__(self, ctx: Context, next: Next) -> Context:
                ...
    """

    async def __call__(self, ctx: "Context", next: Next) -> "Context": ...
