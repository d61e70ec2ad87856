"""Middleware: Protocol-based, no inheritance required.

A middleware is any callable matching either:
    async def mw(ctx: Context, next: Next) -> Context
    def step(ctx: Context) -> Context

Pipeline:
    compose -- Fold a chain into a single Next callable
    run -- Run a chain over a context with cancellation and cleanup
"""

from sprig.middleware.pipeline import compose, run
from sprig.middleware.protocol import Middleware, Next, OnionMiddleware

__all__ = [
    "Middleware",
    "Next",
    "OnionMiddleware",
    "compose",
    "run",
]
