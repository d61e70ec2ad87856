"""Request-scoped context threaded through the middleware chain.

Provides:
- ``Context``: request, response, decoded params, and per-request state.
- ``CancelSignal``: set by the transport when the client goes away.
- ``context_var`` / ``get_context()``: the context of the request the
  current task is serving.

A ``Context`` is created fresh for each request, owned by exactly one
in-flight request, and dropped once the chain finishes.

Thread safety:
    ``ContextVar`` is task-local under asyncio and trio. No locks needed.
"""

from contextlib import AsyncExitStack
from contextvars import ContextVar
from dataclasses import dataclass, field
from typing import Any

import anyio

from sprig.routing.params import ParamValue


class CancelSignal:
    """A one-shot cancellation flag that can also be awaited.

    The transport calls ``set()`` when the request should stop (client
    disconnect, server shutdown). The pipeline watches it so middleware
    does not have to poll.

    The underlying ``anyio.Event`` is created lazily, on first wait, so a
    signal can be constructed and set outside a running event loop.
    Call ``set()`` from the event loop thread.
    """

    __slots__ = ("_event", "_is_set")

    def __init__(self) -> None:
        self._event: anyio.Event | None = None
        self._is_set = False

    def __repr__(self) -> str:
        return f"<CancelSignal {'set' if self._is_set else 'clear'}>"

    @property
    def cancelled(self) -> bool:
        return self._is_set

    def set(self) -> None:
        self._is_set = True
        if self._event is not None:
            self._event.set()

    async def wait(self) -> None:
        """Block until the signal is set."""
        if self._is_set:
            return
        if self._event is None:
            self._event = anyio.Event()
        await self._event.wait()


@dataclass(slots=True)
class Context:
    """Everything one request carries through the middleware chain.

    ``request`` and ``response`` are opaque to the core, except that
    handler middleware calls ``response.set_message()`` and
    ``response.set_status()``.

    Usage::

        async def load_user(ctx: Context, next: Next) -> Context:
            ctx.state["user"] = await users.get(ctx.params["id"])
            return await next(ctx)
    """

    request: Any
    response: Any
    params: dict[str, ParamValue] = field(default_factory=dict)
    query: dict[str, Any] = field(default_factory=dict)
    state: dict[str, Any] = field(default_factory=dict)
    cancel: CancelSignal = field(default_factory=CancelSignal)
    resources: AsyncExitStack = field(default_factory=AsyncExitStack, repr=False)

    @property
    def cancelled(self) -> bool:
        return self.cancel.cancelled


context_var: ContextVar[Context] = ContextVar("sprig_context")
"""The context of the current request. Set by the pipeline while it runs."""


def get_context() -> Context:
    """Return the current request's context.

    Raises ``LookupError`` if called outside a running pipeline.
    """
    return context_var.get()
