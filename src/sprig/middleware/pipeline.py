"""Middleware pipeline: compose a chain and run it over a Context.

The chain resolved by ``RouteTree.match`` is wrapped innermost-first
into a single ``Next`` callable, the same onion the transport sees::

    run([m1, m2, handler], ctx)
        -> m1(ctx, next=m2(ctx, next=handler(ctx, next=terminal)))

Steps run strictly one after another. A step may suspend; other
requests keep progressing on the event loop meanwhile.

Failure semantics:
- A middleware that raises aborts the chain with ``PipelineError``
  carrying its index, the middleware itself, and the context.
- A ``PipelineError`` raised further down passes through outer
  middleware unchanged, so the index always points at the origin.
- When the request's ``CancelSignal`` fires, the chain stops at the
  current suspension point and ``RequestCancelled`` is raised.

Scoped resources pushed onto ``ctx.resources`` are released when the
chain ends, however it ends.
"""

import logging
from collections.abc import Sequence

import anyio

from sprig._internal.invoke import accepts_next, invoke
from sprig.context import CancelSignal, Context, context_var
from sprig.errors import PipelineError, RequestCancelled, middleware_name
from sprig.middleware.protocol import Middleware, Next

logger = logging.getLogger("sprig.pipeline")


async def _terminal(ctx: Context) -> Context:
    return ctx


def compose(chain: Sequence[Middleware]) -> Next:
    """Fold *chain* into one ``Next`` callable.

    The returned callable does not watch the cancel signal while a step
    is suspended; use ``run()`` for that.
    """
    handler: Next = _terminal
    for index in reversed(range(len(chain))):
        handler = _link(index, chain[index], handler)
    return handler


def _link(index: int, middleware: Middleware, downstream: Next) -> Next:
    takes_next = accepts_next(middleware)

    async def step(ctx: Context) -> Context:
        if ctx.cancel.cancelled:
            msg = f"Request cancelled before middleware #{index} ({middleware_name(middleware)})"
            raise RequestCancelled(msg)
        try:
            if takes_next:
                result = await invoke(middleware, ctx, downstream)
            else:
                result = await invoke(middleware, ctx)
            if result is None:
                result = ctx
            elif not isinstance(result, Context):
                msg = (
                    f"Middleware must return a Context or None, "
                    f"got {type(result).__name__}."
                )
                raise TypeError(msg)
        except (PipelineError, RequestCancelled):
            raise
        except Exception as exc:
            logger.debug("Middleware #%d (%s) raised %r", index, middleware_name(middleware), exc)
            raise PipelineError(index, middleware, ctx) from exc

        if takes_next:
            return result
        return await downstream(result)

    return step


async def _watch_cancel(signal: CancelSignal, scope: anyio.CancelScope) -> None:
    await signal.wait()
    scope.cancel()


async def run(chain: Sequence[Middleware], ctx: Context) -> Context:
    """Run *chain* over *ctx* and return the final context.

    Raises ``PipelineError`` if a middleware fails and
    ``RequestCancelled`` if ``ctx.cancel`` fires first.
    """
    entry = compose(chain)
    token = context_var.set(ctx)
    try:
        async with ctx.resources:
            return await _run_cancellable(entry, ctx)
    finally:
        context_var.reset(token)


async def _run_cancellable(entry: Next, ctx: Context) -> Context:
    if ctx.cancel.cancelled:
        msg = "Request cancelled before the pipeline started"
        raise RequestCancelled(msg)

    result: Context | None = None
    error: Exception | None = None
    async with anyio.create_task_group() as tg:
        tg.start_soon(_watch_cancel, ctx.cancel, tg.cancel_scope)
        try:
            result = await entry(ctx)
        except Exception as exc:
            # Re-raised after the group exits, unwrapped.
            error = exc
        finally:
            tg.cancel_scope.cancel()

    if error is not None:
        raise error
    if result is None:
        logger.debug("Pipeline interrupted by cancel signal")
        msg = "Request cancelled while the pipeline was running"
        raise RequestCancelled(msg)
    return result
