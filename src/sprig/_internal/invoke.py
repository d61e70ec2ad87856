"""Invoke helpers: call sync or async middleware uniformly.

Middleware and handlers can be ``def`` or ``async def``. Anything that
calls user-provided code goes through ``invoke`` so the sync/async
check lives in exactly one place.

Usage::

    from sprig._internal.invoke import invoke

    ctx = await invoke(middleware, ctx, next)
"""

import inspect
from typing import Any
from weakref import WeakKeyDictionary


async def invoke(fn: Any, *args: Any, **kwargs: Any) -> Any:
    """Call *fn* and await the result if it is awaitable.

    A synchronous middleware resolves immediately; an asynchronous one
    resolves after its suspension completes. Callers see no difference.
    """
    result = fn(*args, **kwargs)
    if inspect.isawaitable(result):
        result = await result
    return result


_POSITIONAL = (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)

# Weak keys: middleware dropped by its owner is not kept alive here.
_arity_cache: WeakKeyDictionary[Any, bool] = WeakKeyDictionary()


def accepts_next(fn: Any) -> bool:
    """True if *fn* requires a second positional argument (``next``).

    Positional parameters with defaults are not counted, so
    ``def mw(ctx, extra=None)`` is a one-argument step. Callables whose
    signature cannot be inspected are assumed to take ``next``.
    """
    try:
        return _arity_cache[fn]
    except KeyError:
        pass
    except TypeError:
        # Unhashable or not weak-referenceable
        return _inspect_accepts_next(fn)
    result = _inspect_accepts_next(fn)
    _arity_cache[fn] = result
    return result


def _inspect_accepts_next(fn: Any) -> bool:
    try:
        params = inspect.signature(fn).parameters.values()
    except (TypeError, ValueError):
        return True
    required = 0
    for param in params:
        if param.kind is inspect.Parameter.VAR_POSITIONAL:
            return True
        if param.kind in _POSITIONAL and param.default is inspect.Parameter.empty:
            required += 1
    return required >= 2
