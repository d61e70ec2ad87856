"""Fluent builder for the route tree.

Each call mutates the tree at the builder's cursor and/or moves the
cursor, then returns the builder so calls chain::

    api = RouteBuilder("/api/")
    api.use(log_requests)
    api.path("users").param("id", ParamType.NUMBER).get().handler(show_user)

The cursor is owned by one builder. To describe sibling branches, take
``fork()`` before descending, or ``rewind()`` to the last ``route()``.
"""

from collections.abc import Callable, Mapping
from typing import Any, Self

from sprig._internal.invoke import invoke
from sprig.context import Context
from sprig.errors import ConfigurationError, InvalidSegment, middleware_name
from sprig.http.method import Method
from sprig.http.response import MessageResponse
from sprig.middleware.protocol import Middleware, Next
from sprig.routing.node import RouteNode
from sprig.routing.params import Decoder, DecodeFailure, ParamType, StringDecoder
from sprig.routing.segment import SegmentIdentity
from sprig.routing.tree import RouteTree

type HandlerFn = Callable[[Context], Any]


class RouteBuilder:
    """A stateful cursor over a ``RouteTree``.

    - ``path`` / ``param`` descend into (or create) a child
    - ``get`` / ``post`` / ... bind methods at the cursor
    - ``use`` adds middleware every request through the cursor runs
    - ``handler`` adds the terminal middleware for the pending methods

    Methods called before a ``handler`` are pending for it; a method
    called after a handler starts a new pending set, so
    ``.get().handler(a).post().handler(b)`` keeps ``a`` and ``b`` apart.
    """

    __slots__ = ("_anchor", "_cursor", "_handled", "_pending", "tree")

    def __init__(self, base_path: str = "/", *, tree: RouteTree | None = None) -> None:
        if tree is None:
            tree = RouteTree(base_path)
        elif base_path not in ("/", tree.base_path):
            msg = (
                f"Builder base path {base_path!r} does not match "
                f"tree base path {tree.base_path!r}."
            )
            raise ConfigurationError(msg)
        self.tree = tree
        self._cursor = tree.root
        self._anchor = tree.root
        self._pending: list[Method] = []
        self._handled = False

    def __repr__(self) -> str:
        return f"<RouteBuilder at {self._cursor.pattern!r}>"

    @property
    def cursor(self) -> RouteNode:
        return self._cursor

    # -- Navigation --

    def path(self, text: str) -> Self:
        """Descend into the literal child *text*, creating it if needed.

        ``"a/b"`` descends two levels. Raises ``InvalidSegment`` when
        *text* holds no segment at all.
        """
        parts = [part for part in text.split("/") if part]
        if not parts:
            msg = f"Path text must contain at least one segment, got {text!r}."
            raise InvalidSegment(msg)
        self.tree.ensure_mutable()
        node = self._cursor
        for part in parts:
            node = node.add_child(SegmentIdentity.literal(part))
        self._move(node)
        return self

    def route(self, text: str) -> Self:
        """Like ``path``, and make the new position the anchor ``rewind()`` returns to."""
        self.path(text)
        self._anchor = self._cursor
        return self

    def param(self, name: str, param_type: ParamType = ParamType.STRING) -> Self:
        """Descend into the parametric child *name* of type *param_type*.

        Raises ``ConflictingParameterChild`` if the cursor already has a
        parametric child with a different name or type.
        """
        self.tree.ensure_mutable()
        self._move(self._cursor.add_child(SegmentIdentity.parameter(name, param_type)))
        return self

    def fork(self) -> "RouteBuilder":
        """Return an independent builder positioned at the current cursor."""
        other = RouteBuilder(tree=self.tree)
        other._cursor = self._cursor
        other._anchor = self._anchor
        return other

    def rewind(self) -> Self:
        """Move the cursor back to the anchor (the root unless ``route`` was used)."""
        self._move(self._anchor)
        return self

    def _move(self, node: RouteNode) -> None:
        self._cursor = node
        self._pending = []
        self._handled = False

    # -- Methods --

    def method(self, method: Method | str) -> Self:
        """Bind *method* at the cursor and make it pending for ``handler``."""
        verb = Method.parse(method)
        if verb is None:
            msg = f"Unknown HTTP method {method!r}."
            raise ConfigurationError(msg)
        self.tree.ensure_mutable()
        if self._handled:
            self._pending = []
            self._handled = False
        self._cursor.bind_method(verb)
        if verb not in self._pending:
            self._pending.append(verb)
        return self

    def get(self) -> Self:
        return self.method(Method.GET)

    def post(self) -> Self:
        return self.method(Method.POST)

    def put(self) -> Self:
        return self.method(Method.PUT)

    def delete(self) -> Self:
        return self.method(Method.DELETE)

    def patch(self) -> Self:
        return self.method(Method.PATCH)

    def head(self) -> Self:
        return self.method(Method.HEAD)

    def options(self) -> Self:
        return self.method(Method.OPTIONS)

    # -- Middleware --

    def use(self, middleware: Middleware) -> Self:
        """Run *middleware* for every request passing through the cursor."""
        self.tree.ensure_mutable()
        self._cursor.add_middleware(middleware)
        return self

    def handler(self, fn: HandlerFn) -> Self:
        """Attach *fn* as the terminal middleware for the pending methods.

        *fn* receives the ``Context`` and returns a ``MessageResponse``
        (sync or async). Its message and status are written to the
        response, then the chain continues. With no pending method the
        handler is appended like ``use`` middleware, so it also runs for
        requests that pass through the cursor to a descendant.
        """
        self.tree.ensure_mutable()
        middleware = handler_middleware(fn)
        if self._pending:
            for verb in self._pending:
                self._cursor.add_method_middleware(verb, middleware)
        else:
            self._cursor.add_middleware(middleware)
        self._handled = True
        return self

    def query(self, name: str | Decoder, decoder: Decoder | None = None) -> Self:
        """Decode query input into ``ctx.query``.

        ``query("page", NumberDecoder())`` decodes one named value;
        ``query(decoder)`` hands the raw query string to *decoder*, which
        must return a mapping. A ``DecodeFailure`` answers 400 and stops
        the chain.
        """
        self.tree.ensure_mutable()
        if isinstance(name, str):
            middleware = named_query_middleware(name, decoder or StringDecoder())
        else:
            middleware = query_string_middleware(name)
        self._cursor.add_middleware(middleware)
        return self


def write_message(response: Any, result: Any) -> None:
    """Write a handler's return value into *response*."""
    if isinstance(result, MessageResponse):
        response.set_message(result.message)
        response.set_status(result.status)
    else:
        response.set_message(result)


def handler_middleware(fn: HandlerFn) -> Middleware:
    """Wrap a ``Context -> MessageResponse`` function as middleware."""

    async def run_handler(ctx: Context, next: Next) -> Context:
        write_message(ctx.response, await invoke(fn, ctx))
        return await next(ctx)

    run_handler.__qualname__ = f"handler({middleware_name(fn)})"
    return run_handler


def _reject(ctx: Context, failure: DecodeFailure) -> Context:
    ctx.response.set_status(400)
    ctx.response.set_message(str(failure))
    return ctx


def named_query_middleware(name: str, decoder: Decoder) -> Middleware:
    async def decode_query_value(ctx: Context, next: Next) -> Context:
        raw = getattr(ctx.request, "query", {}).get(name)
        if raw is None:
            return await next(ctx)
        value = decoder.decode(raw)
        if isinstance(value, DecodeFailure):
            return _reject(ctx, value)
        ctx.query[name] = value
        return await next(ctx)

    decode_query_value.__qualname__ = f"query({name!r})"
    return decode_query_value


def query_string_middleware(decoder: Decoder) -> Middleware:
    async def decode_query_string(ctx: Context, next: Next) -> Context:
        value = decoder.decode(getattr(ctx.request, "query_string", ""))
        if isinstance(value, DecodeFailure):
            return _reject(ctx, value)
        if not isinstance(value, Mapping):
            msg = (
                f"Query decoder {type(decoder).__name__} must return a mapping, "
                f"got {type(value).__name__}."
            )
            raise TypeError(msg)
        ctx.query.update(value)
        return await next(ctx)

    decode_query_string.__qualname__ = f"query({type(decoder).__name__})"
    return decode_query_string
