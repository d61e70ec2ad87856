"""App: owns a route tree and dispatches requests through it.

Setup phase: describe routes with ``app.routes()``.
Serving phase: the tree freezes on first dispatch; ``dispatch`` maps
outcomes onto the response.
"""

import logging
import threading
from typing import Any, Self, cast

from sprig.builder import RouteBuilder
from sprig.config import AppConfig
from sprig.context import CancelSignal, Context
from sprig.errors import PipelineError
from sprig.http.request import Request
from sprig.http.response import Response
from sprig.middleware.pipeline import run
from sprig.middleware.protocol import Middleware
from sprig.routing.route import Matched, MethodNotAllowed, NotFound
from sprig.routing.tree import RouteTree

logger = logging.getLogger("sprig.app")


class App:
    """A route tree plus the glue that turns outcomes into responses.

    Usage::

        app = App()
        app.routes().path("users").param("id", ParamType.NUMBER).get().handler(show_user)

        response = await app.dispatch(Request.from_url("GET", "/users/7"))

    Status mapping:
    - ``NotFound`` -> 404
    - ``MethodNotAllowed`` -> 405 with an ``Allow`` header
    - ``PipelineError`` -> 500, logged
    ``RequestCancelled`` propagates to the transport.
    """

    __slots__ = ("_freeze_lock", "config", "tree")

    def __init__(self, config: AppConfig | None = None) -> None:
        self.config = config or AppConfig()
        self.tree = RouteTree(self.config.base_path)
        self._freeze_lock = threading.Lock()
        if self.config.log_level:
            logging.getLogger("sprig").setLevel(self.config.log_level.upper())

    # -- Setup --

    def routes(self) -> RouteBuilder:
        """Return a fresh builder positioned at the root."""
        return RouteBuilder(tree=self.tree)

    def use(self, middleware: Middleware) -> Self:
        """Add middleware that runs for every matched request."""
        self.routes().use(middleware)
        return self

    @property
    def frozen(self) -> bool:
        return self.tree.frozen

    def freeze(self) -> None:
        """Thread-safe freeze with double-check locking."""
        if self.tree.frozen:
            return
        with self._freeze_lock:
            if self.tree.frozen:
                return
            self.tree.freeze()
            logger.debug("Route tree frozen with %d route(s)", len(self.tree.routes()))

    # -- Serving --

    async def dispatch(
        self,
        request: Request | Any,
        response: Response | Any = None,
        *,
        cancel: CancelSignal | None = None,
    ) -> Any:
        """Match *request* and run its chain, returning the mutated response."""
        self.freeze()
        if response is None:
            response = Response()

        outcome = self.tree.match(request.method, request.path)

        if isinstance(outcome, NotFound):
            response.set_status(404)
            if self.config.debug and outcome.failure is not None:
                response.set_message(f"Not Found: {outcome.failure}")
            else:
                response.set_message("Not Found")
            return response

        if isinstance(outcome, MethodNotAllowed):
            response.set_status(405)
            if hasattr(response, "set_header"):
                response.set_header("Allow", outcome.allow_header)
            response.set_message(f"Method not allowed. Allowed methods: {outcome.allow_header}")
            return response

        outcome = cast(Matched, outcome)
        ctx = Context(
            request=request,
            response=response,
            params=dict(outcome.params),
            cancel=cancel or CancelSignal(),
        )
        try:
            await run(outcome.chain, ctx)
        except PipelineError as exc:
            logger.exception(
                "Unhandled error in %s %s at middleware #%d (%s)",
                outcome.method,
                request.path,
                exc.index,
                exc.middleware_name,
            )
            response.set_status(500)
            if self.config.debug:
                response.set_message(f"Internal Server Error: {exc}: {exc.__cause__!r}")
            else:
                response.set_message("Internal Server Error")
        return response
