"""Sprig: a route tree and middleware pipeline for HTTP-like dispatch.

Describe routes with a fluent builder, match requests in O(path depth),
and run the matched middleware chain over a request context.

Basic usage::

    from sprig import App, MessageResponse, ParamType, Request

    app = App()

    def show_user(ctx):
        return MessageResponse(f"user-{ctx.params['id']}")

    app.routes().path("users").param("id", ParamType.NUMBER).get().handler(show_user)

    response = await app.dispatch(Request.from_url("GET", "/users/7"))

Lower-level pieces (``RouteTree``, ``RouteBuilder``, ``run``) work
without an ``App`` for callers that bring their own transport.
"""

from importlib import import_module

__version__ = "0.1.0-dev"

# Public name -> defining module. Resolved on first attribute access.
_LAZY_IMPORTS: dict[str, str] = {
    "App": "sprig.app",
    "AppConfig": "sprig.config",
    "RouteBuilder": "sprig.builder",
    "CancelSignal": "sprig.context",
    "Context": "sprig.context",
    "get_context": "sprig.context",
    "MessageResponse": "sprig.http.response",
    "Method": "sprig.http.method",
    "Request": "sprig.http.request",
    "Response": "sprig.http.response",
    "Middleware": "sprig.middleware.protocol",
    "Next": "sprig.middleware.protocol",
    "run": "sprig.middleware.pipeline",
    "DecodeFailure": "sprig.routing.params",
    "Decoder": "sprig.routing.params",
    "ParamType": "sprig.routing.params",
    "SegmentIdentity": "sprig.routing.segment",
    "SegmentKind": "sprig.routing.segment",
    "RouteNode": "sprig.routing.node",
    "RouteTree": "sprig.routing.tree",
    "Matched": "sprig.routing.route",
    "MethodNotAllowed": "sprig.routing.route",
    "NotFound": "sprig.routing.route",
    "SprigError": "sprig.errors",
    "ConfigurationError": "sprig.errors",
    "InvalidSegment": "sprig.errors",
    "ConflictingParameterChild": "sprig.errors",
    "PipelineError": "sprig.errors",
    "RequestCancelled": "sprig.errors",
}

__all__ = sorted(_LAZY_IMPORTS)


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import sprig`` fast while providing a clean top-level API.
    """
    module_name = _LAZY_IMPORTS.get(name)
    if module_name is None:
        msg = f"module {__name__!r} has no attribute {name!r}"
        raise AttributeError(msg)
    return getattr(import_module(module_name), name)
