"""Sprig exception hierarchy.

Shared across the route tree, builder, pipeline, and App so every module
raises and catches the same types.

Only construction mistakes and middleware failures are exceptions.
Request-time outcomes (``NotFound``, ``MethodNotAllowed``,
``DecodeFailure``) are ordinary return values; see ``sprig.routing``.
"""

from typing import Any


class SprigError(Exception):
    """Base for all sprig-specific errors."""


class ConfigurationError(SprigError):
    """Raised when the route tree or app configuration is invalid.

    Typically raised while the tree is being built, before the first
    request is served.
    """


class InvalidSegment(ConfigurationError):  # noqa: N818
    """A path segment descriptor is malformed.

    Empty ids, parameters without a type, and literals with a type
    all end up here.
    """


class ConflictingParameterChild(ConfigurationError):  # noqa: N818
    """A node already has a different parametric child.

    A single tree position can branch into any number of literal
    children but into only one parameter.
    """

    def __init__(self, position: str, existing: str, requested: str) -> None:
        self.position = position
        self.existing = existing
        self.requested = requested
        super().__init__(
            f"Cannot add parameter {requested} under {position!r}: "
            f"{existing} is already declared at this position."
        )


class PipelineError(SprigError):
    """A middleware raised while processing a request.

    Carries the failing middleware, its position in the chain, and the
    context as it was when the failure happened. The original exception
    is chained as ``__cause__``.
    """

    def __init__(self, index: int, middleware: Any, context: Any) -> None:
        self.index = index
        self.middleware = middleware
        self.context = context
        super().__init__(f"Middleware #{index} ({middleware_name(middleware)}) failed")

    @property
    def middleware_name(self) -> str:
        return middleware_name(self.middleware)


class RequestCancelled(SprigError):  # noqa: N818
    """The request was cancelled by the transport before the chain finished."""


def middleware_name(middleware: Any) -> str:
    """Best-effort human readable name for a middleware callable."""
    name = getattr(middleware, "__qualname__", None) or getattr(middleware, "__name__", None)
    if name is None:
        name = type(middleware).__qualname__
    return name
