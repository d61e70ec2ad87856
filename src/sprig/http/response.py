"""Outbound response and the message type handlers return.

Unlike the request, the response is mutated in place while the
middleware chain runs: handler middleware writes the message and
status, other middleware may add headers.
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, slots=True)
class MessageResponse[T]:
    """What a route handler returns: a message and a status code.

    Usage::

        def show_user(ctx):
            return MessageResponse(f"user-{ctx.params['id']}", status=200)
    """

    message: T
    status: int = 200


@dataclass(slots=True)
class Response:
    """A mutable response written to by middleware.

    Any object with ``set_message`` and ``set_status`` can stand in for
    it; the pipeline never looks at anything else.
    """

    message: Any = None
    status: int = 200
    headers: list[tuple[str, str]] = field(default_factory=list)

    def set_message(self, message: Any) -> None:
        self.message = message

    def set_status(self, status: int) -> None:
        self.status = status

    def set_header(self, name: str, value: str) -> None:
        """Add a header. Existing headers with the same name are kept."""
        self.headers.append((name, value))

    def header(self, name: str, default: str | None = None) -> str | None:
        """Return the first header named *name* (case-insensitive)."""
        lower = name.lower()
        for key, value in self.headers:
            if key.lower() == lower:
                return value
        return default
