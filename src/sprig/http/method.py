"""The HTTP verbs a route node can be bound to."""

from enum import StrEnum


class Method(StrEnum):
    """HTTP request methods understood by the route tree.

    Members compare equal to their upper-case names, so
    ``Method.GET == "GET"`` holds.
    """

    GET = "GET"
    POST = "POST"
    PUT = "PUT"
    DELETE = "DELETE"
    PATCH = "PATCH"
    HEAD = "HEAD"
    OPTIONS = "OPTIONS"

    @classmethod
    def parse(cls, value: "str | Method") -> "Method | None":
        """Return the member for *value* (case-insensitive), or ``None``."""
        if isinstance(value, Method):
            return value
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            return None
