"""Immutable inbound request.

The core only reads ``method`` and ``path`` (once, before matching) and
hands the rest to middleware untouched. Transports that already have
their own request type can wrap it in ``Request.extra``.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from typing import Any
from urllib.parse import parse_qsl


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable request as seen by the route tree.

    Usage::

        request = Request.from_url("GET", "/users/7?expand=true")
        request.path          # "/users/7"
        request.query["expand"]  # "true"
    """

    method: str
    path: str
    query_string: str = ""
    headers: Mapping[str, str] = field(default_factory=dict)
    extra: Any = None

    @classmethod
    def from_url(
        cls,
        method: str,
        url: str,
        *,
        headers: Mapping[str, str] | None = None,
        extra: Any = None,
    ) -> "Request":
        """Split *url* into path and raw query string."""
        path, _, query_string = url.partition("?")
        return cls(
            method=method.upper(),
            path=path or "/",
            query_string=query_string,
            headers={k.lower(): v for k, v in (headers or {}).items()},
            extra=extra,
        )

    @property
    def query(self) -> dict[str, str]:
        """Query values, first value wins for repeated keys."""
        result: dict[str, str] = {}
        for key, value in parse_qsl(self.query_string, keep_blank_values=True):
            result.setdefault(key, value)
        return result
