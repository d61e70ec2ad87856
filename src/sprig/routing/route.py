"""Match outcomes: Matched, NotFound, MethodNotAllowed.

Request-time results are values, never exceptions. Callers branch on
the type::

    match tree.match("GET", "/users/7"):
        case Matched(node=node, params=params, chain=chain): ...
        case MethodNotAllowed(allowed=allowed): ...
        case NotFound(): ...
"""

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from sprig.http.method import Method
from sprig.middleware.protocol import Middleware
from sprig.routing.params import DecodeFailure, ParamValue

if TYPE_CHECKING:
    from sprig.routing.node import RouteNode


@dataclass(frozen=True, slots=True)
class Matched:
    """The path resolved to ``node`` and the node answers the method."""

    node: "RouteNode"
    params: dict[str, ParamValue]
    chain: tuple[Middleware, ...]
    method: Method


@dataclass(frozen=True, slots=True)
class NotFound:
    """No node with bound methods sits at the requested path.

    ``failure`` holds the last parameter decode that was rejected on the
    way, if any, which is usually why a plausible path did not match.
    """

    path: str
    failure: DecodeFailure | None = None


@dataclass(frozen=True, slots=True)
class MethodNotAllowed:
    """The path resolved to ``node`` but the node has no chain for the method."""

    node: "RouteNode"
    method: str
    allowed: frozenset[Method] = field(default_factory=frozenset)

    @property
    def allow_header(self) -> str:
        """Allowed methods formatted for an ``Allow`` header."""
        return ", ".join(sorted(self.allowed))


type Outcome = Matched | NotFound | MethodNotAllowed
