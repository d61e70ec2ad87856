"""Route tree with O(path-depth) matching.

Nodes are added during setup (through ``RouteBuilder``) and the tree is
frozen before requests are served. After ``freeze()`` the tree is
read-only, so concurrent matches need no locking.
"""

import logging
from collections.abc import Iterator

from sprig.errors import ConfigurationError
from sprig.http.method import Method
from sprig.middleware.protocol import Middleware
from sprig.routing.node import RouteNode
from sprig.routing.params import DecodeFailure, ParamValue
from sprig.routing.route import Matched, MethodNotAllowed, NotFound, Outcome
from sprig.routing.segment import SegmentIdentity

logger = logging.getLogger("sprig.routing")


def split_path(path: str) -> list[str]:
    """Split a request path into segments, ignoring empty ones.

    Examples::

        "/users/7"   -> ["users", "7"]
        "/users/7/"  -> ["users", "7"]
        "/"          -> []
    """
    return [part for part in path.split("/") if part]


def validate_base_path(base_path: str) -> None:
    """Raise ``ConfigurationError`` unless *base_path* starts and ends with ``/``."""
    if not base_path.startswith("/") or not base_path.endswith("/"):
        msg = f'Base path should start and end with "/", got {base_path!r}.'
        raise ConfigurationError(msg)


class RouteTree:
    """The root node plus the matching algorithm.

    Usage::

        tree = RouteTree("/")
        RouteBuilder(tree=tree).path("users").param("id", ParamType.NUMBER).get().handler(show)
        tree.freeze()
        outcome = tree.match("GET", "/users/42")
    """

    __slots__ = ("_base_segments", "_frozen", "base_path", "root")

    def __init__(self, base_path: str = "/") -> None:
        validate_base_path(base_path)
        self.base_path = base_path
        self.root = RouteNode(SegmentIdentity.literal(base_path))
        self._base_segments = split_path(base_path)
        self._frozen = False

    def __repr__(self) -> str:
        return f"<RouteTree {self.base_path!r} frozen={self._frozen}>"

    # -- Construction phase --

    @property
    def frozen(self) -> bool:
        return self._frozen

    def freeze(self) -> None:
        """Freeze the tree. No more nodes, methods, or middleware can be added."""
        self._frozen = True

    def ensure_mutable(self) -> None:
        if self._frozen:
            msg = "Cannot modify the route tree after it has been frozen."
            raise ConfigurationError(msg)

    # -- Introspection --

    def nodes(self) -> Iterator[RouteNode]:
        """Yield every node, depth-first, literal children before the parameter."""
        stack = [self.root]
        while stack:
            node = stack.pop()
            yield node
            if node.param_child is not None:
                stack.append(node.param_child)
            stack.extend(reversed(node.children.values()))

    def routes(self) -> list[tuple[str, tuple[Method, ...]]]:
        """Return ``(pattern, methods)`` for every node that answers requests."""
        return [
            (node.pattern, tuple(sorted(node.methods)))
            for node in self.nodes()
            if node.methods
        ]

    # -- Request phase --

    def match(self, method: Method | str, path: str) -> Outcome:
        """Resolve *method* and *path* to an outcome.

        Returns ``Matched`` on success, ``MethodNotAllowed`` when the path
        exists without the method, and ``NotFound`` otherwise. Never raises
        for request-time problems.
        """
        parts = split_path(path)
        base_len = len(self._base_segments)
        if parts[:base_len] != self._base_segments:
            logger.debug("No match for %s %s (outside base path)", method, path)
            return NotFound(path)

        failures: list[DecodeFailure] = []
        found = self._match_node(self.root, parts, base_len, {}, failures)
        if found is None:
            logger.debug("No match for %s %s", method, path)
            return NotFound(path, failures[-1] if failures else None)

        node, params = found
        verb = Method.parse(method)
        tail = node.methods.get(verb) if verb is not None else None
        if verb is None or tail is None:
            logger.debug("Method %s not allowed for %s", method, node.pattern)
            return MethodNotAllowed(node, str(method).strip().upper(), node.allowed_methods)

        chain = [*self._shared_middleware(node), *tail]
        logger.debug("Matched %s %s -> %s", verb, path, node.pattern)
        return Matched(node=node, params=params, chain=tuple(chain), method=verb)

    def _match_node(
        self,
        node: RouteNode,
        parts: list[str],
        index: int,
        params: dict[str, ParamValue],
        failures: list[DecodeFailure],
    ) -> tuple[RouteNode, dict[str, ParamValue]] | None:
        """Recursively match path parts against the tree."""
        # All parts consumed: only a node with bound methods is a match
        if index == len(parts):
            if node.methods:
                return node, params
            return None

        part = parts[index]

        # 1. Literal child first (exact match)
        child = node.children.get(part)
        if child is not None:
            result = self._match_node(child, parts, index + 1, params, failures)
            if result is not None:
                return result

        # 2. Parametric child, if the segment decodes
        step = node.param_for(part)
        if isinstance(step, DecodeFailure):
            failures.append(step)
            return None
        if step is not None:
            param, value = step
            new_params = {**params, param.identity.id: value}
            return self._match_node(param, parts, index + 1, new_params, failures)

        return None

    @staticmethod
    def _shared_middleware(node: RouteNode) -> list[Middleware]:
        """``use`` middleware of every node from the root down to *node*."""
        lineage: list[RouteNode] = []
        current: RouteNode | None = node
        while current is not None:
            lineage.append(current)
            current = current.parent
        chain: list[Middleware] = []
        for ancestor in reversed(lineage):
            chain.extend(ancestor.middleware)
        return chain
