"""RouteNode: one position in the route tree.

Nodes are created by the builder and mutated (methods bound, middleware
appended) only while the tree is being built. Once the tree is frozen
they are read concurrently by in-flight requests without locking.
"""

import logging
from typing import cast

from sprig.errors import ConflictingParameterChild
from sprig.http.method import Method
from sprig.middleware.protocol import Middleware
from sprig.routing.params import DecodeFailure, ParamType, ParamValue, decode_param
from sprig.routing.segment import SegmentIdentity

logger = logging.getLogger("sprig.routing")


class RouteNode:
    """A node in the route tree, keyed by its ``SegmentIdentity``.

    Holds:
    - ``middleware``: run for every request passing through this node
    - ``methods``: method -> chain that runs only when the request
      lands here with that method
    - ``children``: literal text -> child
    - ``param_child``: the single parametric child, if any
    """

    __slots__ = ("children", "identity", "methods", "middleware", "param_child", "parent")

    def __init__(self, identity: SegmentIdentity, parent: "RouteNode | None" = None) -> None:
        self.identity = identity
        self.parent = parent
        self.middleware: list[Middleware] = []
        self.methods: dict[Method, list[Middleware]] = {}
        self.children: dict[str, RouteNode] = {}
        self.param_child: RouteNode | None = None

    def __repr__(self) -> str:
        return f"<RouteNode {self.pattern!r} methods={sorted(self.methods)}>"

    @property
    def pattern(self) -> str:
        """The route pattern leading to this node, e.g. ``/users/{id:NUMBER}``."""
        parts: list[str] = []
        node: RouteNode | None = self
        while node is not None and node.parent is not None:
            parts.append(str(node.identity))
            node = node.parent
        base = node.identity.id if node is not None else "/"
        return base + "/".join(reversed(parts))

    @property
    def allowed_methods(self) -> frozenset[Method]:
        return frozenset(self.methods)

    def add_child(self, identity: SegmentIdentity) -> "RouteNode":
        """Return the child for *identity*, creating it if needed.

        Raises ``ConflictingParameterChild`` if a parametric child with a
        different name or type already sits at this position.
        """
        if not identity.is_param:
            child = self.children.get(identity.id)
            if child is None:
                child = RouteNode(identity, parent=self)
                self.children[identity.id] = child
                logger.debug("Created node %s", child.pattern)
            return child

        existing = self.param_child
        if existing is None:
            self.param_child = RouteNode(identity, parent=self)
            logger.debug("Created node %s", self.param_child.pattern)
            return self.param_child

        if existing.identity == identity and existing.identity.param_type == identity.param_type:
            return existing
        raise ConflictingParameterChild(self.pattern, str(existing.identity), str(identity))

    def add_middleware(self, middleware: Middleware) -> None:
        self.middleware.append(middleware)

    def bind_method(self, method: Method) -> None:
        """Make this node answer *method*. Rebinding keeps the existing chain."""
        if method not in self.methods:
            self.methods[method] = []
            logger.debug("Bound %s %s", method, self.pattern)

    def add_method_middleware(self, method: Method, middleware: Middleware) -> None:
        self.bind_method(method)
        self.methods[method].append(middleware)

    def child_for(self, token: str) -> "tuple[RouteNode, ParamValue | None] | DecodeFailure | None":
        """Resolve one path segment against this node's children.

        Literal children win. Otherwise the parametric child is tried and
        its decoded value returned alongside it. A parametric child whose
        type rejects *token* yields the ``DecodeFailure``.
        """
        child = self.children.get(token)
        if child is not None:
            return child, None
        return self.param_for(token)

    def param_for(self, token: str) -> "tuple[RouteNode, ParamValue] | DecodeFailure | None":
        """Resolve *token* against the parametric child only."""
        param = self.param_child
        if param is None:
            return None
        # Parametric identities always carry a type
        param_type = cast(ParamType, param.identity.param_type)
        value = decode_param(token, param_type)
        if isinstance(value, DecodeFailure):
            return value
        return param, value
