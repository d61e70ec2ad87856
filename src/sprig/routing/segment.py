"""SegmentIdentity: how a route node is reached from its parent."""

from dataclasses import dataclass, field
from enum import StrEnum

from sprig.errors import InvalidSegment
from sprig.routing.params import ParamType


class SegmentKind(StrEnum):
    LITERAL = "LITERAL"
    PARAMETER = "PARAMETER"


@dataclass(frozen=True, slots=True)
class SegmentIdentity:
    """An immutable descriptor of one path segment.

    Literal:    ``users``        (kind=LITERAL)
    Parameter:  ``{id:NUMBER}``  (kind=PARAMETER, param_type=NUMBER)

    Equality is by ``(id, kind)``. Two parameters with the same name
    compare equal here; the tree tells them apart by position.
    """

    id: str
    kind: SegmentKind = SegmentKind.LITERAL
    param_type: ParamType | None = field(default=None, compare=False)

    def __post_init__(self) -> None:
        if not self.id:
            msg = "Segment id must be a non-empty string."
            raise InvalidSegment(msg)
        try:
            object.__setattr__(self, "kind", SegmentKind(self.kind))
            if self.param_type is not None:
                object.__setattr__(self, "param_type", ParamType(self.param_type))
        except ValueError as exc:
            raise InvalidSegment(str(exc)) from exc
        if self.kind is SegmentKind.PARAMETER and self.param_type is None:
            msg = f"Parameter segment {self.id!r} needs a param type."
            raise InvalidSegment(msg)
        if self.kind is SegmentKind.LITERAL and self.param_type is not None:
            msg = f"Literal segment {self.id!r} cannot declare a param type."
            raise InvalidSegment(msg)

    @classmethod
    def literal(cls, text: str) -> "SegmentIdentity":
        return cls(text, SegmentKind.LITERAL)

    @classmethod
    def parameter(cls, name: str, param_type: ParamType = ParamType.STRING) -> "SegmentIdentity":
        return cls(name, SegmentKind.PARAMETER, param_type)

    @property
    def is_param(self) -> bool:
        return self.kind is SegmentKind.PARAMETER

    def __str__(self) -> str:
        if self.is_param:
            return f"{{{self.id}:{self.param_type}}}"
        return self.id
