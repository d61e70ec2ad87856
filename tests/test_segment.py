"""Tests for sprig.routing.segment: SegmentIdentity."""

import pytest

from sprig.errors import InvalidSegment
from sprig.routing.params import ParamType
from sprig.routing.segment import SegmentIdentity, SegmentKind


class TestConstruction:
    def test_literal(self) -> None:
        seg = SegmentIdentity.literal("users")
        assert seg.id == "users"
        assert seg.kind is SegmentKind.LITERAL
        assert seg.param_type is None
        assert seg.is_param is False

    def test_parameter(self) -> None:
        seg = SegmentIdentity.parameter("id", ParamType.NUMBER)
        assert seg.kind is SegmentKind.PARAMETER
        assert seg.param_type is ParamType.NUMBER
        assert seg.is_param is True

    def test_parameter_defaults_to_string(self) -> None:
        assert SegmentIdentity.parameter("slug").param_type is ParamType.STRING

    def test_string_values_are_normalized(self) -> None:
        seg = SegmentIdentity("id", "PARAMETER", "BOOLEAN")  # type: ignore[arg-type]
        assert seg.kind is SegmentKind.PARAMETER
        assert seg.param_type is ParamType.BOOLEAN

    def test_empty_id_rejected(self) -> None:
        with pytest.raises(InvalidSegment):
            SegmentIdentity.literal("")

    def test_parameter_without_type_rejected(self) -> None:
        with pytest.raises(InvalidSegment):
            SegmentIdentity("id", SegmentKind.PARAMETER)

    def test_literal_with_type_rejected(self) -> None:
        with pytest.raises(InvalidSegment):
            SegmentIdentity("users", SegmentKind.LITERAL, ParamType.STRING)

    def test_unknown_param_type_rejected(self) -> None:
        with pytest.raises(InvalidSegment):
            SegmentIdentity("id", SegmentKind.PARAMETER, "UUID")  # type: ignore[arg-type]

    def test_frozen(self) -> None:
        seg = SegmentIdentity.literal("users")
        with pytest.raises(AttributeError):
            seg.id = "posts"  # type: ignore[misc]


class TestEquality:
    def test_same_literal_text_is_same_identity(self) -> None:
        assert SegmentIdentity.literal("users") == SegmentIdentity.literal("users")
        assert hash(SegmentIdentity.literal("users")) == hash(SegmentIdentity.literal("users"))

    def test_kind_matters(self) -> None:
        assert SegmentIdentity.literal("id") != SegmentIdentity.parameter("id")

    def test_param_type_ignored(self) -> None:
        a = SegmentIdentity.parameter("id", ParamType.NUMBER)
        b = SegmentIdentity.parameter("id", ParamType.STRING)
        assert a == b


class TestStr:
    def test_literal(self) -> None:
        assert str(SegmentIdentity.literal("users")) == "users"

    def test_parameter(self) -> None:
        assert str(SegmentIdentity.parameter("id", ParamType.NUMBER)) == "{id:NUMBER}"
