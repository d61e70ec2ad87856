"""Path parameter typing and decoding.

Built-in decoders for parametric segments like ``param("id", NUMBER)``.
A failed decode is a value (``DecodeFailure``), not an exception: the
matcher treats it as "this branch does not match".
"""

import math
import re
from dataclasses import dataclass
from enum import StrEnum
from typing import Any, Protocol

type ParamValue = str | int | float | bool


class ParamType(StrEnum):
    """Value types a parametric segment can declare."""

    STRING = "STRING"
    NUMBER = "NUMBER"
    BOOLEAN = "BOOLEAN"


@dataclass(frozen=True, slots=True)
class DecodeFailure:
    """Result of a decode that did not satisfy the declared type."""

    value: str
    expected: str
    reason: str = ""

    def __str__(self) -> str:
        if self.reason:
            return f"{self.value!r} is not a valid {self.expected}: {self.reason}"
        return f"{self.value!r} is not a valid {self.expected}"


class Decoder(Protocol):
    """Anything that turns raw text into a value or a ``DecodeFailure``.

    Used for query values; the built-in decoders below also back the
    path parameter types.
    """

    def decode(self, raw: str) -> Any: ...


# Optional sign, digits, optional fraction, optional exponent.
# Deliberately excludes "nan", "inf", and surrounding whitespace,
# all of which float() would accept.
_NUMBER = re.compile(r"[+-]?(?:\d+(?:\.\d*)?|\.\d+)(?:[eE][+-]?\d+)?")
_INTEGER = re.compile(r"[+-]?\d+")
# CPython's default int() string conversion limit
_MAX_DIGITS = 4300

_BOOLEANS: dict[str, bool] = {"true": True, "false": False}


class StringDecoder:
    """Accepts any text unchanged."""

    __slots__ = ()

    def decode(self, raw: str) -> str:
        return raw


class NumberDecoder:
    """Accepts numeric literals. Integral text decodes to ``int``."""

    __slots__ = ()

    def decode(self, raw: str) -> int | float | DecodeFailure:
        if _INTEGER.fullmatch(raw):
            if len(raw.lstrip("+-")) > _MAX_DIGITS:
                return DecodeFailure(raw, ParamType.NUMBER, "number too large")
            try:
                return int(raw)
            except ValueError:
                return DecodeFailure(raw, ParamType.NUMBER, "number too large")
        if _NUMBER.fullmatch(raw):
            value = float(raw)
            if math.isinf(value):
                return DecodeFailure(raw, ParamType.NUMBER, "number too large")
            return value
        return DecodeFailure(raw, ParamType.NUMBER, "expected a numeric literal")


class BooleanDecoder:
    """Accepts exactly ``true`` and ``false``. Case-sensitive."""

    __slots__ = ()

    def decode(self, raw: str) -> bool | DecodeFailure:
        try:
            return _BOOLEANS[raw]
        except KeyError:
            return DecodeFailure(raw, ParamType.BOOLEAN, "expected 'true' or 'false'")


DECODERS: dict[ParamType, Decoder] = {
    ParamType.STRING: StringDecoder(),
    ParamType.NUMBER: NumberDecoder(),
    ParamType.BOOLEAN: BooleanDecoder(),
}


def decoder_for(param_type: ParamType) -> Decoder:
    """Return the built-in decoder for *param_type*.

    Raises ``KeyError`` if *param_type* is not a known ``ParamType``.
    """
    return DECODERS[param_type]


def decode_param(raw: str, param_type: ParamType) -> ParamValue | DecodeFailure:
    """Decode a captured path segment according to *param_type*."""
    return decoder_for(param_type).decode(raw)
