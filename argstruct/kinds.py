"""
Argstruct kinds: the closed set of value types a destination can hold, and the
type-directed coercion from raw command-line strings into them.

Variant
- Scalar: one of STRING, BOOL, INT8, INT16, INT32, INT64, UINT8, UINT16, UINT32,
  UINT64, FLOAT32, FLOAT64.
- Nullable(inner): a field annotated `T | None`; it has no default and is only
  assigned when its flag is present.
- Listing(inner): a field annotated `list[T]` where T is a string, integer, or
  float scalar.

Annotations
- str → STRING, bool → BOOL, int → INT64, float → FLOAT64.
- Width-specific integers and floats are spelled with the exported aliases
  (Int8 ... UInt64, Float32, Float64), which are typing.Annotated[int|float, <Scalar>],
  so a dataclass still sees a plain int/float at runtime.

Coercion rules (coerce)
- STRING: exactly one value.
- BOOL: exactly zero values; presence is the value (True).
- integers: exactly one value, integer literal syntax (0x/0o/0b prefixes, a bare
  leading zero for octal as in 0755, underscores, sign), range-checked against the
  width. Unsigned kinds reject signs.
- floats: exactly one value, float() syntax or a hexadecimal literal with a binary
  exponent (0x1p-2); FLOAT32 is rounded to single precision
  and range-checked; finite literals overflowing to infinity are range errors.
- Listing: every value converted by the element rule; the first failure aborts.
- Nullable: the inner rule.

Every failure raises an ArgumentException subclass whose message starts with "args: ".
"""
import builtins
import dataclasses
import math
import re
import struct
import types
import typing
from typing import Annotated, Any

from .faults import *
from .utils import *

_INFINITY = re.compile(r"[+-]?inf(inity)?", re.IGNORECASE)
_OCTAL = re.compile(r"[+-]?0[0-7_]+")
_HEXFLOAT = re.compile(r"[+-]?0x([0-9a-f]+\.?[0-9a-f]*|\.[0-9a-f]+)p[+-]?[0-9]+", re.IGNORECASE)


@dataclasses.dataclass(frozen=True, slots=True)
class Scalar:
    name: str
    base: type
    bits: int = 0
    signed: bool = True

    def __repr__(self):
        return self.name


@dataclasses.dataclass(frozen=True, slots=True)
class Nullable:
    inner: Any

    def __repr__(self):
        return f"{self.inner!r}?"


@dataclasses.dataclass(frozen=True, slots=True)
class Listing:
    inner: Scalar

    def __repr__(self):
        return f"[{self.inner!r}]"


@typing.final
class DynamicType:
    """
    Value policy of dict[str, Any] destinations (int, then float, then str, then Present).
    """

    def __repr__(self):
        return "any"


STRING = Scalar("string", str)
BOOL = Scalar("bool", bool)
INT8 = Scalar("int8", int, 8)
INT16 = Scalar("int16", int, 16)
INT32 = Scalar("int32", int, 32)
INT64 = Scalar("int64", int, 64)
UINT8 = Scalar("uint8", int, 8, signed=False)
UINT16 = Scalar("uint16", int, 16, signed=False)
UINT32 = Scalar("uint32", int, 32, signed=False)
UINT64 = Scalar("uint64", int, 64, signed=False)
FLOAT32 = Scalar("float32", float, 32)
FLOAT64 = Scalar("float64", float, 64)
DYNAMIC = DynamicType()

Int8 = Annotated[int, INT8]
Int16 = Annotated[int, INT16]
Int32 = Annotated[int, INT32]
Int64 = Annotated[int, INT64]
UInt8 = Annotated[int, UINT8]
UInt16 = Annotated[int, UINT16]
UInt32 = Annotated[int, UINT32]
UInt64 = Annotated[int, UINT64]
Float32 = Annotated[float, FLOAT32]
Float64 = Annotated[float, FLOAT64]

_BUILTINS = {
    builtins.str: STRING,
    builtins.bool: BOOL,
    builtins.int: INT64,
    builtins.float: FLOAT64,
}


def resolve(annotation, /):
    """
    Map a field annotation onto its kind.

    >>> resolve(list[Int8])
    [int8]
    >>> resolve(Float32 | None)
    float32?

    Raises UnsupportedTypeError for anything outside the closed set (including
    bool lists, nested lists, and Optional list elements).
    """
    origin = typing.get_origin(annotation)

    if origin is Annotated:
        base, *extras = typing.get_args(annotation)
        for extra in extras:
            if isinstance(extra, Scalar):
                return extra
        return resolve(base)

    if isinstance(annotation, type) and annotation in _BUILTINS:
        return _BUILTINS[annotation]

    if origin in (typing.Union, types.UnionType):
        arguments = [argument for argument in typing.get_args(annotation) if argument is not types.NoneType]
        if len(arguments) == 1 and len(typing.get_args(annotation)) == 2:
            return Nullable(resolve(arguments[0]))

    if origin is list and len(arguments := typing.get_args(annotation)) == 1:
        inner = resolve(arguments[0])
        if isinstance(inner, Scalar) and inner is not BOOL:
            return Listing(inner)

    raise UnsupportedTypeError(
        "args: unsupported type: %s" % _typename(annotation),
        title="unsupported type",
        code=FaultCode.UNSUPPORTED_TYPE,
        hint="use str, bool, int, float, a sized alias such as Int8/Float32, list[...] of those, or T | None",
        annotation=annotation,
    )


def _typename(annotation):
    if isinstance(annotation, type) and not typing.get_args(annotation):
        return annotation.__name__
    return repr(annotation)


def _subject(name):
    """
    "option <name>: " prefix for named flags, nothing for bare list elements.
    """
    return "option %s: " % name if name is not None else ""


def _single(values, name):
    """
    the one raw value of a scalar option, or a cardinality fault.
    """
    match len(values):
        case 0:
            raise MissingValueError(
                "args: option %s specified but not set" % name,
                title="missing value",
                code=FaultCode.MISSING_VALUE,
                hint="pass a value after it (for example: --%s <value>)" % name,
                name=name,
            )
        case 1:
            return values[0]
        case _:
            raise AmbiguousValueError(
                "args: option %s specified more than once" % name,
                title="ambiguous value",
                code=FaultCode.AMBIGUOUS_VALUE,
                hint="pass exactly one value for --%s" % name,
                name=name,
                values=tuple(values),
            )


def parse_integer(text, /, bits=64, signed=True):
    """
    Parse an integer literal and check it fits in `bits`.

    Raises ValueError on bad syntax and OverflowError when out of range.

    >>> parse_integer("0x7f", 8)
    127
    >>> parse_integer("0755")
    493
    """
    if not text or text != text.strip() or (not signed and text[0] in "+-"):
        raise ValueError("parsing %r: invalid syntax" % text)
    try:
        number = int(text, 8 if _OCTAL.fullmatch(text) else 0)
    except ValueError:
        raise ValueError("parsing %r: invalid syntax" % text) from None

    if signed:
        low, high = -(1 << (bits - 1)), (1 << (bits - 1)) - 1
    else:
        low, high = 0, (1 << bits) - 1
    if not low <= number <= high:
        raise OverflowError("parsing %r: value out of range" % text)
    return number


def parse_float(text, /, bits=64):
    """
    Parse a float literal at the given precision (32 or 64 bits).

    Raises ValueError on bad syntax and OverflowError when out of range.
    """
    if not text or text != text.strip():
        raise ValueError("parsing %r: invalid syntax" % text)
    try:
        number = float.fromhex(text) if _HEXFLOAT.fullmatch(text) else float(text)
    except ValueError:
        raise ValueError("parsing %r: invalid syntax" % text) from None
    except OverflowError:
        raise OverflowError("parsing %r: value out of range" % text) from None

    if math.isinf(number) and not _INFINITY.fullmatch(text):
        raise OverflowError("parsing %r: value out of range" % text)
    if bits == 32:
        try:
            number, = struct.unpack("f", struct.pack("f", number))
        except OverflowError:
            raise OverflowError("parsing %r: value out of range" % text) from None
    return number


def _convert(scalar, text, name):
    """
    convert one raw token according to a non-bool scalar kind.
    """
    try:
        match scalar:
            case Scalar(base=builtins.str):
                return text
            case Scalar(base=builtins.int):
                return parse_integer(text, scalar.bits, scalar.signed)
            case Scalar(base=builtins.float):
                return parse_float(text, scalar.bits)
    except OverflowError as error:
        raise MalformedValueError(
            "args: %s%s for %s" % (_subject(name), error, scalar.name),
            title="value out of range",
            code=FaultCode.VALUE_OUT_OF_RANGE,
            hint="pass a value that fits in %s" % scalar.name,
            name=name,
            value=text,
        ) from error
    except ValueError as error:
        raise MalformedValueError(
            "args: %s%s" % (_subject(name), error),
            title="malformed value",
            code=FaultCode.MALFORMED_VALUE,
            hint="pass a valid %s literal" % scalar.name,
            name=name,
            value=text,
        ) from error

    raise UnsupportedTypeError(
        "args: unsupported type: %s" % scalar.name,
        title="unsupported type",
        code=FaultCode.UNSUPPORTED_TYPE,
        name=name,
    )


def coerce(kind, values, /, name=None):
    """
    Convert the raw values collected for one flag into a value of `kind`.

    Parameters
    - kind: Scalar | Nullable | Listing
    - values: Sequence[str], the raw tokens that followed the flag.
    - name: flag name used in fault messages.

    >>> coerce(INT16, ["-0x10"], "offset")
    -16
    >>> coerce(BOOL, [], "verbose")
    True
    >>> coerce(Listing(FLOAT64), ["1.5", "2"], "weights")
    [1.5, 2.0]
    """
    match kind:
        case Nullable(inner):
            return coerce(inner, values, name)
        case Listing(inner):
            return [_convert(inner, value, name) for value in values]
        case Scalar() if kind is BOOL:
            if values:
                raise UnexpectedParameterError(
                    "args: boolean option %s has parameter" % name,
                    title="unexpected parameter to switch",
                    code=FaultCode.UNEXPECTED_PARAMETER,
                    hint="switches take no value; drop %r" % " ".join(values),
                    name=name,
                    values=tuple(values),
                )
            return True
        case Scalar():
            return _convert(kind, _single(values, name), name)
        case _:
            raise UnsupportedTypeError(
                "args: unsupported type: %r" % (kind,),
                title="unsupported type",
                code=FaultCode.UNSUPPORTED_TYPE,
                name=name,
            )


def infer(values, /):
    """
    Dynamic value of a dict[str, Any] entry.

    - no value      → Present
    - one value     → int (base-prefixed, 64-bit), else float, else the string
    - several values → the list of raw strings

    >>> infer(["5"]), infer(["10.5"]), infer(["x"]), infer([])
    (5, 10.5, 'x', Present)
    """
    match values:
        case []:
            return Present
        case [value]:
            try:
                return parse_integer(value)
            except (ValueError, OverflowError):
                pass
            try:
                return parse_float(value)
            except (ValueError, OverflowError):
                return value
        case _:
            return list(values)


__all__ = (
    # Variant
    "Scalar",
    "Nullable",
    "Listing",
    "DynamicType",

    # Kinds
    "STRING",
    "BOOL",
    "INT8",
    "INT16",
    "INT32",
    "INT64",
    "UINT8",
    "UINT16",
    "UINT32",
    "UINT64",
    "FLOAT32",
    "FLOAT64",
    "DYNAMIC",

    # Annotation aliases
    "Int8",
    "Int16",
    "Int32",
    "Int64",
    "UInt8",
    "UInt16",
    "UInt32",
    "UInt64",
    "Float32",
    "Float64",

    # Functions
    "resolve",
    "coerce",
    "infer",
    "parse_integer",
    "parse_float",
)
