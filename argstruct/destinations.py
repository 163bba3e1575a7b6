"""
Argstruct dispatcher: populate a destination from command-line tokens.

Destinations
- record: a dataclass instance. Each exported field (name not starting with "_")
  that is not an embedded dataclass is matched against the collected flags by its
  lowercased name, then by its tag's short alias. Absent optional fields are left
  alone, so non-nullable fields keep the caller's defaults and nullable ones stay unset.
- list: all tokens are element values (flags included); the element type is given
  with type=list[T] (list[str] when omitted). The list's contents are replaced.
- dict: collected flags become keys; type=dict[str, str] keeps one string per key,
  type=dict[str, Any] (the default) infers int, float, str, or Present per key.

Atomicity
- Every value is converted before anything is written. A fault leaves the
  destination exactly as it was.

Quick example:
    >>> from dataclasses import dataclass
    >>> @dataclass
    ... class Args:
    ...     foo: int = argument("this is a foo,-f", default=5)
    ...     baz: str = argument("a baz!,r", default="")
    >>> args = Args()
    >>> dispatch(args, ["-f", "7", "--baz", "qux"])
    >>> args
    Args(foo=7, baz='qux')
"""
import builtins
import dataclasses
import sys
import types
import typing
from typing import Any

from .faults import *
from .kinds import *
from .tags import *
from .tokens import collect
from .utils import *

_IMMUTABLE = (
    builtins.str,
    builtins.bytes,
    builtins.int,
    builtins.float,
    builtins.complex,
    builtins.tuple,
    builtins.frozenset,
    types.MappingProxyType,
)


def _non_reference(destination, reason):
    return DestinationTypeError(
        "args: non-reference %s" % reason,
        title="destination is not a reference",
        code=FaultCode.NON_REFERENCE_DESTINATION,
        hint="pass a mutable instance (a dataclass object, a list, or a dict) to be filled in place",
        destination=destination,
    )


def _invalid(destination, reason, code=FaultCode.INVALID_DESTINATION):
    return DestinationTypeError(
        "args: invalid type for unmarshal: %s" % reason,
        title="invalid destination",
        code=code,
        hint="use a dataclass instance, a list with type=list[T], or a dict with type=dict[str, str | Any]",
        destination=destination,
    )


def is_record(object, /):
    """
    True for dataclass instances (not dataclass types).
    """
    return dataclasses.is_dataclass(object) and not isinstance(object, builtins.type)


def is_embedded(annotation, /):
    """
    Fields typed with another dataclass are embedded records and never parsed.
    """
    return isinstance(annotation, builtins.type) and dataclasses.is_dataclass(annotation)


def exported(record, /):
    """
    Yield (field, annotation) for every exported, non-embedded field of a record,
    in declaration order.
    """
    hints = typing.get_type_hints(builtins.type(record), include_extras=True)
    for field in dataclasses.fields(record):
        if field.name.startswith("_"):
            continue
        annotation = hints.get(field.name, field.type)
        if is_embedded(annotation):
            continue
        yield field, annotation


def _shape(destination, type):
    """
    classify the destination before any token is read.

    returns one of ("record", None), ("list", Listing), ("dict", STRING | DYNAMIC).
    """
    if destination is None:
        raise _non_reference(destination, "None")
    if isinstance(destination, builtins.type):
        raise _non_reference(destination, "type %s (pass an instance)" % destination.__name__)
    if isinstance(destination, _IMMUTABLE):
        raise _non_reference(destination, builtins.type(destination).__name__)

    if is_record(destination):
        if type is not Unset:
            raise _invalid(destination, "type= only applies to list and dict destinations")
        if builtins.type(destination).__dataclass_params__.frozen:
            raise _non_reference(destination, "frozen dataclass %s" % builtins.type(destination).__name__)
        return "record", None

    if isinstance(destination, list):
        annotation = coalesce(type, list[str])
        if typing.get_origin(annotation) is not list:
            raise _invalid(destination, "list described as %r" % (annotation,))
        return "list", resolve(annotation)

    if isinstance(destination, dict):
        annotation = coalesce(type, dict[str, Any])
        if typing.get_origin(annotation) is not dict or len(typing.get_args(annotation)) != 2:
            raise _invalid(destination, "dict described as %r" % (annotation,))
        key, value = typing.get_args(annotation)
        if key is not str:
            raise DestinationTypeError(
                "args: map key type must be string, not %s" % getattr(key, "__name__", repr(key)),
                title="invalid key type",
                code=FaultCode.INVALID_KEY_TYPE,
                hint="flags are strings; declare the destination as dict[str, ...]",
                destination=destination,
            )
        if value is str:
            return "dict", STRING
        if value is Any or value is object:
            return "dict", DYNAMIC
        raise _invalid(
            destination,
            "dict of %s" % getattr(value, "__name__", repr(value)),
            FaultCode.INVALID_VALUE_TYPE,
        )

    raise _invalid(destination, builtins.type(destination).__name__)


def _record(record, tokens):
    raw = collect(tokens)
    staged = {}

    for field, annotation in exported(record):
        name = field.name.lower()
        tag = field_tag(field)

        # Try the long name first, then the short alias
        if name in raw:
            values = raw[name]
        elif tag.short is not None and tag.short in raw:
            values = raw[tag.short]
        elif tag.required:
            raise RequiredArgumentError(
                "args: required argument was not supplied: --%s" % name,
                title="required argument",
                code=FaultCode.REQUIRED_ARGUMENT,
                hint="pass --%s%s" % (name, " (or -%s)" % tag.short if tag.short else ""),
                name=name,
            )
        else:
            continue

        staged[field.name] = coerce(resolve(annotation), values, name)

    for name, value in staged.items():
        setattr(record, name, value)


def _list(destination, kind, tokens):
    destination[:] = coerce(kind, tokens)


def _dict(destination, policy, tokens):
    staged = {}

    for key, values in collect(tokens).items():
        if policy is DYNAMIC:
            staged[key] = infer(values)
        elif len(values) > 1:
            raise AmbiguousValueError(
                "args: option %r specified more than once" % key,
                title="ambiguous value",
                code=FaultCode.AMBIGUOUS_VALUE,
                hint="pass exactly one value for --%s" % key,
                name=key,
                values=tuple(values),
            )
        else:
            staged[key] = values[0] if values else ""

    destination.update(staged)


def dispatch(destination, tokens, /, *, type=Unset):
    """
    Fill `destination` from an explicit token list.

    Parameters
    - destination: dataclass instance | list | dict
    - tokens: Iterable[str], usually sys.argv[1:]
    - type: list[T] or dict[str, str | Any] describing a list/dict destination;
      must be omitted for records.

    Raises
    - DestinationTypeError before reading any token when the destination shape is invalid.
    - UnsupportedTypeError for field/element types outside the supported set.
    - RequiredArgumentError, MissingValueError, AmbiguousValueError,
      UnexpectedParameterError, MalformedValueError while converting values.
    """
    shape, kind = _shape(destination, type)
    tokens = list(tokens)

    match shape:
        case "record":
            _record(destination, tokens)
        case "list":
            _list(destination, kind, tokens)
        case "dict":
            _dict(destination, kind, tokens)


def parse(destination, /, *, type=Unset):
    """
    Fill `destination` from the process arguments (sys.argv without the program name).
    """
    return dispatch(destination, sys.argv[1:], type=type)


__all__ = (
    "dispatch",
    "parse",
    "is_record",
    "is_embedded",
    "exported",
)
