"""
Per-field argument metadata.

A record field carries a short tag string under the "args" key of its dataclass
metadata:

    @dataclass
    class Args:
        foo: int = argument("this is a foo,-f", default=5)
        bar: Float32 = argument("this is a bar,r", default=0.0)

The tag is a comma-separated list: the first segment is the description; any later
segment "r" marks the field as required and any later segment "-X" gives it the
short alias X. Other segments are ignored so tags stay forward-compatible.
"""
import dataclasses
from typing import NamedTuple

from .utils import *

KEY = "args"


class Tag(NamedTuple):
    descr: str = ""
    required: bool = False
    short: str | None = None


def parse_tag(raw, /):
    """
    Split a tag string into its Tag fields.

    >>> parse_tag("number of pies,-p,r")
    Tag(descr='number of pies', required=True, short='p')
    >>> parse_tag("")
    Tag(descr='', required=False, short=None)
    """
    if not isinstance(raw, str):
        raise TypeError("parse_tag() argument must be a string")

    descr, *segments = raw.split(",")
    required = False
    short = None

    for segment in segments:
        if len(segment) == 2 and segment.startswith("-"):
            short = segment[1]
        elif segment == "r":
            required = True

    return Tag(descr, required, short)


def field_tag(field, /):
    """
    Tag of a dataclasses.Field (empty Tag when the field has no "args" metadata).
    """
    return parse_tag(field.metadata.get(KEY, ""))


def argument(tag="", /, *, default=Unset, default_factory=Unset, **options):
    """
    dataclasses.field() with an argument tag attached.

    Parameters
    - tag: str
      "<description>[,r][,-X]" (see module docstring).
    - default / default_factory:
      forwarded to dataclasses.field() when provided.
    - options:
      any other dataclasses.field() keyword (repr, compare, kw_only, ...).
    """
    if not isinstance(tag, str):
        raise TypeError("argument() tag must be a string")
    if default is not Unset:
        options["default"] = default
    if default_factory is not Unset:
        options["default_factory"] = default_factory
    metadata = dict(options.pop("metadata", {})) | {KEY: tag}
    return dataclasses.field(metadata=metadata, **options)


__all__ = (
    "Tag",
    "parse_tag",
    "field_tag",
    "argument",
)
