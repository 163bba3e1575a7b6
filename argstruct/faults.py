"""
Argstruct faults (errors) and rendering.

Scope
- FaultCode: canonical, stable numeric identifiers for every user-facing issue.
  Codes are grouped by domain to keep copy consistent and make logs/searches predictable.
- ArgumentException: base type that carries message + options and knows how to
  render itself in a friendly, lowercased, and actionable way.
- trigger(): central entry point to surface a fault (respecting shell/deferred/fancy/colorful).

Message conventions
- Every message starts with the fixed "args: " prefix so callers can tell parser
  faults from their own output at a glance.
- Faults are terminal: the parse call that raised one has not touched its destination.

Integration
- parse() raises faults directly (non-shell mode).
- Host programs either catch ArgumentException or hand it to trigger(fault, shell=True),
  which prints it through rich on stderr and exits with status 1.
"""
import copy
import os.path
import sys
from collections import defaultdict
from enum import IntEnum
from types import MappingProxyType

from rich.console import Console, Group
from rich.panel import Panel
from rich.text import Text

console = Console(stderr=True)


class FaultCode(IntEnum):
    """
    canonical fault codes used across the parser (stable identifiers).

    grouping (by high-level domain)
    - structural (211xx)
      • NON_REFERENCE_DESTINATION, INVALID_DESTINATION, INVALID_KEY_TYPE, INVALID_VALUE_TYPE
    - required arguments (212xx)
      • REQUIRED_ARGUMENT
    - cardinality (213xx)
      • MISSING_VALUE, AMBIGUOUS_VALUE, UNEXPECTED_PARAMETER
    - format/range (214xx)
      • MALFORMED_VALUE, VALUE_OUT_OF_RANGE
    - unsupported field types (215xx)
      • UNSUPPORTED_TYPE

    spacing leaves room for future additions without reshuffling existing codes.
    """
    # --- structural errors (211xx) ---
    NON_REFERENCE_DESTINATION   = 21101
    INVALID_DESTINATION         = 21102
    INVALID_KEY_TYPE            = 21103
    INVALID_VALUE_TYPE          = 21104

    # --- required-field errors (212xx) ---
    REQUIRED_ARGUMENT           = 21201

    # --- cardinality errors (213xx) ---
    MISSING_VALUE               = 21301
    AMBIGUOUS_VALUE             = 21302
    UNEXPECTED_PARAMETER        = 21303

    # --- format/range errors (214xx) ---
    MALFORMED_VALUE             = 21401
    VALUE_OUT_OF_RANGE          = 21402

    # --- unsupported types (215xx) ---
    UNSUPPORTED_TYPE            = 21501

    def normalize(self):
        """
        return a host-normalized string for this code.

        the host application can provide a __codes__ mapping in __main__
        to override numeric ids with friendlier labels. when no mapping
        is present, the numeric value is returned as a string.
        """
        return str(getattr(__import__("__main__"), "__codes__", {}).get(self, self.value))


class ArgumentException(Exception):
    """
    base class of every parser fault.

    attributes
    - message: the one-line, "args: "-prefixed description.
    - options: read-only mapping with the rendering context (code, title, hint)
      plus whatever the raise site attached (name, values, kind, ...).
    """

    def __init__(self, message, /, **options):
        assert isinstance(message, str)
        super().__init__(message)
        self.message = message
        self.options = MappingProxyType(options)

    @property
    def code(self):
        return self.options.get("code")

    def __rich__(self):
        main = __import__("__main__")
        colorful = self.options.get("colorful", False)
        fancy = self.options.get("fancy", False)

        styles = defaultdict(str, {
            # header parts
            "prog-name": "bold #E6E6F0",  # near-white program name
            "fault-code": "bold #00E5FF",  # neon cyan fault code
            "fault-title": "bold #FF4DA6",  # friendly pinky title

            # body
            "fault-message": "#C8C8D0",  # soft light gray message
            "option-name": "bold #00E6FF",  # same cyan as the usage panel
            "offending-value": "#FFD600",  # amber, the token that was rejected
            "hint": "italic #9CE19C",  # gentle green hint text
        } | getattr(main, "__styles__", {}))

        def paint(fragment, style):
            return Text(str(fragment), styles[style] if colorful else "")

        code = self.code
        header = Text.assemble(
            "[ ",
            paint(getattr(main, "__prog__", os.path.basename(sys.argv[0]) or "args"), "prog-name"),
            " — ",
            paint(code.normalize() if isinstance(code, FaultCode) else "?", "fault-code"),
            " | ",
            paint(self.options.get("title", "argument error").title(), "fault-title"),
            " ]"
        )
        renders = [paint(self.message, "fault-message")]

        # Raise sites attach the flag name and either one value or all of them
        context = []
        if (name := self.options.get("name")) is not None:
            context += ["  option ", paint("--%s" % name, "option-name")]
        values = (self.options["value"],) if "value" in self.options else self.options.get("values", ())
        if values:
            context += [
                "  value " if len(values) == 1 else "  values ",
                paint(" ".join(map(repr, values)), "offending-value"),
            ]
        if context:
            renders.append(Text.assemble(*context))

        if hint := self.options.get("hint"):
            renders.append(Text.assemble(" → ", paint(hint, "hint")))

        if fancy:
            return Panel(Group(*renders), title=header, title_align="left")

        return Group(header, *renders)

    def __trigger__(self) -> None:
        if not self.options.get("shell", False):
            raise self from self.__cause__
        console.print(self)
        if self.options.get("deferred", False):
            return
        sys.exit(1)

    def __replace__(self, *unused, **overrides):
        assert not unused, "unused arguments are not allowed"
        replaced = type(self)(self.message, **{**self.options, **overrides})
        replaced.__cause__ = self.__cause__
        return replaced


class DestinationTypeError(ArgumentException, TypeError): ...
class UnsupportedTypeError(ArgumentException, TypeError): ...
class RequiredArgumentError(ArgumentException): ...
class MissingValueError(ArgumentException): ...
class AmbiguousValueError(ArgumentException): ...
class UnexpectedParameterError(ArgumentException): ...
class MalformedValueError(ArgumentException, ValueError): ...


def trigger(fault, /, **options):
    """
    surface a fault with the given runtime options.

    contract
    - fault must provide __trigger__ and __replace__ methods (see ArgumentException).
    - options are merged into the fault via copy.replace() before triggering.
    - with shell=True the fault is printed on stderr through rich and the process
      exits with status 1 (deferred=True prints without exiting); otherwise the
      fault is raised.

    typical options
    - shell, fancy, colorful, deferred, title, hint.
    """
    if (
        not hasattr(fault, "__trigger__") or
        not callable(fault.__trigger__) or
        not hasattr(fault, "__replace__") or
        not callable(fault.__replace__)
    ):
        raise TypeError("trigger() argument must have a __trigger__ and __replace__ methods")
    copy.replace(fault, **options).__trigger__()


__all__ = (
    "ArgumentException",
    "DestinationTypeError",
    "UnsupportedTypeError",
    "RequiredArgumentError",
    "MissingValueError",
    "AmbiguousValueError",
    "UnexpectedParameterError",
    "MalformedValueError",
    "FaultCode",
    "trigger",
)
