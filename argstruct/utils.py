"""
Argstruct utilities (internal helpers, carefully exposed)

Overview
- UnsetType / Unset
  • Singleton sentinel to represent “value not provided” without conflating with None.
  • Falsey (bool(Unset) is False), printable as "Unset", and non-subclassable.

- PresentType / Present
  • Singleton marker stored in dynamic dictionaries for flags given without a value
    (e.g., "--verbose" parsed into dict[str, Any] yields {"verbose": Present}).
  • Truthy: presence is a positive signal, so `if flags.get("verbose"):` reads naturally.

- coalesce(value, default=None)
  • Replace Unset with a concrete default, but preserve legitimate falsey values like None/0/""/[].

Stability and contract
- These utilities are re-exported via __all__; names not in __all__ are internal.

Quick examples
    >>> coalesce(Unset, "fallback")
    'fallback'
    >>> coalesce(None, "fallback") is None
    True
"""
import functools
from typing import final

from rich.text import Text


@final
class UnsetType:
    """
    Internal sentinel type representing a value that was not provided.

    This is used when None is a legitimate user value, but the API needs a way
    to distinguish “not provided” from “provided as None”.

    Characteristics
    - Boolean-false: bool(Unset) is False, but it is distinct from None and 0.
    - Printable: repr(Unset) -> "Unset" for friendly diagnostics.
    - Non-subclassable and a singleton per process.
    """

    @functools.cache
    def __new__(cls):
        """
        Ensure a single instance for this sentinel type.
        """
        return super().__new__(cls)

    def __bool__(self):
        return False

    def __repr__(self):
        return "Unset"

    def __init_subclass__(cls, **options):
        """
        Disallow subclassing to preserve sentinel semantics.
        """
        raise TypeError("type 'UnsetType' is not an acceptable base type")


@final
class PresentType:
    """
    Presence-only marker for dynamic dictionary destinations.

    A flag that appears on the command line without any value carries no payload
    but is still meaningful: parsing ["--baz"] into a dict[str, Any] stores
    Present under "baz". The marker is a process-wide singleton so identity
    checks (`value is Present`) are reliable after copy/deepcopy/pickle.
    """

    @functools.cache
    def __new__(cls):
        return super().__new__(cls)

    def __bool__(self):
        """
        Truthy: the flag was given.
        """
        return True

    def __repr__(self):
        return "Present"

    def __rich__(self):
        """
        Rich protocol hook: render a dim green 'Present' token.
        """
        return Text(repr(self), style="dim green")

    def __init_subclass__(cls, **options):
        raise TypeError("type 'PresentType' is not an acceptable base type")


def coalesce(object, default=None, /):
    """
    Resolve an internal Unset sentinel to a concrete default.

    Returns the given object unless it is the Unset sentinel, in which case the
    provided default is returned. Falsey values like None, 0, "", or [] are
    preserved as-is.

    Examples
    - coalesce("name", "fallback") -> "name"
    - coalesce(Unset, "fallback")  -> "fallback"
    - coalesce(None, "fallback")   -> None   # None is preserved, not replaced
    """
    return object if object is not Unset else default


Unset = UnsetType()
"""
Internal sentinel for “not provided”.

Notes
- Singleton: there is only one Unset instance.
- Distinct from None: equality and identity checks must not treat it as None.
"""

Present = PresentType()
"""
Value stored for presence-only flags in dynamic dictionaries.
"""


__all__ = (
    # Functions
    "coalesce",

    # Types
    "UnsetType",
    "PresentType",

    # Constants
    "Unset",
    "Present",
)
