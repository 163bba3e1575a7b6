r"""
Usage rendering for record destinations.

Two renderers share the same rows:
- usage(file, default): plain, tab-separated text written to any file-like object.
  Stable byte-for-byte output, suitable for tests and pipes:

      usage:
       -s,\t--salad\t(default: "")\ttype of salad to eat
       -p,\t--pie\t(default: 0)\tnumber of pies to eat
       \t--nachos\t\tnacho quotient

- panel(default): the same information as a rich table, styled with the palette
  below (overridable through a __styles__ mapping in __main__).

Defaults come from the instance passed in, so callers usually keep a pristine
default record around and render usage from it after a failed parse.
Nullable fields have no default and render an empty default column.
"""
import json
import types
import typing
from collections import defaultdict

from rich.console import Console, Group
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .destinations import is_record, exported
from .faults import *
from .tags import field_tag
from .utils import *


def _nullable(annotation):
    origin = typing.get_origin(annotation)
    return origin in (typing.Union, types.UnionType) and types.NoneType in typing.get_args(annotation)


def _format(value):
    if isinstance(value, str):
        return json.dumps(value, ensure_ascii=False)
    return str(value)


def _rows(default):
    """
    yield (short, name, default text or None, description) per exported field.
    """
    if not is_record(default):
        raise DestinationTypeError(
            "args: can only print usage with dataclass instance, not %s" % type(default).__name__,
            title="invalid usage source",
            code=FaultCode.INVALID_DESTINATION,
            hint="pass an instance of the dataclass that describes the arguments",
            destination=default,
        )

    for field, annotation in exported(default):
        tag = field_tag(field)
        value = None if _nullable(annotation) else _format(getattr(default, field.name))
        yield tag.short, field.name.lower(), value, tag.descr


def usage(file, default, /, description=Unset):
    """
    Write the plain usage text of `default` to `file`.

    Parameters
    - file: any object with a write(str) method.
    - default: dataclass instance holding the default values.
    - description: optional one-line program description, written before "usage:".
    """
    rows = list(_rows(default))

    if description is not Unset:
        file.write("%s\n" % description)
    file.write("usage:\n")

    for short, name, value, descr in rows:
        file.write(" -%s,\t" % short if short else " \t")
        if value is None:
            file.write("--%s\t\t%s\n" % (name, descr))
        else:
            file.write("--%s\t(default: %s)\t%s\n" % (name, value, descr))


def panel(default, /, console=Unset, *, description=Unset, colorful=True, fancy=False):
    """
    Print the usage of `default` as a rich table.

    Palette keys
    - usage-label, description-section
    - short-name, option-name, default-value, argument-description
    - panel-title

    Customization
    - Define a mapping named __styles__ in __main__ to override any palette entry.
    - When colorful is False, styling is suppressed.
    """
    rows = list(_rows(default))
    console = coalesce(console, Console())
    main = __import__("__main__")

    styles = defaultdict(str, {
        # === Head sections ===
        "usage-label": "bold #00E6FF",  # CYAN → signature info color
        "description-section": "italic #A3A3A3",  # Neutral gray

        # === Names / defaults ===
        "short-name": "bold #22C55E",  # GREEN for aliases
        "option-name": "bold #00E6FF",  # CYAN for options
        "default-value": "#FFD600",  # AMBER for defaults
        "argument-description": "#9CA3AF",  # Muted gray

        # === Fancy panel ===
        "panel-title": "bold #FF4D94",  # Magenta branding
    } | getattr(main, "__styles__", {}))

    def styler(style):
        return styles[style] if colorful else ""

    def text(fragment, style=""):
        # Normalize to Rich Text. In non-colorful mode, strip styles.
        if not fragment:
            return Text("")
        if not colorful:
            return Text(str(fragment))
        return Text(str(fragment), style)

    table = Table(box=None, show_header=False, pad_edge=False, padding=(0, 2, 0, 0))
    for _ in range(4):
        table.add_column()

    for short, name, value, descr in rows:
        table.add_row(
            text("-%s," % short if short else "", styler("short-name")),
            text("--" + name, styler("option-name")),
            text("(default: %s)" % value if value is not None else "", styler("default-value")),
            text(descr, styler("argument-description")),
        )

    renders = []
    if description is not Unset:
        renders.append(text(description, styler("description-section")))
    renders.append(Text.assemble(text("usage", styler("usage-label")), ":"))
    renders.append(table)

    if fancy:
        title = text(getattr(main, "__prog__", type(default).__name__), styler("panel-title"))
        console.print(Panel(Group(*renders), title=title, title_align="left"))
    else:
        console.print(Group(*renders))


__all__ = (
    "usage",
    "panel",
)
