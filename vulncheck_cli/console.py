"""Styled status messages, JSON output and an interactive JSON viewer."""

from __future__ import annotations

import dataclasses
import json
import os
import subprocess
import sys
from typing import Any

from rich.console import Console, Group
from rich.rule import Rule
from rich.syntax import Syntax
from rich.text import Text

PANTONE = "#6667ab"
WHITE = "#ffffff"
GRAY = "#cccccc"
EMERALD = "#34d399"
RED = "#ff0000"


class FlagError(Exception):
    """An error caused by how a command was invoked."""


def _console() -> Console:
    return Console(highlight=False, soft_wrap=True)


def _line(*parts: tuple[str, str]) -> Text:
    text = Text()
    for content, style in parts:
        text.append(content, style=style)
    return text


def success(text: str) -> None:
    """Print a success message."""
    _console().print(_line(("✓", EMERALD), (" ", ""), (text, WHITE)))


def info(text: str) -> None:
    """Print an informational message."""
    _console().print(_line(("i", PANTONE), (" ", ""), (text, WHITE)))


def stat(label: str, value: str) -> None:
    """Print a labelled value."""
    _console().print(
        _line(("i", PANTONE), (" ", ""), (label, GRAY), (": ", ""), (value, WHITE))
    )


def danger(text: str) -> Exception:
    """Return an error carrying a failure message in the status-line format."""
    return Exception(f"✗ {text}\n")


def error(message: str, *args: Any) -> FlagError:
    """Return a FlagError whose message is ``message`` formatted with ``args``."""
    return FlagError(message % args if args else message)


def _default(value: Any) -> Any:
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    if dataclasses.is_dataclass(value) and not isinstance(value, type):
        return {
            f.name: getattr(value, f.name)
            for f in dataclasses.fields(value)
            if not f.name.startswith("_")
        }
    if isinstance(value, (set, frozenset, tuple)):
        return list(value)
    raise TypeError(f"json: unsupported type: {type(value).__name__}")


_HTML_ESCAPES = {
    "<": "\\u003c",
    ">": "\\u003e",
    "&": "\\u0026",
    "\u2028": "\\u2028",
    "\u2029": "\\u2029",
}


def _marshal(data: Any) -> str:
    encoded = json.dumps(data, indent=2, ensure_ascii=False, default=_default)
    return "".join(_HTML_ESCAPES.get(ch, ch) for ch in encoded)


def print_json(data: Any) -> None:
    """Print data as indented JSON."""
    print(_marshal(data))


def json_file(data: Any, filename: str | os.PathLike[str]) -> None:
    """Write data as indented JSON to a file."""
    encoded = _marshal(data)
    with open(filename, "w", encoding="utf-8") as handle:
        handle.write(encoded)
    os.chmod(filename, 0o644)


def clear_screen() -> None:
    """Clear the terminal; raises if the clear command fails."""
    if sys.platform.startswith("win"):
        command = ["cmd", "/c", "cls"]
    else:
        command = ["clear"]
    subprocess.run(command, check=True)


def viewport(index: str, data: Any) -> None:
    """Show data as highlighted JSON in a scrollable pager."""
    content = _marshal(data)
    console = _console()
    header = Rule(Text(f"Browsing index: {index}"), align="left", style=PANTONE)
    body = Syntax(content, "json", theme="nord")
    footer = Rule(Text("q to quit"), align="right", style=PANTONE)
    with console.pager(styles=True):
        console.print(Group(header, body, footer))