"""Placeholder hydration. Fills {name} placeholders from an argument map.

Grammar (one left-to-right pass, no nesting):

* ``{{`` and ``}}`` are escapes for a literal ``{`` / ``}``.
* ``{name}`` is replaced by the textual value of ``args[name]``. Everything
  up to the next ``}`` is the name, so ``{a{b}`` refers to ``"a{b"``.
* ``{}`` is always an error.
* A lone ``}`` and an unterminated ``{name`` are copied through unchanged.
"""

from __future__ import annotations

from pathlib import Path
from typing import Iterator, Mapping

from promptfactory.errors import (
    EmptyPlaceholderError,
    InvalidArgumentError,
    MissingVariableError,
    UnusedArgumentError,
)
from promptfactory.models import Scalar

_TEXT = "text"
_VAR = "var"


def _scan(template: str) -> Iterator[tuple[str, str]]:
    """Yield ``(_TEXT, literal)`` and ``(_VAR, name)`` tokens in order."""
    buf: list[str] = []
    i = 0
    n = len(template)
    while i < n:
        ch = template[i]
        if ch == "{":
            if i + 1 < n and template[i + 1] == "{":
                buf.append("{")
                i += 2
                continue
            # Inside a placeholder: the name runs to the next closing brace.
            end = template.find("}", i + 1)
            if end == -1:
                buf.append(template[i:])
                break
            name = template[i + 1:end]
            if not name:
                raise EmptyPlaceholderError()
            if buf:
                yield _TEXT, "".join(buf)
                buf = []
            yield _VAR, name
            i = end + 1
            continue
        if ch == "}" and i + 1 < n and template[i + 1] == "}":
            buf.append("}")
            i += 2
            continue
        buf.append(ch)
        i += 1
    if buf:
        yield _TEXT, "".join(buf)


def format_value(name: str, value: Scalar) -> str:
    """Canonical text for an argument value (bools render as true/false)."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (str, int, float)):
        return str(value)
    raise InvalidArgumentError(name, value)


def placeholders(template: str) -> list[str]:
    """Return the placeholder names referenced by *template*, first-seen order."""
    seen: dict[str, None] = {}
    for kind, value in _scan(template):
        if kind == _VAR:
            seen.setdefault(value, None)
    return list(seen)


def hydrate(template: str, args: Mapping[str, Scalar], *, strict: bool = False) -> str:
    """Substitute every placeholder in *template* with its value from *args*.

    Raises ``MissingVariableError`` for the first placeholder without an
    argument and ``EmptyPlaceholderError`` on ``{}``. Arguments the template
    never references are ignored unless *strict* is set, in which case they
    raise ``UnusedArgumentError``.
    """
    out: list[str] = []
    used: set[str] = set()
    for kind, value in _scan(template):
        if kind == _TEXT:
            out.append(value)
            continue
        if value not in args:
            raise MissingVariableError(value)
        used.add(value)
        out.append(format_value(value, args[value]))

    if strict:
        unused = sorted(set(args) - used)
        if unused:
            raise UnusedArgumentError(unused)
    return "".join(out)


def render_template(
    template_path: str | Path, args: Mapping[str, Scalar], *, strict: bool = False
) -> str:
    """Read a template file and hydrate it."""
    content = Path(template_path).read_text(encoding="utf-8")
    return hydrate(content, args, strict=strict)
