"""Display patterns: `{field}` substitution against a flat record.

Patterns are user configuration (e.g. `PODFEED_SEARCH_PATTERN`), so unknown
fields are rendered as `<<field>>` to let users discover the right names.
Unbalanced braces are a broken pattern and raise `TemplateError`.
"""

from __future__ import annotations

import enum
import json
import logging
import unicodedata
from typing import Any, Mapping

from podfeed.errors import TemplateError

logger = logging.getLogger(__name__)


class _State(enum.Enum):
    OUTSIDE = "outside"
    INSIDE = "inside"


def display(value: Any) -> str:
    """Canonical display text for a record value."""
    if isinstance(value, str):
        return value
    if isinstance(value, bool):
        return "true" if value else "false"
    if value is None:
        return "null"
    if isinstance(value, (int, float)):
        return str(value)
    if isinstance(value, (dict, list, tuple)):
        return json.dumps(value, ensure_ascii=False, separators=(",", ":"))
    return str(value)


def sentinel(field: str) -> str:
    return f"<<{field}>>"


def render(record: Mapping[str, Any], template: str) -> str:
    """Render `template`, replacing each `{field}` with the record's value.

    Missing fields become `<<field>>`. An unterminated trailing `{...` is
    dropped.

    Raises:
        TemplateError: on a `{` inside a placeholder or a `}` outside one.
    """
    state = _State.OUTSIDE
    out: list[str] = []
    field: list[str] = []

    for pos, c in enumerate(template):
        if state is _State.OUTSIDE:
            if c == "{":
                state = _State.INSIDE
            elif c == "}":
                raise TemplateError("unmatched '}'", template, pos)
            else:
                out.append(c)
        else:
            if c == "{":
                raise TemplateError("nested '{'", template, pos)
            elif c == "}":
                name = "".join(field)
                field.clear()
                out.append(display(record[name]) if name in record else sentinel(name))
                state = _State.OUTSIDE
            else:
                field.append(c)

    if state is _State.INSIDE:
        logger.debug("Dropping unterminated placeholder %r in pattern %r", "".join(field), template)
    return "".join(out)


def _char_width(c: str) -> int:
    if unicodedata.combining(c):
        return 0
    if unicodedata.east_asian_width(c) in ("W", "F"):
        return 2
    return 1


def truncate(text: str, max_width: int, append_dots: bool = True) -> str:
    """Cut `text` to at most `max_width` display columns.

    When the text was cut and `append_dots` is set, the last three kept
    characters become `...` (fewer dots when `max_width` is below 3).
    """
    width = 0
    kept: list[str] = []
    for c in text:
        w = _char_width(c)
        if width + w > max_width:
            break
        kept.append(c)
        width += w
    else:
        return text

    dots = "..."[:max_width] if append_dots else ""
    if dots:
        del kept[-len(dots):]
        kept.append(dots)
    return "".join(kept)
