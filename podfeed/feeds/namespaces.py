"""XML namespace-prefix normalization.

Generic XML -> dict conversion merges sibling elements that share a local name
but differ in namespace prefix (`itunes:summary` vs `summary`), so a user pattern
can no longer address them individually. Replacing the `:` separator in element
names with an ordinary-name token before conversion keeps the distinction as a
literal part of the key. User patterns get the same treatment through
`normalize_pattern`, so `rss.channel.itunes:author` still resolves.

Pipeline shape:
- check well-formedness (expat, no namespace processing)
- tokenize into Start / End / Text / Other events
- rewrite element names, re-emit everything else verbatim
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Iterator, Union
from xml.parsers import expat

from podfeed.config import DEFAULT_NAMESPACE_ALTER
from podfeed.errors import MalformedXmlError

logger = logging.getLogger(__name__)

NAMESPACE_ALTER = DEFAULT_NAMESPACE_ALTER


@dataclass(frozen=True)
class Start:
    name: str
    raw: str
    self_closing: bool = False


@dataclass(frozen=True)
class End:
    name: str
    raw: str


@dataclass(frozen=True)
class Text:
    raw: str


@dataclass(frozen=True)
class Other:
    """Comments, CDATA sections, processing instructions, doctype."""

    raw: str


Event = Union[Start, End, Text, Other]


_QUOTED = r"""(?:"[^"]*"|'[^']*')"""
_MARKUP_DECL = r"""(?:<!--.*?-->|<\?.*?\?>)"""

_TOKEN = re.compile(
    rf"""
    (?P<other>
        <!--.*?-->
      | <!\[CDATA\[.*?\]\]>
      | <\?.*?\?>
      | <!DOCTYPE(?:[^\[>"']|{_QUOTED}|\[(?:{_MARKUP_DECL}|[^\]"']|{_QUOTED})*\])*>
    )
  | (?P<end></(?P<end_name>[^\s>]+)\s*>)
  | (?P<start><(?P<start_name>[^\s/>!?]+)(?:[^>"']|{_QUOTED})*>)
  | (?P<text>[^<]+)
    """,
    re.DOTALL | re.VERBOSE,
)


def _decode(xml: str | bytes) -> str:
    if isinstance(xml, str):
        return xml
    try:
        return xml.decode("utf-8")
    except UnicodeDecodeError as e:
        raise MalformedXmlError(f"document is not valid UTF-8: {e.reason} at byte {e.start}") from e


def check_well_formed(xml: str | bytes) -> None:
    """Parse the whole document once, without namespace processing.

    Undeclared prefixes (`<foo:bar>` with no `xmlns:foo`) are accepted; they are
    ordinary name characters to a non-namespace-aware parser.

    Raises:
        MalformedXmlError: if the document is not well-formed.
    """
    parser = expat.ParserCreate()
    try:
        parser.Parse(_decode(xml), True)
    except expat.ExpatError as e:
        raise MalformedXmlError(expat.ErrorString(e.code), e.lineno, e.offset) from e


def iter_events(xml: str | bytes) -> Iterator[Event]:
    """Lazily split a document into Start / End / Text / Other events.

    Concatenating `raw` of every event reproduces the input exactly. This does
    not check well-formedness; callers that need a guarantee should call
    `check_well_formed` first (as `normalize` does).
    """
    text = _decode(xml)
    pos = 0
    while pos < len(text):
        m = _TOKEN.match(text, pos)
        if m is None:
            raise MalformedXmlError(f"unexpected markup at offset {pos}: {text[pos:pos + 20]!r}")
        raw = m.group(0)
        if m.group("start") is not None:
            yield Start(m.group("start_name"), raw, raw.endswith("/>"))
        elif m.group("end") is not None:
            yield End(m.group("end_name"), raw)
        elif m.group("text") is not None:
            yield Text(raw)
        else:
            yield Other(raw)
        pos = m.end()


def rename(name: str, replacement: str) -> str:
    """Replace the first `:` in an element name; names without one pass through."""
    prefix, sep, local = name.partition(":")
    if not sep:
        return name
    return f"{prefix}{replacement}{local}"


def _rewrite(event: Event, replacement: str) -> str:
    if isinstance(event, Start):
        new_name = rename(event.name, replacement)
        if new_name == event.name:
            return event.raw
        return "<" + new_name + event.raw[1 + len(event.name):]
    if isinstance(event, End):
        new_name = rename(event.name, replacement)
        if new_name == event.name:
            return event.raw
        return "</" + new_name + event.raw[2 + len(event.name):]
    return event.raw


def normalize(xml: str | bytes, replacement: str = NAMESPACE_ALTER) -> str:
    """Replace the namespace separator in every element name with `replacement`.

    Start and end tags go through the same rule, so the output stays a valid,
    paired tree. Attributes (names and values), text, comments, CDATA and
    processing instructions are re-emitted byte for byte.

    Example:
        >>> normalize("<root><foo:bar>x</foo:bar></root>", "__ns__")
        '<root><foo__ns__bar>x</foo__ns__bar></root>'

    Raises:
        MalformedXmlError: if the document is not well-formed or not UTF-8.
    """
    text = _decode(xml)
    check_well_formed(text)

    out: list[str] = []
    renamed = 0
    for event in iter_events(text):
        piece = _rewrite(event, replacement)
        if piece is not event.raw:
            renamed += 1
        out.append(piece)

    logger.debug("Normalized %s namespaced tags (replacement=%r)", renamed, replacement)
    return "".join(out)


def normalize_pattern(pattern: str, replacement: str = NAMESPACE_ALTER) -> str:
    """Apply `rename` to each dotted step of a user query pattern."""
    return ".".join(rename(step, replacement) for step in pattern.split("."))
