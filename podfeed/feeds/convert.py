"""Generic XML -> plain data conversion and dotted-pattern lookup.

This is the stage that runs *after* `podfeed.feeds.namespaces.normalize`. It is
deliberately generic and lossy in the usual way: repeated sibling names merge
into a list, attributes become `@name` keys, and mixed text lands under `#text`.
"""

from __future__ import annotations

from typing import Any
from xml.parsers import expat

from podfeed.errors import MalformedXmlError
from podfeed.feeds.namespaces import NAMESPACE_ALTER, normalize_pattern

TEXT_KEY = "#text"
ATTR_PREFIX = "@"


class _Node:
    __slots__ = ("name", "attrs", "children", "text")

    def __init__(self, name: str, attrs: dict[str, str]) -> None:
        self.name = name
        self.attrs = attrs
        self.children: dict[str, Any] = {}
        self.text: list[str] = []

    def add_child(self, name: str, value: Any) -> None:
        if name not in self.children:
            self.children[name] = value
        elif isinstance(self.children[name], list):
            self.children[name].append(value)
        else:
            self.children[name] = [self.children[name], value]

    def value(self) -> Any:
        text = "".join(self.text).strip()
        if not self.attrs and not self.children:
            return text or None
        out: dict[str, Any] = {f"{ATTR_PREFIX}{k}": v for k, v in self.attrs.items()}
        out.update(self.children)
        if text:
            out[TEXT_KEY] = text
        return out


def to_record(xml: str | bytes) -> dict[str, Any]:
    """Convert a document into nested dicts/lists/strings keyed by element name.

    Raises:
        MalformedXmlError: if the document is not well-formed.
    """
    stack: list[_Node] = []
    result: dict[str, Any] = {}

    def start(name: str, attrs: dict[str, str]) -> None:
        stack.append(_Node(name, attrs))

    def end(name: str) -> None:
        node = stack.pop()
        if stack:
            stack[-1].add_child(node.name, node.value())
        else:
            result[node.name] = node.value()

    def chars(data: str) -> None:
        if stack:
            stack[-1].text.append(data)

    parser = expat.ParserCreate()
    parser.buffer_text = True
    parser.StartElementHandler = start
    parser.EndElementHandler = end
    parser.CharacterDataHandler = chars
    try:
        parser.Parse(xml, True)
    except expat.ExpatError as e:
        raise MalformedXmlError(expat.ErrorString(e.code), e.lineno, e.offset) from e
    return result


def lookup(record: Any, pattern: str, replacement: str = NAMESPACE_ALTER) -> Any:
    """Resolve a dotted path such as `rss.channel.itunes:author`.

    Colons in the pattern are normalized the same way element names were.
    Integer steps index into lists. Returns None when any step is missing.
    """
    cur = record
    for step in normalize_pattern(pattern, replacement).split("."):
        if isinstance(cur, dict):
            if step not in cur:
                return None
            cur = cur[step]
        elif isinstance(cur, list) and step.isdigit():
            idx = int(step)
            if idx >= len(cur):
                return None
            cur = cur[idx]
        else:
            return None
    return cur


def get_guid(item: dict[str, Any]) -> str | None:
    """Return an item's guid, whether stored as plain text or with attributes.

    An empty `<guid/>` (with or without attributes) yields None; an item with
    no guid element raises KeyError.
    """
    guid = item["guid"]
    if guid is None or isinstance(guid, str):
        return guid
    return guid.get(TEXT_KEY)
