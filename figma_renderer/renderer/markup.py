"""Intermediate markup tree and its text serialization."""
from __future__ import annotations

import re
from typing import Dict, Iterator, List, Optional, Union
from xml.sax.saxutils import escape

from figma_renderer.utils.numbers import format_number

DEFAULT_TAB_WIDTH = 2

AttributeValue = Union[str, int, float, bool, None]

_CAPITAL = re.compile(r"([A-Z])")
_VERBATIM_ATTRIBUTES = frozenset({"viewBox", "preserveAspectRatio"})
_ATTRIBUTE_ENTITIES = {'"': "&quot;"}


def attribute_name(prop: str) -> str:
    """Convert a camelCase property name into a hyphenated attribute name."""
    if prop in _VERBATIM_ATTRIBUTES:
        return prop
    return _CAPITAL.sub(r"-\1", prop).lower()


def _attribute_text(name: str, value: AttributeValue) -> Optional[str]:
    if value is None or value is False:
        return None
    if value is True:
        return attribute_name(name)
    if isinstance(value, (int, float)):
        rendered = format_number(value)
    else:
        rendered = escape(str(value), _ATTRIBUTE_ENTITIES)
    return f'{attribute_name(name)}="{rendered}"'


class MarkupElement:
    """Element with a tag (``None`` for a transparent wrapper), attributes and children.

    Transparent elements never produce a tag of their own; their children are
    spliced into the parent both when iterating and when serializing.
    """

    def __init__(
        self,
        tag: Optional[str],
        attributes: Optional[Dict[str, AttributeValue]] = None,
        children: Optional[List[Union["MarkupElement", str]]] = None,
    ) -> None:
        self.tag = tag
        self.attributes: Dict[str, AttributeValue] = dict(attributes or {})
        self.children: List[Union[MarkupElement, str]] = list(children or [])

    def __repr__(self) -> str:
        return f"MarkupElement({self.tag!r}, {self.attributes!r}, children={len(self.children)})"

    def __iter__(self) -> Iterator["MarkupElement"]:
        """Yield direct element children, flattening transparent ones."""
        for child in self.children:
            if not isinstance(child, MarkupElement):
                continue
            if child.tag is None:
                yield from child
            else:
                yield child

    @property
    def is_transparent(self) -> bool:
        return self.tag is None

    def iter_elements(self, tag: Optional[str] = None) -> Iterator["MarkupElement"]:
        """Depth-first walk over every tagged descendant, optionally filtered by tag."""
        for child in self:
            if tag is None or child.tag == tag:
                yield child
            yield from child.iter_elements(tag)

    def text_content(self) -> str:
        parts: List[str] = []
        for child in self.children:
            parts.append(child.text_content() if isinstance(child, MarkupElement) else child)
        return "".join(parts)

    def to_string(self, tab_width: int = DEFAULT_TAB_WIDTH) -> str:
        return "\n".join(self._lines(0, tab_width))

    def __str__(self) -> str:
        return self.to_string()

    def _lines(self, depth: int, tab_width: int) -> List[str]:
        if self.tag is None:
            lines: List[str] = []
            for child in self.children:
                lines.extend(self._child_lines(child, depth, tab_width))
            return lines

        indent = " " * (depth * tab_width)
        attributes = [text for text in (_attribute_text(k, v) for k, v in self.attributes.items()) if text]
        opening = f"<{self.tag}" + "".join(f" {text}" for text in attributes)

        body: List[str] = []
        for child in self.children:
            body.extend(self._child_lines(child, depth + 1, tab_width))
        if not body:
            return [f"{indent}{opening} />"]
        return [f"{indent}{opening}>", *body, f"{indent}</{self.tag}>"]

    @staticmethod
    def _child_lines(child: Union["MarkupElement", str], depth: int, tab_width: int) -> List[str]:
        if isinstance(child, MarkupElement):
            return child._lines(depth, tab_width)
        if not child:
            return []
        return [" " * (depth * tab_width) + escape(child)]
