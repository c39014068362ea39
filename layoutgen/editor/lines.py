"""Line model for indentation-driven editing of ``layout.yml``.

The specification is never re-serialised.  It is held as a vector of lines
(without their endings) plus the newline style and whether the text ended
with a newline, so every line an edit does not touch is reproduced exactly.

Structure is recovered from indentation alone:

- a *node* is a block-sequence item (``- name: x``) together with every
  following line indented deeper than its dash,
- a *section* is a ``file:`` or ``tree:`` key inside a node together with the
  items listed under it.

Blank lines, comment lines and ``---`` markers carry no structure; they never
end a block on their own.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Any, Optional

import yaml

from layoutgen.spec.models import repo_name_from_url

_KEY_RE = re.compile(r"^(?P<key>[A-Za-z_][A-Za-z0-9_-]*)\s*:(?:\s+(?P<value>.*))?$")

DEFAULT_LIST_OFFSET = 2


# ---------------------------------------------------------------------------
# Line helpers
# ---------------------------------------------------------------------------


def indent_of(line: str) -> int:
    return len(line) - len(line.lstrip(" "))


def is_ignorable(line: str) -> bool:
    """Blank lines, comments and document markers."""
    stripped = line.strip()
    return not stripped or stripped.startswith("#") or stripped == "---"


def is_item(line: str) -> bool:
    stripped = line.strip()
    return stripped == "-" or stripped.startswith("- ")


def split_key(text: str) -> Optional[tuple[str, str]]:
    """Split ``key: value`` into its parts (value may be empty)."""
    match = _KEY_RE.match(text.strip())
    if match is None:
        return None
    value = (match.group("value") or "").strip()
    if value.startswith("#"):
        value = ""
    return match.group("key"), value


def scalar_text(value: str) -> str:
    """Read a plain or quoted YAML scalar (trailing comments dropped)."""
    if not value:
        return ""
    try:
        loaded: Any = yaml.safe_load(value)
    except yaml.YAMLError:
        return value.strip()
    if loaded is None:
        return ""
    if isinstance(loaded, (dict, list)):
        return value.strip()
    return str(loaded)


def format_scalar(name: str) -> str:
    """Render *name* so that YAML reads it back as the same string."""
    try:
        loaded = yaml.safe_load(f"key: {name}")
    except yaml.YAMLError:
        loaded = None
    if isinstance(loaded, dict) and loaded.get("key") == name and name == name.strip():
        return name
    return '"' + name.replace("\\", "\\\\").replace('"', '\\"') + '"'


# ---------------------------------------------------------------------------
# Structural views
# ---------------------------------------------------------------------------


@dataclass(frozen=True)
class Node:
    """A sequence item: lines ``start`` up to (excluding) ``end``."""

    start: int
    end: int
    indent: int
    key_indent: int


@dataclass(frozen=True)
class Section:
    """A ``key:`` line inside a node and the items listed beneath it."""

    key: str
    line: int
    indent: int
    end: int
    items: tuple[Node, ...]
    inline_value: str = ""

    @property
    def is_inline_empty(self) -> bool:
        value = self.inline_value.split("#", 1)[0]
        return value.replace(" ", "") in ("[]", "~", "null")


# ---------------------------------------------------------------------------
# SpecLines
# ---------------------------------------------------------------------------


class SpecLines:
    """Mutable line vector of a specification document."""

    def __init__(self, lines: list[str], newline: str = "\n", trailing_newline: bool = True) -> None:
        self.lines = lines
        self.newline = newline
        self.trailing_newline = trailing_newline

    @classmethod
    def parse(cls, text: str) -> SpecLines:
        newline = "\r\n" if "\r\n" in text else "\n"
        trailing = text.endswith(newline)
        lines = text.split(newline)
        if trailing:
            lines.pop()
        return cls(lines, newline, trailing)

    def render(self) -> str:
        text = self.newline.join(self.lines)
        if self.trailing_newline and self.lines:
            text += self.newline
        return text

    # -- Editing -------------------------------------------------------------

    def insert(self, index: int, new_lines: list[str]) -> None:
        self.lines[index:index] = new_lines

    def delete(self, start: int, end: int) -> None:
        del self.lines[start:end]

    def replace(self, index: int, line: str) -> None:
        self.lines[index] = line

    # -- Blocks --------------------------------------------------------------

    def next_content(self, start: int, stop: Optional[int] = None) -> Optional[int]:
        """Index of the first structural line at or after *start*."""
        stop = len(self.lines) if stop is None else stop
        for index in range(start, stop):
            if not is_ignorable(self.lines[index]):
                return index
        return None

    def block_end(self, start: int) -> int:
        """End (exclusive) of the block opened by the item at *start*.

        The block holds every following line indented deeper than the dash.
        Trailing blank and comment lines are left outside the block.
        """
        indent = indent_of(self.lines[start])
        end = start + 1
        for index in range(start + 1, len(self.lines)):
            line = self.lines[index]
            if is_ignorable(line):
                continue
            if indent_of(line) <= indent:
                break
            end = index + 1
        return end

    def node_at(self, start: int) -> Node:
        line = self.lines[start]
        indent = indent_of(line)
        body = line.strip()[1:]
        if body.strip():
            key_indent = indent + 1 + (len(body) - len(body.lstrip(" ")))
        else:
            following = self.next_content(start + 1, self.block_end(start))
            key_indent = indent_of(self.lines[following]) if following is not None else indent + 2
        return Node(start=start, end=self.block_end(start), indent=indent, key_indent=key_indent)

    # -- Projects ------------------------------------------------------------

    def projects(self) -> list[Node]:
        """Top-level sequence items, in document order."""
        first = self.next_content(0)
        if first is None or not is_item(self.lines[first]):
            return []
        indent = indent_of(self.lines[first])
        nodes: list[Node] = []
        for index, line in enumerate(self.lines):
            if not is_ignorable(line) and indent_of(line) == indent and is_item(line):
                nodes.append(self.node_at(index))
        return nodes

    def project(self, index: int) -> Optional[Node]:
        nodes = self.projects()
        if 0 <= index < len(nodes):
            return nodes[index]
        return None

    # -- Keys and sections ---------------------------------------------------

    def key_lines(self, node: Node) -> list[tuple[int, str, str]]:
        """Direct ``key: value`` entries of *node* as ``(line, key, value)``."""
        entries: list[tuple[int, str, str]] = []
        inline = split_key(self.lines[node.start].strip()[1:])
        if inline is not None:
            entries.append((node.start, *inline))
        for index in range(node.start + 1, node.end):
            line = self.lines[index]
            if is_ignorable(line) or is_item(line) or indent_of(line) != node.key_indent:
                continue
            parsed = split_key(line)
            if parsed is not None:
                entries.append((index, *parsed))
        return entries

    def value(self, node: Node, key: str) -> Optional[str]:
        for _, name, raw in self.key_lines(node):
            if name == key:
                return scalar_text(raw)
        return None

    def node_name(self, node: Node) -> str:
        """Resolved name of an item: ``name:``, else the repo name of ``from:``."""
        name = self.value(node, "name")
        if name is not None:
            return name
        source = self.value(node, "from")
        if source:
            return repo_name_from_url(source)
        return ""

    def section(self, node: Node, key: str) -> Optional[Section]:
        for line, name, raw in self.key_lines(node):
            if name != key:
                continue
            indent = node.key_indent if line == node.start else indent_of(self.lines[line])
            return self._section_at(key, line, indent, node.end, raw)
        return None

    def _section_at(self, key: str, line: int, indent: int, limit: int, raw: str) -> Section:
        items: list[Node] = []
        end = line + 1
        if raw:
            # Flow or scalar value on the key line itself; no block items.
            return Section(key=key, line=line, indent=indent, end=end, items=(), inline_value=raw)

        first = self.next_content(line + 1, limit)
        if first is not None and is_item(self.lines[first]) and indent_of(self.lines[first]) >= indent:
            item_indent = indent_of(self.lines[first])
            index = first
            while index < limit:
                text = self.lines[index]
                if is_ignorable(text):
                    index += 1
                    continue
                if indent_of(text) != item_indent or not is_item(text):
                    break
                node = self.node_at(index)
                node = Node(node.start, min(node.end, limit), node.indent, node.key_indent)
                items.append(node)
                end = node.end
                index = node.end

        return Section(key=key, line=line, indent=indent, end=end, items=tuple(items))

    # -- Conventions ---------------------------------------------------------

    def list_offset(self) -> int:
        """Indent of list items relative to their key, as used by the document."""
        for index, line in enumerate(self.lines):
            if is_ignorable(line) or is_item(line):
                continue
            parsed = split_key(line)
            if parsed is None or parsed[1]:
                continue
            following = self.next_content(index + 1)
            if following is None or not is_item(self.lines[following]):
                continue
            offset = indent_of(self.lines[following]) - indent_of(line)
            if offset >= 0:
                return offset
        return DEFAULT_LIST_OFFSET
