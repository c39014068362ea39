"""Marker-block handling for module-manifest files.

Manifest files (``mod.rs``, ``__init__.py``, ``index.ts`` ...) carry a block
delimited by two marker comments.  Everything between the markers belongs to
the generator and is rewritten on every run; everything outside belongs to
the developer and is kept byte for byte.
"""

from __future__ import annotations

from typing import Optional

MARKER_TAG = "auto exported by layoutgen."


class MarkerManager:
    """Applies layoutgen markers for idempotent block replacement."""

    BEGIN_FMT = "{comment} start " + MARKER_TAG
    END_FMT = "{comment} end " + MARKER_TAG

    def __init__(self, comment: str = "//") -> None:
        self.comment = comment
        self.begin = self.BEGIN_FMT.format(comment=comment)
        self.end = self.END_FMT.format(comment=comment)

    def wrap(self, declarations: list[str]) -> str:
        """Return the marker block holding *declarations*, newline terminated."""
        return "\n".join([self.begin, *declarations, self.end]) + "\n"

    def has_block(self, content: str) -> bool:
        start = content.find(self.begin)
        return start != -1 and content.find(self.end, start + len(self.begin)) != -1

    def replace(self, content: str, declarations: list[str]) -> str:
        """Rewrite the managed block inside *content*.

        A file without a complete block gets one prepended, separated from
        the existing text by a blank line.
        """
        block = self.wrap(declarations)
        if not self.has_block(content):
            return f"{block}\n{content}"

        pre, rest = content.split(self.begin, 1)
        _, post = rest.split(self.end, 1)
        return pre + block.rstrip("\n") + post

    def extract(self, content: str) -> Optional[list[str]]:
        """Return the declarations currently inside the block, if any."""
        if not self.has_block(content):
            return None
        _, rest = content.split(self.begin, 1)
        body, _ = rest.split(self.end, 1)
        return [line for line in body.splitlines() if line.strip()]
