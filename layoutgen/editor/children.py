"""Typed children carried by a directory add-request."""

from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import PurePosixPath
from typing import Iterable, Union


@dataclass(frozen=True)
class AddChild:
    """A file or directory found inside a directory being added.

    Directories carry their own nested children so a freshly discovered tree
    can be added in one edit sequence.
    """

    name: str
    is_directory: bool = False
    children: tuple[AddChild, ...] = field(default_factory=tuple)

    @classmethod
    def from_paths(
        cls,
        paths: Iterable[Union[str, PurePosixPath]],
        base: Union[str, PurePosixPath] = "",
    ) -> list[AddChild]:
        """Build nested children from slash-separated relative paths.

        Args:
            paths: Paths relative to the project root or to *base*.  A
                trailing ``/`` marks a directory; intermediate segments are
                always directories.
            base: Directory the children live in.  Paths outside it are
                ignored, as is *base* itself.

        Returns:
            Children of *base*, directories first, each group sorted by name.
        """
        base_parts = PurePosixPath(str(base)).parts
        root: dict[str, dict] = {}
        directories: set[tuple[str, ...]] = set()

        for raw in paths:
            text = str(raw)
            is_dir = text.endswith("/")
            parts = PurePosixPath(text.rstrip("/")).parts
            if parts[: len(base_parts)] != base_parts:
                continue
            parts = parts[len(base_parts):]
            if not parts:
                continue

            level = root
            for depth, part in enumerate(parts):
                level = level.setdefault(part, {})
                if depth < len(parts) - 1 or is_dir:
                    directories.add(parts[: depth + 1])

        return _build(root, (), directories)


def _build(
    level: dict[str, dict],
    prefix: tuple[str, ...],
    directories: set[tuple[str, ...]],
) -> list[AddChild]:
    children = []
    for name, nested in level.items():
        key = prefix + (name,)
        if key in directories:
            children.append(AddChild(name, True, tuple(_build(nested, key, directories))))
        else:
            children.append(AddChild(name, False))
    return sorted(children, key=lambda child: (not child.is_directory, child.name))
