"""Tag paths: ordered category segments locating an item in the taxonomy."""

from __future__ import annotations

import sys

TAG_SEPARATOR = ">"

TagPath = tuple[str, ...]


def tokenize_tag_path(text: str) -> TagPath:
    """Split ``"A > B>C"`` into interned segments ``("A", "B", "C")``."""
    return tuple(sys.intern(part.strip()) for part in text.split(TAG_SEPARATOR) if part.strip())


def as_tag_path(segments) -> TagPath:
    return tuple(sys.intern(s.strip()) for s in segments)


def join_tag_path(path: TagPath) -> str:
    return TAG_SEPARATOR.join(path)
