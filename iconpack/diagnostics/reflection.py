"""Rewrite ReflectionMetadata.xml so the explorer sorts classes by taxonomy.

Each ``ReflectionMetadataClass`` item whose class has instance tags gets an
``ExplorerOrder`` equal to the position of its first tag in the sorted tag
list. Existing ``ExplorerOrder`` lines are dropped first. The file is edited
line by line so its formatting survives untouched.
"""

from __future__ import annotations

import enum
import logging
import re
from pathlib import Path

from iconpack.taxonomy.system import TagSystem

logger = logging.getLogger(__name__)

REFLECTION_FILE_NAME = "ReflectionMetadata.xml"

_EXPLORER_ORDER_MARK = '<string name="ExplorerOrder">'
_CLASS_MARK = '<Item class="ReflectionMetadataClass">'
_PROPERTIES_MARK = "<Properties>"
_NAME_RE = re.compile(r'^(\s*)<string name="Name">(.*?)</string>')


class _State(enum.Enum):
    READY = enum.auto()
    IN_ITEM = enum.auto()
    IN_PROPERTIES = enum.auto()


def rewrite_explorer_order(xml_text: str, tag_system: TagSystem) -> tuple[str, int]:
    """Return the rewritten text and the number of ExplorerOrder entries written."""
    order = tag_system.tag_order()
    lines = [line for line in xml_text.split("\n") if _EXPLORER_ORDER_MARK not in line]

    out: list[str] = []
    inserted = 0
    state = _State.READY
    for line in lines:
        out.append(line)
        if state is _State.READY:
            state = _State.IN_ITEM if _CLASS_MARK in line else _State.READY
        elif state is _State.IN_ITEM:
            state = _State.IN_PROPERTIES if _PROPERTIES_MARK in line else _State.READY
        else:
            match = _NAME_RE.search(line)
            if match:
                indent, name = match.groups()
                tags = tag_system.instance_tags.get(name)
                position = order.get(tags[0]) if tags else None
                if position is not None:
                    out.append(f"{indent}{_EXPLORER_ORDER_MARK}{position}</string>")
                    inserted += 1
                    logger.debug("-> %s ExplorerOrder %d", name, position)
            state = _State.READY

    return "\n".join(out), inserted


def write_reflection_metadata(source: Path, out_root: Path, tag_system: TagSystem) -> Path | None:
    """Rewrite ``source`` into ``out_root`` if it exists."""
    source = Path(source)
    if not source.is_file():
        logger.debug("No %s at %s; skipping", REFLECTION_FILE_NAME, source)
        return None

    text, inserted = rewrite_explorer_order(source.read_text(encoding="utf-8"), tag_system)
    out_root = Path(out_root)
    out_root.mkdir(parents=True, exist_ok=True)
    dest = out_root / REFLECTION_FILE_NAME
    dest.write_text(text, encoding="utf-8")
    logger.info("Wrote reflection metadata with %d explorer orders to %s", inserted, dest)
    return dest
