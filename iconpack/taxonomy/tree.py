"""Build a typed category tree from indentation-structured taxonomy text.

    Parts
        BaseParts
            >Part
            >MeshPart
        >>Material
    Services
        >Workspace

Category lines nest by indentation. ``>`` assigns an instance item and
``>>`` a general item to the category path they sit under.
"""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass, field

from iconpack.errors import TaxonomyError
from iconpack.models.tag_path import TagPath, as_tag_path
from iconpack.taxonomy.indent import measure_indent

GENERAL_MARKER = ">>"
INSTANCE_MARKER = ">"


@dataclass
class TagNode:
    name: str
    children: list[TagNode] = field(default_factory=list)
    instance_items: list[str] = field(default_factory=list)
    general_items: list[str] = field(default_factory=list)


@dataclass
class TagTree:
    """One parsed taxonomy source. ``root`` is a nameless container."""

    root: TagNode
    colour: str
    source: str = "<text>"

    def categories(self) -> Iterator[TagPath]:
        """Every category path, depth-first in source order."""
        for path, _ in self._nodes():
            if path:
                yield path

    def instance_assignments(self) -> Iterator[tuple[str, TagPath]]:
        for path, node in self._nodes():
            for item in node.instance_items:
                yield item, path

    def general_assignments(self) -> Iterator[tuple[str, TagPath]]:
        for path, node in self._nodes():
            for item in node.general_items:
                yield item, path

    def _nodes(self) -> Iterator[tuple[TagPath, TagNode]]:
        stack: list[tuple[TagPath, TagNode]] = [((), self.root)]
        while stack:
            path, node = stack.pop()
            yield path, node
            for child in reversed(node.children):
                stack.append((as_tag_path(path + (child.name,)), child))


def parse_tag_tree(text: str, colour: str, source: str = "<text>") -> TagTree:
    root = TagNode(name="")
    stack: list[TagNode] = []

    for line_no, line in enumerate(text.splitlines(), start=1):
        if not line.strip():
            continue
        try:
            depth = measure_indent(line)
        except ValueError as e:
            raise TaxonomyError(str(e), source, line_no) from None
        if depth > len(stack):
            raise TaxonomyError(
                f"line is indented {depth} level(s) but only {len(stack)} categories are open",
                source,
                line_no,
            )

        del stack[depth:]
        parent = stack[-1] if stack else root
        content = line.strip()

        if content.startswith(GENERAL_MARKER):
            parent.general_items.append(_item_name(content[len(GENERAL_MARKER):], source, line_no))
        elif content.startswith(INSTANCE_MARKER):
            parent.instance_items.append(_item_name(content[len(INSTANCE_MARKER):], source, line_no))
        else:
            node = TagNode(name=content)
            parent.children.append(node)
            stack.append(node)

    return TagTree(root=root, colour=colour, source=source)


def _item_name(raw: str, source: str, line_no: int) -> str:
    name = raw.strip()
    if not name:
        raise TaxonomyError("item assignment has no name", source, line_no)
    return name
