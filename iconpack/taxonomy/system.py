"""Tag system: category taxonomy plus per-item tag paths.

Built from one or more taxonomy trees (one file per top-level colour group)
and persisted as a JSON snapshot that the render step reads back.
"""

from __future__ import annotations

import json
import logging
from collections.abc import Iterable
from dataclasses import dataclass, field
from pathlib import Path

from pydantic import ValidationError

from iconpack.errors import ConfigError
from iconpack.models.tag_path import TagPath, as_tag_path, join_tag_path
from iconpack.models.tag_snapshot import TagSystemSnapshot
from iconpack.taxonomy.tree import TagTree, parse_tag_tree

logger = logging.getLogger(__name__)

TAXONOMY_GLOB = "*.txt"
SNAPSHOT_NAME = "generated.json"


@dataclass
class TagSystem:
    all_tags: set[str] = field(default_factory=set)
    tag_colours: dict[str, str] = field(default_factory=dict)
    instance_tags: dict[str, TagPath] = field(default_factory=dict)
    general_tags: dict[str, TagPath] = field(default_factory=dict)

    @classmethod
    def from_trees(cls, trees: Iterable[TagTree]) -> TagSystem:
        system = cls()
        for tree in trees:
            system.add_tree(tree)
        return system

    @classmethod
    def from_directory(cls, tree_dir: Path) -> TagSystem:
        """Parse every taxonomy file in the directory. The file stem is its colour."""
        tree_dir = Path(tree_dir)
        if not tree_dir.is_dir():
            raise ConfigError(f"Taxonomy directory not found: {tree_dir}")

        trees = []
        for path in sorted(tree_dir.glob(TAXONOMY_GLOB)):
            text = path.read_text(encoding="utf-8")
            trees.append(parse_tag_tree(text, colour=path.stem, source=str(path)))
        logger.info("Parsed %d taxonomy files from %s", len(trees), tree_dir)
        return cls.from_trees(trees)

    def add_tree(self, tree: TagTree) -> None:
        for path in tree.categories():
            self.all_tags.add(path[-1])
            if len(path) == 1:
                self.tag_colours[path[0]] = tree.colour

        for item, path in tree.instance_assignments():
            if item in self.instance_tags:
                logger.warning("Instance %s is tagged twice; keeping %s", item, join_tag_path(path))
            self.instance_tags[item] = path
        for item, path in tree.general_assignments():
            if item in self.general_tags:
                logger.warning("General icon %s is tagged twice; keeping %s", item, join_tag_path(path))
            self.general_tags[item] = path

    def tags_for(self, category: str, item: str) -> TagPath | None:
        """Tag path of an item in the ``instance`` or ``general`` category."""
        if category == "instance":
            return self.instance_tags.get(item)
        if category == "general":
            return self.general_tags.get(item)
        return None

    def lint(self) -> list[str]:
        """Advisory consistency concerns between declared and referenced tags."""
        referenced = {tag for path in self.instance_tags.values() for tag in path}
        concerns = [f"tag {tag} is referenced but undeclared" for tag in sorted(referenced - self.all_tags)]
        concerns += [f"tag {tag} is declared but unused" for tag in sorted(self.all_tags - referenced)]
        return concerns

    def tag_order(self) -> dict[str, int]:
        """Position of each declared tag in sorted order."""
        return {tag: i for i, tag in enumerate(sorted(self.all_tags))}

    def to_snapshot(self) -> TagSystemSnapshot:
        return TagSystemSnapshot(
            all_tags=sorted(self.all_tags),
            tag_colours=dict(sorted(self.tag_colours.items())),
            instance_tags={k: list(v) for k, v in sorted(self.instance_tags.items())},
            general_tags={k: list(v) for k, v in sorted(self.general_tags.items())},
        )

    @classmethod
    def from_snapshot(cls, snapshot: TagSystemSnapshot) -> TagSystem:
        return cls(
            all_tags=set(snapshot.all_tags),
            tag_colours=dict(snapshot.tag_colours),
            instance_tags={k: as_tag_path(v) for k, v in snapshot.instance_tags.items()},
            general_tags={k: as_tag_path(v) for k, v in snapshot.general_tags.items()},
        )

    def save(self, path: Path) -> None:
        Path(path).write_text(self.to_snapshot().model_dump_json(indent=2), encoding="utf-8")

    @classmethod
    def load(cls, path: Path) -> TagSystem:
        try:
            snapshot = TagSystemSnapshot.model_validate(json.loads(Path(path).read_text(encoding="utf-8")))
        except (OSError, json.JSONDecodeError, ValidationError) as e:
            raise ConfigError(f"Could not load tag system {path}: {e}") from e
        return cls.from_snapshot(snapshot)
