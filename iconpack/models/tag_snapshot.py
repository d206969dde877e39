"""On-disk snapshot of a compiled tag system."""

from __future__ import annotations

from pydantic import BaseModel, Field


class TagSystemSnapshot(BaseModel):
    all_tags: list[str] = Field(default_factory=list)
    tag_colours: dict[str, str] = Field(default_factory=dict)
    instance_tags: dict[str, list[str]] = Field(default_factory=dict)
    general_tags: dict[str, list[str]] = Field(default_factory=dict)
