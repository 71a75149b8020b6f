"""Compiled-template models.

This module defines the intermediate representation produced by the
compiler and consumed at render time: a compiled template holding the
validated node tree plus one ``Island`` per placed component instance.
Compiled templates are persisted externally between edits, so they are
plain pydantic models that round-trip through JSON.
"""

from collections.abc import Iterator
from typing import Any

from pydantic import BaseModel, Field

from pagecraft.parser import Node

# Bumped whenever the island property schema changes. Templates compiled
# under an older version are migrated again at render time.
CURRENT_SCHEMA_VERSION = 2

# Reserved island properties
POSITIONING_PROP = "_positioning"
SIZE_PROP = "_size"


class Island(BaseModel):
    """One compiled, independently placeable component instance.

    Attributes:
        id: Identifier unique within one compiled template.
        component: Registered component name.
        props: Resolved properties, including the reserved ``_positioning``
            and ``_size`` sub-objects when present.
        children: Islands for components nested inside this one.

    Example:
        >>> island = Island(
        ...     id="island-1",
        ...     component="BlogPosts",
        ...     props={"limit": 3, "_size": {"width": 300}},
        ... )
        >>> island.size
        {'width': 300}
    """

    id: str = Field(..., description="Identifier unique within the template")
    component: str = Field(..., description="Registered component name")
    props: dict[str, Any] = Field(
        default_factory=dict, description="Resolved component properties"
    )
    children: list["Island"] = Field(
        default_factory=list, description="Nested component islands"
    )

    model_config = {
        "frozen": True,
    }

    @property
    def positioning(self) -> Any:
        return self.props.get(POSITIONING_PROP)

    @property
    def size(self) -> Any:
        return self.props.get(SIZE_PROP)

    def walk(self, nested: bool = False) -> Iterator[tuple["Island", bool]]:
        """Yield (island, is_nested) pairs, self first."""
        yield self, nested
        for child in self.children:
            yield from child.walk(nested=True)


class CompiledTemplate(BaseModel):
    """Validated template ready for persistence and rendering.

    Attributes:
        schema_version: Island schema version the template was compiled under.
        root: Validated node tree; component nodes carry ``data-island``.
        islands: Top-level islands in document order.
        css: Extracted style block, if any.
    """

    schema_version: int = Field(
        default=CURRENT_SCHEMA_VERSION, description="Island schema version"
    )
    root: Node = Field(..., description="Validated node tree")
    islands: list[Island] = Field(
        default_factory=list, description="Top-level islands in document order"
    )
    css: str | None = Field(None, description="Extracted style block")

    model_config = {
        "frozen": True,
    }

    def iter_islands(self) -> Iterator[tuple[Island, bool]]:
        """Every island in document order with its nesting flag."""
        for island in self.islands:
            yield from island.walk()

    def get_island(self, island_id: str) -> Island | None:
        for island, _ in self.iter_islands():
            if island.id == island_id:
                return island
        return None

    def to_json(self) -> str:
        return self.model_dump_json(by_alias=True)

    @classmethod
    def from_json(cls, data: str) -> "CompiledTemplate":
        return cls.model_validate_json(data)
