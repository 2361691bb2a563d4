"""
Source content models.

These describe the content items supplied by an external catalog.
A tree is synthesized from them when a subject pack does not embed
a valid tree of its own.
"""

from enum import Enum
from typing import Any, List, Optional

from pydantic import AliasChoices, Field, field_validator

from .base import TreeModel


class DifficultyLevel(str, Enum):
    """Three-level difficulty scale used by source content."""
    INTRO = "intro"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class SourceConnection(TreeModel):
    """A declared semantic connection from one source item to another."""

    target_id: str = Field(
        ...,
        validation_alias=AliasChoices("targetId", "target_id", "targetEraId"),
    )
    kind: str = Field(..., description="analogy|influence|contrast|application")
    strength: Optional[float] = None


class SourceItem(TreeModel):
    """
    A content item from the external catalog.

    ``start`` and ``end`` bound the item's declared range; ``start`` is
    also the chronological key used to chain items within a group.
    """

    id: str
    title: str = Field(..., validation_alias=AliasChoices("title", "content"))
    group: str
    start: float = 0.0
    end: float = 0.0

    difficulty: Optional[str] = Field(None, description="intro|intermediate|advanced")
    estimated_minutes: Optional[int] = None
    skill_tags: List[str] = Field(default_factory=list)
    learning_objectives: List[str] = Field(default_factory=list)
    description: Optional[str] = None

    prerequisite_ids: List[str] = Field(default_factory=list)
    connections: List[SourceConnection] = Field(default_factory=list)

    @field_validator(
        "skill_tags", "learning_objectives", "prerequisite_ids", "connections",
        mode="before",
    )
    @classmethod
    def _empty_when_null(cls, value: Any) -> Any:
        return [] if value is None else value
