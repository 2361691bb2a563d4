"""
Base domain models for the Knowledge Tree.

A KnowledgeTree is a directed graph where:
- Nodes represent learnable concepts
- Edges represent typed relationships (prerequisites, influences, contrasts)
- The tree is shared across all learners of a subject pack

Trees are immutable once constructed; per-learner progress lives
outside the tree and is supplied fresh to every computation.
"""

from datetime import datetime, timezone
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel


DEFAULT_DIFFICULTY = 2
DEFAULT_EVIDENCE_CHECKPOINTS = 4
DEFAULT_ESTIMATED_MINUTES = 15


class TreeModel(BaseModel):
    """Base for all tree models: snake_case in Python, camelCase on the wire."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
    )


class EdgeKind(str, Enum):
    """Relationship types between knowledge nodes."""
    PREREQUISITE = "prerequisite"  # Must understand A before B
    COREQUISITE = "corequisite"    # Best understood alongside
    INFLUENCE = "influence"        # A historically influenced B
    CONTRAST = "contrast"          # A clarifies B by opposition
    APPLICATION = "application"    # A applies concepts from B
    DEEPENING = "deepening"        # B goes deeper into the same topic as A


class TreeSource(str, Enum):
    """How a tree was produced."""
    AI_GENERATED = "ai-generated"
    EXPERT_CURATED = "expert-curated"
    HYBRID = "hybrid"
    COMMUNITY = "community"


class KnowledgeNode(TreeModel):
    """
    A single learnable concept.

    Difficulty runs from 1 (introductory) to 5 (research-level).
    """

    model_config = ConfigDict(frozen=True)

    id: str = Field(..., description="Stable node ID, unique within a tree")
    title: str
    group: str = Field(..., description="Track this node belongs to")
    difficulty: int = Field(default=DEFAULT_DIFFICULTY, ge=1, le=5)
    evidence_checkpoints: int = Field(default=DEFAULT_EVIDENCE_CHECKPOINTS, ge=0)
    estimated_minutes: int = Field(default=DEFAULT_ESTIMATED_MINUTES, ge=0)

    skill_tags: List[str] = Field(default_factory=list)
    why_it_matters: Optional[str] = None
    learning_objectives: List[str] = Field(default_factory=list)
    prereqs: List[str] = Field(
        default_factory=list,
        description="Convenience alias for incoming prerequisite edges",
    )

    @field_validator("difficulty", "evidence_checkpoints", "estimated_minutes", mode="before")
    @classmethod
    def _default_when_null(cls, value: Any, info) -> Any:
        if value is None:
            return {
                "difficulty": DEFAULT_DIFFICULTY,
                "evidence_checkpoints": DEFAULT_EVIDENCE_CHECKPOINTS,
                "estimated_minutes": DEFAULT_ESTIMATED_MINUTES,
            }[info.field_name]
        return value

    @field_validator("skill_tags", "learning_objectives", "prereqs", mode="before")
    @classmethod
    def _empty_when_null(cls, value: Any) -> Any:
        return [] if value is None else value


class KnowledgeEdge(TreeModel):
    """
    A typed, weighted relationship between two nodes.

    Only prerequisite edges constrain ordering and take part in
    cycle detection.
    """

    model_config = ConfigDict(frozen=True)

    from_id: str = Field(..., alias="from")
    to_id: str = Field(..., alias="to")
    kind: EdgeKind
    strength: float = Field(default=1.0, description="Conventionally 0.0-1.0")
    rationale: Optional[str] = None

    @property
    def is_prerequisite(self) -> bool:
        return self.kind == EdgeKind.PREREQUISITE


class TreeMetadata(TreeModel):
    """Optional descriptive metadata for a tree."""

    model_config = ConfigDict(frozen=True)

    author: Optional[str] = None
    description: Optional[str] = None
    tags: List[str] = Field(default_factory=list)


class KnowledgeTree(TreeModel):
    """
    A versioned concept graph for one subject.

    Never mutated by engine operations; regenerating a tree means
    replacing it wholesale.
    """

    model_config = ConfigDict(frozen=True)

    subject: str = Field(..., description="Subject pack identifier")
    version: str = Field(default="0.1.0", description="Semver-style version")
    last_updated: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    source: TreeSource = TreeSource.AI_GENERATED

    nodes: List[KnowledgeNode] = Field(default_factory=list)
    edges: List[KnowledgeEdge] = Field(default_factory=list)
    metadata: Optional[TreeMetadata] = None
