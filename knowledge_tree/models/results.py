"""
Engine output models.

Everything the engine returns is a plain model with a JSON form
(``model_dump(by_alias=True, mode="json")``).
"""

from enum import Enum
from typing import Dict, List, Optional

from pydantic import Field

from .base import KnowledgeTree, TreeModel


class RecommendedNode(TreeModel):
    """A node suggested as a next step, with its explanation."""

    node_id: str
    reason: str
    score: float
    learning_gain: float = Field(..., description="Strength of unstarted work this node unblocks")
    unmet_prereqs: List[str] = Field(default_factory=list)


class LearningPath(TreeModel):
    """An ordered sequence of nodes with aggregate effort."""

    node_ids: List[str] = Field(default_factory=list)
    total_minutes: int = 0
    average_difficulty: float = 0.0
    label: str


class GroupProgress(TreeModel):
    started: int = 0
    mastered: int = 0
    total: int = 0


class TreeAnalytics(TreeModel):
    """Progress rolled up across a tree."""

    coverage_percent: int = Field(..., ge=0, le=100)
    mastery_percent: int = Field(..., ge=0, le=100)
    top_recommendations: List[RecommendedNode] = Field(default_factory=list)
    group_progress: Dict[str, GroupProgress] = Field(default_factory=dict)
    acquired_skills: List[str] = Field(default_factory=list)
    remaining_skills: List[str] = Field(default_factory=list)


class TreeValidationResult(TreeModel):
    """Structural integrity report. Warnings never affect ``valid``."""

    valid: bool
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)


class TreeLoadSource(str, Enum):
    """Where a loaded tree came from."""
    PACK_EMBEDDED = "pack-embedded"
    AUTO_GENERATED = "auto-generated"
    CACHED = "cached"


class TreeLoadResult(TreeModel):
    tree: KnowledgeTree
    validation: Optional[TreeValidationResult] = None
    source: TreeLoadSource
