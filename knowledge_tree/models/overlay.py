"""
Mastery states and per-learner overlays.

Overlays adapt the shared tree to one learner without modifying it.
"""

from datetime import datetime
from enum import Enum
from typing import Dict, List, Optional

from pydantic import Field

from .base import TreeModel


class MasteryState(str, Enum):
    """Mastery bucket derived from a 0-100 progress percent."""
    UNSTARTED = "unstarted"
    EXPLORING = "exploring"
    DEVELOPING = "developing"
    STRONG = "strong"
    MASTERED = "mastered"


class LearningStyle(str, Enum):
    VISUAL = "visual"
    READING = "reading"
    KINESTHETIC = "kinesthetic"
    AUDITORY = "auditory"


def progress_to_mastery(progress: float) -> MasteryState:
    """Map a progress percent to its mastery bucket."""
    if progress >= 100:
        return MasteryState.MASTERED
    if progress >= 75:
        return MasteryState.STRONG
    if progress >= 50:
        return MasteryState.DEVELOPING
    if progress > 0:
        return MasteryState.EXPLORING
    return MasteryState.UNSTARTED


_MASTERY_PROGRESS = {
    MasteryState.MASTERED: 100,
    MasteryState.STRONG: 75,
    MasteryState.DEVELOPING: 50,
    MasteryState.EXPLORING: 25,
    MasteryState.UNSTARTED: 0,
}


def mastery_to_progress(state: MasteryState) -> int:
    """Representative progress percent for a mastery bucket."""
    return _MASTERY_PROGRESS[MasteryState(state)]


class UserNodeOverlay(TreeModel):
    """One learner's state on one node."""

    node_id: str
    progress: int = Field(default=0, description="0-100")
    mastery_state: MasteryState = MasteryState.UNSTARTED
    completed_checkpoints: int = 0
    skipped: bool = False
    last_interaction: Optional[datetime] = None
    notes: Optional[str] = None


class PersonalizedOverlay(TreeModel):
    """A learner's overlay across a whole tree version."""

    user_id: Optional[str] = None
    tree_subject: str
    tree_version: str
    node_overlays: Dict[str, UserNodeOverlay] = Field(default_factory=dict)
    learning_style: Optional[LearningStyle] = None
    custom_path_order: Optional[List[str]] = None
    last_updated: datetime
