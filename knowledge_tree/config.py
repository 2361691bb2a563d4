"""
Engine settings.

Configuration via environment variables:
- KNOWLEDGE_TREE_RECOMMENDATION_COUNT: shortlist size (default 3)
- KNOWLEDGE_TREE_ANALYTICS_RECOMMENDATIONS: top picks in analytics (default 5)
- KNOWLEDGE_TREE_MAX_DIFFICULTY: difficulty ceiling for recommendations (default 5)
"""

import os
from dataclasses import dataclass


def _int_from_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        return int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None


@dataclass(frozen=True)
class EngineSettings:
    """Tunables used by the repository facade."""
    recommendation_count: int = 3
    analytics_recommendation_count: int = 5
    max_difficulty: int = 5

    def __post_init__(self) -> None:
        if self.recommendation_count < 0:
            raise ValueError("recommendation_count must be >= 0")
        if self.analytics_recommendation_count < 0:
            raise ValueError("analytics_recommendation_count must be >= 0")
        if not 1 <= self.max_difficulty <= 5:
            raise ValueError("max_difficulty must be between 1 and 5")

    @classmethod
    def from_env(cls) -> "EngineSettings":
        """Read settings from KNOWLEDGE_TREE_* environment variables."""
        return cls(
            recommendation_count=_int_from_env("KNOWLEDGE_TREE_RECOMMENDATION_COUNT", 3),
            analytics_recommendation_count=_int_from_env(
                "KNOWLEDGE_TREE_ANALYTICS_RECOMMENDATIONS", 5
            ),
            max_difficulty=_int_from_env("KNOWLEDGE_TREE_MAX_DIFFICULTY", 5),
        )
