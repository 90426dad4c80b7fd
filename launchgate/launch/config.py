"""Launch configuration: candidate statuses and the launch policy."""

from dataclasses import dataclass, field
from enum import Enum


class LaunchStatus(str, Enum):
    """Lifecycle of a launch candidate."""
    CANDIDATE = "candidate"
    QUEUED = "queued"
    LAUNCHED = "launched"
    SKIPPED_CLASSIFIER = "skipped-classifier"
    SKIPPED_POLICY = "skipped-policy"
    SKIPPED_MANUAL = "skipped-manual"
    ANALYSIS_MISSING = "analysis-missing"
    FAILED = "failed"

    @property
    def is_in_flight(self) -> bool:
        """Queued or launched candidates must not be processed again."""
        return self in (LaunchStatus.QUEUED, LaunchStatus.LAUNCHED)

    @property
    def is_skipped(self) -> bool:
        return self.value.startswith("skipped-")


DEFAULT_BLOCK_RISK_FLAGS = ["political", "tragedy", "brand_like_ticker"]


@dataclass
class LaunchPolicy:
    """Thresholds an analysis must clear before a launch is issued."""
    min_score: int = 8
    min_confidence: float = 0.65
    block_risk_flags: list[str] = field(default_factory=lambda: list(DEFAULT_BLOCK_RISK_FLAGS))
    allow_nsfw: bool = False

    def __post_init__(self) -> None:
        if not 1 <= self.min_score <= 10:
            raise ValueError(f"min_score must be within 1..10, got {self.min_score}")
        if not 0.0 <= self.min_confidence <= 1.0:
            raise ValueError(f"min_confidence must be within 0..1, got {self.min_confidence}")
