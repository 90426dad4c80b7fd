"""Policy Gate.

Pure decision over a LaunchAnalysis: does this candidate clear the
configured score, confidence, NSFW and risk-flag thresholds?
"""

from typing import Optional, Union

from launchgate.analysis.models import LaunchAnalysis
from launchgate.launch.candidate import LaunchCandidate
from launchgate.launch.config import LaunchPolicy

DEFAULT_POLICY = LaunchPolicy()


def rejection_reason(
    analysis: Optional[LaunchAnalysis], policy: Optional[LaunchPolicy] = None
) -> Optional[str]:
    """First failing rule, or None when the analysis passes."""
    policy = policy or DEFAULT_POLICY
    if analysis is None:
        return "no analysis"
    if not analysis.should_launch:
        return "analysis does not recommend launch"
    if analysis.nsfw_or_sensitive and not policy.allow_nsfw:
        return "nsfw or sensitive content"
    if analysis.score_1to10 < policy.min_score:
        return f"score {analysis.score_1to10} below {policy.min_score}"
    if analysis.confidence < policy.min_confidence:
        return f"confidence {analysis.confidence:.2f} below {policy.min_confidence:.2f}"
    blocked = [flag for flag in analysis.risk_flags if flag in policy.block_risk_flags]
    if blocked:
        return f"blocked risk flags: {', '.join(blocked)}"
    return None


def should_launch(
    candidate: Union[LaunchCandidate, LaunchAnalysis],
    policy: Optional[LaunchPolicy] = None,
) -> bool:
    """True when the candidate's analysis clears every policy rule."""
    analysis = candidate.analysis if isinstance(candidate, LaunchCandidate) else candidate
    return rejection_reason(analysis, policy) is None
