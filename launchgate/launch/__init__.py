"""Launch decision and execution.

Candidate cache, idempotency store, policy gate, executor interface and
the coordinator that ties them into an at-most-once action path.
"""

from launchgate.launch.config import LaunchStatus, LaunchPolicy, DEFAULT_BLOCK_RISK_FLAGS
from launchgate.launch.candidate import (
    LaunchCandidate,
    candidate_key,
    tweet_url,
    build_launch_candidate,
)
from launchgate.launch.cache import CandidateCache
from launchgate.launch.dedup import IdempotencyStore, InMemoryIdempotencyStore
from launchgate.launch.policy import should_launch, rejection_reason
from launchgate.launch.executor import (
    LaunchRequest,
    LaunchResult,
    LaunchExecutor,
    DryRunLaunchExecutor,
)
from launchgate.launch.coordinator import LaunchCoordinator, LaunchOutcome, OutcomeStatus

__all__ = [
    # Config
    "LaunchStatus",
    "LaunchPolicy",
    "DEFAULT_BLOCK_RISK_FLAGS",
    # Candidates
    "LaunchCandidate",
    "candidate_key",
    "tweet_url",
    "build_launch_candidate",
    "CandidateCache",
    # Dedup
    "IdempotencyStore",
    "InMemoryIdempotencyStore",
    # Policy
    "should_launch",
    "rejection_reason",
    # Executor
    "LaunchRequest",
    "LaunchResult",
    "LaunchExecutor",
    "DryRunLaunchExecutor",
    # Coordinator
    "LaunchCoordinator",
    "LaunchOutcome",
    "OutcomeStatus",
]
