"""Twitter Launch Pipeline.

Per tweet: parse (or ask the analyzer for) launch commands, gate each on
keyword classification, obtain a launch analysis, record the candidate,
apply the Policy Gate, and hand passing candidates to the coordinator.
Every outcome is recorded in the candidate cache.
"""

from typing import Any, Optional
import asyncio
import logging

from launchgate.analysis import GroqAnalyzer, KeywordAnalysis, LaunchAnalysis
from launchgate.classifier import ClassifiedSignal, TweetClassifier
from launchgate.event_bus import EventBus, EventType, LaunchDetectedData, TweetEventData
from launchgate.ingestion import ParsedLaunchCommand, Signal, parse_launch_command, tweet_urls
from launchgate.launch import (
    CandidateCache,
    LaunchCandidate,
    LaunchCoordinator,
    LaunchOutcome,
    LaunchPolicy,
    LaunchRequest,
    LaunchStatus,
    build_launch_candidate,
    candidate_key,
    rejection_reason,
)
from launchgate.logging_config import SignalContext

logger = logging.getLogger(__name__)

DEFAULT_ANALYSIS_TIMEOUT = 15.0
_APPROVABLE = (LaunchStatus.CANDIDATE, LaunchStatus.ANALYSIS_MISSING)


class TwitterLaunchPipeline:
    """Decide, per tweet, which launch commands become launches.

    With ``auto_launch`` off, candidates that pass the policy stay in
    ``candidate`` until ``approve`` or ``skip`` is called.

    Example:
        pipeline = TwitterLaunchPipeline(bus, classifier, analyzer, cache, coordinator, LaunchPolicy())
        candidates = await pipeline.process_tweet(signal)
    """

    def __init__(
        self,
        bus: EventBus,
        classifier: TweetClassifier,
        analyzer: Optional[GroqAnalyzer],
        cache: CandidateCache,
        coordinator: LaunchCoordinator,
        policy: Optional[LaunchPolicy] = None,
        auto_launch: bool = True,
        analysis_timeout: float = DEFAULT_ANALYSIS_TIMEOUT,
    ) -> None:
        self.bus = bus
        self.classifier = classifier
        self.analyzer = analyzer
        self.cache = cache
        self.coordinator = coordinator
        self.policy = policy or LaunchPolicy()
        self.auto_launch = auto_launch
        self.analysis_timeout = analysis_timeout
        self._tweets = 0
        self._no_command = 0

    @property
    def uses_llm(self) -> bool:
        return self.analyzer is not None and self.analyzer.enabled

    # ── Intake ───────────────────────────────────────────────────────

    async def process_tweet(self, signal: Signal) -> list[LaunchCandidate]:
        """Run one tweet through the pipeline; returns the candidates it touched."""
        with SignalContext(signal_id=signal.source_id, source=signal.source.value) as ctx:
            self._tweets += 1
            self._emit_tweet(EventType.TWEET_RECEIVED, signal)

            commands = await self._commands_for(signal)
            if not commands:
                self._no_command += 1
                logger.debug("No launch command in tweet %s", signal.source_id)
                self._emit_tweet(EventType.TWEET_FILTERED, signal, reason="no launch command")
                return []

            classified = self.classifier.classify(signal)
            touched = []
            for command in commands:
                key = candidate_key(command.ticker, signal.source_id)
                ctx.bind_candidate(key)
                candidate = await self._process_command(signal, classified, command, key)
                if candidate is not None:
                    touched.append(candidate)
            return touched

    async def _commands_for(self, signal: Signal) -> list[ParsedLaunchCommand]:
        command = parse_launch_command(signal)
        if command is not None:
            return [command]
        if self.uses_llm:
            return await self.analyzer.suggest_launch_commands(signal)
        return []

    async def _process_command(
        self,
        signal: Signal,
        classified: ClassifiedSignal,
        command: ParsedLaunchCommand,
        key: str,
    ) -> Optional[LaunchCandidate]:
        if self._in_flight(key):
            return None

        keyword_analysis = KeywordAnalysis.from_classified(classified, command)

        if not self.classifier.passes_gate(classified):
            reason = self.classifier.rejection_reason(classified)
            logger.info("Classifier gate rejected %s: %s", key, reason)
            return self._record(
                signal, command, keyword_analysis, LaunchStatus.SKIPPED_CLASSIFIER, reason
            )

        if self.uses_llm:
            analysis = await self._analyze(signal)
            if self._in_flight(key):
                return None
            if analysis is None:
                return self._record(
                    signal, command, None, LaunchStatus.ANALYSIS_MISSING, "analysis unavailable"
                )
        else:
            analysis = keyword_analysis

        candidate = self._record(signal, command, analysis, LaunchStatus.CANDIDATE)

        reason = rejection_reason(analysis, self.policy)
        if reason is not None:
            logger.info("Policy rejected %s: %s", key, reason)
            self.cache.update_status(key, LaunchStatus.SKIPPED_POLICY)
            self._emit_tweet(
                EventType.TWEET_FILTERED, signal, analysis=analysis,
                status=LaunchStatus.SKIPPED_POLICY, reason=reason,
            )
            return candidate

        if not self.auto_launch:
            logger.info("Candidate %s awaiting manual approval", key)
            return candidate

        await self._launch(candidate)
        return candidate

    def _in_flight(self, key: str) -> bool:
        existing = self.cache.get(key)
        if existing is not None and existing.status.is_in_flight:
            logger.info("Candidate %s already %s; skipping", key, existing.status.value)
            return True
        return False

    async def _analyze(self, signal: Signal) -> Optional[LaunchAnalysis]:
        try:
            return await asyncio.wait_for(self.analyzer.analyze(signal), self.analysis_timeout)
        except asyncio.TimeoutError:
            logger.warning(
                "Analysis of %s timed out after %.1fs", signal.source_id, self.analysis_timeout
            )
        except Exception:
            logger.exception("Analysis of %s failed", signal.source_id)
        return None

    def _record(
        self,
        signal: Signal,
        command: ParsedLaunchCommand,
        analysis: Optional[LaunchAnalysis],
        status: LaunchStatus,
        reason: Optional[str] = None,
    ) -> LaunchCandidate:
        candidate = build_launch_candidate(signal, command, analysis, status)
        stored = self.cache.upsert(candidate.key, candidate, command, status)
        if status != LaunchStatus.CANDIDATE:
            self._emit_tweet(
                EventType.TWEET_FILTERED, signal, analysis=analysis, status=status, reason=reason
            )
        return stored

    # ── Launch ───────────────────────────────────────────────────────

    async def _launch(self, candidate: LaunchCandidate) -> LaunchOutcome:
        confidence = candidate.analysis.confidence if candidate.analysis is not None else 0.0
        self.bus.emit(EventType.LAUNCH_DETECTED, LaunchDetectedData(
            ticker=candidate.ticker,
            name=candidate.name,
            tweet_id=candidate.tweet_id,
            tweet_author=candidate.author_handle,
            confidence=confidence,
            candidate_key=candidate.key,
        ))
        self.cache.update_status(candidate.key, LaunchStatus.QUEUED)
        return await self.coordinator.launch(
            candidate.key, LaunchRequest.from_command(candidate.source_command)
        )

    async def approve(self, key: str) -> Optional[LaunchOutcome]:
        """Launch a candidate held for manual approval."""
        candidate = self.cache.get(key)
        if candidate is None or candidate.status not in _APPROVABLE:
            logger.warning("Cannot approve %s: not awaiting approval", key)
            return None
        with SignalContext(signal_id=candidate.tweet_id, source=candidate.source, candidate_key=key):
            logger.info("Candidate %s approved", key)
            return await self._launch(candidate)

    def skip(self, key: str) -> bool:
        """Manually reject a candidate held for approval."""
        candidate = self.cache.get(key)
        if candidate is None or candidate.status not in _APPROVABLE:
            return False
        logger.info("Candidate %s skipped manually", key)
        return self.cache.update_status(key, LaunchStatus.SKIPPED_MANUAL)

    async def retry(self, key: str) -> Optional[LaunchOutcome]:
        """Re-arm and relaunch a failed candidate."""
        with SignalContext(candidate_key=key):
            return await self.coordinator.retry(key)

    # ── Events / stats ───────────────────────────────────────────────

    def _emit_tweet(
        self,
        event_type: EventType,
        signal: Signal,
        analysis: Optional[LaunchAnalysis] = None,
        status: Optional[LaunchStatus] = None,
        reason: Optional[str] = None,
    ) -> None:
        self.bus.emit(event_type, TweetEventData(
            tweet_id=signal.source_id,
            author_username=signal.author,
            text=signal.content,
            analysis=analysis.to_dict() if analysis is not None else None,
            launch_status=status.value if status is not None else None,
            reason=reason,
            urls=tuple(tweet_urls(signal)),
            media_urls=signal.media_urls,
        ))

    def get_stats(self) -> dict[str, Any]:
        return {
            "tweets": self._tweets,
            "no_command": self._no_command,
            "auto_launch": self.auto_launch,
            "uses_llm": self.uses_llm,
            "candidates": self.cache.count_by_status(),
            "classifier": self.classifier.get_stats(),
            "coordinator": self.coordinator.get_stats(),
        }
