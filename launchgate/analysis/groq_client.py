"""Groq LLM analyzer.

Calls an OpenAI-compatible chat-completions endpoint in JSON mode to
(a) suggest launch commands for tweets the regex parser did not match and
(b) produce a structured launch verdict for the Policy Gate. Every
transport, HTTP, or parse failure is logged and turned into ``None`` or
``[]`` at this boundary.
"""

from typing import Any, Optional
import asyncio
import json
import logging

import httpx

from launchgate.analysis.config import GroqConfig
from launchgate.analysis.models import LLMAnalysis
from launchgate.errors import AnalysisError
from launchgate.ingestion.base import Signal
from launchgate.ingestion.parser import ParsedLaunchCommand, is_valid_ticker
from launchgate.ingestion.twitter_adapter import tweet_urls
from launchgate.logging_config import log_performance

logger = logging.getLogger(__name__)

MIN_SUGGESTED_TICKER_LENGTH = 2

ANALYSIS_SYSTEM_PROMPT = (
    "You are a concise crypto trading signal evaluator. "
    "Return ONLY JSON with fields: shouldLaunch (bool), confidence (0-1), "
    "score1to10 (1-10), reason (string), tokenName (string), tokenTicker "
    "(string, 2-8 uppercase letters/numbers), theme (string), tone (string), "
    "keywordsDetected (string[]), riskFlags (string[]), nsfwOrSensitive (bool). "
    "Be strict: avoid copying existing brand names or tickers unless clearly "
    "generic. Prefer safe, non-infringing names."
)

SUGGESTION_SYSTEM_PROMPT = (
    "You extract potential crypto token launch metadata from tweets. "
    "Use only the provided tweet text and the provided URLs/media if any. "
    "Return JSON only with keys: ticker (2-10 uppercase letters, no $), "
    "name (short friendly token name), reason (why this fits), "
    "website (choose from provided urls if any match; else empty), "
    "twitter (handle only, no @, if text implies; else empty), "
    "imageUrl (pfp suggestion url chosen from provided media if available; else empty). "
    "Do not invent URLs; prefer the provided ones. "
    "If no reasonable suggestion, return an empty JSON object."
)


class GroqAnalyzer:
    """LLM-backed launch analyzer.

    Disabled (no API key) analyzers answer ``None`` / ``[]`` without I/O.

    Example:
        analyzer = GroqAnalyzer(GroqConfig(api_key="gsk_..."))
        verdict = await analyzer.analyze(signal)
        commands = await analyzer.suggest_launch_commands(signal)
        await analyzer.aclose()
    """

    def __init__(
        self,
        config: Optional[GroqConfig] = None,
        client: Optional[httpx.AsyncClient] = None,
    ) -> None:
        self.config = config or GroqConfig()
        self._client = client
        self._owns_client = client is None
        self._requests = 0
        self._failures = 0

    @property
    def enabled(self) -> bool:
        return self.config.is_active

    def _get_client(self) -> httpx.AsyncClient:
        if self._client is None:
            self._client = httpx.AsyncClient(timeout=self.config.analysis_timeout)
        return self._client

    async def aclose(self) -> None:
        if self._client is not None and self._owns_client:
            await self._client.aclose()
            self._client = None

    # ── Transport ────────────────────────────────────────────────────

    async def _chat(
        self,
        model: str,
        messages: list[dict[str, str]],
        timeout: float,
        max_tokens: Optional[int] = None,
    ) -> dict[str, Any]:
        """Send one JSON-mode chat completion and return the parsed object."""
        body = {
            "model": model,
            "temperature": self.config.temperature,
            "max_tokens": max_tokens or self.config.max_tokens,
            "messages": messages,
            "response_format": {"type": "json_object"},
        }
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.config.api_key}",
        }
        self._requests += 1
        try:
            response = await asyncio.wait_for(
                self._get_client().post(self.config.endpoint, json=body, headers=headers),
                timeout=timeout,
            )
        except asyncio.TimeoutError as e:
            raise AnalysisError(f"{model} timed out after {timeout}s") from e
        except httpx.HTTPError as e:
            raise AnalysisError(f"{model} request failed: {e}") from e

        if response.status_code != 200:
            raise AnalysisError(
                f"{model} returned HTTP {response.status_code}",
                {"body": response.text[:500]},
            )

        try:
            content = response.json()["choices"][0]["message"]["content"]
        except (ValueError, KeyError, IndexError, TypeError) as e:
            raise AnalysisError(f"{model} returned an unexpected envelope") from e
        if not content:
            raise AnalysisError(f"{model} returned empty content")

        try:
            parsed = json.loads(content)
        except json.JSONDecodeError as e:
            raise AnalysisError(f"{model} returned invalid JSON") from e
        if not isinstance(parsed, dict):
            raise AnalysisError(f"{model} returned a non-object JSON value")
        return parsed

    # ── Detailed analysis ────────────────────────────────────────────

    @log_performance()
    async def analyze(self, signal: Signal) -> Optional[LLMAnalysis]:
        """Structured launch verdict for one tweet, or None on any failure."""
        if not self.enabled:
            return None

        raw = signal.raw_payload
        urls = tweet_urls(signal)
        user_prompt = "\n".join([
            f'Tweet: "{signal.content}"',
            f"Author: @{signal.author}",
            f"Followers: {raw.get('author_followers', raw.get('authorFollowers', 'unknown'))}",
            f"Verified: {'yes' if raw.get('author_verified', raw.get('authorVerified')) else 'no'}",
            f"Language: {raw.get('lang') or raw.get('language') or 'unknown'}",
            f"URLs: {', '.join(urls) if urls else 'none'}",
            f"Media count: {len(signal.media_urls)}",
        ])
        try:
            parsed = await self._chat(
                self.config.model,
                [
                    {"role": "system", "content": ANALYSIS_SYSTEM_PROMPT},
                    {"role": "user", "content": user_prompt},
                ],
                timeout=self.config.analysis_timeout,
                max_tokens=min(800, self.config.max_tokens or 800),
            )
        except AnalysisError as e:
            self._failures += 1
            logger.warning("LLM analysis failed for %s: %s", signal.source_id, e)
            return None

        analysis = LLMAnalysis.from_response(parsed)
        logger.debug(
            "LLM analysis for %s: should_launch=%s score=%s",
            signal.source_id, analysis.should_launch, analysis.score_1to10,
        )
        return analysis

    # ── Suggestions ──────────────────────────────────────────────────

    async def suggest_launch_commands(self, signal: Signal) -> list[ParsedLaunchCommand]:
        """Ask each configured model for a ticker/name; dedupe by ticker."""
        if not self.enabled:
            return []

        max_suggestions = max(1, self.config.suggestion_count)
        models = self.config.models[:max_suggestions]
        results = await asyncio.gather(
            *(self._suggest(signal, model) for model in models)
        )

        seen: set[str] = set()
        commands: list[ParsedLaunchCommand] = []
        for command in results:
            if command is not None and command.ticker not in seen:
                seen.add(command.ticker)
                commands.append(command)
        return commands[:max_suggestions]

    async def _suggest(self, signal: Signal, model: str) -> Optional[ParsedLaunchCommand]:
        urls = tweet_urls(signal)
        user_prompt = "\n".join([
            f'Tweet: "{signal.content}"',
            f"URLs: {', '.join(urls)}" if urls else "URLs: none provided",
            f"Media: {', '.join(signal.media_urls)}" if signal.media_urls else "Media: none provided",
        ])
        try:
            parsed = await self._chat(
                model,
                [
                    {"role": "system", "content": SUGGESTION_SYSTEM_PROMPT},
                    {"role": "user", "content": user_prompt},
                ],
                timeout=self.config.suggestion_timeout,
            )
        except AnalysisError as e:
            self._failures += 1
            logger.warning("Launch suggestion from %s failed: %s", model, e)
            return None

        ticker = str(parsed.get("ticker") or "").strip().lstrip("$").upper()
        name = str(parsed.get("name") or "").strip()
        if not ticker or not name:
            return None
        if len(ticker) < MIN_SUGGESTED_TICKER_LENGTH or not is_valid_ticker(ticker):
            logger.debug("Discarding suggested ticker %r from %s", ticker, model)
            return None

        return ParsedLaunchCommand(
            ticker=ticker,
            name=name,
            source_id=signal.source_id,
            source_author=signal.author,
            source_text=signal.content,
            description=parsed.get("reason") or None,
            image_url=parsed.get("imageUrl") or parsed.get("avatarUrl") or None,
            website=parsed.get("website") or None,
            twitter_handle=parsed.get("twitter") or None,
        )

    def get_stats(self) -> dict[str, Any]:
        return {
            "enabled": self.enabled,
            "model": self.config.model,
            "secondary_model": self.config.secondary_model,
            "requests": self._requests,
            "failures": self._failures,
        }
