"""Tests for launch analysis: normalization, keyword fallback, Groq client."""

import json

import httpx
import pytest

from launchgate.analysis import (
    GroqAnalyzer,
    GroqConfig,
    KeywordAnalysis,
    LaunchAnalysis,
    LLMAnalysis,
    clamp_score,
    sanitize_ticker,
)
from launchgate.classifier import classify
from launchgate.ingestion import parse_launch_command
from conftest import CONTRACT_ADDRESS, make_signal

PEPE2_LAUNCH_TWEET = f"$LAUNCH PEPE2 Pepe Two. Fair launch live now, just launched! CA: {CONTRACT_ADDRESS}"


def completion(content) -> httpx.Response:
    if not isinstance(content, str):
        content = json.dumps(content)
    return httpx.Response(200, json={"choices": [{"message": {"content": content}}]})


def make_analyzer(handler, **config) -> GroqAnalyzer:
    client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
    return GroqAnalyzer(GroqConfig(api_key="gsk_test", **config), client=client)


# ═══════════════════════════════════════════════════════════════════════
# Normalization
# ═══════════════════════════════════════════════════════════════════════


class TestLLMAnalysis:
    """Tests for LLMAnalysis.from_response."""

    def test_canonical_fields(self):
        analysis = LLMAnalysis.from_response({
            "shouldLaunch": True,
            "confidence": 0.82,
            "score1to10": 8.5,
            "reason": "clear launch",
            "tokenName": "Pepe Two",
            "tokenTicker": "pepe2",
            "riskFlags": ["copycat"],
            "keywordsDetected": ["launch"],
        })
        assert analysis.should_launch is True
        assert analysis.score_1to10 == 9
        assert analysis.token_ticker == "PEPE2"
        assert analysis.risk_flags == ("copycat",)
        assert analysis.nsfw_or_sensitive is False
        assert isinstance(analysis, LaunchAnalysis)

    def test_aliases_and_string_booleans(self):
        analysis = LLMAnalysis.from_response({
            "isLaunch": "true",
            "confidence_score": 0.4,
            "name": "Moon",
            "ticker": "$mo-on!",
            "risks": ["spam"],
            "nsfw": "TRUE",
        })
        assert analysis.should_launch is False
        assert analysis.score_1to10 == 4
        assert analysis.token_name == "Moon"
        assert analysis.token_ticker == "MOON"
        assert analysis.risk_flags == ("spam",)
        assert analysis.nsfw_or_sensitive is True

    def test_is_launch_counts_at_half_confidence(self):
        assert LLMAnalysis.from_response({"isLaunch": True, "confidence": 0.5}).should_launch

    def test_defaults_for_garbage(self):
        analysis = LLMAnalysis.from_response({"confidence": "abc", "riskFlags": "spam"})
        assert analysis.confidence == 0.0
        assert analysis.score_1to10 == 1
        assert analysis.reason == "No reason provided"
        assert analysis.risk_flags == ()
        assert analysis.theme == "general"

    def test_confidence_clamped(self):
        assert LLMAnalysis.from_response({"confidence": 7}).confidence == 1.0

    def test_to_dict(self):
        d = LLMAnalysis.from_response({"shouldLaunch": True, "confidence": 0.9}).to_dict()
        assert d["kind"] == "llm"
        assert d["score_1to10"] == 9


class TestHelpers:

    @pytest.mark.parametrize("value,expected", [
        (0, 1), (0.4, 1), (4.5, 5), (6.49, 6), (9.5, 10), (42, 10), (-3, 1),
    ])
    def test_clamp_score(self, value, expected):
        assert clamp_score(value) == expected

    def test_sanitize_ticker(self):
        assert sanitize_ticker("$abc-def-ghi") == "ABCDEFGH"
        assert sanitize_ticker(None) == ""


class TestKeywordAnalysis:
    """Tests for the classifier-derived analysis."""

    def test_launch_alert_with_command(self):
        signal = make_signal(PEPE2_LAUNCH_TWEET)
        classified = classify(signal)
        analysis = KeywordAnalysis.from_classified(classified, parse_launch_command(signal))
        assert analysis.should_launch is True
        assert analysis.score_1to10 == 10
        assert analysis.token_ticker == "PEPE2"
        assert analysis.token_name == "Pepe Two"
        assert analysis.risk_flags == ()
        assert analysis.category == "launch_alert"
        assert isinstance(analysis, LaunchAnalysis)

    def test_missing_command_is_not_actionable(self):
        analysis = KeywordAnalysis.from_classified(classify(make_signal("$PEPE")))
        assert analysis.should_launch is False
        assert analysis.reason == "no launch command"
        assert "no_contract" in analysis.risk_flags

    def test_spam_flag(self):
        signal = make_signal("launch $SCAM free airdrop dm me now")
        analysis = KeywordAnalysis.from_classified(classify(signal), parse_launch_command(signal))
        assert "spam" in analysis.risk_flags

    def test_non_actionable_category(self):
        classified = classify(make_signal("good vibes only"))
        command = parse_launch_command(make_signal("launch $VIBE"))
        analysis = KeywordAnalysis.from_classified(classified, command)
        assert analysis.should_launch is False
        assert analysis.reason == "category other is not actionable"


# ═══════════════════════════════════════════════════════════════════════
# Groq client
# ═══════════════════════════════════════════════════════════════════════


class TestGroqAnalyzer:
    """Tests for GroqAnalyzer against a mock transport."""

    @pytest.mark.asyncio
    async def test_disabled_without_key(self):
        calls = []

        def handler(request):
            calls.append(request)
            return completion({})

        client = httpx.AsyncClient(transport=httpx.MockTransport(handler))
        analyzer = GroqAnalyzer(GroqConfig(api_key=""), client=client)
        assert analyzer.enabled is False
        assert await analyzer.analyze(make_signal(PEPE2_LAUNCH_TWEET)) is None
        assert await analyzer.suggest_launch_commands(make_signal("hello")) == []
        assert calls == []
        await client.aclose()

    @pytest.mark.asyncio
    async def test_analyze_success(self):
        seen = {}

        def handler(request):
            seen["auth"] = request.headers["authorization"]
            seen["body"] = json.loads(request.content)
            return completion({"shouldLaunch": True, "confidence": 0.9, "score1to10": 9,
                               "tokenName": "Pepe Two", "tokenTicker": "PEPE2"})

        analyzer = make_analyzer(handler)
        analysis = await analyzer.analyze(make_signal(PEPE2_LAUNCH_TWEET))
        assert analysis.should_launch is True
        assert analysis.score_1to10 == 9
        assert seen["auth"] == "Bearer gsk_test"
        assert seen["body"]["response_format"] == {"type": "json_object"}
        assert seen["body"]["model"] == "llama-3.3-70b-versatile"
        assert "Tweet:" in seen["body"]["messages"][1]["content"]
        assert analyzer.get_stats()["requests"] == 1

    @pytest.mark.asyncio
    async def test_http_error_returns_none(self):
        analyzer = make_analyzer(lambda request: httpx.Response(500, text="boom"))
        assert await analyzer.analyze(make_signal(PEPE2_LAUNCH_TWEET)) is None
        assert analyzer.get_stats()["failures"] == 1

    @pytest.mark.asyncio
    async def test_invalid_json_returns_none(self):
        analyzer = make_analyzer(lambda request: completion("not json {"))
        assert await analyzer.analyze(make_signal(PEPE2_LAUNCH_TWEET)) is None

    @pytest.mark.asyncio
    async def test_non_object_json_returns_none(self):
        analyzer = make_analyzer(lambda request: completion("[1, 2]"))
        assert await analyzer.analyze(make_signal(PEPE2_LAUNCH_TWEET)) is None

    @pytest.mark.asyncio
    async def test_bad_envelope_returns_none(self):
        analyzer = make_analyzer(lambda request: httpx.Response(200, json={"choices": []}))
        assert await analyzer.analyze(make_signal(PEPE2_LAUNCH_TWEET)) is None

    @pytest.mark.asyncio
    async def test_transport_error_returns_none(self):
        def handler(request):
            raise httpx.ConnectError("refused", request=request)

        analyzer = make_analyzer(handler)
        assert await analyzer.analyze(make_signal(PEPE2_LAUNCH_TWEET)) is None

    @pytest.mark.asyncio
    async def test_suggestions_deduplicated_by_ticker(self):
        def handler(request):
            body = json.loads(request.content)
            return completion({"ticker": "$moon", "name": f"Moon via {body['model']}"})

        analyzer = make_analyzer(handler, secondary_model="other-model")
        commands = await analyzer.suggest_launch_commands(make_signal("to the moon"))
        assert [c.ticker for c in commands] == ["MOON"]
        assert commands[0].source_id == "1800000000000000001"

    @pytest.mark.asyncio
    async def test_suggestions_from_two_models(self):
        tickers = {"llama-3.3-70b-versatile": "ALPHA", "other-model": "BETA"}

        def handler(request):
            body = json.loads(request.content)
            return completion({"ticker": tickers[body["model"]], "name": "Token"})

        analyzer = make_analyzer(handler, secondary_model="other-model")
        commands = await analyzer.suggest_launch_commands(make_signal("new meta"))
        assert sorted(c.ticker for c in commands) == ["ALPHA", "BETA"]

    @pytest.mark.asyncio
    async def test_invalid_suggestions_discarded(self):
        answers = iter([{"ticker": "X", "name": "Too short"}, {"ticker": "OK", "name": ""}])

        def handler(request):
            return completion(next(answers))

        analyzer = make_analyzer(handler, secondary_model="other-model")
        assert await analyzer.suggest_launch_commands(make_signal("hm")) == []

    @pytest.mark.asyncio
    async def test_empty_object_means_no_suggestion(self):
        analyzer = make_analyzer(lambda request: completion({}))
        assert await analyzer.suggest_launch_commands(make_signal("gm")) == []
