"""Tests for the alpha signal scorer and the tweet classifier."""

import pytest

from launchgate.classifier import (
    ClassifierConfig,
    SignalCategory,
    SignalPriority,
    TweetClassifier,
    assign_priority,
    classify,
    extract_contract_addresses,
    extract_tickers,
    is_filtered,
)
from launchgate.event_bus import EventType
from launchgate.ingestion import SourceType
from conftest import CONTRACT_ADDRESS, make_signal

LAUNCH_WITH_CONTRACT = f"$LAUNCH MOON now!! check r/moon and {CONTRACT_ADDRESS}"
AIRDROP_SPAM = "FREE AIRDROP dm me to claim, send 1 SOL now"


# ═══════════════════════════════════════════════════════════════════════
# Scorer
# ═══════════════════════════════════════════════════════════════════════


class TestClassify:
    """Tests for classify()."""

    def test_launch_alert_with_contract(self):
        classified = classify(make_signal(LAUNCH_WITH_CONTRACT, source=SourceType.DISCORD, channel="Random/#general"))
        assert classified.category == SignalCategory.LAUNCH_ALERT
        assert classified.confidence >= 0.3
        assert classified.confidence == pytest.approx(0.6)
        assert classified.risk == 0.0
        assert classified.priority.rank >= SignalPriority.MEDIUM.rank
        assert classified.tickers == ("LAUNCH",)
        assert classified.contract_addresses == (CONTRACT_ADDRESS,)

    def test_spam_is_filtered(self):
        classified = classify(make_signal(AIRDROP_SPAM))
        assert classified.risk >= 0.5
        assert classified.risk == pytest.approx(0.9)
        assert classified.scores.risk_patterns_matched == 2
        assert set(classified.scores.spam_keywords) == {"free", "airdrop", "dm me"}
        assert is_filtered(classified)

    def test_scores_are_bounded(self):
        text = "$AAA $BBB $CCC $DDD launch mint gem alpha 100x moonshot presale " + CONTRACT_ADDRESS
        classified = classify(make_signal(text))
        assert classified.confidence == 1.0
        assert classified.scores.mention == pytest.approx(0.6)

        spam = "free giveaway airdrop claim now dm me send sol guaranteed hurry last chance t.me/scam"
        assert classify(make_signal(spam)).risk == 1.0

    def test_empty_content(self):
        classified = classify(make_signal(""))
        assert classified.category == SignalCategory.OTHER
        assert classified.priority == SignalPriority.LOW
        assert classified.confidence == 0.0

    def test_trusted_channel(self):
        config = ClassifierConfig(trusted_channels=["alpha calls"])
        classified = classify(make_signal("$PEPE dm me", channel="Alpha Calls/#vip"), config)
        assert classified.scores.trusted_channel is True
        assert classified.confidence == pytest.approx(0.4)
        # dm me: 0.2 keyword + 0.15 pattern, minus 0.3 trusted relief
        assert classified.risk == pytest.approx(0.05)

    def test_trusted_author(self):
        config = ClassifierConfig(trusted_users=["whale"])
        classified = classify(make_signal("$PEPE", author="WhaleWatcher"), config)
        assert classified.scores.trusted_author is True
        assert classified.confidence == pytest.approx(0.35)

    def test_untrusted_gets_no_bonus(self):
        config = ClassifierConfig(trusted_channels=["alpha"], trusted_users=["whale"])
        classified = classify(make_signal("$PEPE", channel="@bob", author="bob"), config)
        assert classified.confidence == pytest.approx(0.2)

    @pytest.mark.parametrize("text,category", [
        ("$BONK is cooking", SignalCategory.TOKEN_MENTION),
        ("stealth launch soon", SignalCategory.TOKEN_MENTION),
        ("whale alert: large transfer spotted", SignalCategory.WHALE_MOVEMENT),
        ("Big partnership announced today", SignalCategory.NEWS),
        ("feeling bullish on sol", SignalCategory.SENTIMENT),
        ("ta says resistance at 1.2", SignalCategory.TECHNICAL),
        ("stale data everywhere", SignalCategory.OTHER),
        ("what a day", SignalCategory.OTHER),
    ])
    def test_category_precedence(self, text, category):
        assert classify(make_signal(text)).category == category

    def test_contract_without_launch_keywords_is_mention(self):
        classified = classify(make_signal(f"ca {CONTRACT_ADDRESS}"))
        # 0.25 from the address alone: mention, not launch_alert
        assert classified.category == SignalCategory.TOKEN_MENTION

    def test_to_dict(self):
        d = classify(make_signal(LAUNCH_WITH_CONTRACT)).to_dict()
        assert d["category"] == "launch_alert"
        assert d["source"] == "twitter"
        assert d["contract_addresses"] == [CONTRACT_ADDRESS]
        assert "launch" in d["scores"]


class TestAssignPriority:
    """Tests for priority tiers."""

    def test_urgent_requires_launch_alert(self):
        assert assign_priority(SignalCategory.LAUNCH_ALERT, 0.8, 0.1) == SignalPriority.URGENT
        assert assign_priority(SignalCategory.TOKEN_MENTION, 0.8, 0.1) == SignalPriority.HIGH

    def test_risk_caps_priority(self):
        assert assign_priority(SignalCategory.LAUNCH_ALERT, 0.9, 0.35) == SignalPriority.HIGH
        assert assign_priority(SignalCategory.LAUNCH_ALERT, 0.9, 0.5) == SignalPriority.MEDIUM

    def test_low(self):
        assert assign_priority(SignalCategory.NEWS, 0.39, 0.0) == SignalPriority.LOW

    @pytest.mark.parametrize("category", list(SignalCategory))
    @pytest.mark.parametrize("risk", [0.0, 0.25, 0.35, 0.6, 1.0])
    def test_monotone_in_confidence(self, category, risk):
        ranks = [
            assign_priority(category, c / 20, risk).rank for c in range(21)
        ]
        assert ranks == sorted(ranks)


class TestExtraction:
    """Tests for ticker and address extraction."""

    def test_tickers_deduplicated_in_order(self):
        assert extract_tickers("$PEPE and $PEPE and $WIF") == ("PEPE", "WIF")

    def test_lowercase_cashtag_ignored(self):
        assert extract_tickers("$pepe $X $TOOLONGTICKERNAME") == ()

    def test_contract_addresses(self):
        assert extract_contract_addresses(f"ca: {CONTRACT_ADDRESS} {CONTRACT_ADDRESS}") == (CONTRACT_ADDRESS,)

    def test_non_base58_rejected(self):
        assert extract_contract_addresses("0" * 40) == ()


class TestIsFiltered:
    """Tests for the quality filter."""

    def test_thresholds(self):
        classified = classify(make_signal("$PEPE"))
        assert is_filtered(classified)
        assert not is_filtered(classified, ClassifierConfig(min_confidence_threshold=0.2))


# ═══════════════════════════════════════════════════════════════════════
# Tweet classifier
# ═══════════════════════════════════════════════════════════════════════


class TestTweetClassifier:
    """Tests for the stateful twitter-path classifier."""

    def setup_method(self):
        from launchgate.event_bus import EventBus

        self.bus = EventBus()
        self.classifier = TweetClassifier(self.bus)

    def test_emits_tweet_classified(self):
        self.classifier.classify(make_signal(LAUNCH_WITH_CONTRACT))
        events = self.bus.get_events_by_type(EventType.TWEET_CLASSIFIED)
        assert len(events) == 1
        assert events[0].data.classification["category"] == "launch_alert"

    def test_spam_counted_and_blocked(self):
        classified = self.classifier.classify(make_signal(AIRDROP_SPAM))
        assert len(self.bus.get_events_by_type(EventType.SPAM_DETECTED)) == 1
        assert self.classifier.passes_gate(classified) is False
        warnings = self.bus.get_events_by_type(EventType.ALERT_WARNING)
        assert warnings[0].data.title == "High Risk Tweet Blocked"
        stats = self.classifier.get_stats()
        assert stats["spam"] == 1
        assert stats["filtered"] == 1
        assert stats["spam_rate"] == 1.0

    def test_other_category_fails_gate(self):
        classified = self.classifier.classify(make_signal("good morning"))
        assert self.classifier.passes_gate(classified) is False
        assert self.classifier.rejection_reason(classified) == "no actionable category"

    def test_low_confidence_fails_gate(self):
        classified = self.classifier.classify(make_signal("launch $PEPE"))
        assert classified.category == SignalCategory.TOKEN_MENTION
        assert self.classifier.passes_gate(classified) is False
        assert self.classifier.rejection_reason(classified) == "confidence 0.35 below 0.50"
        assert self.classifier.get_stats()["filtered"] == 1

    def test_confidence_threshold_is_configurable(self):
        self.classifier.update_config(min_confidence_threshold=0.3)
        classified = self.classifier.classify(make_signal("launch $PEPE"))
        assert self.classifier.passes_gate(classified) is True

    def test_launch_passes_gate(self):
        classified = self.classifier.classify(make_signal(LAUNCH_WITH_CONTRACT))
        assert self.classifier.passes_gate(classified) is True
        assert self.classifier.rejection_reason(classified) is None
        assert self.classifier.get_stats()["launches"] == 1

    def test_trusted_users(self):
        self.classifier.add_trusted_user("@DevGuy")
        self.classifier.add_trusted_user("devguy")
        assert self.classifier.config.trusted_users == ["devguy"]
        classified = self.classifier.classify(make_signal("$PEPE", author="devguy"))
        assert classified.scores.trusted_author is True
        assert self.classifier.remove_trusted_user("DEVGUY") is True
        assert self.classifier.remove_trusted_user("devguy") is False

    def test_update_config(self):
        self.classifier.update_config(max_risk_threshold=0.95)
        classified = self.classifier.classify(make_signal(AIRDROP_SPAM))
        assert classified.risk < 0.95
        assert self.bus.get_events_by_type(EventType.SPAM_DETECTED) == []
