"""Classifier / Scorer.

Keyword and pattern scoring that turns a normalized Signal into a
ClassifiedSignal with bounded confidence and risk, a category, and a
priority.

Example:
    from launchgate.classifier import ClassifierConfig, classify, is_filtered

    classified = classify(signal, ClassifierConfig(trusted_channels=["alpha"]))
    if not is_filtered(classified):
        forward(classified)
"""

from launchgate.classifier.config import (
    SignalCategory,
    SignalPriority,
    ClassifierConfig,
    DEFAULT_LAUNCH_KEYWORDS,
    DEFAULT_SPAM_KEYWORDS,
    DEFAULT_RISK_PATTERNS,
    DEFAULT_CATEGORY_KEYWORDS,
)
from launchgate.classifier.models import ClassifiedSignal, ScoreBreakdown
from launchgate.classifier.scorer import (
    classify,
    assign_priority,
    is_filtered,
    extract_tickers,
    extract_contract_addresses,
)
from launchgate.classifier.tweet_classifier import TweetClassifier

__all__ = [
    # Config
    "SignalCategory",
    "SignalPriority",
    "ClassifierConfig",
    "DEFAULT_LAUNCH_KEYWORDS",
    "DEFAULT_SPAM_KEYWORDS",
    "DEFAULT_RISK_PATTERNS",
    "DEFAULT_CATEGORY_KEYWORDS",
    # Models
    "ClassifiedSignal",
    "ScoreBreakdown",
    # Scorer
    "classify",
    "assign_priority",
    "is_filtered",
    "extract_tickers",
    "extract_contract_addresses",
    # Tweet classifier
    "TweetClassifier",
]
