"""Launch analysis.

One ``LaunchAnalysis`` interface with two producers: the Groq LLM
analyzer and the keyword classifier fallback.

Example:
    from launchgate.analysis import GroqAnalyzer, GroqConfig, KeywordAnalysis

    analyzer = GroqAnalyzer(GroqConfig(api_key=key))
    analysis = await analyzer.analyze(signal) or KeywordAnalysis.from_classified(classified, command)
"""

from launchgate.analysis.config import GroqConfig, DEFAULT_MODEL, GROQ_CHAT_COMPLETIONS_URL
from launchgate.analysis.models import (
    LaunchAnalysis,
    LLMAnalysis,
    KeywordAnalysis,
    clamp_score,
    sanitize_ticker,
)
from launchgate.analysis.groq_client import GroqAnalyzer

__all__ = [
    # Config
    "GroqConfig",
    "DEFAULT_MODEL",
    "GROQ_CHAT_COMPLETIONS_URL",
    # Models
    "LaunchAnalysis",
    "LLMAnalysis",
    "KeywordAnalysis",
    "clamp_score",
    "sanitize_ticker",
    # Client
    "GroqAnalyzer",
]
