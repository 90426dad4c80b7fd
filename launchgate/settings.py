"""Centralized settings for LaunchGate.

Uses pydantic-settings to load from environment variables (prefixed
LAUNCHGATE_) or a ``.env`` file. List-valued settings are comma-separated
strings. Converters build the plain config dataclasses each component
takes.
"""

from functools import lru_cache
from typing import Optional

from pydantic_settings import BaseSettings

from launchgate.alerting.config import AlertConfig
from launchgate.analysis.config import DEFAULT_MODEL, GroqConfig
from launchgate.classifier.config import ClassifierConfig
from launchgate.event_bus.config import EventBusConfig
from launchgate.launch.config import DEFAULT_BLOCK_RISK_FLAGS, LaunchPolicy
from launchgate.logging_config.config import LogFormat, LoggingConfig, LogLevel


def _split(value: str) -> list[str]:
    return [item.strip() for item in value.split(",") if item.strip()]


class Settings(BaseSettings):
    """LaunchGate settings loaded from environment variables."""

    # --- Event bus ---
    event_history_size: int = 1000

    # --- Classifier ---
    min_confidence_threshold: float = 0.5
    max_risk_threshold: float = 0.7
    trusted_channels: str = ""
    trusted_users: str = ""

    # --- Launch policy ---
    auto_launch: bool = True
    policy_min_score: int = 8
    policy_min_confidence: float = 0.65
    policy_block_risk_flags: str = ",".join(DEFAULT_BLOCK_RISK_FLAGS)
    policy_allow_nsfw: bool = False

    # --- Groq analyzer ---
    groq_api_key: str = ""
    groq_enabled: bool = True
    groq_model: str = DEFAULT_MODEL
    groq_secondary_model: Optional[str] = None
    groq_temperature: float = 0.25
    groq_max_tokens: int = 800
    groq_suggestion_count: int = 2
    analysis_timeout: float = 15.0
    suggestion_timeout: float = 12.0

    # --- Alerting ---
    alerts_enabled: bool = True
    alerts_console: bool = True
    alert_webhook_url: Optional[str] = None
    discord_webhook_url: Optional[str] = None
    telegram_bot_token: Optional[str] = None
    telegram_chat_id: Optional[str] = None

    # --- Persistence (optional audit sink) ---
    database_url: Optional[str] = None

    # --- Logging ---
    log_level: LogLevel = LogLevel.INFO
    log_format: LogFormat = LogFormat.JSON
    slow_threshold_ms: float = 5000.0

    model_config = {
        "env_prefix": "LAUNCHGATE_",
        "env_file": ".env",
        "extra": "ignore",
    }

    def event_bus_config(self) -> EventBusConfig:
        return EventBusConfig(max_history=self.event_history_size)

    def classifier_config(self) -> ClassifierConfig:
        return ClassifierConfig(
            min_confidence_threshold=self.min_confidence_threshold,
            max_risk_threshold=self.max_risk_threshold,
            trusted_channels=_split(self.trusted_channels),
            trusted_users=[u.lower().lstrip("@") for u in _split(self.trusted_users)],
        )

    def launch_policy(self) -> LaunchPolicy:
        return LaunchPolicy(
            min_score=self.policy_min_score,
            min_confidence=self.policy_min_confidence,
            block_risk_flags=_split(self.policy_block_risk_flags),
            allow_nsfw=self.policy_allow_nsfw,
        )

    def groq_config(self) -> GroqConfig:
        return GroqConfig(
            api_key=self.groq_api_key,
            enabled=self.groq_enabled,
            model=self.groq_model,
            secondary_model=self.groq_secondary_model,
            temperature=self.groq_temperature,
            max_tokens=self.groq_max_tokens,
            suggestion_count=self.groq_suggestion_count,
            analysis_timeout=self.analysis_timeout,
            suggestion_timeout=self.suggestion_timeout,
        )

    def alert_config(self) -> AlertConfig:
        return AlertConfig(
            enabled=self.alerts_enabled,
            console_output=self.alerts_console,
            webhook_url=self.alert_webhook_url,
            discord_webhook=self.discord_webhook_url,
            telegram_bot_token=self.telegram_bot_token,
            telegram_chat_id=self.telegram_chat_id,
        )

    def logging_config(self) -> LoggingConfig:
        return LoggingConfig(
            level=self.log_level,
            format=self.log_format,
            slow_threshold_ms=self.slow_threshold_ms,
        )


@lru_cache
def get_settings() -> Settings:
    """Get cached settings singleton."""
    return Settings()
