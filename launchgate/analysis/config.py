"""Analyzer configuration."""

from dataclasses import dataclass
from typing import Optional

GROQ_CHAT_COMPLETIONS_URL = "https://api.groq.com/openai/v1/chat/completions"
DEFAULT_MODEL = "llama-3.3-70b-versatile"


@dataclass
class GroqConfig:
    """Configuration for the Groq chat-completions analyzer."""
    api_key: str = ""
    enabled: bool = True
    model: str = DEFAULT_MODEL
    secondary_model: Optional[str] = None
    endpoint: str = GROQ_CHAT_COMPLETIONS_URL
    temperature: float = 0.25
    max_tokens: int = 800
    suggestion_count: int = 2
    analysis_timeout: float = 15.0
    suggestion_timeout: float = 12.0

    @property
    def is_active(self) -> bool:
        """True when requests would actually be sent."""
        return self.enabled and bool(self.api_key)

    @property
    def models(self) -> list[str]:
        models = [self.model] if self.model else []
        if self.secondary_model and self.secondary_model != self.model:
            models.append(self.secondary_model)
        return models
