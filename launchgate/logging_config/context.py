"""Signal Context Management.

Binds the identity of the signal currently being processed (and the
launch candidate derived from it) to every log entry emitted while the
pipeline works on it. Uses contextvars so concurrent asyncio tasks keep
separate contexts.
"""

import time
from contextvars import ContextVar, Token
from dataclasses import dataclass, field
from typing import Any

_signal_id_var: ContextVar[str] = ContextVar("signal_id", default="")
_source_var: ContextVar[str] = ContextVar("source", default="")
_candidate_key_var: ContextVar[str] = ContextVar("candidate_key", default="")

# Output key -> variable, in the order keys appear in log lines
_BOUND_FIELDS = (
    ("signal_id", _signal_id_var),
    ("source", _source_var),
    ("candidate_key", _candidate_key_var),
)


def get_signal_id() -> str:
    return _signal_id_var.get()


def get_candidate_key() -> str:
    return _candidate_key_var.get()


def get_context_dict() -> dict[str, Any]:
    """Non-empty bound fields, ready to merge into a log entry."""
    return {name: var.get() for name, var in _BOUND_FIELDS if var.get()}


@dataclass
class SignalContext:
    """Context manager binding a signal identity to log entries.

    Example:
        with SignalContext(signal_id="123", source="twitter") as ctx:
            logger.info("classifying")           # includes signal_id, source
            ctx.bind_candidate("PEPE2-123")
            logger.info("policy passed")         # also includes candidate_key
    """

    signal_id: str = ""
    source: str = ""
    candidate_key: str = ""

    _opened: float = field(default_factory=time.perf_counter, repr=False)
    _resets: list[tuple[ContextVar, Token]] = field(default_factory=list, repr=False)

    def __enter__(self) -> "SignalContext":
        values = (self.signal_id, self.source, self.candidate_key)
        self._resets = [(var, var.set(value)) for (_, var), value in zip(_BOUND_FIELDS, values)]
        return self

    def __exit__(self, exc_type, exc_val, exc_tb) -> None:
        while self._resets:
            var, token = self._resets.pop()
            var.reset(token)

    @property
    def elapsed_ms(self) -> float:
        return (time.perf_counter() - self._opened) * 1000

    def bind_candidate(self, key: str) -> None:
        """Attach a candidate key to the rest of this context."""
        self.candidate_key = key
        _candidate_key_var.set(key)
