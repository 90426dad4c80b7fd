"""Pytest configuration and shared fixtures."""

import sys
from pathlib import Path

import pytest

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from launchgate.event_bus import EventBus  # noqa: E402
from launchgate.ingestion import Signal, SourceType  # noqa: E402

# 40-character base58 string shaped like a Solana mint address
CONTRACT_ADDRESS = "GASowWy7kQ3vXz9RbNc4TfHpJ2uDm8YeKs5LxV6a"


def make_signal(
    content: str,
    source: SourceType = SourceType.TWITTER,
    source_id: str = "1800000000000000001",
    author: str = "alice",
    channel: str = "@alice",
    **kwargs,
) -> Signal:
    return Signal(
        source=source,
        source_id=source_id,
        content=content,
        author=author,
        channel=channel,
        **kwargs,
    )


@pytest.fixture
def bus():
    return EventBus()


@pytest.fixture
def signal_factory():
    return make_signal
