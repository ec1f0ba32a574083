"""Shared test fixtures for stashit."""

import pytest

pytest.register_assert_rewrite("stashit.testing.adapter_cases")

from stashit.adapters.memory import MemoryAdapter
from stashit.core.config import StashItConfig
from stashit.core.registry import HookRegistry
from stashit.core.stash import StashIt


class TrackingAdapter(MemoryAdapter):
    """Memory adapter that records lifecycle calls."""

    def __init__(self) -> None:
        super().__init__()
        self.calls: list[str] = []

    async def connect(self) -> None:
        self.calls.append("connect")

    async def disconnect(self) -> None:
        self.calls.append("disconnect")


@pytest.fixture
def config():
    """Create a default config without loading from disk."""
    return StashItConfig()


@pytest.fixture
def registry():
    """Create a fresh hook registry."""
    return HookRegistry()


@pytest.fixture
def adapter():
    """Create an in-memory adapter that records connect/disconnect."""
    return TrackingAdapter()


@pytest.fixture
def stash(adapter):
    """Create a StashIt over the tracking adapter, with no plugins."""
    return StashIt(adapter)
