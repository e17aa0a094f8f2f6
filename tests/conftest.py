from __future__ import annotations

import pytest

from mjtranslate.core.errors import ProviderUnavailable
from mjtranslate.core.providers import Provider


class FakeClient:
    """Records every call; replies from a queue of strings or exceptions."""

    def __init__(self, provider: Provider, replies=None, configured: bool = True):
        self.provider = provider
        self.replies = list(replies or [])
        self.configured = configured
        self.calls: list[dict] = []

    @property
    def is_configured(self) -> bool:
        return self.configured

    async def complete(self, system: str, user: str, max_tokens: int = 1000) -> str:
        self.calls.append({"system": system, "user": user, "max_tokens": max_tokens})
        if not self.replies:
            raise ProviderUnavailable(self.provider)
        reply = self.replies.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


@pytest.fixture
def fake_client():
    return FakeClient


@pytest.fixture
def no_sleep():
    delays: list[float] = []

    async def _sleep(seconds: float) -> None:
        delays.append(seconds)

    _sleep.delays = delays
    return _sleep
