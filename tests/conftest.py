"""
Pytest will auto-discover / import this file called 'conftest.py'.
This file defines fixtures/helpers required for testing multiple layers.
"""

import asyncio
from typing import Callable, Iterable

import pytest

from src.chat.feed import FeedMessage, RoomFeed
from src.core.config import Settings
from src.core.exceptions import NotificationError
from src.core.models import Player
from src.services.registry import SessionHandle, SessionRegistry

ROOM = "room-1"


class RecordingFeed(RoomFeed):
    """RoomFeed that tests can wait on."""

    async def wait_until(
        self, predicate: Callable[[], bool], timeout: float = 2.0
    ) -> None:
        async with asyncio.timeout(timeout):
            while not predicate():
                await asyncio.sleep(0.001)

    async def wait_for_text(
        self, room: str, text: str, timeout: float = 2.0
    ) -> FeedMessage:
        await self.wait_until(lambda: self.find(room, text) is not None, timeout)
        message = self.find(room, text)
        assert message is not None
        return message

    def find(self, room: str, text: str) -> FeedMessage | None:
        for message in self.messages(room):
            if text in message.content:
                return message
        return None


class BrokenNotifier:
    """Every delivery fails."""

    def __init__(self) -> None:
        self.attempts = 0

    async def post(self, room: str, content: str, reactions: Iterable[str] = ()) -> str:
        self.attempts += 1
        raise NotificationError("platform unreachable")

    async def edit(self, room: str, message_id: str, content: str) -> None:
        self.attempts += 1
        raise NotificationError("platform unreachable")


class CountingRegistry(SessionRegistry):
    """Keeps track of how often each room got released."""

    def __init__(self) -> None:
        super().__init__()
        self.releases: dict[str, int] = {}

    def release(self, room: str, handle: SessionHandle | None = None) -> None:
        self.releases[room] = self.releases.get(room, 0) + 1
        super().release(room, handle)


@pytest.fixture
def challenger() -> Player:
    return Player(id="100", name="alice")


@pytest.fixture
def opponent() -> Player:
    return Player(id="200", name="bob")


@pytest.fixture
def stranger() -> Player:
    return Player(id="300", name="carol")


@pytest.fixture
def feed() -> RecordingFeed:
    return RecordingFeed()


@pytest.fixture
def registry() -> CountingRegistry:
    return CountingRegistry()


@pytest.fixture
def fast_settings() -> Settings:
    """Timeouts long enough for scripted players, colors not randomised (challenger is red)."""
    return Settings(challenge_timeout=2.0, move_timeout=2.0, random_colors=False)


@pytest.fixture
def room() -> str:
    return ROOM


@pytest.fixture
def broken_notifier() -> BrokenNotifier:
    return BrokenNotifier()
