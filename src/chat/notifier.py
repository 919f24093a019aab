"""
Protocol for the notification sink (the chat platform, or anything standing in for it),
and the Announcer that sessions talk to.
"""

import logging
from typing import Iterable, Protocol

from src.core.models import RoomId

logger = logging.getLogger(__name__)

MessageId = str


class Notifier(Protocol):
    """Delivery of messages into rooms."""

    async def post(
        self, room: RoomId, content: str, reactions: Iterable[str] = ()
    ) -> MessageId:
        """Send a new message, with the given reactions attached, and return its id."""
        ...

    async def edit(self, room: RoomId, message_id: MessageId, content: str) -> None:
        """Replace the content of an earlier message."""
        ...


class Announcer:
    """
    One message in one room that gets posted once and edited afterwards.

    ---
    Delivery failures never leave this class: they are logged and the session carries on.
    If the first post failed, the next announcement posts a new message instead of editing.
    """

    def __init__(
        self, notifier: Notifier, room: RoomId, reactions: Iterable[str] = ()
    ) -> None:
        self.notifier = notifier
        self.room = room
        self.reactions = tuple(reactions)
        self.message_id: MessageId | None = None

    async def announce(self, content: str) -> bool:
        """Show `content` in the room. Returns False if it could not be delivered."""
        try:
            if self.message_id is None:
                self.message_id = await self.notifier.post(
                    self.room, content, self.reactions
                )
            else:
                await self.notifier.edit(self.room, self.message_id, content)
        except Exception:
            logger.warning(
                "Could not deliver message to room %s", self.room, exc_info=True
            )
            return False
        return True


async def notify(notifier: Notifier, room: RoomId, content: str) -> bool:
    """Fire-and-forget single message."""
    return await Announcer(notifier, room).announce(content)
