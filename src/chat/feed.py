"""In-memory implementation of the Notifier: every room keeps its list of messages, which clients poll."""

from dataclasses import dataclass, field
from itertools import count
from typing import Iterable

from src.chat.notifier import MessageId
from src.core.exceptions import NotificationError
from src.core.models import RoomId


@dataclass
class FeedMessage:
    id: MessageId
    room: RoomId
    content: str
    reactions: list[str] = field(default_factory=list)
    edits: int = 0


class RoomFeed:
    """Messages are stored per room, oldest first."""

    def __init__(self) -> None:
        self._rooms: dict[RoomId, list[FeedMessage]] = {}
        self._ids = count(1)

    async def post(
        self, room: RoomId, content: str, reactions: Iterable[str] = ()
    ) -> MessageId:
        message = FeedMessage(
            id=str(next(self._ids)),
            room=room,
            content=content,
            reactions=list(reactions),
        )
        self._rooms.setdefault(room, []).append(message)
        return message.id

    async def edit(self, room: RoomId, message_id: MessageId, content: str) -> None:
        message = self.get(room, message_id)
        if message is None:
            raise NotificationError(f"No message {message_id} in room {room}.")
        message.content = content
        message.edits += 1

    def get(self, room: RoomId, message_id: MessageId) -> FeedMessage | None:
        for message in self._rooms.get(room, []):
            if message.id == message_id:
                return message
        return None

    def messages(self, room: RoomId) -> list[FeedMessage]:
        return list(self._rooms.get(room, []))
