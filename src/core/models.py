"""
Boundary layer data model(s).

These objects are passed between the API layer, the Service, and the chat adapter.
None of them carry mutable game state: a running game's state is owned by its session task.
"""

from dataclasses import dataclass

# Type alias to make signatures easier to read
RoomId = str


@dataclass(frozen=True)
class Player:
    """Opaque identity of a chat user."""

    id: str
    name: str = ""
    bot: bool = False

    @property
    def mention(self) -> str:
        return f"<@{self.id}>"


@dataclass(frozen=True)
class Signal:
    """A reaction added by a player to a message in a room."""

    player: Player
    emoji: str


@dataclass(frozen=True)
class ChatMessage:
    """Inbound chat message, as delivered by the platform."""

    room: RoomId
    author: Player
    content: str
    mentions: tuple[Player, ...] = ()


@dataclass(frozen=True)
class Challenge:
    """The only command the core understands: `challenger` invites `opponent` to a game in `room`."""

    room: RoomId
    challenger: Player
    opponent: Player


# Every command the bot knows. Only one for now.
Command = Challenge
