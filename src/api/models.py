"""Requests and Response models"""

from typing import Optional

from pydantic import BaseModel, field_validator

from src.core.exceptions import InvalidRequestError
from src.core.models import Player


class PlayerPayload(BaseModel):
    id: str
    name: str = ""
    bot: bool = False

    @field_validator("id")
    @classmethod
    def validate_id(cls, value: str) -> str:
        if not value.strip():
            raise InvalidRequestError("Player id must not be empty.")
        return value.strip()

    def to_player(self) -> Player:
        return Player(id=self.id, name=self.name, bot=self.bot)


# --- REQUEST MODELS ---
class MessageRequest(BaseModel):
    """A chat message posted in a room."""

    author: PlayerPayload
    content: str
    mentions: list[PlayerPayload] = []


class ReactionRequest(BaseModel):
    """A reaction added by a user to a message in a room."""

    player: PlayerPayload
    emoji: str

    @field_validator("emoji")
    @classmethod
    def validate_emoji(cls, value: str) -> str:
        if not value:
            raise InvalidRequestError("Reaction emoji must not be empty.")
        return value


# --- RESPONSE MODELS ---
class CommandResponse(BaseModel):
    room: str
    status: str
    detail: Optional[str] = None
    reaction: Optional[str] = None


class SessionResponse(BaseModel):
    room: str
    active: bool


class FeedMessageResponse(BaseModel):
    id: str
    content: str
    reactions: list[str]
    edits: int


class FeedResponse(BaseModel):
    room: str
    messages: list[FeedMessageResponse]
