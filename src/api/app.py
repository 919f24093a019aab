"""HTTP surface through which the chat platform delivers messages, reactions, and moderator requests."""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import Depends, FastAPI, HTTPException, Request, Response, status

from src.api.commands import parse_command
from src.api.models import (
    CommandResponse,
    FeedMessageResponse,
    FeedResponse,
    MessageRequest,
    ReactionRequest,
    SessionResponse,
)
from src.chat import messages
from src.chat.feed import RoomFeed
from src.chat.notifier import notify
from src.core.config import Settings, get_settings
from src.core.exceptions import (
    BotAuthorError,
    InvalidCommandError,
    InvalidTargetUserError,
    NoPrefixError,
)
from src.core.models import ChatMessage
from src.services.registry import SessionRegistry
from src.services.session_service import SessionService

logger = logging.getLogger(__name__)


def get_service(request: Request) -> SessionService:
    return request.app.state.service


def get_feed(request: Request) -> RoomFeed:
    return request.app.state.feed


def create_app(settings: Settings | None = None) -> FastAPI:
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        feed = RoomFeed()
        app.state.feed = feed
        app.state.service = SessionService(SessionRegistry(), feed, settings)
        yield
        logger.info("Shutting down, ending all sessions")
        await app.state.service.shutdown()

    app = FastAPI(title="Connect Four", lifespan=lifespan)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.post("/rooms/{room}/messages", response_model=CommandResponse)
    async def post_message(
        room: str,
        body: MessageRequest,
        response: Response,
        service: SessionService = Depends(get_service),
    ) -> CommandResponse:
        """A chat message was written in a room. Only commands with the bot's prefix do anything."""
        message = ChatMessage(
            room=room,
            author=body.author.to_player(),
            content=body.content,
            mentions=tuple(p.to_player() for p in body.mentions),
        )
        try:
            command = parse_command(message, settings.command_prefix)
        except (NoPrefixError, BotAuthorError):
            return CommandResponse(room=room, status="ignored")
        except InvalidTargetUserError:
            await notify(service.notifier, room, messages.invalid_target())
            response.status_code = status.HTTP_422_UNPROCESSABLE_ENTITY
            return CommandResponse(
                room=room, status="rejected", detail=messages.invalid_target()
            )
        except InvalidCommandError as e:
            response.status_code = status.HTTP_400_BAD_REQUEST
            return CommandResponse(
                room=room,
                status="unknown command",
                detail=e.name,
                reaction=messages.UNKNOWN_COMMAND_REACTION,
            )

        task = await service.challenge(command)
        if task is None:
            response.status_code = status.HTTP_409_CONFLICT
            return CommandResponse(
                room=room,
                status="rejected",
                detail=messages.room_occupied(command.challenger),
            )
        response.status_code = status.HTTP_202_ACCEPTED
        return CommandResponse(room=room, status="challenge issued")

    @app.post("/rooms/{room}/reactions", status_code=status.HTTP_202_ACCEPTED)
    async def post_reaction(
        room: str,
        body: ReactionRequest,
        service: SessionService = Depends(get_service),
    ) -> SessionResponse:
        if not service.react(room, body.player.to_player(), body.emoji):
            raise HTTPException(status_code=404, detail=f"No session in room {room}.")
        return SessionResponse(room=room, active=True)

    @app.get("/rooms/{room}/session")
    async def get_session(
        room: str, service: SessionService = Depends(get_service)
    ) -> SessionResponse:
        return SessionResponse(room=room, active=service.is_active(room))

    @app.delete("/rooms/{room}/session", status_code=status.HTTP_202_ACCEPTED)
    async def end_session(
        room: str, service: SessionService = Depends(get_service)
    ) -> SessionResponse:
        """Moderator request: force the session in this room to end."""
        if not service.terminate(room):
            raise HTTPException(status_code=404, detail=f"No session in room {room}.")
        return SessionResponse(room=room, active=True)

    @app.get("/rooms/{room}/feed")
    async def get_feed_messages(
        room: str, feed: RoomFeed = Depends(get_feed)
    ) -> FeedResponse:
        """Used in a polling loop by clients to display the room."""
        return FeedResponse(
            room=room,
            messages=[
                FeedMessageResponse(
                    id=m.id, content=m.content, reactions=m.reactions, edits=m.edits
                )
                for m in feed.messages(room)
            ],
        )

    return app
