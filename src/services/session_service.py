"""Orchestration of sessions: admission into a room, negotiation, the game, and routing of outside events."""

import asyncio
import logging
import random

from src.chat import messages
from src.chat.notifier import Notifier, notify
from src.connect4.game_state import GameState
from src.core.config import Settings
from src.core.models import Challenge, Player, RoomId, Signal
from src.core.shared_types import Color, NegotiationOutcome
from src.services.game_loop import GameLoop, GameSummary
from src.services.negotiation import ChallengeNegotiation
from src.services.registry import SessionHandle, SessionRegistry

logger = logging.getLogger(__name__)


class SessionService:
    """One task per session. Outside callers only ever reach a session through its handle in the registry."""

    def __init__(
        self,
        registry: SessionRegistry,
        notifier: Notifier,
        settings: Settings,
        rng: random.Random | None = None,
    ) -> None:
        self.registry = registry
        self.notifier = notifier
        self.settings = settings
        self.rng = rng or random.Random()
        self._tasks: dict[RoomId, asyncio.Task[GameSummary | None]] = {}

    # -- Inbound events --
    async def challenge(
        self, command: Challenge
    ) -> asyncio.Task[GameSummary | None] | None:
        """Start a session for the challenge, unless its room is busy. Returns the session task."""
        logger.info(
            "Challenge from %s to %s in room %s",
            command.challenger.id,
            command.opponent.id,
            command.room,
        )
        handle = self.registry.try_reserve(command.room)
        if handle is None:
            logger.info("Room %s already has a session", command.room)
            await notify(
                self.notifier, command.room, messages.room_occupied(command.challenger)
            )
            return None

        task = asyncio.create_task(
            self._run_session(handle, command), name=f"session-{command.room}"
        )
        self._tasks[command.room] = task
        task.add_done_callback(lambda t: self._forget(command.room, t))
        return task

    def react(self, room: RoomId, player: Player, emoji: str) -> bool:
        """Route a reaction to the session in `room`. False if there is none."""
        handle = self.registry.handle_for(room)
        if handle is None:
            return False
        handle.deliver(Signal(player, emoji))
        return True

    def terminate(self, room: RoomId) -> bool:
        """Ask the session in `room` to stop. False if there is none."""
        handle = self.registry.handle_for(room)
        if handle is None:
            return False
        logger.info("Forced termination requested for room %s", room)
        handle.force_end()
        return True

    def is_active(self, room: RoomId) -> bool:
        return room in self.registry

    async def shutdown(self) -> None:
        """Stop every running session and wait until they have cleaned up."""
        for room in self.registry.rooms():
            self.terminate(room)
        tasks = list(self._tasks.values())
        if tasks:
            await asyncio.gather(*tasks, return_exceptions=True)

    # -- Session task --
    async def _run_session(
        self, handle: SessionHandle, command: Challenge
    ) -> GameSummary | None:
        """Negotiation strictly before the game. Never raises: a broken session must not take others down."""
        try:
            negotiation = ChallengeNegotiation(
                handle,
                self.registry,
                self.notifier,
                command.challenger,
                command.opponent,
                timeout=self.settings.challenge_timeout,
            )
            outcome = await negotiation.run()
            if outcome != NegotiationOutcome.ACCEPTED:
                return None

            state = self._new_game(command.challenger, command.opponent)
            logger.info(
                "Game started in room %s: red=%s yellow=%s",
                command.room,
                state.players[Color.RED].id,
                state.players[Color.YELLOW].id,
            )
            return await GameLoop(handle, self.registry, self.notifier, state).run()
        except Exception:
            logger.exception("Session in room %s failed", command.room)
            return None
        finally:
            # no-op when the negotiation or the game loop already released the room
            if self.registry.handle_for(command.room) is handle:
                self.registry.release(command.room, handle)

    def _new_game(self, challenger: Player, opponent: Player) -> GameState:
        red, yellow = challenger, opponent
        if self.settings.random_colors and self.rng.random() < 0.5:
            red, yellow = opponent, challenger
        return GameState(
            players={Color.RED: red, Color.YELLOW: yellow},
            move_timeout=self.settings.move_timeout,
        )

    def _forget(self, room: RoomId, task: asyncio.Task) -> None:
        if self._tasks.get(room) is task:
            del self._tasks[room]
