"""
The active game: one wait per turn on the current player's move, the cancellation channel, and the move timeout.
"""

import logging
from dataclasses import dataclass

from src.chat import messages
from src.chat.notifier import Announcer, Notifier
from src.connect4.game_state import GameState
from src.core.models import Player, Signal
from src.core.shared_types import Color, GameResult, MoveOutcome
from src.services.registry import SessionHandle, SessionRegistry
from src.services.waiting import drain, wait_for_signal

logger = logging.getLogger(__name__)


@dataclass
class GameSummary:
    result: GameResult
    state: GameState
    # only set when a player ran out of time
    forfeited_by: Player | None = None

    @property
    def winner(self) -> Player | None:
        if self.result == GameResult.RED_WINS:
            return self.state.players[Color.RED]
        if self.result == GameResult.YELLOW_WINS:
            return self.state.players[Color.YELLOW]
        return None


class GameLoop:
    """Drives one GameState from the first move to a terminal state."""

    def __init__(
        self,
        handle: SessionHandle,
        registry: SessionRegistry,
        notifier: Notifier,
        state: GameState,
    ) -> None:
        self.handle = handle
        self.registry = registry
        self.state = state
        self.board_message = Announcer(
            notifier, handle.room, reactions=messages.COLUMN_EMOTES
        )

    def interpret(self, signal: Signal) -> int | None:
        """Column picked by the current player. Anything else (other players, other emojis) is not a move."""
        if not self.state.is_current_player(signal.player):
            return None
        return messages.column_for(signal.emoji)

    async def run(self) -> GameSummary:
        """Play until a terminal state. The room is released exactly once on the way out, whatever happens."""
        try:
            return await self._play()
        finally:
            self.registry.release(self.handle.room, self.handle)

    async def _play(self) -> GameSummary:
        # reactions meant for the invitation are not moves
        drain(self.handle.signals)
        await self.board_message.announce(self.state.message_content())

        while True:
            player = self.state.current_player
            result = await wait_for_signal(
                self.handle, self.interpret, self.state.move_timeout
            )

            if result.cancelled:
                logger.info("Game in room %s ended by a moderator", self.handle.room)
                await self.board_message.announce(
                    messages.game_terminated(self.state.message_content())
                )
                return GameSummary(GameResult.FORCED_TERMINATION, self.state)

            if result.timed_out:
                logger.info(
                    "Player %s timed out in room %s", player.id, self.handle.room
                )
                await self.board_message.announce(
                    messages.game_forfeited(self.state.message_content(), player)
                )
                return GameSummary(
                    GameResult.FORFEIT_BY_TIMEOUT, self.state, forfeited_by=player
                )

            column = result.value
            outcome = self.state.play_move(column)
            logger.debug(
                "Room %s: %s played column %s -> %s",
                self.handle.room,
                player.id,
                column,
                outcome.name,
            )

            if outcome.is_terminal:
                return await self._finish(outcome)

            await self.board_message.announce(self.state.message_content())

    async def _finish(self, outcome: MoveOutcome) -> GameSummary:
        content = self.state.message_content()
        if outcome == MoveOutcome.DRAW:
            await self.board_message.announce(messages.game_drawn(content))
        else:
            winner = self.state.players[outcome.winner]
            await self.board_message.announce(messages.game_won(content, winner))

        result = GameResult.from_outcome(outcome)
        logger.info("Game in room %s over: %s", self.handle.room, result)
        return GameSummary(result, self.state)
