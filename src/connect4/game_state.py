"""
A game in progress: the board, who plays which color, and whose turn it is.

Owned exclusively by one session task. Nothing outside of the game loop holds a reference to it.
"""

from dataclasses import dataclass, field

from src.connect4.board import CELL_GLYPHS, Board
from src.core.models import Player
from src.core.shared_types import Color, MoveOutcome


@dataclass
class GameState:
    players: dict[Color, Player]
    move_timeout: float
    board: Board = field(default_factory=Board)
    turn: Color = Color.RED

    @property
    def current_player(self) -> Player:
        return self.players[self.turn]

    def color_of(self, player: Player) -> Color | None:
        for color, registered in self.players.items():
            if registered.id == player.id:
                return color
        return None

    def is_current_player(self, player: Player) -> bool:
        return self.current_player.id == player.id

    def play_move(self, column: int) -> MoveOutcome:
        """The current player drops a piece. The turn only passes on when the game goes on."""
        outcome = self.board.apply_move(column, self.turn)
        if outcome == MoveOutcome.CONTINUE:
            self.turn = self.turn.other
        return outcome

    def message_content(self) -> str:
        """Status block shown above the board: timeout, players, and a marker on whose turn it is."""
        red_marker = "*" if self.turn == Color.RED else " "
        yellow_marker = "*" if self.turn == Color.YELLOW else " "
        return (
            f"*Move timeout: {self.move_timeout:g} seconds*\n"
            f"`[{red_marker}]` {self.players[Color.RED].mention}: {CELL_GLYPHS[Color.RED.cell]}\n"
            f"`[{yellow_marker}]` {self.players[Color.YELLOW].mention}: {CELL_GLYPHS[Color.YELLOW.cell]}\n\n"
            f"{self.board.render()}"
        )
