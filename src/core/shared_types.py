"""
Type definitions used across layers
"""

from enum import Enum, StrEnum, auto


class Cell(StrEnum):
    EMPTY = "empty"
    RED = "red"
    YELLOW = "yellow"


# --- Color is the subset of Cell a player can own. RED always moves first.
class Color(StrEnum):
    RED = "red"
    YELLOW = "yellow"

    @property
    def cell(self) -> Cell:
        return Cell(self.value)

    @property
    def other(self) -> "Color":
        return Color.YELLOW if self == Color.RED else Color.RED


class MoveOutcome(Enum):
    CONTINUE = auto()
    RED_WINS = auto()
    YELLOW_WINS = auto()
    DRAW = auto()
    ILLEGAL = auto()

    @classmethod
    def win_for(cls, color: Color) -> "MoveOutcome":
        return cls.RED_WINS if color == Color.RED else cls.YELLOW_WINS

    @property
    def winner(self) -> Color | None:
        if self == MoveOutcome.RED_WINS:
            return Color.RED
        if self == MoveOutcome.YELLOW_WINS:
            return Color.YELLOW
        return None

    @property
    def is_terminal(self) -> bool:
        return self not in (MoveOutcome.CONTINUE, MoveOutcome.ILLEGAL)


class NegotiationOutcome(StrEnum):
    ACCEPTED = "accepted"
    DECLINED = "declined"
    CANCELLED = "cancelled"
    TIMED_OUT = "timed out"
    TERMINATED = "terminated"


class GameResult(StrEnum):
    RED_WINS = "red wins"
    YELLOW_WINS = "yellow wins"
    DRAW = "draw"
    FORFEIT_BY_TIMEOUT = "forfeit by timeout"
    FORCED_TERMINATION = "forced termination"

    @classmethod
    def from_outcome(cls, outcome: MoveOutcome) -> "GameResult":
        """Terminal MoveOutcome to the matching result of the game loop."""
        if outcome == MoveOutcome.RED_WINS:
            return cls.RED_WINS
        if outcome == MoveOutcome.YELLOW_WINS:
            return cls.YELLOW_WINS
        if outcome == MoveOutcome.DRAW:
            return cls.DRAW
        raise ValueError(f"{outcome!r} does not end a game.")


class GameAction(Enum):
    """Messages that can be sent to a running session over its cancellation channel."""

    FORCE_END = auto()
