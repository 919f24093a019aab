"""The board implements every rule that affects the grid: gravity, win detection, and draws."""

from dataclasses import dataclass, field
from typing import Self

from src.core.exceptions import InvalidColumnError
from src.core.shared_types import Cell, Color, MoveOutcome

# (columns, rows)
BOARD_DIMENSIONS = (7, 6)
WINNING_RUN = 4

# (column step, row step). Checked in this order, the first run long enough wins.
DIRECTIONS: tuple[tuple[int, int], ...] = (
    (0, 1),  # vertical
    (1, 0),  # horizontal
    (1, 1),  # rising diagonal
    (1, -1),  # falling diagonal
)

CELL_GLYPHS: dict[Cell, str] = {
    Cell.EMPTY: "⚫",
    Cell.RED: "🔴",
    Cell.YELLOW: "🟡",
}


def _empty_columns() -> list[list[Cell]]:
    columns, rows = BOARD_DIMENSIONS
    return [[Cell.EMPTY] * rows for _ in range(columns)]


@dataclass
class Board:
    # columns[c][r], row 0 is the bottom of the column
    columns: list[list[Cell]] = field(default_factory=_empty_columns)

    @classmethod
    def from_rows(cls, rows: list[str]) -> Self:
        """Build a board from its text form, top row first.

        ex. [".......", ..., "RY....."] gives a red piece at the bottom of column 0 and a yellow one next to it.
        ('.' empty, 'R' red, 'Y' yellow)
        """
        n_columns, n_rows = BOARD_DIMENSIONS
        if len(rows) != n_rows or any(len(row) != n_columns for row in rows):
            raise ValueError(f"Expected {n_rows} rows of {n_columns} characters.")
        lookup = {".": Cell.EMPTY, "R": Cell.RED, "Y": Cell.YELLOW}
        board = cls()
        for row_idx, line in enumerate(reversed(rows)):
            for column, character in enumerate(line):
                board.columns[column][row_idx] = lookup[character]
        return board

    def cell(self, column: int, row: int) -> Cell | None:
        """Contents of a cell, or None when the coordinates fall off the board."""
        n_columns, n_rows = BOARD_DIMENSIONS
        if not (0 <= column < n_columns and 0 <= row < n_rows):
            return None
        return self.columns[column][row]

    def height(self, column: int) -> int:
        """Number of pieces stacked in a column"""
        self._check_column(column)
        return sum(1 for cell in self.columns[column] if cell != Cell.EMPTY)

    def is_column_full(self, column: int) -> bool:
        return self.height(column) == BOARD_DIMENSIONS[1]

    def is_full(self) -> bool:
        return all(cell != Cell.EMPTY for column in self.columns for cell in column)

    def empty_cells(self) -> int:
        return sum(1 for column in self.columns for cell in column if cell == Cell.EMPTY)

    def apply_move(self, column: int, color: Color) -> MoveOutcome:
        """
        Drop a piece of the given color into a column.

        ----
        1. A full column is ILLEGAL, and nothing changes.
        2. The piece lands on the lowest empty row.
        3. A run of four (or more) through the new piece wins.
        4. Otherwise a full board is a DRAW, anything else CONTINUEs.
        """
        row = self.height(column)
        if row == BOARD_DIMENSIONS[1]:
            return MoveOutcome.ILLEGAL

        self.columns[column][row] = color.cell

        if self._wins_through(column, row):
            return MoveOutcome.win_for(color)
        if self.is_full():
            return MoveOutcome.DRAW
        return MoveOutcome.CONTINUE

    def render(self) -> str:
        """One line per row, top row first, one glyph per cell."""
        lines = []
        for row in range(BOARD_DIMENSIONS[1] - 1, -1, -1):
            lines.append(
                "".join(CELL_GLYPHS[self.columns[c][row]] for c in range(BOARD_DIMENSIONS[0]))
            )
        return "\n".join(lines) + "\n"

    def _wins_through(self, column: int, row: int) -> bool:
        for step in DIRECTIONS:
            if self.run_length(column, row, step) >= WINNING_RUN:
                return True
        return False

    def run_length(self, column: int, row: int, step: tuple[int, int]) -> int:
        """Length of the unbroken run of same-colored cells through (column, row) along a direction."""
        color = self.cell(column, row)
        if color is None or color == Cell.EMPTY:
            return 0
        d_col, d_row = step
        length = 1
        for sign in (1, -1):
            c, r = column + sign * d_col, row + sign * d_row
            # falling off the board ends the run just like a different color does
            while self.cell(c, r) == color:
                length += 1
                c, r = c + sign * d_col, r + sign * d_row
        return length

    def _check_column(self, column: int) -> None:
        if not 0 <= column < BOARD_DIMENSIONS[0]:
            raise InvalidColumnError(
                f"Column {column} is outside of the board (0-{BOARD_DIMENSIONS[0] - 1})."
            )
