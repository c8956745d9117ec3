from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum, IntEnum
from typing import List, Optional, Tuple

BOARD_SIZE = 9
NUM_SQUARES = BOARD_SIZE * BOARD_SIZE
COLUMN_LETTERS = "abcdefghi"

# (dcol, drow) in N, E, S, W order.
DIRECTIONS: Tuple[Tuple[int, int], ...] = ((0, 1), (1, 0), (0, -1), (-1, 0))


class Piece(IntEnum):
    EMPTY = 0
    BLACK = 1
    WHITE = 2
    KING = 3

    @property
    def symbol(self) -> str:
        return _SYMBOLS[self]

    @property
    def side(self) -> "Piece":
        return owner(self)

    def opponent(self) -> "Piece":
        return opponent(self)

    @staticmethod
    def from_symbol(symbol: str) -> "Piece":
        for piece, text in _SYMBOLS.items():
            if text == symbol:
                return piece
        raise ValueError(f"Unknown piece symbol {symbol!r}.")


_SYMBOLS = {
    Piece.EMPTY: "-",
    Piece.BLACK: "B",
    Piece.WHITE: "W",
    Piece.KING: "K",
}


def owner(piece: Piece) -> Piece:
    """Side a piece moves for; the king belongs to WHITE."""
    if piece == Piece.KING:
        return Piece.WHITE
    return Piece(piece)


def opponent(side: Piece) -> Piece:
    side = owner(side)
    if side == Piece.WHITE:
        return Piece.BLACK
    if side == Piece.BLACK:
        return Piece.WHITE
    return Piece.EMPTY


class GameResult(Enum):
    ONGOING = "ongoing"
    WHITE_WIN = "white_win"
    BLACK_WIN = "black_win"

    @staticmethod
    def from_winner(winner: Optional[Piece]) -> "GameResult":
        if winner == Piece.WHITE:
            return GameResult.WHITE_WIN
        if winner == Piece.BLACK:
            return GameResult.BLACK_WIN
        return GameResult.ONGOING


@dataclass(frozen=True)
class Square:
    col: int
    row: int

    @property
    def index(self) -> int:
        return self.row * BOARD_SIZE + self.col

    @property
    def is_edge(self) -> bool:
        return self.col in (0, BOARD_SIZE - 1) or self.row in (0, BOARD_SIZE - 1)

    def is_rook_move(self, other: "Square") -> bool:
        return self != other and (self.col == other.col or self.row == other.row)

    def direction(self, other: "Square") -> int:
        """Index into DIRECTIONS of the line from self to OTHER, or -1."""
        if not self.is_rook_move(other):
            return -1
        if other.row > self.row:
            return 0
        if other.col > self.col:
            return 1
        if other.row < self.row:
            return 2
        return 3

    def neighbor(self, direction: int, steps: int = 1) -> Optional["Square"]:
        dcol, drow = DIRECTIONS[direction]
        col = self.col + dcol * steps
        row = self.row + drow * steps
        if not exists(col, row):
            return None
        return sq(col, row)

    def neighbors(self) -> List["Square"]:
        return [s for s in (self.neighbor(d) for d in range(len(DIRECTIONS))) if s is not None]

    def between(self, other: "Square") -> List["Square"]:
        """Squares strictly between self and OTHER on a shared line."""
        direction = self.direction(other)
        if direction < 0:
            return []
        distance = abs(other.col - self.col) + abs(other.row - self.row)
        return [self.neighbor(direction, step) for step in range(1, distance)]

    def __str__(self) -> str:
        return f"{COLUMN_LETTERS[self.col]}{self.row + 1}"


def exists(col: int, row: int) -> bool:
    return 0 <= col < BOARD_SIZE and 0 <= row < BOARD_SIZE


SQUARES: Tuple[Square, ...] = tuple(
    Square(index % BOARD_SIZE, index // BOARD_SIZE) for index in range(NUM_SQUARES)
)


def sq(col: int, row: Optional[int] = None) -> Square:
    """Return the square at (COL, ROW), or at linear index COL when ROW is omitted."""
    if row is None:
        if not 0 <= col < NUM_SQUARES:
            raise ValueError(f"Square index {col} out of range.")
        return SQUARES[col]
    if not exists(col, row):
        raise ValueError(f"Square ({col}, {row}) out of range.")
    return SQUARES[row * BOARD_SIZE + col]


@dataclass(frozen=True)
class Move:
    from_square: Square
    to_square: Square

    def __str__(self) -> str:
        return f"{self.from_square}{self.to_square}"


@dataclass(frozen=True)
class MoveRecord:
    move: Move
    moved: Piece
    captures: Tuple[Tuple[Square, Piece], ...] = field(default_factory=tuple)
    prior_winner: Optional[Piece] = None
    prior_repeated: bool = False
    added_position: bool = True
