from __future__ import annotations

import logging
from typing import List, Optional, Set, Tuple, Union

import numpy as np
from numpy.typing import NDArray

from .errors import IllegalMoveError, MoveLimitError
from .rules import (
    INITIAL_ATTACKERS,
    INITIAL_DEFENDERS,
    ROOK_TARGETS,
    SCAN_ORDER,
    THRONE,
    THRONE_ZONE,
    mv,
)
from .state import (
    BOARD_SIZE,
    COLUMN_LETTERS,
    DIRECTIONS,
    SQUARES,
    GameResult,
    Move,
    MoveRecord,
    Piece,
    Square,
    opponent,
    owner,
    sq,
)

logger = logging.getLogger(__name__)

BoardArray = NDArray[np.int8]

_KEY_TABLE = bytes.maketrans(b"\x00\x01\x02\x03", b"-BWK")

# Plain ints for the move generator loops.
_EMPTY = int(Piece.EMPTY)
_KING = int(Piece.KING)
_THRONE_INDEX = THRONE.index
_BLACK_PIECES = frozenset((int(Piece.BLACK),))
_WHITE_PIECES = frozenset((int(Piece.WHITE), _KING))


class Board:
    """Mutable Tablut position with undo history and repetition tracking.

    The grid is indexed ``grid[row, col]``. All mutation goes through
    ``make_move``/``undo``; ``put`` exists only for setting up positions.
    """

    def __init__(self) -> None:
        self._grid: BoardArray = np.zeros((BOARD_SIZE, BOARD_SIZE), dtype=np.int8)
        self._turn = Piece.BLACK
        self._winner: Optional[Piece] = None
        self._repeated = False
        self._move_count = 0
        self._move_limit: Optional[int] = None
        self._positions: Set[str] = set()
        self._history: List[MoveRecord] = []
        self.reset()

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------
    def reset(self) -> None:
        """Clear the board to the initial position."""
        self._grid[:, :] = Piece.EMPTY
        for square in INITIAL_ATTACKERS:
            self._grid[square.row, square.col] = Piece.BLACK
        for square in INITIAL_DEFENDERS:
            self._grid[square.row, square.col] = Piece.WHITE
        self._grid[THRONE.row, THRONE.col] = Piece.KING
        self._start(Piece.BLACK)

    def _start(self, turn: Piece) -> None:
        self._turn = turn
        self._winner = None
        self._repeated = False
        self._move_count = 0
        self._history = []
        self._positions = {self.encoded()}

    @classmethod
    def from_text(cls, diagram: str, turn: Piece = Piece.BLACK) -> "Board":
        """Build a board from a 9-line diagram, row 9 first, one symbol per square.

        Whitespace between symbols is ignored, so the output of
        ``to_text(coordinates=False)`` parses back.
        """
        rows = [line.replace(" ", "") for line in diagram.strip().splitlines() if line.strip()]
        if len(rows) != BOARD_SIZE or any(len(line) != BOARD_SIZE for line in rows):
            raise ValueError("Board diagram must have 9 rows of 9 squares.")
        board = cls()
        for offset, line in enumerate(rows):
            row = BOARD_SIZE - 1 - offset
            for col, symbol in enumerate(line):
                board._grid[row, col] = Piece.from_symbol(symbol)
        board._start(owner(turn))
        return board

    def copy(self) -> "Board":
        other = Board.__new__(Board)
        other._grid = self._grid.copy()
        other._turn = self._turn
        other._winner = self._winner
        other._repeated = self._repeated
        other._move_count = self._move_count
        other._move_limit = self._move_limit
        other._positions = set(self._positions)
        other._history = list(self._history)
        return other

    # ------------------------------------------------------------------
    # Queries
    # ------------------------------------------------------------------
    @property
    def grid(self) -> BoardArray:
        return self._grid

    @property
    def turn(self) -> Piece:
        return self._turn

    @property
    def winner(self) -> Optional[Piece]:
        return self._winner

    @property
    def result(self) -> GameResult:
        return GameResult.from_winner(self._winner)

    @property
    def is_terminal(self) -> bool:
        return self._winner is not None

    def repeated_position(self) -> bool:
        return self._repeated

    @property
    def move_count(self) -> int:
        return self._move_count

    @property
    def move_limit(self) -> Optional[int]:
        return self._move_limit

    def set_move_limit(self, limit: Optional[int]) -> None:
        """Set the move limit to LIMIT, or clear it with None.

        A limit is rejected when ``2 * limit <= move_count``.
        """
        if limit is not None and (limit <= 0 or 2 * limit <= self._move_count):
            raise MoveLimitError(
                f"Move limit {limit} is incompatible with {self._move_count} elapsed moves."
            )
        self._move_limit = limit

    def get(self, square: Union[Square, int], row: Optional[int] = None) -> Piece:
        if not isinstance(square, Square):
            square = sq(square, row)
        return Piece(int(self._grid[square.row, square.col]))

    def put(self, piece: Piece, square: Square) -> None:
        self._grid[square.row, square.col] = piece

    def king_position(self) -> Optional[Square]:
        cells = self._grid.ravel().tolist()
        if _KING not in cells:
            return None
        return SQUARES[cells.index(_KING)]

    def piece_locations(self, side: Piece) -> List[Square]:
        """Squares holding pieces of SIDE (the king counts for WHITE), in scan order."""
        cells = self._grid.ravel().tolist()
        own = _WHITE_PIECES if owner(side) == Piece.WHITE else _BLACK_PIECES
        return [SQUARES[index] for index in SCAN_ORDER if cells[index] in own]

    def encoded(self) -> str:
        cells = self._grid.tobytes().translate(_KEY_TABLE).decode("ascii")
        return self._turn.symbol + cells

    # ------------------------------------------------------------------
    # Legality
    # ------------------------------------------------------------------
    def is_unblocked_move(self, from_square: Square, to_square: Square) -> bool:
        if not from_square.is_rook_move(to_square):
            return False
        if self.get(to_square) != Piece.EMPTY:
            return False
        return all(self.get(square) == Piece.EMPTY for square in from_square.between(to_square))

    def is_legal(self, from_square: Union[Square, Move], to_square: Optional[Square] = None) -> bool:
        if isinstance(from_square, Move):
            from_square, to_square = from_square.from_square, from_square.to_square
        elif to_square is None:
            raise TypeError("is_legal() needs a Move or both a from and a to square.")
        piece = self.get(from_square)
        if piece == Piece.EMPTY or owner(piece) != self._turn:
            return False
        if not self.is_unblocked_move(from_square, to_square):
            return False
        return to_square != THRONE or piece == Piece.KING

    def legal_moves(self, side: Piece) -> List[Move]:
        """All legal moves for SIDE regardless of whose turn it is.

        Order: pieces in SCAN_ORDER, then directions N, E, S, W, then
        increasing distance.
        """
        cells = self._grid.ravel().tolist()
        own = _WHITE_PIECES if owner(side) == Piece.WHITE else _BLACK_PIECES
        moves: List[Move] = []
        append = moves.append
        for origin in SCAN_ORDER:
            piece = cells[origin]
            if piece not in own:
                continue
            for targets in ROOK_TARGETS[origin]:
                for dest, move in targets:
                    if cells[dest] != _EMPTY:
                        break
                    if dest == _THRONE_INDEX and piece != _KING:
                        continue
                    append(move)
        return moves

    def has_move(self, side: Piece) -> bool:
        cells = self._grid.ravel().tolist()
        own = _WHITE_PIECES if owner(side) == Piece.WHITE else _BLACK_PIECES
        for origin in SCAN_ORDER:
            piece = cells[origin]
            if piece not in own:
                continue
            for targets in ROOK_TARGETS[origin]:
                for dest, _ in targets:
                    if cells[dest] != _EMPTY:
                        break
                    if dest != _THRONE_INDEX or piece == _KING:
                        return True
        return False

    # ------------------------------------------------------------------
    # Move application
    # ------------------------------------------------------------------
    def make_move(self, from_square: Union[Square, Move], to_square: Optional[Square] = None) -> None:
        if isinstance(from_square, Move):
            move = from_square
        else:
            if to_square is None:
                raise TypeError("make_move() needs a Move or both a from and a to square.")
            if not from_square.is_rook_move(to_square):
                raise IllegalMoveError(f"{from_square}-{to_square} is not a rook move.")
            move = mv(from_square, to_square)
        if self._winner is not None:
            raise IllegalMoveError("Cannot move after the game has ended.")
        if not self.is_legal(move):
            raise IllegalMoveError(f"Illegal move {move} for {self._turn.name}.")

        prior_winner = self._winner
        prior_repeated = self._repeated
        moved = self.get(move.from_square)
        side = owner(moved)
        self.put(Piece.EMPTY, move.from_square)
        self.put(moved, move.to_square)

        captures = tuple((square, self.get(square)) for square in self._captures(move.to_square, side))
        for square, _ in captures:
            self.put(Piece.EMPTY, square)

        king = self.king_position()
        if king is None:
            self._winner = Piece.BLACK
        elif king.is_edge:
            self._winner = Piece.WHITE

        self._move_count += 1
        self._turn = opponent(side)
        if self._winner is None and not self.has_move(self._turn):
            self._winner = opponent(self._turn)

        key = self.encoded()
        added = key not in self._positions
        if added:
            self._positions.add(key)
        elif self._winner is None:
            self._winner = self._turn
            self._repeated = True

        self._history.append(
            MoveRecord(
                move=move,
                moved=moved,
                captures=captures,
                prior_winner=prior_winner,
                prior_repeated=prior_repeated,
                added_position=added,
            )
        )
        if self._winner is not None:
            logger.debug(
                "Game over after %d moves: %s wins%s",
                self._move_count,
                self._winner.name,
                " by repetition" if self._repeated else "",
            )

    def _captures(self, to_square: Square, side: Piece) -> List[Square]:
        enemy = opponent(side)
        captured: List[Square] = []
        for direction in range(len(DIRECTIONS)):
            mid = to_square.neighbor(direction)
            far = to_square.neighbor(direction, 2)
            if mid is None or far is None:
                continue
            victim = self.get(mid)
            if victim == Piece.EMPTY or owner(victim) != enemy:
                continue
            if victim == Piece.KING and mid in THRONE_ZONE:
                if self._king_surrounded(mid):
                    captured.append(mid)
            elif self._hostile_to(far, enemy):
                captured.append(mid)
        return captured

    def _hostile_to(self, square: Square, enemy: Piece) -> bool:
        piece = self.get(square)
        if piece == Piece.EMPTY:
            return square == THRONE
        return owner(piece) == opponent(enemy)

    def _king_surrounded(self, king: Square) -> bool:
        """True iff every orthogonal neighbour of KING is an attacker or the empty throne."""
        for neighbor in king.neighbors():
            piece = self.get(neighbor)
            if piece == Piece.BLACK:
                continue
            if neighbor == THRONE and piece == Piece.EMPTY:
                continue
            return False
        return True

    def undo(self) -> None:
        """Undo one move. Has no effect on the initial board."""
        if not self._history:
            return
        record = self._history.pop()
        move = record.move
        if self.get(move.to_square) != record.moved or self.get(move.from_square) != Piece.EMPTY:
            raise RuntimeError(f"Undo history does not match the board for move {move}.")
        if record.added_position:
            self._positions.discard(self.encoded())
        self.put(record.moved, move.from_square)
        self.put(Piece.EMPTY, move.to_square)
        for square, piece in record.captures:
            self.put(piece, square)
        self._move_count -= 1
        self._turn = owner(record.moved)
        self._winner = record.prior_winner
        self._repeated = record.prior_repeated

    def clear_undo(self) -> None:
        """Drop undo history and recorded positions; keeps position and win status."""
        self._history = []
        self._positions = {self.encoded()}

    @property
    def history(self) -> Tuple[MoveRecord, ...]:
        return tuple(self._history)

    # ------------------------------------------------------------------
    # Rendering
    # ------------------------------------------------------------------
    def to_text(self, coordinates: bool = True) -> str:
        lines = []
        for row in range(BOARD_SIZE - 1, -1, -1):
            prefix = f"{row + 1:2d}" if coordinates else "  "
            cells = " ".join(self.get(col, row).symbol for col in range(BOARD_SIZE))
            lines.append(f"{prefix} {cells}")
        if coordinates:
            lines.append("   " + " ".join(COLUMN_LETTERS))
        return "\n".join(lines)

    def __str__(self) -> str:
        return self.to_text(coordinates=True)

    def __repr__(self) -> str:
        return (
            f"Board(turn={self._turn.name}, winner={self._winner}, moves={self._move_count})\n"
            f"{self.to_text(coordinates=False)}"
        )

