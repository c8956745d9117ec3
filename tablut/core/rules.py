from __future__ import annotations

import re
from typing import Dict, FrozenSet, List, Tuple

from .errors import MoveParseError
from .state import BOARD_SIZE, DIRECTIONS, NUM_SQUARES, SQUARES, Move, Square, sq

MAX_DISTANCE = BOARD_SIZE - 1
ACTION_VECTOR_SIZE = NUM_SQUARES * len(DIRECTIONS) * MAX_DISTANCE

THRONE = sq(4, 4)
NTHRONE = sq(4, 5)
ETHRONE = sq(5, 4)
STHRONE = sq(4, 3)
WTHRONE = sq(3, 4)
THRONE_NEIGHBORS: Tuple[Square, ...] = (NTHRONE, ETHRONE, STHRONE, WTHRONE)
THRONE_ZONE: FrozenSet[Square] = frozenset((THRONE,) + THRONE_NEIGHBORS)

INITIAL_ATTACKERS: Tuple[Square, ...] = (
    sq(0, 3), sq(0, 4), sq(0, 5), sq(1, 4),
    sq(8, 3), sq(8, 4), sq(8, 5), sq(7, 4),
    sq(3, 0), sq(4, 0), sq(5, 0), sq(4, 1),
    sq(3, 8), sq(4, 8), sq(5, 8), sq(4, 7),
)

INITIAL_DEFENDERS: Tuple[Square, ...] = (
    NTHRONE, ETHRONE, STHRONE, WTHRONE,
    sq(4, 6), sq(4, 2), sq(2, 4), sq(6, 4),
)

_MOVES: Dict[Tuple[int, int], Move] = {}


def mv(from_square: Square, to_square: Square) -> Move:
    """Return the interned rook move FROM_SQUARE-TO_SQUARE."""
    if not from_square.is_rook_move(to_square):
        raise ValueError(f"{from_square}-{to_square} is not a rook move.")
    return _MOVES[(from_square.index, to_square.index)]


def _build_rook_moves() -> Tuple[Tuple[Tuple[Move, ...], ...], ...]:
    table: List[Tuple[Tuple[Move, ...], ...]] = []
    for origin in SQUARES:
        per_direction = []
        for direction in range(len(DIRECTIONS)):
            moves = []
            for distance in range(1, MAX_DISTANCE + 1):
                dest = origin.neighbor(direction, distance)
                if dest is None:
                    break
                move = Move(origin, dest)
                _MOVES[(origin.index, dest.index)] = move
                moves.append(move)
            per_direction.append(tuple(moves))
        table.append(tuple(per_direction))
    return tuple(table)


# ROOK_MOVES[square.index][direction] lists destinations by increasing distance.
ROOK_MOVES = _build_rook_moves()

# Same table keyed for the hot path: (destination index, move) pairs.
ROOK_TARGETS: Tuple[Tuple[Tuple[Tuple[int, Move], ...], ...], ...] = tuple(
    tuple(tuple((move.to_square.index, move) for move in moves) for moves in per_square)
    for per_square in ROOK_MOVES
)

# Square indices in board scan order: column a from row 1 up, then column b, ...
SCAN_ORDER: Tuple[int, ...] = tuple(
    row * BOARD_SIZE + col for col in range(BOARD_SIZE) for row in range(BOARD_SIZE)
)

_MOVE_PATTERN = re.compile(r"^\s*([a-i])([1-9])\s*-?\s*([a-i])?([1-9])\s*$")


def parse_square(text: str) -> Square:
    text = text.strip()
    if len(text) != 2 or text[0] not in "abcdefghi" or text[1] not in "123456789":
        raise MoveParseError(f"Malformed square {text!r}.")
    return sq(ord(text[0]) - ord("a"), int(text[1]) - 1)


def parse_move(text: str) -> Move:
    """Parse ``d5d7``, ``d5-d7`` or the short ``d5-7`` form into a Move."""
    match = _MOVE_PATTERN.match(text.lower())
    if match is None:
        raise MoveParseError(f"Malformed move {text!r}.")
    from_col, from_row, to_col, to_row = match.groups()
    if to_col is None:
        if "-" not in text:
            raise MoveParseError(f"Malformed move {text!r}.")
        to_col = from_col
    origin = parse_square(from_col + from_row)
    dest = parse_square(to_col + to_row)
    if not origin.is_rook_move(dest):
        raise MoveParseError(f"{text!r} is not a rook move.")
    return mv(origin, dest)



def encode_action(move: Move) -> int:
    """Index of MOVE in a flat (square, direction, distance) action space."""
    direction = move.from_square.direction(move.to_square)
    if direction < 0:
        raise ValueError("Move is not a rook move.")
    distance = abs(move.to_square.col - move.from_square.col) + abs(
        move.to_square.row - move.from_square.row
    )
    return (move.from_square.index * len(DIRECTIONS) + direction) * MAX_DISTANCE + distance - 1


def decode_action(index: int) -> Move:
    if not 0 <= index < ACTION_VECTOR_SIZE:
        raise ValueError("Action index out of range.")
    index, distance = divmod(index, MAX_DISTANCE)
    origin, direction = divmod(index, len(DIRECTIONS))
    dest = sq(origin).neighbor(direction, distance + 1)
    if dest is None:
        raise ValueError("Action leaves the board.")
    return mv(sq(origin), dest)
