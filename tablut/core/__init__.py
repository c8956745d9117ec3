"""Core game logic for Tablut."""

from .state import (
    BOARD_SIZE,
    DIRECTIONS,
    NUM_SQUARES,
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
from .rules import (
    ACTION_VECTOR_SIZE,
    ETHRONE,
    INITIAL_ATTACKERS,
    INITIAL_DEFENDERS,
    NTHRONE,
    ROOK_MOVES,
    STHRONE,
    THRONE,
    THRONE_NEIGHBORS,
    WTHRONE,
    decode_action,
    encode_action,
    ROOK_TARGETS,
    SCAN_ORDER,
    mv,
    parse_move,
    parse_square,
)
from .board import Board
from .errors import IllegalMoveError, MoveLimitError, MoveParseError, SearchError

__all__ = [
    "BOARD_SIZE",
    "DIRECTIONS",
    "NUM_SQUARES",
    "SQUARES",
    "GameResult",
    "Move",
    "MoveRecord",
    "Piece",
    "Square",
    "opponent",
    "owner",
    "sq",
    "ACTION_VECTOR_SIZE",
    "THRONE",
    "NTHRONE",
    "ETHRONE",
    "STHRONE",
    "WTHRONE",
    "THRONE_NEIGHBORS",
    "INITIAL_ATTACKERS",
    "INITIAL_DEFENDERS",
    "ROOK_MOVES",
    "decode_action",
    "encode_action",
    "ROOK_TARGETS",
    "SCAN_ORDER",
    "mv",
    "parse_move",
    "parse_square",
    "Board",
    "IllegalMoveError",
    "MoveLimitError",
    "MoveParseError",
    "SearchError",
]
