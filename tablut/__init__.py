"""Tablut rules engine and alpha-beta player."""

from . import core, env, features, players, search
from .core import Board, GameResult, Move, Piece, Square, mv, parse_move, sq
from .env import TablutEnv
from .features import (
    AUX_VECTOR_SIZE,
    BOARD_CHANNELS,
    build_aux_vector,
    build_board_tensor,
    state_to_numpy,
)
from .players import AIPlayer, Player, RandomPlayer
from .search import AlphaBetaSearch, SearchConfig, SearchResult

__all__ = [
    "core",
    "env",
    "features",
    "players",
    "search",
    "Board",
    "GameResult",
    "Move",
    "Piece",
    "Square",
    "mv",
    "parse_move",
    "sq",
    "TablutEnv",
    "AUX_VECTOR_SIZE",
    "BOARD_CHANNELS",
    "build_aux_vector",
    "build_board_tensor",
    "state_to_numpy",
    "Player",
    "AIPlayer",
    "RandomPlayer",
    "AlphaBetaSearch",
    "SearchConfig",
    "SearchResult",
]
