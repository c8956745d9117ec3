from __future__ import annotations

from copy import deepcopy
from typing import Optional

import numpy as np

from tablut.core import Board, Move, Piece
from tablut.search import AlphaBetaSearch, SearchConfig


class Player:
    """Produces the next move for one side as move text, or None when it has none."""

    def __init__(self, side: Piece) -> None:
        self.side = side.side

    def choose(self, board: Board) -> Optional[Move]:
        raise NotImplementedError

    def my_move(self, board: Board) -> Optional[str]:
        if board.winner is not None or board.turn != self.side:
            return None
        move = self.choose(board)
        return None if move is None else str(move)

    @property
    def is_manual(self) -> bool:
        return False


class AIPlayer(Player):
    def __init__(
        self,
        side: Piece,
        config: Optional[SearchConfig] = None,
        *,
        depth: Optional[int] = None,
    ) -> None:
        super().__init__(side)
        self._config = deepcopy(config) if config else SearchConfig()
        self.depth = depth
        self.search = AlphaBetaSearch(self._config)

    def choose(self, board: Board) -> Optional[Move]:
        return self.search.find_move(board, depth=self.depth, side=self.side)


class RandomPlayer(Player):
    def __init__(self, side: Piece, rng: Optional[np.random.Generator] = None) -> None:
        super().__init__(side)
        self.rng = rng or np.random.default_rng()

    def choose(self, board: Board) -> Optional[Move]:
        moves = board.legal_moves(self.side)
        if not moves:
            return None
        return moves[int(self.rng.integers(len(moves)))]
