from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from tablut.core import (
    ROOK_TARGETS,
    THRONE,
    THRONE_NEIGHBORS,
    Board,
    Move,
    Piece,
    SearchError,
)

logger = logging.getLogger(__name__)

# Position-score magnitude indicating a win (for white if positive, black if negative).
WINNING_VALUE = 2**31 - 21
# Search bound; strictly larger than any score so a move is always recorded.
INFTY = 2**31 - 1


def side_sense(side: Piece) -> int:
    return -1 if side == Piece.BLACK else 1


@dataclass
class SearchConfig:
    depth_divisor: int = 38
    max_depth: Optional[int] = None
    edge_bonus_to_move: int = 1000
    edge_bonus: int = 100
    king_off_throne_bonus: int = 10
    siege_bonus: int = 5


@dataclass
class SearchResult:
    move: Optional[Move]
    value: int
    depth: int


class AlphaBetaSearch:
    """Depth-limited minimax with alpha-beta pruning over Tablut positions.

    The search always runs on a private copy of the board; moves are
    applied and undone on that copy so the caller's board is never touched.
    """

    def __init__(self, config: Optional[SearchConfig] = None) -> None:
        self.config = config or SearchConfig()
        self._last_found_move: Optional[Move] = None

    # ------------------------------------------------------------------
    def find_move(
        self,
        board: Board,
        *,
        depth: Optional[int] = None,
        side: Optional[Piece] = None,
    ) -> Optional[Move]:
        return self.run(board, depth=depth, side=side).move

    def run(
        self,
        board: Board,
        *,
        depth: Optional[int] = None,
        side: Optional[Piece] = None,
    ) -> SearchResult:
        if side is not None and side.side != board.turn:
            raise SearchError(f"{side.name} is not to move; {board.turn.name} is.")
        if board.winner is not None:
            return SearchResult(move=None, value=self.static_score(board), depth=0)

        work = board.copy()
        if depth is None:
            depth = self.max_depth(work)
        self._last_found_move = None
        value = self.search(work, depth, True, side_sense(work.turn), -INFTY, INFTY)
        move = self._last_found_move
        logger.debug("Searched %s to depth %d: move=%s value=%d", work.turn.name, depth, move, value)
        return SearchResult(move=move, value=value, depth=depth)

    def search(
        self,
        board: Board,
        depth: int,
        save_move: bool,
        sense: int,
        alpha: int,
        beta: int,
    ) -> int:
        """Return the minimax value of BOARD searched DEPTH plies deep.

        SENSE is +1 when WHITE maximises at this ply and -1 when BLACK
        minimises. When SAVE_MOVE is set the best move found is recorded.
        Sibling moves are cut off once ``alpha > beta``.
        """
        if sense not in (1, -1):
            raise SearchError(f"Wrong sense provided: {sense}.")
        if board.winner is not None or depth == 0:
            return self.static_score(board)

        if sense == 1:
            best = -INFTY
            for move in board.legal_moves(Piece.WHITE):
                board.make_move(move)
                response = self.search(board, depth - 1, False, -sense, alpha, beta)
                board.undo()
                if response > best:
                    best = response
                    if save_move:
                        self._last_found_move = move
                    alpha = max(alpha, best)
                    if alpha > beta:
                        break
            return best

        worst = INFTY
        for move in board.legal_moves(Piece.BLACK):
            board.make_move(move)
            response = self.search(board, depth - 1, False, -sense, alpha, beta)
            board.undo()
            if response < worst:
                worst = response
                if save_move:
                    self._last_found_move = move
                beta = min(beta, worst)
                if alpha > beta:
                    break
        return worst

    # ------------------------------------------------------------------
    def max_depth(self, board: Board) -> int:
        """Search depth for BOARD: the move limit if set, else mobility based."""
        if self.config.max_depth is not None:
            return self.config.max_depth
        if board.move_limit:
            return board.move_limit
        n = len(board.legal_moves(board.turn))
        return n // self.config.depth_divisor + 1

    def static_score(self, board: Board) -> int:
        if board.winner == Piece.WHITE:
            return WINNING_VALUE
        if board.winner == Piece.BLACK:
            return -WINNING_VALUE

        config = self.config
        white_score = 0
        black_score = 0

        king = board.king_position()
        if king is not None:
            bonus = config.edge_bonus_to_move if board.turn == Piece.WHITE else config.edge_bonus
            cells = board.grid.ravel().tolist()
            for targets in ROOK_TARGETS[king.index]:
                for dest, move in targets:
                    if cells[dest] != Piece.EMPTY:
                        break
                    if move.to_square.is_edge:
                        white_score += bonus

        if king != THRONE:
            black_score += config.king_off_throne_bonus
        else:
            besiegers = sum(1 for square in THRONE_NEIGHBORS if board.get(square) == Piece.BLACK)
            black_score += besiegers * config.siege_bonus

        black_score += len(board.legal_moves(Piece.BLACK))
        white_score += len(board.legal_moves(Piece.WHITE))
        return white_score - black_score
