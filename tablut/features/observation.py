from __future__ import annotations

from typing import Tuple

import numpy as np

from tablut.core import BOARD_SIZE, Board, Piece

BOARD_CHANNELS = 3  # black, white, king
AUX_VECTOR_SIZE = 2  # side to move one-hot (black, white)


def build_board_tensor(board: Board) -> np.ndarray:
    """Return board tensor with shape (3, 9, 9) channel-first, rows indexed from row 1."""
    tensor = np.zeros((BOARD_CHANNELS, BOARD_SIZE, BOARD_SIZE), dtype=np.float32)
    grid = board.grid
    tensor[0] = grid == Piece.BLACK
    tensor[1] = grid == Piece.WHITE
    tensor[2] = grid == Piece.KING
    return tensor


def build_aux_vector(board: Board) -> np.ndarray:
    aux = np.zeros((AUX_VECTOR_SIZE,), dtype=np.float32)
    aux[0 if board.turn == Piece.BLACK else 1] = 1.0
    return aux


def state_to_numpy(board: Board) -> Tuple[np.ndarray, np.ndarray]:
    return build_board_tensor(board), build_aux_vector(board)
