from __future__ import annotations

from typing import Dict, Optional

import gymnasium as gym
import numpy as np
from gymnasium import spaces

from tablut.core import (
    ACTION_VECTOR_SIZE,
    BOARD_SIZE,
    Board,
    Piece,
    decode_action,
    encode_action,
)
from tablut.features import (
    AUX_VECTOR_SIZE,
    BOARD_CHANNELS,
    build_aux_vector,
    build_board_tensor,
)
from tablut.players import AIPlayer, Player


class TablutEnv(gym.Env):
    """Single-agent Tablut: the agent plays ``agent_side``, ``opponent`` answers each move."""

    metadata = {"render_modes": ["ansi"], "render_fps": 4}

    def __init__(
        self,
        *,
        agent_side: Piece = Piece.WHITE,
        opponent: Optional[Player] = None,
        max_moves: int = 200,
        enforce_legal_actions: bool = True,
        render_mode: Optional[str] = None,
    ) -> None:
        super().__init__()
        self.agent_side = agent_side.side
        self.opponent = opponent or AIPlayer(self.agent_side.opponent(), depth=1)
        if self.opponent.side == self.agent_side:
            raise ValueError("Opponent must play the other side.")
        self._max_moves = max_moves
        self._enforce_legal = enforce_legal_actions
        self.render_mode = render_mode

        board_shape = (BOARD_CHANNELS, BOARD_SIZE, BOARD_SIZE)
        self.observation_space = spaces.Dict(
            {
                "board": spaces.Box(low=0.0, high=1.0, shape=board_shape, dtype=np.float32),
                "aux": spaces.Box(low=0.0, high=1.0, shape=(AUX_VECTOR_SIZE,), dtype=np.float32),
            }
        )
        self.action_space = spaces.Discrete(ACTION_VECTOR_SIZE)

        self._board = Board()
        self._last_info: Dict[str, np.ndarray] = {}

    @property
    def board(self) -> Board:
        return self._board

    def reset(self, *, seed: Optional[int] = None, options: Optional[Dict] = None):
        super().reset(seed=seed)
        if options and "max_moves" in options:
            self._max_moves = options["max_moves"]
        self._board = Board()
        if self._board.turn != self.agent_side:
            self._opponent_move()
        observation = self._build_observation()
        info = self._build_info()
        self._last_info = info
        return observation, info

    def step(self, action_index: int):
        if not self.action_space.contains(action_index):
            raise ValueError(f"Action index {action_index} out of bounds.")
        if self._board.winner is not None:
            raise ValueError("Episode has ended; call reset().")

        legal_mask = self.legal_action_mask()
        if self._enforce_legal and not legal_mask[action_index]:
            raise ValueError("Illegal action provided and enforce_legal_actions=True.")

        self._board.make_move(decode_action(int(action_index)))
        if self._board.winner is None:
            self._opponent_move()

        observation = self._build_observation()
        info = self._build_info()
        self._last_info = info

        terminated = self._board.winner is not None
        truncated = not terminated and self._board.move_count >= self._max_moves
        reward = self._compute_reward(self._board.winner)
        return observation, reward, terminated, truncated, info

    def legal_action_mask(self) -> np.ndarray:
        mask = np.zeros(self.action_space.n, dtype=np.int8)
        if self._board.winner is not None:
            return mask
        for move in self._board.legal_moves(self.agent_side):
            mask[encode_action(move)] = 1
        return mask

    def render(self):
        if self.render_mode != "ansi":
            raise NotImplementedError("Only 'ansi' render mode is supported.")
        return self._board.to_text(coordinates=True)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------
    def _opponent_move(self) -> None:
        move = self.opponent.choose(self._board)
        if move is None:
            raise RuntimeError("Opponent produced no move in a live position.")
        self._board.make_move(move)

    def _build_observation(self) -> Dict[str, np.ndarray]:
        board = build_board_tensor(self._board)
        aux = build_aux_vector(self._board)
        return {"board": board, "aux": aux}

    def _build_info(self) -> Dict[str, object]:
        return {
            "legal_action_mask": self.legal_action_mask(),
            "winner": self._board.winner,
            "repeated": self._board.repeated_position(),
            "move_count": self._board.move_count,
        }

    def _compute_reward(self, winner: Optional[Piece]) -> float:
        if winner is None:
            return 0.0
        return 1.0 if winner == self.agent_side else -1.0
