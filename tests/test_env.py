import numpy as np
import pytest

from tablut import RandomPlayer, TablutEnv
from tablut.core import ACTION_VECTOR_SIZE, Piece, encode_action


def make_env(**kwargs):
    opponent = RandomPlayer(Piece.BLACK, np.random.default_rng(0))
    return TablutEnv(agent_side=Piece.WHITE, opponent=opponent, render_mode="ansi", **kwargs)


def test_reset_returns_valid_observation():
    env = make_env()
    obs, info = env.reset()

    assert obs["board"].shape == (3, 9, 9)
    assert obs["aux"].shape == (2,)
    assert info["legal_action_mask"].shape == (ACTION_VECTOR_SIZE,)
    # Black opens, so the opponent has already moved.
    assert env.board.move_count == 1
    assert env.board.turn == Piece.WHITE


def test_legal_mask_matches_enumeration():
    env = make_env()
    env.reset()
    mask = env.legal_action_mask()
    legal = env.board.legal_moves(Piece.WHITE)
    assert np.count_nonzero(mask) == len(legal)
    for move in legal:
        assert mask[encode_action(move)] == 1


def test_step_advances_both_sides():
    env = make_env()
    obs, info = env.reset()
    action = int(np.flatnonzero(info["legal_action_mask"])[0])

    next_obs, reward, terminated, truncated, next_info = env.step(action)

    assert env.board.move_count in (2, 3)
    if not terminated:
        assert reward == 0.0
        assert env.board.move_count == 3
    assert not truncated
    assert np.any(next_obs["board"] != obs["board"])


def test_illegal_action_rejected():
    env = make_env()
    _, info = env.reset()
    illegal = int(np.flatnonzero(info["legal_action_mask"] == 0)[0])
    with pytest.raises(ValueError):
        env.step(illegal)


def test_truncation_at_move_cap():
    env = make_env(max_moves=2)
    _, info = env.reset()
    action = int(np.flatnonzero(info["legal_action_mask"])[0])
    _, _, terminated, truncated, _ = env.step(action)
    assert terminated or truncated


def test_render_ansi():
    env = make_env()
    env.reset()
    text = env.render()
    assert text.splitlines()[-1].split() == list("abcdefghi")


def test_opponent_must_play_other_side():
    with pytest.raises(ValueError):
        TablutEnv(agent_side=Piece.WHITE, opponent=RandomPlayer(Piece.WHITE))
