import numpy as np

from tablut import AIPlayer, Board, Piece, RandomPlayer, parse_move
from tablut.core import GameResult
from tablut.search import SearchConfig


def test_ai_player_waits_for_its_turn():
    board = Board()
    assert AIPlayer(Piece.WHITE, depth=1).my_move(board) is None


def test_ai_player_returns_legal_move_text():
    board = Board()
    text = AIPlayer(Piece.BLACK, depth=1).my_move(board)
    assert text is not None
    assert board.is_legal(parse_move(text))


def test_king_piece_plays_for_white():
    player = AIPlayer(Piece.KING, depth=1)
    assert player.side == Piece.WHITE


def test_ai_player_silent_on_finished_game():
    board = Board.from_text(
        """
        - - - - - - - - -
        - - - - - - - B -
        - - - - - - - - -
        - - - - - - - - -
        - - - - - - - - -
        - - - - - - - - -
        - - K - - - - - -
        - - - - - - - - -
        - - - - - - - - -
        """,
        Piece.WHITE,
    )
    board.make_move(parse_move("c3c1"))
    assert board.result == GameResult.WHITE_WIN
    assert AIPlayer(Piece.BLACK, depth=1).my_move(board) is None


def test_random_player_is_seeded_and_legal():
    board = Board()
    first = RandomPlayer(Piece.BLACK, np.random.default_rng(7)).my_move(board)
    second = RandomPlayer(Piece.BLACK, np.random.default_rng(7)).my_move(board)
    assert first == second
    assert board.is_legal(parse_move(first))


def test_ai_player_keeps_its_own_config():
    config = SearchConfig(siege_bonus=9)
    player = AIPlayer(Piece.BLACK, config, depth=2)
    config.siege_bonus = 1
    assert player.search.config.siege_bonus == 9
    assert player.depth == 2
