import time

import pytest

from tablut.core import Board, Piece, SearchError, parse_move
from tablut.search import INFTY, WINNING_VALUE, AlphaBetaSearch, SearchConfig, side_sense

DENSE_POSITION = """
B B B B B B B B B
B B - B B B W W W
B B B B W W W - W
W W W B B - W W W
B B - W K W B B B
W W W W W B - W W
B - B B B W W W W
B B B W - W B B B
B B B B B B B B -
"""

OPEN_POSITION = """
- - - - - - - - -
- - B - - - - - -
- - K - W - - - -
- - - - - - B - -
B - W - - - - - B
- - - - W - - - -
- - - - B - - - -
- - W - - - - - -
- - - - - B - - -
"""


def minimax(board: Board, depth: int, sense: int, search: AlphaBetaSearch) -> int:
    if board.winner is not None or depth == 0:
        return search.static_score(board)
    side = Piece.WHITE if sense == 1 else Piece.BLACK
    values = []
    for move in board.legal_moves(side):
        child = board.copy()
        child.make_move(move)
        values.append(minimax(child, depth - 1, -sense, search))
    return max(values) if sense == 1 else min(values)


def test_depth_heuristic_from_initial_mobility():
    board = Board()
    search = AlphaBetaSearch()
    assert len(board.legal_moves(board.turn)) == 80
    assert search.max_depth(board) == 80 // 38 + 1 == 3


def test_depth_follows_move_limit_and_override():
    board = Board()
    board.set_move_limit(2)
    assert AlphaBetaSearch().max_depth(board) == 2
    assert AlphaBetaSearch(SearchConfig(max_depth=1)).max_depth(board) == 1


def test_no_move_on_finished_game():
    board = Board.from_text(OPEN_POSITION, Piece.WHITE)
    board.make_move(parse_move("c7a7"))
    assert board.winner == Piece.WHITE
    result = AlphaBetaSearch().run(board)
    assert result.move is None
    assert result.value == WINNING_VALUE


def test_white_takes_immediate_edge_win():
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
    result = AlphaBetaSearch().run(board, depth=1)
    assert str(result.move) == "c3c9"
    assert result.value == WINNING_VALUE


def test_black_captures_king_when_possible():
    board = Board.from_text(
        """
        - - - - - - - - -
        - - - - - - - - -
        - B K - - - - B -
        - - - - - - - - -
        - - - - - - - - -
        - - - - - - - - -
        - - - - - - - - -
        - - - - - - - - -
        - - - - - - - - -
        """,
        Piece.BLACK,
    )
    result = AlphaBetaSearch().run(board, depth=1)
    assert str(result.move) == "h7d7"
    assert result.value == -WINNING_VALUE


def test_ties_resolve_to_first_move_in_enumeration_order():
    board = Board()
    search = AlphaBetaSearch()
    values = []
    for move in board.legal_moves(Piece.BLACK):
        child = board.copy()
        child.make_move(move)
        values.append((search.static_score(child), move))
    best = min(value for value, _ in values)
    expected = next(move for value, move in values if value == best)
    assert search.find_move(board, depth=1) is expected


@pytest.mark.parametrize(
    "diagram, turn, depth",
    [
        (DENSE_POSITION, Piece.BLACK, 1),
        (DENSE_POSITION, Piece.BLACK, 2),
        (DENSE_POSITION, Piece.BLACK, 3),
        (DENSE_POSITION, Piece.WHITE, 3),
        (OPEN_POSITION, Piece.BLACK, 2),
        (OPEN_POSITION, Piece.WHITE, 2),
    ],
)
def test_alpha_beta_matches_plain_minimax(diagram, turn, depth):
    board = Board.from_text(diagram, turn)
    search = AlphaBetaSearch()
    result = search.run(board, depth=depth)
    assert result.value == minimax(board, depth, side_sense(turn), search)
    assert result.move is not None
    assert board.is_legal(result.move)


def test_search_leaves_board_untouched():
    board = Board.from_text(OPEN_POSITION, Piece.BLACK)
    before = (board.encoded(), board.move_count, len(board.history), board.winner)
    AlphaBetaSearch().find_move(board, depth=2)
    assert (board.encoded(), board.move_count, len(board.history), board.winner) == before


def test_static_score_rewards_king_mobility_on_white_move():
    config = SearchConfig()
    search = AlphaBetaSearch(config)
    white_to_move = Board.from_text(OPEN_POSITION, Piece.WHITE)
    black_to_move = Board.from_text(OPEN_POSITION, Piece.BLACK)
    # King on c7 reaches only the a7 edge.
    difference = search.static_score(white_to_move) - search.static_score(black_to_move)
    assert difference == config.edge_bonus_to_move - config.edge_bonus


def test_static_score_initial_position():
    search = AlphaBetaSearch()
    board = Board()
    # King boxed in on the throne with no attackers beside it.
    assert search.static_score(board) == len(board.legal_moves(Piece.WHITE)) - 80


def test_invalid_sense_is_rejected():
    search = AlphaBetaSearch()
    with pytest.raises(SearchError):
        search.search(Board(), 1, False, 0, -INFTY, INFTY)


def test_side_must_match_turn():
    with pytest.raises(SearchError):
        AlphaBetaSearch().find_move(Board(), side=Piece.WHITE)


def test_move_generation_is_cheap_enough_for_search():
    board = Board.from_text(DENSE_POSITION, Piece.BLACK)
    start = time.perf_counter()
    for _ in range(2000):
        board.legal_moves(Piece.BLACK)
        board.legal_moves(Piece.WHITE)
        board.has_move(Piece.WHITE)
    assert time.perf_counter() - start < 5.0


def test_default_depth_opening_search_returns_legal_move():
    board = Board()
    result = AlphaBetaSearch().run(board)
    assert result.depth == 3
    assert board.is_legal(result.move)
