"""Minimax search with alpha-beta pruning."""

from .alphabeta import INFTY, WINNING_VALUE, AlphaBetaSearch, SearchConfig, SearchResult, side_sense

__all__ = ["AlphaBetaSearch", "SearchConfig", "SearchResult", "INFTY", "WINNING_VALUE", "side_sense"]
