"""Players that produce moves for one side."""

from .base import AIPlayer, Player, RandomPlayer

__all__ = ["Player", "AIPlayer", "RandomPlayer"]
