from __future__ import annotations


class IllegalMoveError(ValueError):
    pass


class MoveLimitError(ValueError):
    pass


class MoveParseError(ValueError):
    pass


class SearchError(RuntimeError):
    pass
