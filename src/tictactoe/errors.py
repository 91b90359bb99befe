"""
Exceptions raised by the engine and the game session.
"""


class InvalidState(RuntimeError):
    """A search or session call was made on a position that does not allow it.

    Raised when a move is requested for a finished (won or drawn) board,
    or when the computer is asked to move out of turn. This is a bug in
    the calling code, not something to show to a player.
    """


class IllegalMove(ValueError):
    """A player's move was rejected (occupied cell, out of range, game over)."""
