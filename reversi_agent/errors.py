"""Exception hierarchy for the Reversi engine, search and adapters."""


class ReversiError(Exception):
    """Base class for all errors raised by reversi_agent."""


class InvalidMoveError(ReversiError):
    """A move that is not in the legal-move set of the board it was played on."""


class GameOverError(InvalidMoveError):
    """A move was played on a board where the game has already ended."""


class EmptySearchError(ReversiError):
    """Search was asked for a move on a position with nothing to choose from."""


class ConfigurationError(ReversiError):
    """Malformed or out-of-range configuration options."""


class SearchInvariantError(ReversiError):
    """Search statistics are internally inconsistent.

    Raised instead of returning a move computed from corrupted statistics.
    """


class ProtocolError(ReversiError):
    """A referee message could not be parsed."""
