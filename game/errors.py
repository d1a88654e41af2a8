# Exception types raised by the board, the solver and the game loop


class MastermindError(Exception):
    """Base class for all errors raised by this package."""


class ConfigurationError(MastermindError, ValueError):
    """Invalid board configuration (hole count, alphabet, universe size)."""


class DecodeError(MastermindError, ValueError):
    """A code or pattern that does not belong to the configured board."""


class InconsistentFeedbackError(MastermindError, RuntimeError):
    """No candidate pattern is consistent with the feedback received."""
