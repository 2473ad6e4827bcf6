"""Exception types raised by the sewer generator.

Recoverable failures (synthesis contradictions, missing spawn cells, levels
without pools) never leave the package: they are retried internally. Only
structurally impossible requests and exhausted retry caps surface here.
"""


class SewerError(Exception):
    """Base class for generator errors."""


class SewerConfigError(SewerError, ValueError):
    """Request can never succeed (bad size, bad tuning value, bad example bitmap)."""


class GenerationFailed(SewerError, RuntimeError):
    """An explicit attempt or retry cap was exhausted."""

    def __init__(self, message: str, attempts: int = 0):
        super().__init__(message)
        self.attempts = attempts


class Contradiction(SewerError):
    """Synthesizer reached a cell with no legal pattern left."""


__all__ = ["SewerError", "SewerConfigError", "GenerationFailed", "Contradiction"]
