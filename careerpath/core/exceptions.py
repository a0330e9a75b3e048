"""Core domain exceptions.

All exceptions raised by core logic inherit from CoreError.
Adapters catch provider-specific errors and re-raise as these.

Structural incompleteness is deliberately absent: it is a normal outcome
reported through CompletenessReport and never raised.
"""
from typing import List, Optional


class CoreError(Exception):
    """Base for all core domain errors.

    Attributes:
        generation_calls: Generation calls made before the error, set by
            the retry orchestrator (0 when raised outside it)
    """

    generation_calls: int = 0


class GenerationFailure(CoreError):
    """The external text-generation call errored or timed out."""
    pass


class ConfigurationError(CoreError):
    """Missing prompt template, unknown model key or similar setup error."""
    pass


class JsonRecoveryFailure(CoreError):
    """Every parse strategy failed and no fallback data was supplied.

    Attributes:
        attempts: ParseAttempt records in strategy order
    """

    def __init__(self, message: str, attempts: Optional[List] = None):
        super().__init__(message)
        self.attempts = list(attempts or [])

    @property
    def errors(self) -> List[str]:
        """Per-strategy error messages, formatted as 'strategy: error'."""
        return [
            f"{a.strategy}: {a.error}" for a in self.attempts if not a.succeeded
        ]
