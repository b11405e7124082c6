"""
Domain-specific errors for the patterns bounded context.

All errors raised from the domain layer must be defined here.
These are mapped to HTTP responses at the interface layer.
No framework imports allowed.
"""


class PatternDomainError(Exception):
    """Base error for all pattern intelligence errors."""

    def __init__(self, message: str) -> None:
        self.message = message
        super().__init__(self.message)


class StrategyNotFoundError(PatternDomainError):
    """Raised when a referenced strategy does not exist in the data layer."""

    def __init__(self, strategy_id: str) -> None:
        super().__init__(f"Strategy {strategy_id} not found")
        self.strategy_id = strategy_id


class VectorIndexUnavailableError(PatternDomainError):
    """Raised when the vector index rejects a write or cannot be reached."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Vector index unavailable: {reason}")
        self.reason = reason
