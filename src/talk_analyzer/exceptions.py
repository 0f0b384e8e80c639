"""Exceptions raised by talk analyzer."""


class TalkAnalyzerError(Exception):
    """Base exception for all talk analyzer errors."""

    def __init__(self, message: str, details: dict[str, str] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{self.message} ({details_str})"
        return self.message


class InvalidCorpusError(TalkAnalyzerError, TypeError):
    """The corpus handed to the pipeline is not a sequence of conversations."""

    def __init__(self, received: object, reason: str = "expected a list of Conversation objects"):
        super().__init__(
            f"Invalid conversation corpus: {reason}",
            details={"received": type(received).__name__},
        )
        self.received = received
