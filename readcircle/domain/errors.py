"""Domain error hierarchy.

``ExpectedError`` subclasses are recoverable outcomes reported through the
result envelope. Anything else propagates to the request handler.
"""


class CoreError(Exception):
    """Base class for errors raised by the core."""


class ExpectedError(CoreError):
    """A recoverable condition; no side effects have occurred."""


class NotFoundError(ExpectedError):
    pass


class ForbiddenError(ExpectedError):
    pass


class NoChangeError(ExpectedError):
    """Reconciliation found nothing to add or remove."""


class DuplicateReviewError(ExpectedError):
    pass


class InvalidScoreError(ExpectedError):
    pass


class UnknownContentKindError(CoreError):
    """The feed met a post kind it has no projection for."""

    def __init__(self, kind: object) -> None:
        super().__init__(f"unknown content kind: {kind!r}")
        self.kind = kind
