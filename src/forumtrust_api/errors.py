"""Domain errors raised by the trust layer workflows.

Pure components (trust classification, scanning, maturity and cursors) never
raise these; they return decision values that the workflows translate.
"""


class ForumTrustError(Exception):
    """Base class for every domain error."""

    status_code: int = 500
    retryable: bool = False

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(ForumTrustError):
    """Malformed input, rejected before any side effect."""

    status_code = 400


class NotFound(ForumTrustError):
    """Target content or report is absent."""

    status_code = 404


class Forbidden(ForumTrustError):
    """Actor lacks the rights for this operation."""

    status_code = 403


class Conflict(ForumTrustError):
    """Operation collides with the current state."""

    status_code = 409


class RateLimited(ForumTrustError):
    """Caller should retry later."""

    status_code = 429
    retryable = True

    def __init__(self, message: str, retry_after: int = 60):
        super().__init__(message)
        self.retry_after = retry_after


class UpstreamWriteFailure(ForumTrustError):
    """The identity write client failed; nothing was applied locally."""

    status_code = 502
    retryable = True


class SelfReport(ValidationError):
    def __init__(self) -> None:
        super().__init__("Cannot report your own content")


class TargetNotFound(NotFound):
    def __init__(self) -> None:
        super().__init__("Content not found")


class ReportNotFound(NotFound):
    def __init__(self) -> None:
        super().__init__("Report not found")


class DuplicateReport(Conflict):
    def __init__(self) -> None:
        super().__init__("You have already reported this content")


class AlreadyResolved(Conflict):
    def __init__(self) -> None:
        super().__init__("Report already resolved")


class AlreadyAppealed(Conflict):
    def __init__(self) -> None:
        super().__init__("Report has already been appealed")


class NotResolved(ValidationError):
    def __init__(self) -> None:
        super().__init__("Can only appeal resolved reports")


class NotDismissed(ValidationError):
    def __init__(self) -> None:
        super().__init__("Can only appeal dismissed reports")


class ConcurrentModification(Conflict):
    """A conditional update found the row already changed."""

    def __init__(self, what: str = "Record"):
        super().__init__(f"{what} was modified concurrently")
