"""Domain errors for review-apps."""


class ReviewAppError(RuntimeError):
    """Raised when the review app run cannot continue safely."""


class MissingPRNumber(ReviewAppError):
    """The triggering event does not carry a pull request number."""


class UnsafeAppName(ReviewAppError):
    """The resolved app name does not contain the pull request number."""


class CommandFailedError(ReviewAppError):
    """A fatal external command exited with a non-zero status."""

    def __init__(self, message: str, returncode: int):
        super().__init__(message)
        self.returncode = returncode
