"""
Exceptions shared across layers.
"""


class ArchiveError(RuntimeError):
    """The history archive could not be read or written."""


class RemoteAPIError(RuntimeError):
    """The remote Mastermind service failed or answered with an error."""

    def __init__(self, message: str, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code
