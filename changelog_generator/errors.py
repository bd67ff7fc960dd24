"""
Exception types raised by the changelog generator.
"""

from typing import Optional


class ChangelogError(RuntimeError):
    """Base class for every failure of the changelog pipeline."""


class InvalidUrlError(ChangelogError):
    """The given URL does not point at a GitHub repository."""

    def __init__(self, url: str) -> None:
        super().__init__(f"Invalid GitHub URL: {url!r}")
        self.url = url


class UpstreamError(ChangelogError):
    """The GitHub API failed or returned an unusable response."""

    def __init__(self, message: str, status: Optional[int] = None) -> None:
        super().__init__(message)
        self.status = status


class NotFoundError(UpstreamError):
    """A repository, ref or commit does not exist or is not visible with the given token."""
