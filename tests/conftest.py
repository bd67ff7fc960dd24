"""Shared fixtures for changelog_generator tests."""

from __future__ import annotations

import datetime
from unittest.mock import MagicMock

import pytest

from changelog_generator.cache import ResponseCache
from changelog_generator.config import Settings
from changelog_generator.fetcher import GitHubFetcher
from changelog_generator.models import RawCommit, RepoMeta, TagInfo


def make_raw(
    message: str,
    sha: str = "abcdef1234567890",
    author: str | None = "alice",
) -> RawCommit:
    """Build a RawCommit the way the GitHub client would."""
    return RawCommit(
        sha=sha,
        message=message,
        url=f"https://github.com/x/y/commit/{sha}",
        author=author,
        author_url=f"https://github.com/{author}" if author else None,
    )


@pytest.fixture
def fetcher() -> MagicMock:
    """A GitHubFetcher stand-in for a repo with default branch main and no tags."""
    mock = MagicMock(spec=GitHubFetcher)
    mock.get_repository.return_value = RepoMeta(full_name="x/y", default_branch="main")
    mock.list_tags.return_value = []
    mock.list_commits.return_value = []
    mock.compare_commits.return_value = []
    return mock


@pytest.fixture
def tagged_fetcher(fetcher: MagicMock) -> MagicMock:
    """Fetcher for a repo with tags v1 (older) and v2 (newer)."""
    fetcher.list_tags.return_value = [
        TagInfo(name="v1", commit_sha="sha-v1"),
        TagInfo(name="v2", commit_sha="sha-v2"),
    ]
    dates = {
        "sha-v1": datetime.datetime(2024, 1, 1, tzinfo=datetime.timezone.utc),
        "sha-v2": datetime.datetime(2024, 6, 1, tzinfo=datetime.timezone.utc),
    }
    fetcher.get_commit_date.side_effect = lambda owner, repo, sha: dates[sha]
    return fetcher


@pytest.fixture
def cache() -> ResponseCache:
    return ResponseCache(ttl=3600)


@pytest.fixture
def settings() -> Settings:
    return Settings(max_workers=4)
