"""
Changelog Generator - build release changelogs from a GitHub repository's conventional commits.
"""

from .models import ChangelogOptions, ChangelogResult, CommitType, COMMIT_TYPES, ParsedCommit, RawCommit, TagPair
from .errors import ChangelogError, InvalidUrlError, NotFoundError, UpstreamError
from .cache import ResponseCache
from .fetcher import CachedGitHubFetcher, GitHubFetcher
from .parser import CommitParser
from .renderer import ChangelogRenderer, parse_changelog
from .resolver import RangeResolver
from .generator import ChangelogGenerator, parse_github_url

__all__ = [
    'ChangelogOptions',
    'ChangelogResult',
    'CommitType',
    'COMMIT_TYPES',
    'ParsedCommit',
    'RawCommit',
    'TagPair',
    'ChangelogError',
    'InvalidUrlError',
    'NotFoundError',
    'UpstreamError',
    'ResponseCache',
    'CachedGitHubFetcher',
    'GitHubFetcher',
    'CommitParser',
    'ChangelogRenderer',
    'parse_changelog',
    'RangeResolver',
    'ChangelogGenerator',
    'parse_github_url',
]
