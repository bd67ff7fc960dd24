"""
GitHub data fetching module.

This module handles all GitHub API interactions for fetching repository data,
tags and commit history using PyGithub. Every listing is paginated with
pages of 100 items and stops at the first short page.
"""

import contextlib
import datetime
import logging
from typing import Callable, Iterator, List, Optional, TypeVar

import requests

from .cache import ResponseCache, make_cache_key
from .errors import NotFoundError, UpstreamError
from .models import RawCommit, RepoMeta, TagInfo

# External libs
try:
    from github import Auth, Github, GithubException, UnknownObjectException
    from github.Commit import Commit
    from github.PaginatedList import PaginatedList
    from github.Repository import Repository
except Exception as e:
    raise RuntimeError("PyGithub is required. Install with: pip install PyGithub") from e

PAGE_SIZE = 100

T = TypeVar("T")

# Set up logging
logger = logging.getLogger("changelog-generator.fetcher")


@contextlib.contextmanager
def _github_errors(action: str) -> Iterator[None]:
    """Translate PyGithub and transport failures into the package's error types."""
    try:
        yield
    except UnknownObjectException as e:
        error_msg = f"Failed to {action}: not found"
        logger.error(error_msg)
        raise NotFoundError(error_msg, status=e.status) from e
    except GithubException as e:
        detail = e.data.get("message") if isinstance(e.data, dict) else None
        error_msg = f"Failed to {action}: {detail or e}"
        logger.error(error_msg)
        raise UpstreamError(error_msg, status=e.status) from e
    except requests.RequestException as e:
        error_msg = f"Failed to {action}: {e}"
        logger.error(error_msg)
        raise UpstreamError(error_msg) from e


def _to_raw_commit(c: Commit) -> RawCommit:
    author = c.author
    return RawCommit(
        sha=c.sha,
        message=c.commit.message,
        url=c.html_url,
        author=author.login if author else None,
        author_url=author.html_url if author else None,
    )


class GitHubFetcher:
    """
    Fetch repository metadata, tags and commits from GitHub using PyGithub.

    Args:
        token: Personal access token (or None for unauthenticated, but rate-limited).
        timeout: Per-request timeout in seconds.
        retries: Automatic retries of failed requests; 0 disables retrying.
        client: Pre-built PyGithub client, mostly useful for tests.
    """

    def __init__(
        self,
        token: Optional[str] = None,
        timeout: int = 15,
        retries: int = 0,
        client: Optional[Github] = None,
    ) -> None:
        if client is not None:
            self._g = client
            return
        try:
            auth = Auth.Token(token) if token else None
            self._g = Github(auth=auth, per_page=PAGE_SIZE, timeout=timeout, retry=retries)
            logger.debug("GitHub client initialized (authenticated=%s)", bool(token))
        except Exception as e:
            logger.error("Failed to initialize GitHub client: %s", e)
            raise RuntimeError(f"GitHub client initialization failed: {e}") from e

    def _repo(self, owner: str, repo: str) -> Repository:
        # lazy: no request until an attribute or sub-resource is used
        return self._g.get_repo(f"{owner}/{repo}", lazy=True)

    @staticmethod
    def _collect(pages: PaginatedList, convert: Callable[..., T], limit: Optional[int] = None) -> List[T]:
        result: List[T] = []
        page = 0
        while True:
            items = pages.get_page(page)
            result.extend(convert(item) for item in items)
            logger.debug("Fetched page %d (%d items)", page + 1, len(items))
            if limit is not None and len(result) >= limit:
                return result[:limit]
            if len(items) < PAGE_SIZE:
                return result
            page += 1

    def get_repository(self, owner: str, repo: str) -> RepoMeta:
        """
        Fetch repository metadata from GitHub.

        Raises:
            NotFoundError: If the repository does not exist or is not accessible
        """
        with _github_errors(f"fetch repository {owner}/{repo}"):
            r = self._g.get_repo(f"{owner}/{repo}")
            meta = RepoMeta(full_name=r.full_name, default_branch=r.default_branch, url=r.html_url)
        logger.info("Fetched metadata for %s (default branch: %s)", meta.full_name, meta.default_branch)
        return meta

    def list_tags(self, owner: str, repo: str, limit: Optional[int] = None) -> List[TagInfo]:
        """List tags in the order the API returns them, at most ``limit`` if given."""
        with _github_errors(f"list tags for {owner}/{repo}"):
            tags = self._collect(
                self._repo(owner, repo).get_tags(),
                lambda t: TagInfo(name=t.name, commit_sha=t.commit.sha),
                limit=limit,
            )
        logger.info("Found %d tags in %s/%s", len(tags), owner, repo)
        return tags

    def get_commit_date(self, owner: str, repo: str, sha: str) -> datetime.datetime:
        """Return the committer date of a single commit."""
        with _github_errors(f"fetch commit {sha} in {owner}/{repo}"):
            git_commit = self._repo(owner, repo).get_git_commit(sha)
            return git_commit.committer.date

    def list_commits(self, owner: str, repo: str, ref: str) -> List[RawCommit]:
        """
        Fetch the full history of ``ref``, most recent first.

        Used when the repository has no tag to compare against.
        """
        with _github_errors(f"list commits of {ref} in {owner}/{repo}"):
            commits = self._collect(self._repo(owner, repo).get_commits(sha=ref), _to_raw_commit)
        logger.info("Fetched %d commits of %s in %s/%s", len(commits), ref, owner, repo)
        return commits

    def compare_commits(self, owner: str, repo: str, base: str, head: str) -> List[RawCommit]:
        """
        Fetch the commits reachable from ``head`` but not from ``base``.

        Returns:
            Commits ordered oldest to newest
        """
        with _github_errors(f"compare {base}...{head} in {owner}/{repo}"):
            comparison = self._repo(owner, repo).compare(base, head)
            commits = self._collect(comparison.commits, _to_raw_commit)
        commits.reverse()
        logger.info("Found %d commits between %s and %s in %s/%s", len(commits), base, head, owner, repo)
        return commits


class CachedGitHubFetcher:
    """
    Caching decorator around a :class:`GitHubFetcher`.

    Each successful response is stored in ``cache`` under the operation name and
    its parameters before being returned. Failures are never cached.
    """

    def __init__(self, fetcher: GitHubFetcher, cache: ResponseCache) -> None:
        self._fetcher = fetcher
        self.cache = cache

    def get_repository(self, owner: str, repo: str) -> RepoMeta:
        key = make_cache_key("get_repository", {"owner": owner, "repo": repo})
        return self.cache.memoize(key, lambda: self._fetcher.get_repository(owner, repo))

    def list_tags(self, owner: str, repo: str, limit: Optional[int] = None) -> List[TagInfo]:
        key = make_cache_key("list_tags", {"owner": owner, "repo": repo, "limit": limit})
        return self.cache.memoize(key, lambda: self._fetcher.list_tags(owner, repo, limit=limit))

    def get_commit_date(self, owner: str, repo: str, sha: str) -> datetime.datetime:
        key = make_cache_key("get_commit", {"owner": owner, "repo": repo, "commit_sha": sha})
        return self.cache.memoize(key, lambda: self._fetcher.get_commit_date(owner, repo, sha))

    def list_commits(self, owner: str, repo: str, ref: str) -> List[RawCommit]:
        key = make_cache_key("list_commits", {"owner": owner, "repo": repo, "ref": ref})
        return self.cache.memoize(key, lambda: self._fetcher.list_commits(owner, repo, ref))

    def compare_commits(self, owner: str, repo: str, base: str, head: str) -> List[RawCommit]:
        key = make_cache_key("compare_commits", {"owner": owner, "repo": repo, "base": base, "head": head})
        return self.cache.memoize(key, lambda: self._fetcher.compare_commits(owner, repo, base, head))
