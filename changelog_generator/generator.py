"""
Changelog generation facade.

Ties the GitHub client, range resolver, commit parser and renderer together
behind a single ``generate`` call. Results are cached per generator instance.
"""

import logging
import re
from typing import Any, Mapping, Optional, Tuple, Union

from .cache import ResponseCache, make_cache_key
from .config import Settings
from .errors import InvalidUrlError
from .fetcher import CachedGitHubFetcher, GitHubFetcher
from .models import ChangelogOptions, ChangelogResult, TagPair
from .parser import CommitParser, drop_invalid
from .renderer import ChangelogRenderer
from .resolver import RangeResolver

NO_CHANGES_MESSAGE = "No changes found between these versions."

GITHUB_URL_RE = re.compile(r"github\.com/([^/?#]+)/([^/?#]+)")

logger = logging.getLogger("changelog-generator.generator")


def parse_github_url(url: str) -> Tuple[str, str]:
    """
    Extract ``(owner, repo)`` from a GitHub repository URL.

    Raises:
        InvalidUrlError: If the URL does not name a GitHub repository
    """
    m = GITHUB_URL_RE.search(url or "")
    if not m:
        raise InvalidUrlError(url)
    owner = m.group(1)
    repo = re.sub(r"\.git$", "", m.group(2))
    if not repo:
        raise InvalidUrlError(url)
    return owner, repo


class ChangelogGenerator:
    """
    Generate a release changelog for a GitHub repository.

    One instance owns one GitHub client and one response cache, so repeated
    requests through the same instance are served from memory within the TTL.

    Args:
        token: GitHub token forwarded to the API, or None for anonymous access.
        settings: Runtime settings; defaults are read from the environment.
        fetcher: GitHub client to use instead of building one from ``token``.
        cache: Response cache to use instead of a fresh one.
    """

    def __init__(
        self,
        token: Optional[str] = None,
        settings: Optional[Settings] = None,
        fetcher: Optional[GitHubFetcher] = None,
        cache: Optional[ResponseCache] = None,
    ) -> None:
        settings = settings or Settings.from_env()
        if fetcher is None:
            fetcher = GitHubFetcher(
                token=token or settings.github_token,
                timeout=settings.github_timeout,
                retries=settings.github_retries,
            )
        self.cache = cache if cache is not None else ResponseCache(ttl=settings.cache_ttl)
        self.client = CachedGitHubFetcher(fetcher, self.cache)
        self.resolver = RangeResolver(self.client, max_workers=settings.max_workers)
        self.renderer = ChangelogRenderer()

    def generate(self, options: Union[ChangelogOptions, Mapping[str, Any]]) -> ChangelogResult:
        """
        Build the changelog described by ``options``.

        Returns:
            ChangelogResult with the Markdown changelog and the range it covers

        Raises:
            InvalidUrlError: If ``github_url`` is not a GitHub repository URL
            NotFoundError: If the repository or one of the refs does not exist
            UpstreamError: If the GitHub API fails
        """
        if not isinstance(options, ChangelogOptions):
            options = ChangelogOptions.from_dict(options)
        key = make_cache_key("generate", options.cache_params())
        return self.cache.memoize(key, lambda: self._generate(options))

    def _generate(self, options: ChangelogOptions) -> ChangelogResult:
        owner, repo = parse_github_url(options.github_url)
        logger.info("Generating changelog for %s/%s", owner, repo)

        tags = self.resolver.resolve(owner, repo, options.from_tag, options.to_tag)
        base, head = tags.previous, tags.latest

        if not base:
            # No lower bound: the whole history of head, oldest first
            commits = list(reversed(self.client.list_commits(owner, repo, head)))
        elif base == head:
            commits = []
        else:
            commits = self.client.compare_commits(owner, repo, base, head)

        if not commits:
            logger.info("No changes between %s and %s", base, head)
            return ChangelogResult(changelog=NO_CHANGES_MESSAGE, from_tag=base, to_tag=head)

        parsed = CommitParser.parse_all(commits)
        if not options.include_invalid_commits:
            parsed = drop_invalid(parsed)

        changelog = self.renderer.render(parsed, TagPair(latest=head, previous=base), options)
        logger.info("Rendered changelog for %s/%s from %d commits", owner, repo, len(parsed))
        return ChangelogResult(changelog=changelog, from_tag=base, to_tag=head)
