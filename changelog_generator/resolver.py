"""
Changelog range resolution.

A changelog runs from the most recently created release tag to the head of
the repository's default branch, unless the caller names either end.
"""

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional

from .models import TagInfo, TagPair

MAX_TAGS = 100

logger = logging.getLogger("changelog-generator.resolver")


class RangeResolver:
    """
    Determine the (base, head) pair of a changelog.

    Args:
        client: A fetcher exposing ``get_repository``, ``list_tags`` and
            ``get_commit_date`` (usually a ``CachedGitHubFetcher``).
        max_workers: Upper bound on concurrent commit-date lookups.
    """

    def __init__(self, client, max_workers: int = 8) -> None:
        self.client = client
        self.max_workers = max_workers

    def resolve(
        self,
        owner: str,
        repo: str,
        explicit_from: Optional[str] = None,
        explicit_to: Optional[str] = None,
    ) -> TagPair:
        if explicit_from is not None and explicit_to is not None:
            return TagPair(latest=explicit_to, previous=explicit_from)

        default_branch = self.client.get_repository(owner, repo).default_branch
        tags = self.client.list_tags(owner, repo, limit=MAX_TAGS)

        if tags:
            previous = self.latest_tag(owner, repo, tags).name
        else:
            logger.info("No tags in %s/%s, range is empty", owner, repo)
            previous = default_branch

        pair = TagPair(
            latest=explicit_to if explicit_to is not None else default_branch,
            previous=explicit_from if explicit_from is not None else previous,
        )
        logger.info("Resolved range %s...%s for %s/%s", pair.previous, pair.latest, owner, repo)
        return pair

    def latest_tag(self, owner: str, repo: str, tags: List[TagInfo]) -> TagInfo:
        """
        Return the tag whose commit has the latest committer date.

        Tags with equal dates keep their listing order: the first one wins.
        """
        workers = max(1, min(self.max_workers, len(tags)))
        with ThreadPoolExecutor(max_workers=workers) as pool:
            dates = list(pool.map(lambda t: self.client.get_commit_date(owner, repo, t.commit_sha), tags))

        best, best_date = tags[0], dates[0]
        for tag, date in zip(tags[1:], dates[1:]):
            if date > best_date:
                best, best_date = tag, date
        return best
