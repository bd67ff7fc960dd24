"""
Commit parsing module.

This module classifies commit messages using the Conventional Commits format
(``type(scope)!: subject``). Messages that do not follow the format are kept
and classified as ``other``.
"""

import re
from typing import Iterable, List, Optional

from .models import OTHER_TYPE, ParsedCommit, RawCommit


class CommitParser:
    """
    Parse raw commits into :class:`ParsedCommit` records.

    Every input commit yields exactly one record; parsing never fails.
    """

    CONVENTIONAL_RE = re.compile(r"^(\w+)(?:\(([^)]+)\))?(?:!)?: (.+)")

    @staticmethod
    def parse(commit: RawCommit) -> ParsedCommit:
        message = commit.message or ""
        first = message.split("\n", 1)[0].strip()
        body = CommitParser._body(message)

        m = CommitParser.CONVENTIONAL_RE.match(first)
        if m:
            ctype, scope, subject = m.group(1).lower(), m.group(2), m.group(3)
        else:
            ctype, scope, subject = OTHER_TYPE, None, first

        return ParsedCommit(
            type=ctype,
            scope=scope,
            subject=subject or commit.sha,
            body=body,
            sha=commit.sha,
            url=commit.url,
            author=commit.author,
            author_url=commit.author_url,
        )

    @staticmethod
    def parse_all(commits: Iterable[RawCommit]) -> List[ParsedCommit]:
        return [CommitParser.parse(c) for c in commits]

    @staticmethod
    def _body(message: str) -> Optional[str]:
        """Second paragraph of the message, if any."""
        paragraphs = message.split("\n\n")
        if len(paragraphs) < 2:
            return None
        return paragraphs[1].strip() or None


def drop_invalid(commits: Iterable[ParsedCommit]) -> List[ParsedCommit]:
    """
    Remove commits that were not written as conventional commits.

    Callers that prefer to omit non-conforming commits rather than list them
    under "Other Changes" apply this after parsing.
    """
    return [c for c in commits if c.type != OTHER_TYPE]
