"""
Changelog Rendering Module

This module contains the ChangelogRenderer class responsible for turning
classified commits into a Markdown changelog, and ``parse_changelog`` which
reads that Markdown back into a structured document.
"""

import datetime
import re
from typing import List, Optional, Sequence

from .models import (
    COMMIT_TYPES,
    OTHER_TYPE,
    ChangelogOptions,
    CommitType,
    ParsedCommit,
    StructuredChangelog,
    TagPair,
    today_utc,
)

VERSION_RE = re.compile(r"^## \[(.*?)\] - (.*)$")
HEADER_RE = re.compile(r"^### (?::[\w+-]+: )?(.*)$")
ENTRY_RE = re.compile(
    r"^- \[`([^`]*)`\]\((.*?)\) - "
    r"(?:\*\*(.+?)\*\*: )?"
    r"(.*?)"
    r"(?: by \[@([^\]]+)\]\(([^)]*)\))?$"
)

ISSUE_REF_RE = re.compile(r"(?<![\w\[/])#(\d+)\b")
REPO_FROM_COMMIT_URL_RE = re.compile(r"^(https?://[^/]+/[^/]+/[^/]+)/commit/")


class ChangelogRenderer:
    """
    Compose a Markdown changelog from parsed commits.

    Sections follow the fixed order of ``COMMIT_TYPES``; empty sections are
    omitted. Output is deterministic for a given input and date.
    """

    def __init__(self, categories: Sequence[CommitType] = COMMIT_TYPES) -> None:
        self.categories = tuple(categories)

    def render(
        self,
        commits: Sequence[ParsedCommit],
        tags: TagPair,
        options: ChangelogOptions,
        today: Optional[datetime.date] = None,
    ) -> str:
        """
        Build a Markdown changelog.

        Args:
            commits: Parsed commits, oldest first
            tags: Range being rendered; ``tags.latest`` names the version
            options: Filtering and formatting options
            today: Release date to print, defaults to the current UTC date

        Returns:
            Changelog Markdown terminated by a newline
        """
        entries = list(reversed(commits)) if options.reverse_order else list(commits)
        sections: List[str] = []

        for category in self.selected_categories(options):
            matching = [
                c for c in entries
                if c.type in category.types
                and not (c.scope and c.scope in options.exclude_scopes)
            ]
            if not matching:
                continue

            header = f"### {category.icon} {category.header}" if options.use_gitmojis else f"### {category.header}"
            lines = [header]
            lines.extend(self._format_entry(c, options) for c in matching)
            sections.append("\n".join(lines))

        date = (today or today_utc()).isoformat()
        version = f"## [{tags.latest}] - {date}"
        return f"{version}\n\n" + "\n\n".join(sections) + "\n"

    def selected_categories(self, options: ChangelogOptions) -> List[CommitType]:
        """Categories left after applying ``restrict_to_types`` and ``exclude_types``."""
        selected = []
        for category in self.categories:
            if options.restrict_to_types and not set(category.types) & set(options.restrict_to_types):
                continue
            # "other" can only be filtered by scope
            if category.primary != OTHER_TYPE and category.primary in options.exclude_types:
                continue
            selected.append(category)
        return selected

    def _format_entry(self, commit: ParsedCommit, options: ChangelogOptions) -> str:
        scope = f"**{commit.scope}**: " if commit.scope else ""
        subject = commit.subject if commit.scope else escape_subject(commit.subject)
        if options.include_ref_issues:
            subject = link_issue_refs(subject, commit.url)
        author = f" by [@{commit.author}]({commit.author_url or ''})" if commit.author else ""
        return f"- [`{commit.sha[:7]}`]({commit.url}) - {scope}{subject}{author}"


def escape_subject(subject: str) -> str:
    """
    Escape a leading backslash or bold marker so an unscoped subject cannot
    be read back as a scope.
    """
    if subject.startswith("**"):
        return "\\*\\*" + subject[2:]
    if subject.startswith("\\"):
        return "\\" + subject
    return subject


def unescape_subject(subject: str) -> str:
    if subject.startswith("\\*\\*"):
        return "**" + subject[4:]
    if subject.startswith("\\\\"):
        return subject[1:]
    return subject


def link_issue_refs(subject: str, commit_url: str) -> str:
    """Turn ``#123`` references into links to the repository's issues."""
    m = REPO_FROM_COMMIT_URL_RE.match(commit_url or "")
    if not m:
        return subject
    repo_url = m.group(1)
    return ISSUE_REF_RE.sub(lambda ref: f"[#{ref.group(1)}]({repo_url}/issues/{ref.group(1)})", subject)


def parse_changelog(markdown: str) -> StructuredChangelog:
    """
    Read a changelog produced by :class:`ChangelogRenderer` back into structured form.

    Only the exact format the renderer emits is understood; other lines are ignored.
    """
    doc = StructuredChangelog()
    current: Optional[str] = None

    for line in markdown.split("\n"):
        if line.startswith("## "):
            m = VERSION_RE.match(line)
            if m:
                doc.version, doc.date = m.group(1), m.group(2)
        elif line.startswith("### "):
            current = HEADER_RE.match(line).group(1).strip()
            doc.sections.setdefault(current, [])
        elif line.startswith("- ") and current is not None:
            m = ENTRY_RE.match(line)
            if not m:
                continue
            hash_, url, scope, subject, author, author_url = m.groups()
            doc.sections[current].append({
                "hash": hash_,
                "url": url,
                "scope": scope or None,
                "subject": subject if scope else unescape_subject(subject),
                "author": author or None,
                "author_url": author_url or None,
            })

    return doc
