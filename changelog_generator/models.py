"""
Data models for the changelog generator.

This module contains the shared data structures used across all modules.
"""

import datetime
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Optional, Tuple


@dataclass(frozen=True)
class RawCommit:
    """A single commit as returned by the GitHub API, before classification."""
    sha: str
    message: str
    url: str
    author: Optional[str] = None
    author_url: Optional[str] = None


@dataclass(frozen=True)
class ParsedCommit:
    """A commit classified by its conventional-commit prefix."""
    type: str
    subject: str
    sha: str
    url: str
    scope: Optional[str] = None
    body: Optional[str] = None
    author: Optional[str] = None
    author_url: Optional[str] = None


@dataclass(frozen=True)
class TagInfo:
    """A repository tag and the commit it points to."""
    name: str
    commit_sha: str


@dataclass(frozen=True)
class RepoMeta:
    """Repository metadata from GitHub."""
    full_name: str
    default_branch: str
    url: Optional[str] = None


@dataclass(frozen=True)
class TagPair:
    """Head (``latest``) and base (``previous``) references of a changelog range."""
    latest: str
    previous: str


@dataclass(frozen=True)
class CommitType:
    """One changelog category: the keywords it collects, its header and gitmoji."""
    types: Tuple[str, ...]
    header: str
    icon: str

    @property
    def primary(self) -> str:
        return self.types[0]


# Section order of every rendered changelog.
COMMIT_TYPES: Tuple[CommitType, ...] = (
    CommitType(("feat",), "New Features", ":sparkles:"),
    CommitType(("fix",), "Bug Fixes", ":bug:"),
    CommitType(("perf",), "Performance", ":zap:"),
    CommitType(("refactor",), "Refactors", ":recycle:"),
    CommitType(("test",), "Tests", ":white_check_mark:"),
    CommitType(("build", "ci"), "Build", ":construction_worker:"),
    CommitType(("docs",), "Documentation", ":memo:"),
    CommitType(("other",), "Other Changes", ":flying_saucer:"),
)

OTHER_TYPE = "other"

# camelCase wire names -> ChangelogOptions attribute names
_OPTION_ALIASES = {
    "githubUrl": "github_url",
    "fromTag": "from_tag",
    "toTag": "to_tag",
    "excludeTypes": "exclude_types",
    "excludeScopes": "exclude_scopes",
    "restrictToTypes": "restrict_to_types",
    "includeRefIssues": "include_ref_issues",
    "includeInvalidCommits": "include_invalid_commits",
    "useGitmojis": "use_gitmojis",
    "reverseOrder": "reverse_order",
}


@dataclass(frozen=True)
class ChangelogOptions:
    """
    Caller-supplied configuration for one changelog generation.

    Only ``github_url`` is required. ``from_tag``/``to_tag`` override the
    automatically resolved range; the list fields filter what is rendered.
    """
    github_url: str
    from_tag: Optional[str] = None
    to_tag: Optional[str] = None
    exclude_types: Tuple[str, ...] = ()
    exclude_scopes: Tuple[str, ...] = ()
    restrict_to_types: Tuple[str, ...] = ()
    include_ref_issues: bool = False
    include_invalid_commits: bool = True
    use_gitmojis: bool = False
    reverse_order: bool = False

    def __post_init__(self) -> None:
        # Lists are accepted for convenience but stored as tuples so options stay hashable.
        for name in ("exclude_types", "exclude_scopes", "restrict_to_types"):
            value = getattr(self, name)
            if value is None:
                value = ()
            elif isinstance(value, str):
                value = (value,)
            object.__setattr__(self, name, tuple(value))

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "ChangelogOptions":
        """
        Build options from a mapping using either camelCase or snake_case keys.

        Unknown keys are ignored.
        """
        known = set(cls.__dataclass_fields__)
        kwargs: Dict[str, Any] = {}
        for key, value in data.items():
            name = _OPTION_ALIASES.get(key, key)
            if name in known:
                kwargs[name] = value
        return cls(**kwargs)

    def cache_params(self) -> Dict[str, Any]:
        """Deterministic parameter mapping used to key cached results."""
        return {
            "github_url": self.github_url,
            "from_tag": self.from_tag,
            "to_tag": self.to_tag,
            "exclude_types": list(self.exclude_types),
            "exclude_scopes": list(self.exclude_scopes),
            "restrict_to_types": list(self.restrict_to_types),
            "include_ref_issues": self.include_ref_issues,
            "include_invalid_commits": self.include_invalid_commits,
            "use_gitmojis": self.use_gitmojis,
            "reverse_order": self.reverse_order,
        }


@dataclass(frozen=True)
class ChangelogResult:
    """The rendered changelog and the range it covers."""
    changelog: str
    from_tag: str
    to_tag: str


@dataclass
class StructuredChangelog:
    """Structured form of a rendered changelog, as read back from its Markdown."""
    version: str = ""
    date: str = ""
    sections: Dict[str, List[Dict[str, Optional[str]]]] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "version": self.version,
            "date": self.date,
            "sections": {
                header: [
                    {
                        "hash": e["hash"],
                        "url": e["url"],
                        "scope": e["scope"],
                        "subject": e["subject"],
                        "author": e["author"],
                        "authorUrl": e["author_url"],
                    }
                    for e in entries
                ]
                for header, entries in self.sections.items()
            },
        }


def today_utc() -> datetime.date:
    return datetime.datetime.now(datetime.timezone.utc).date()
