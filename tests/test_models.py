"""Tests for changelog_generator.models and changelog_generator.config."""

from __future__ import annotations

import pytest

from changelog_generator.config import Settings
from changelog_generator.models import COMMIT_TYPES, ChangelogOptions


class TestCommitTypes:
    """Tests for the COMMIT_TYPES table."""

    def test_fixed_order(self) -> None:
        assert [t.header for t in COMMIT_TYPES] == [
            "New Features",
            "Bug Fixes",
            "Performance",
            "Refactors",
            "Tests",
            "Build",
            "Documentation",
            "Other Changes",
        ]

    def test_build_collects_ci(self) -> None:
        build = COMMIT_TYPES[5]
        assert build.types == ("build", "ci")
        assert build.primary == "build"


class TestChangelogOptions:
    """Tests for ChangelogOptions."""

    def test_from_dict_camel_case(self) -> None:
        options = ChangelogOptions.from_dict({
            "githubUrl": "https://github.com/x/y",
            "excludeTypes": ["docs"],
            "useGitmojis": True,
            "unknown": 1,
        })

        assert options.github_url == "https://github.com/x/y"
        assert options.exclude_types == ("docs",)
        assert options.use_gitmojis is True

    def test_lists_and_tuples_are_equal(self) -> None:
        a = ChangelogOptions(github_url="u", exclude_scopes=["a"])
        b = ChangelogOptions(github_url="u", exclude_scopes=("a",))

        assert a == b
        assert a.cache_params() == b.cache_params()

    def test_single_string_is_one_value(self) -> None:
        options = ChangelogOptions.from_dict({"githubUrl": "u", "excludeTypes": "fix", "excludeScopes": "internal"})

        assert options.exclude_types == ("fix",)
        assert options.exclude_scopes == ("internal",)

    def test_defaults(self) -> None:
        options = ChangelogOptions(github_url="u")

        assert options.include_invalid_commits is True
        assert options.use_gitmojis is False
        assert options.exclude_types == ()


class TestSettings:
    """Tests for Settings.from_env()."""

    def test_defaults(self) -> None:
        settings = Settings.from_env({})

        assert settings.github_token is None
        assert settings.cache_ttl == 3600
        assert settings.github_retries == 0

    def test_overrides(self) -> None:
        settings = Settings.from_env({
            "GITHUB_TOKEN": "tok",
            "CHANGELOG_CACHE_TTL": "60",
            "GITHUB_TIMEOUT": "5",
            "CHANGELOG_MAX_WORKERS": "0",
        })

        assert settings.github_token == "tok"
        assert settings.cache_ttl == 60
        assert settings.github_timeout == 5
        assert settings.max_workers == 1

    def test_max_generators(self) -> None:
        assert Settings.from_env({}).max_generators == 32
        assert Settings.from_env({"CHANGELOG_MAX_GENERATORS": "0"}).max_generators == 1

    @pytest.mark.parametrize("name", ["CHANGELOG_CACHE_TTL", "GITHUB_TIMEOUT", "CHANGELOG_MAX_GENERATORS"])
    def test_malformed_number_names_variable(self, name: str) -> None:
        with pytest.raises(ValueError, match=name):
            Settings.from_env({name: "abc"})
