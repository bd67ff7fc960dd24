"""Tests for changelog_generator.main."""

from __future__ import annotations

import json
from pathlib import Path
from unittest.mock import MagicMock, patch

import pytest

from changelog_generator.errors import InvalidUrlError
from changelog_generator.main import main
from changelog_generator.models import ChangelogOptions, ChangelogResult

CHANGELOG = (
    "## [main] - 2024-07-01\n"
    "\n"
    "### Bug Fixes\n"
    "- [`abcdef1`](https://github.com/x/y/commit/abcdef1234567890) - crash\n"
)


@pytest.fixture
def generator_cls():
    with patch("changelog_generator.main.ChangelogGenerator") as mock_cls:
        mock_cls.return_value.generate.return_value = ChangelogResult(
            changelog=CHANGELOG, from_tag="v1", to_tag="main"
        )
        yield mock_cls


class TestMain:
    """Tests for main()."""

    def test_prints_markdown(self, generator_cls: MagicMock, capsys: pytest.CaptureFixture) -> None:
        code = main(["--url", "https://github.com/x/y"])

        assert code == 0
        assert capsys.readouterr().out == CHANGELOG

    def test_builds_options_from_flags(self, generator_cls: MagicMock) -> None:
        main([
            "--url", "https://github.com/x/y",
            "--token", "tok",
            "--from-tag", "v1",
            "--exclude-types", "docs, build",
            "--exclude-scopes", "internal",
            "--gitmojis",
            "--reverse",
            "--drop-invalid",
        ])

        assert generator_cls.call_args.kwargs["token"] == "tok"
        options = generator_cls.return_value.generate.call_args.args[0]
        assert options == ChangelogOptions(
            github_url="https://github.com/x/y",
            from_tag="v1",
            exclude_types=("docs", "build"),
            exclude_scopes=("internal",),
            include_invalid_commits=False,
            use_gitmojis=True,
            reverse_order=True,
        )

    def test_json_output(self, generator_cls: MagicMock, capsys: pytest.CaptureFixture) -> None:
        main(["--url", "https://github.com/x/y", "--json"])

        doc = json.loads(capsys.readouterr().out)
        assert doc["version"] == "main"
        assert doc["fromTag"] == "v1"
        assert doc["sections"]["Bug Fixes"][0]["subject"] == "crash"

    def test_writes_output_file(self, generator_cls: MagicMock, tmp_path: Path) -> None:
        target = tmp_path / "CHANGELOG.md"

        main(["--url", "https://github.com/x/y", "--output", str(target)])

        assert target.read_text(encoding="utf-8") == CHANGELOG

    def test_error_exit_code(self, generator_cls: MagicMock, capsys: pytest.CaptureFixture) -> None:
        generator_cls.return_value.generate.side_effect = InvalidUrlError("nope")

        code = main(["--url", "nope"])

        assert code == 1
        assert "Invalid GitHub URL" in capsys.readouterr().err

    def test_malformed_environment_exits_cleanly(
        self, generator_cls: MagicMock, capsys: pytest.CaptureFixture, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("CHANGELOG_CACHE_TTL", "abc")

        code = main(["--url", "https://github.com/x/y"])

        assert code == 1
        err = capsys.readouterr().err
        assert err.startswith("Error: invalid configuration:")
        assert "CHANGELOG_CACHE_TTL" in err
        generator_cls.assert_not_called()
