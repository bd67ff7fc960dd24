#!/usr/bin/env python3
"""
Command-line interface for the changelog generator.

Usage (example):
    changelog-generator --url https://github.com/octocat/Hello-World --token GITHUB_TOKEN --output CHANGELOG.md
"""

import argparse
import json
import logging
import sys
from typing import List, Optional

from .config import Settings
from .errors import ChangelogError
from .generator import ChangelogGenerator
from .models import ChangelogOptions
from .renderer import parse_changelog

logger = logging.getLogger("changelog-generator")


def _csv(value: str) -> List[str]:
    return [v.strip() for v in value.split(",") if v.strip()]


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Generate a changelog from a GitHub repository's commit history.")
    parser.add_argument("--url", "-u", required=True, help="GitHub repository URL")
    parser.add_argument("--token", "-t", required=False, help="GitHub token (defaults to $GITHUB_TOKEN)")
    parser.add_argument("--from-tag", help="Base reference (defaults to the most recent tag)")
    parser.add_argument("--to-tag", help="Head reference (defaults to the default branch)")
    parser.add_argument("--exclude-types", type=_csv, default=[], help="Comma-separated commit types to leave out")
    parser.add_argument("--exclude-scopes", type=_csv, default=[], help="Comma-separated scopes to leave out")
    parser.add_argument("--restrict-to-types", type=_csv, default=[], help="Comma-separated commit types to keep")
    parser.add_argument("--gitmojis", action="store_true", help="Prefix section headings with gitmojis")
    parser.add_argument("--link-issues", action="store_true", help="Link #123 references to issues")
    parser.add_argument("--reverse", action="store_true", help="List newest commits first")
    parser.add_argument("--drop-invalid", action="store_true", help="Omit commits that are not conventional commits")
    parser.add_argument("--json", action="store_true", help="Print the structured changelog as JSON")
    parser.add_argument("--output", "-o", help="Write the changelog to this file instead of stdout")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    return parser


def main(argv: Optional[List[str]] = None) -> int:
    """
    Main entry point for the changelog generator.

    Returns:
        Process exit code
    """
    args = build_parser().parse_args(argv)
    logging.basicConfig(level=logging.DEBUG if args.verbose else logging.INFO, stream=sys.stderr)

    options = ChangelogOptions(
        github_url=args.url,
        from_tag=args.from_tag,
        to_tag=args.to_tag,
        exclude_types=args.exclude_types,
        exclude_scopes=args.exclude_scopes,
        restrict_to_types=args.restrict_to_types,
        include_ref_issues=args.link_issues,
        include_invalid_commits=not args.drop_invalid,
        use_gitmojis=args.gitmojis,
        reverse_order=args.reverse,
    )

    try:
        settings = Settings.from_env()
    except ValueError as e:
        logger.error("Invalid configuration: %s", e)
        print(f"Error: invalid configuration: {e}", file=sys.stderr)
        return 1

    try:
        generator = ChangelogGenerator(token=args.token, settings=settings)
        result = generator.generate(options)
    except KeyboardInterrupt:
        logger.info("Changelog generation interrupted by user")
        return 1
    except ChangelogError as e:
        logger.error("Changelog generation failed: %s", e)
        print(f"Error: {e}", file=sys.stderr)
        return 1

    if args.json:
        doc = parse_changelog(result.changelog).to_dict()
        doc.update(fromTag=result.from_tag, toTag=result.to_tag)
        output = json.dumps(doc, indent=2) + "\n"
    else:
        output = result.changelog if result.changelog.endswith("\n") else result.changelog + "\n"

    if args.output:
        logger.info("Writing changelog to %s", args.output)
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(output)
    else:
        sys.stdout.write(output)

    logger.info("Changelog %s...%s generated", result.from_tag, result.to_tag)
    return 0


if __name__ == "__main__":
    sys.exit(main())
