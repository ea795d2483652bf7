#!/usr/bin/env python3
"""
Run flake8, mypy and black checks on the slack-mcp sources and tests.
"""
import argparse
import logging
import subprocess
import sys
from pathlib import Path

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("slack-mcp-lint")

ROOT_DIR = Path(__file__).parent.parent.absolute()

CHECK_DIRS = [
    ROOT_DIR / "src" / "slack_mcp",
    ROOT_DIR / "tests",
]

# black's default line length; flake8 otherwise stops at 79
MAX_LINE_LENGTH = "88"


def run_command(cmd, description):
    """Run a command, logging its output when it fails."""
    logger.info(f"{description}...")
    result = subprocess.run(cmd, capture_output=True, text=True)
    if result.returncode == 0:
        logger.info(f"{description} passed")
        return True

    logger.error(f"{description} failed")
    for output in (result.stdout, result.stderr):
        if output:
            logger.error(output)
    return False


def run_linting(dirs, auto_fix=False):
    paths = [str(d) for d in dirs if Path(d).exists()]
    if not paths:
        logger.warning("Nothing to check")
        return 0

    if auto_fix:
        run_command(["black", *paths], "Black formatting")

    checks = [
        (
            [
                "flake8",
                f"--max-line-length={MAX_LINE_LENGTH}",
                "--extend-ignore=E203",
                *paths,
            ],
            "Flake8 linting",
        ),
        (
            ["mypy", "--explicit-package-bases", "--ignore-missing-imports", *paths],
            "Mypy type checking",
        ),
        (["black", "--check", *paths], "Black format checking"),
    ]
    # Run every check even after a failure so all problems are reported at once
    results = [run_command(cmd, description) for cmd, description in checks]

    if all(results):
        logger.info("All linting checks passed")
        return 0
    logger.error("Some linting checks failed")
    return 1


def main():
    parser = argparse.ArgumentParser(description="Lint the slack-mcp codebase.")
    parser.add_argument(
        "--fix",
        action="store_true",
        help="Reformat with black before checking",
    )
    parser.add_argument(
        "--dirs", nargs="+", help="Directories to check (default: src/slack_mcp tests)"
    )
    args = parser.parse_args()

    dirs = [Path(d) for d in args.dirs] if args.dirs else CHECK_DIRS
    return run_linting(dirs, auto_fix=args.fix)


if __name__ == "__main__":
    sys.exit(main())
