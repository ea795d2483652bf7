#!/usr/bin/env python3
"""
Format the slack-mcp sources and tests with black.
"""
import logging
import subprocess
import sys
from pathlib import Path

logging.basicConfig(
    level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger("slack-mcp-format")

ROOT_DIR = Path(__file__).parent.parent.absolute()

FORMAT_DIRS = [
    ROOT_DIR / "src" / "slack_mcp",
    ROOT_DIR / "tests",
    ROOT_DIR / "scripts",
]


def main():
    paths = [str(d) for d in FORMAT_DIRS if d.exists()]
    logger.info(f"Formatting {', '.join(paths)}")

    result = subprocess.run(["black", *paths], capture_output=True, text=True)
    # black reports what it touched on stderr
    if result.stderr:
        logger.info(result.stderr.strip())

    if result.returncode != 0:
        logger.error("Formatting failed")
        return 1
    logger.info("Formatting completed")
    return 0


if __name__ == "__main__":
    sys.exit(main())
