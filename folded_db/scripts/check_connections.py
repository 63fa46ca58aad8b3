"""
Connection Checker.

Run this script to validate database connection descriptors stored in a
JSON file before handing them to the application. The file holds either
a single descriptor object or an array of them.

Usage:
    python -m folded_db.scripts.check_connections connections.json

Exits with status 1 if any descriptor is invalid.
"""

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import List, Optional

from folded_db.config import settings
from folded_db.repositories.connections import ConnectionRegistry


def check_connections(path: Path) -> int:
    try:
        descriptors = json.loads(path.read_text(encoding="utf-8"))
    except OSError as e:
        print(f"Cannot read {path}: {e}")
        return 1
    except json.JSONDecodeError as e:
        print(f"{path} is not valid JSON: {e}")
        return 1

    if isinstance(descriptors, dict):
        descriptors = [descriptors]
    if not isinstance(descriptors, list):
        print(f"{path} must hold a connection object or an array of them, got {type(descriptors).__name__}.")
        return 1

    registry = ConnectionRegistry()
    failures = 0

    print(f"Found {len(descriptors)} connection(s) in {path}.")

    for index, descriptor in enumerate(descriptors, start=1):
        try:
            error = registry.validate(descriptor)
        except TypeError as e:
            error = e

        if error:
            failures += 1
            print(f"#{index}: {error}")
        else:
            print(f"#{index}: OK ({descriptor['driver']})")

    return 1 if failures else 0


def main(argv: Optional[List[str]] = None) -> int:
    parser = argparse.ArgumentParser(description="Validate database connection descriptors.")
    parser.add_argument("path", type=Path, help="JSON file with one descriptor or an array of them")
    args = parser.parse_args(argv)

    logging.basicConfig(level=settings.LOG_LEVEL.upper())

    return check_connections(args.path)


if __name__ == "__main__":
    sys.exit(main())
