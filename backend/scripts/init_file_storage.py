#!/usr/bin/env python3
"""
Create the uploads directory layout.

Run from the backend directory: python -m scripts.init_file_storage [--base uploads]
Safe to run repeatedly; existing directories and files are left alone.
"""
import argparse
import sys
from pathlib import Path
from typing import Dict, List

from app.core.logging_config import LoggingConfig

logger = LoggingConfig.get_logger(__name__)

DIRECTORIES = (
    "",
    "ProjectFiles",
    "postMedia/images",
    "postMedia/videos",
    "profileImages",
    "videos",
)

GITIGNORE_DIRS = ("ProjectFiles", "postMedia/images", "postMedia/videos")
GITIGNORE_CONTENT = "*\n!.gitignore\n!README.md\n"

PROJECT_FILES_README = """# Project files

Files uploaded for projects are stored here, one directory per project:

    ProjectFiles/project-<project id>/<timestamp ms>_<file name>

Accepted types: PDF, PNG, JPG and PowerPoint.
Contents are ignored by git; only this README and .gitignore are tracked.
"""


def _ensure_dir(path: Path, report: Dict[str, List[str]]) -> None:
    if path.is_dir():
        logger.info(f"Directory already exists: {path}")
        report["existing"].append(str(path))
    else:
        path.mkdir(parents=True, exist_ok=True)
        logger.info(f"Directory created: {path}")
        report["created"].append(str(path))


def _ensure_file(path: Path, content: str, report: Dict[str, List[str]]) -> None:
    if path.exists():
        logger.info(f"File already exists: {path}")
        report["existing"].append(str(path))
    else:
        path.write_text(content, encoding="utf-8")
        logger.info(f"File created: {path}")
        report["created"].append(str(path))


def init_file_storage(base: str = "uploads") -> Dict[str, List[str]]:
    """
    Create upload directories, the ProjectFiles README and .gitignore files

    Returns:
        Dict with ``created`` and ``existing`` path lists
    """
    root = Path(base)
    report: Dict[str, List[str]] = {"created": [], "existing": []}

    for relative in DIRECTORIES:
        _ensure_dir(root / relative, report)

    _ensure_file(root / "ProjectFiles" / "README.md", PROJECT_FILES_README, report)
    for relative in GITIGNORE_DIRS:
        _ensure_file(root / relative / ".gitignore", GITIGNORE_CONTENT, report)

    logger.info(
        f"File storage initialised under {root}: "
        f"{len(report['created'])} created, {len(report['existing'])} already present"
    )
    return report


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(prog="init_file_storage", description=__doc__.strip().splitlines()[0])
    parser.add_argument("--base", default="uploads", help="Uploads root directory (default: uploads)")
    args = parser.parse_args(argv)

    try:
        report = init_file_storage(args.base)
    except OSError as e:
        logger.error(f"Failed to initialise file storage: {e}", exc_info=True)
        return 1

    for path in report["created"]:
        print(f"created         {path}")
    for path in report["existing"]:
        print(f"already exists  {path}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
