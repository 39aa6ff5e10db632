"""
Image pool seeding script.

Registers image files found under DATASET_ROOT/<category>/ as pool rows.
Already registered images are left untouched.

Dependencies: sqlalchemy, python-dotenv, backend.configs
System role: Image pool bootstrap

Usage:
    DATASET_ROOT=/data/final_dataset python -m backend.boundary.db.seed_images
"""

import logging
import os
import re
import sys
from pathlib import Path

from dotenv import load_dotenv
from sqlalchemy.dialects.postgresql import insert

from backend.boundary.db.connection import get_session_factory
from backend.boundary.db.models import ImageModel
from backend.configs import IMAGE_CATEGORIES
from backend.observability.logger import configure_logging

logger = logging.getLogger(__name__)

IMAGE_EXT_RE = re.compile(r"\.(jpg|jpeg|png)$", re.IGNORECASE)


def collect_images(dataset_root: Path) -> list[dict[str, str]]:
    """
    List image files per category folder.

    Raises:
        FileNotFoundError: If a category folder is missing
    """
    rows: list[dict[str, str]] = []
    for category in IMAGE_CATEGORIES:
        folder = dataset_root / category
        if not folder.is_dir():
            raise FileNotFoundError(f"Missing category folder: {folder}")
        for path in sorted(folder.iterdir()):
            if path.is_file() and IMAGE_EXT_RE.search(path.name):
                rows.append({"id": path.name, "category": category})
    return rows


def seed_images(dataset_root: Path) -> int:
    """
    Insert image rows in one transaction, ignoring existing ids.

    Returns:
        int: Number of image files found
    """
    rows = collect_images(dataset_root)
    logger.info("Found image files", extra={"count": len(rows), "root": str(dataset_root)})
    if not rows:
        return 0

    SessionFactory = get_session_factory()
    with SessionFactory() as session, session.begin():
        stmt = insert(ImageModel).values(rows).on_conflict_do_nothing(index_elements=["id"])
        session.execute(stmt)
    logger.info("Image seed complete", extra={"count": len(rows)})
    return len(rows)


if __name__ == "__main__":
    load_dotenv()
    configure_logging()
    root = Path(os.getenv("DATASET_ROOT", Path.home() / "Final Dataset"))
    try:
        seed_images(root)
    except Exception:
        logger.exception("Image seed failed", extra={"root": str(root)})
        sys.exit(1)
