#!/usr/bin/env python3
"""
Copy meals (and optionally headings) from the JSON data file into MongoDB.

Usage:
    python scripts/migrate_meals.py                       # meals from data.json
    python scripts/migrate_meals.py --include-headings    # meals and headings
    python scripts/migrate_meals.py --replace             # clear target collections first
"""

import sys
import logging
import argparse
from pathlib import Path
from typing import Dict, Optional

from pydantic import ValidationError

# Add parent directory to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from adapters.json_adapter import JsonDocumentStore  # noqa: E402
from app.config import Settings  # noqa: E402
from app.exceptions import StorageIOError  # noqa: E402
from domain.models import Heading, Meal  # noqa: E402
from repositories.factory import RecordStores, create_mongo_stores  # noqa: E402

logger = logging.getLogger("migrate_meals")


def migrate(
    source: JsonDocumentStore,
    target: RecordStores,
    include_headings: bool = False,
    replace: bool = False,
) -> Dict[str, int]:
    """
    Insert every JSON record into the target stores.

    Legacy keys (``halfServe``, ``heading``) are normalized through the
    domain models. When headings are migrated too, meal heading references
    are rewritten to the new heading IDs.

    Returns:
        Number of records inserted per collection
    """
    document = source.load()
    counts = {"meals": 0, "headings": 0, "skipped": 0}

    if replace:
        for repo in (target.meals, target.headings):
            clear = getattr(repo, "clear", None)
            if clear is not None:
                removed = clear()
                logger.info("Removed %d existing %s", removed, repo.collection)

    heading_ids: Dict[str, str] = {}
    if include_headings:
        for record in document["headings"]:
            heading = Heading.model_validate(record)
            created = target.headings.create({"name": heading.name})
            heading_ids[heading.id] = created["id"]
            counts["headings"] += 1

    for record in document["meals"]:
        try:
            meal = Meal.model_validate(record)
        except ValidationError as exc:
            logger.warning("Skipping malformed meal %s: %s", record.get("id"), exc)
            counts["skipped"] += 1
            continue
        fields = meal.to_record()
        if meal.heading_id in heading_ids:
            fields["headingId"] = heading_ids[meal.heading_id]
        target.meals.create(fields)
        counts["meals"] += 1

    return counts


def main(argv: Optional[list] = None) -> int:
    parser = argparse.ArgumentParser(description="Import JSON menu data into MongoDB")
    parser.add_argument("--data-file", type=Path, default=None, help="JSON data file (default: DATA_FILE setting)")
    parser.add_argument("--include-headings", action="store_true", help="Also import headings")
    parser.add_argument("--replace", action="store_true", help="Delete existing MongoDB records first")
    args = parser.parse_args(argv)

    settings = Settings()
    logging.basicConfig(level=settings.log_level.upper(), format=settings.log_format)

    data_file = args.data_file or settings.data_file
    if not data_file.exists():
        logger.error("Data file not found: %s", data_file)
        return 1

    target = create_mongo_stores(settings)
    try:
        counts = migrate(
            JsonDocumentStore(data_file),
            target,
            include_headings=args.include_headings,
            replace=args.replace,
        )
    except StorageIOError as exc:
        logger.error("Migration error: %s", exc)
        return 1
    finally:
        target.close()

    logger.info(
        "Successfully imported %d meals and %d headings (%d skipped).",
        counts["meals"],
        counts["headings"],
        counts["skipped"],
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
