#!/usr/bin/env python3
# =============================================================================
# scripts/seed.py - Database Seeder
# =============================================================================
# Imports or destroys the sample bootcamps and courses in _data/.
#
# Usage:
#   # Import (bootcamps are geocoded, so network access is needed)
#   python scripts/seed.py -i
#
#   # Delete all bootcamps and courses
#   python scripts/seed.py -d
#
# Prerequisites:
#   - MongoDB must be running
#   - DB_URL must be set (.env file)
# =============================================================================

import argparse
import json
import logging
import os
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv
load_dotenv()

from bson import ObjectId

from app.config import settings
from app.exceptions import DevCamperException
from core.models import BootcampCreate, CourseCreate
from core.services import BootcampService, CourseService
from lib.geocoder import Geocoder
from lib.mongo_client import BOOTCAMPS, COURSES, MongoDatabase

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(name)s - %(levelname)s - %(message)s")
logger = logging.getLogger("seed")

DATA_DIR = Path(__file__).resolve().parent.parent / "_data"


def load(name: str) -> list[dict]:
    with open(DATA_DIR / name, encoding="utf-8") as f:
        return json.load(f)


def import_data(database: MongoDatabase, geocoder: Geocoder) -> None:
    """Create every bootcamp, then every course (recomputing average costs)."""
    bootcamps = BootcampService(database, geocoder)
    courses = CourseService(database)

    for item in load("bootcamps.json"):
        bootcamp_id = ObjectId(item.pop("_id"))
        bootcamps.create_bootcamp(BootcampCreate(**item), bootcamp_id=bootcamp_id)

    for item in load("courses.json"):
        course_id = ObjectId(item.pop("_id"))
        courses.create_course(CourseCreate(**item), course_id=course_id)

    logger.info("Data Imported...")


def delete_data(database: MongoDatabase) -> None:
    """Remove all bootcamps and courses."""
    removed_courses = database.collection(COURSES).delete_many({}).deleted_count
    removed_bootcamps = database.collection(BOOTCAMPS).delete_many({}).deleted_count
    logger.info(f"Data Destroyed... ({removed_bootcamps} bootcamps, {removed_courses} courses)")


def main():
    parser = argparse.ArgumentParser(description="Seed the DevCamper database")
    action = parser.add_mutually_exclusive_group(required=True)
    action.add_argument("-i", "--import", dest="import_", action="store_true", help="import _data/*.json")
    action.add_argument("-d", "--delete", action="store_true", help="delete all bootcamps and courses")
    args = parser.parse_args()

    database = MongoDatabase.from_settings(settings)
    geocoder = Geocoder.from_settings(settings)
    try:
        database.ensure_indexes()
        if args.import_:
            import_data(database, geocoder)
        else:
            delete_data(database)
    except DevCamperException as e:
        logger.error(f"Seeding failed: {e.message}")
        sys.exit(1)
    finally:
        geocoder.close()
        database.close()


if __name__ == "__main__":
    main()
