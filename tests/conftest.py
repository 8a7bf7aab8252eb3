# =============================================================================
# tests/conftest.py - Pytest Configuration
# =============================================================================
# This module provides pytest fixtures and configuration for all tests.
#
# Key features:
# - Sets up mock environment variables before any imports
# - Provides a mocked MongoDB wrapper and geocoder (no server needed)
# - Provides sample bootcamp and course documents
# =============================================================================

import os
from datetime import datetime, timezone
from unittest.mock import MagicMock

# =============================================================================
# Set up test environment BEFORE any imports
# =============================================================================
# This must happen before importing app.config which loads settings immediately

os.environ.setdefault("DB_URL", "mongodb://localhost:27017")
os.environ.setdefault("DB_NAME", "devcamper_test")
os.environ.setdefault("ENVIRONMENT", "development")
os.environ.setdefault("DEBUG", "true")

import pytest
from bson import ObjectId

from lib.geocoder import GeocodedLocation
from lib.mongo_client import BOOTCAMPS, COURSES


BOOTCAMP_ID = ObjectId("5d713995b721c3bb38c1f5d0")
COURSE_ID = ObjectId("5d725a4a7b292f5f8ceff789")


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def bootcamps_collection():
    """Mocked bootcamps collection."""
    return MagicMock(name="bootcamps")


@pytest.fixture
def courses_collection():
    """Mocked courses collection."""
    return MagicMock(name="courses")


@pytest.fixture
def mock_database(bootcamps_collection, courses_collection):
    """MongoDatabase stand-in handing out the mocked collections by name."""
    collections = {
        BOOTCAMPS: bootcamps_collection,
        COURSES: courses_collection,
    }
    database = MagicMock()
    database.collection.side_effect = lambda name: collections[name]
    database.name = "devcamper_test"
    database.ping.return_value = True
    return database


@pytest.fixture
def boston_location():
    """Geocoding result for the sample bootcamp's address."""
    return GeocodedLocation(
        latitude=42.350846,
        longitude=-71.105640,
        formatted_address="233 Bay State Rd, Boston, MA 02215-1405, US",
        street="233 Bay State Rd",
        city="Boston",
        state_code="MA",
        zipcode="02215-1405",
        country_code="US",
    )


@pytest.fixture
def mock_geocoder(boston_location):
    """Geocoder stand-in that resolves every address to Boston."""
    geocoder = MagicMock()
    geocoder.geocode.return_value = boston_location
    geocoder.geocode_zipcode.return_value = boston_location
    return geocoder


@pytest.fixture
def sample_bootcamp_payload():
    """Valid POST /bootcamps body."""
    return {
        "name": "Devworks Bootcamp",
        "description": "Devworks is a full stack JavaScript Bootcamp located in the heart of Boston",
        "website": "https://devworks.com",
        "phone": "(111) 111-1111",
        "email": "enroll@devworks.com",
        "address": "233 Bay State Rd Boston MA 02215",
        "careers": ["Web Development", "UI/UX", "Business"],
        "housing": True,
        "job_assistance": True,
        "job_guarantee": False,
        "accept_gi": True,
    }


@pytest.fixture
def sample_bootcamp_doc(boston_location):
    """Bootcamp document as stored in MongoDB."""
    return {
        "_id": BOOTCAMP_ID,
        "name": "Devworks Bootcamp",
        "slug": "devworks-bootcamp",
        "description": "Devworks is a full stack JavaScript Bootcamp located in the heart of Boston",
        "website": "https://devworks.com",
        "careers": ["Web Development", "UI/UX", "Business"],
        "location": boston_location.to_geojson(),
        "average_cost": 10000,
        "photo": "no-photo.jpg",
        "housing": True,
        "job_assistance": True,
        "job_guarantee": False,
        "accept_gi": True,
        "created_at": datetime(2024, 1, 15, 10, 0, tzinfo=timezone.utc),
    }


@pytest.fixture
def sample_course_payload():
    """Valid course body."""
    return {
        "title": "Front End Web Development",
        "description": "This course will provide you with all of the essentials to become a successful frontend web developer",
        "weeks": "8",
        "tuition": 8000,
        "minimum_skill": "beginner",
        "scholarship_available": True,
    }


@pytest.fixture
def sample_course_doc():
    """Course document as stored in MongoDB."""
    return {
        "_id": COURSE_ID,
        "title": "Front End Web Development",
        "description": "This course will provide you with all of the essentials to become a successful frontend web developer",
        "weeks": "8",
        "tuition": 8000.0,
        "minimum_skill": "beginner",
        "scholarship_available": True,
        "bootcamp": BOOTCAMP_ID,
        "created_at": datetime(2024, 1, 15, 10, 30, tzinfo=timezone.utc),
    }
