# =============================================================================
# lib/ - Standalone Utility Modules
# =============================================================================
# This package contains reusable utilities:
# - mongo_client.py: Typed MongoDB wrapper (connection, collections, indexes)
# - geocoder.py: Address and zipcode geocoding over the Nominatim HTTP API
# - utils.py: Shared utilities (error handling, ObjectId parsing, serialization)
#
# These modules are self-contained and can be tested in isolation.
# =============================================================================

from lib.mongo_client import BOOTCAMPS, COURSES, MongoDatabase, MongoClientError
from lib.geocoder import GeocodedLocation, Geocoder, GeocoderError
from lib.utils import (
    ApplicationError,
    parse_object_id,
    serialize_document,
    slugify,
    utcnow,
)

__all__ = [
    # MongoDB
    "BOOTCAMPS",
    "COURSES",
    "MongoDatabase",
    "MongoClientError",
    # Geocoding
    "GeocodedLocation",
    "Geocoder",
    "GeocoderError",
    # Utils
    "ApplicationError",
    "parse_object_id",
    "serialize_document",
    "slugify",
    "utcnow",
]
