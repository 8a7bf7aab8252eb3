# =============================================================================
# core/services/bootcamp_service.py - Bootcamp Business Logic
# =============================================================================
# Handles bootcamp CRUD operations, geocoding of addresses and radius search.
# Separates HTTP concerns from database/business logic.
# =============================================================================

import logging
from typing import Any

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.errors import DuplicateKeyError

from app.config import settings
from app.exceptions import (
    AddressNotFoundError,
    DuplicateFieldError,
    GeocodingUnavailableError,
    ResourceNotFoundError,
)
from core.models.bootcamp import BOOTCAMP_FILTER_FIELDS, BootcampCreate, BootcampUpdate
from core.query import Populate, QueryBuilder
from lib.geocoder import GeocodedLocation, Geocoder, GeocoderError
from lib.mongo_client import BOOTCAMPS, COURSES, MongoDatabase
from lib.utils import parse_object_id, serialize_document, slugify, utcnow

logger = logging.getLogger(__name__)

DEFAULT_PHOTO = "no-photo.jpg"

# Courses joined into bootcamp list results
BOOTCAMP_COURSES = Populate(
    path="courses",
    collection=COURSES,
    local_field="_id",
    foreign_field="bootcamp",
    many=True,
)


class BootcampService:
    """
    Service for bootcamp management operations.

    Provides a clean interface between API routes and database.
    """

    def __init__(self, database: MongoDatabase, geocoder: Geocoder):
        self.database = database
        self.geocoder = geocoder
        self.bootcamps = database.collection(BOOTCAMPS)
        self.courses = database.collection(COURSES)

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def list_bootcamps(self, params: Any) -> dict[str, Any]:
        """Advanced results over all bootcamps, each with its courses."""
        builder = QueryBuilder(
            self.database,
            BOOTCAMPS,
            BOOTCAMP_FILTER_FIELDS,
            populate=BOOTCAMP_COURSES,
            default_limit=settings.PAGINATION_DEFAULT_LIMIT,
            max_limit=settings.PAGINATION_MAX_LIMIT,
            total_mode=settings.PAGINATION_TOTAL,
        )
        return builder.execute(params)

    def get_bootcamp(self, bootcamp_id: str) -> dict[str, Any]:
        """
        Get a bootcamp by ID.

        Raises:
            MalformedIdError: If bootcamp_id is not an ObjectId
            ResourceNotFoundError: If the bootcamp doesn't exist
        """
        return serialize_document(self._find(bootcamp_id))

    def bootcamps_in_radius(self, zipcode: str, distance: float) -> dict[str, Any]:
        """
        Bootcamps within `distance` of a zipcode.

        The distance unit follows RADIUS_UNIT; dividing by the Earth's radius
        in that unit gives the radius in radians $centerSphere expects.

        Args:
            zipcode: Postal code of the search center
            distance: Search radius (miles or kilometres)
        """
        center = self._locate_zipcode(zipcode)
        radius = distance / settings.earth_radius

        bootcamps = list(
            self.bootcamps.find({
                "location": {
                    "$geoWithin": {
                        "$centerSphere": [[center.longitude, center.latitude], radius]
                    }
                }
            })
        )

        logger.info(
            f"Radius search: {len(bootcamps)} bootcamps within {distance}{settings.RADIUS_UNIT} of {zipcode}"
        )
        return {
            "success": True,
            "count": len(bootcamps),
            "data": serialize_document(bootcamps),
        }

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def create_bootcamp(
        self,
        data: BootcampCreate,
        bootcamp_id: ObjectId | None = None,
    ) -> dict[str, Any]:
        """
        Create a bootcamp.

        The address is geocoded into `location` and dropped; the slug is
        derived from the name.

        Args:
            data: Validated bootcamp fields
            bootcamp_id: Fixed id (used by the seeder)

        Raises:
            AddressNotFoundError: If the address cannot be geocoded
            DuplicateFieldError: If the name is already taken
        """
        location = self._locate(data.address)

        document = data.model_dump(exclude={"address"}, exclude_none=True)
        document.update(
            slug=slugify(data.name),
            location=location.to_geojson(),
            photo=DEFAULT_PHOTO,
            created_at=utcnow(),
        )
        if bootcamp_id is not None:
            document["_id"] = bootcamp_id

        try:
            result = self.bootcamps.insert_one(document)
        except DuplicateKeyError as e:
            raise DuplicateFieldError((e.details or {}).get("keyValue")) from e

        document["_id"] = result.inserted_id
        logger.info(f"Created bootcamp: {result.inserted_id} ({data.name})")
        return serialize_document(document)

    def update_bootcamp(self, bootcamp_id: str, data: BootcampUpdate) -> dict[str, Any]:
        """
        Update a bootcamp.

        Raises:
            ResourceNotFoundError: If the bootcamp doesn't exist
            DuplicateFieldError: If the new name is already taken
        """
        oid = parse_object_id(bootcamp_id)
        updates = data.model_dump(exclude_unset=True, exclude_none=True)

        if "address" in updates:
            updates["location"] = self._locate(updates.pop("address")).to_geojson()
        if "name" in updates:
            updates["slug"] = slugify(updates["name"])

        if not updates:
            return self.get_bootcamp(bootcamp_id)

        try:
            bootcamp = self.bootcamps.find_one_and_update(
                {"_id": oid},
                {"$set": updates},
                return_document=ReturnDocument.AFTER,
            )
        except DuplicateKeyError as e:
            raise DuplicateFieldError((e.details or {}).get("keyValue")) from e

        if not bootcamp:
            raise ResourceNotFoundError("Bootcamp", bootcamp_id)

        logger.info(f"Updated bootcamp: {oid}")
        return serialize_document(bootcamp)

    def delete_bootcamp(self, bootcamp_id: str) -> dict[str, Any]:
        """Delete a bootcamp together with its courses."""
        bootcamp = self._find(bootcamp_id)

        removed = self.courses.delete_many({"bootcamp": bootcamp["_id"]})
        self.bootcamps.delete_one({"_id": bootcamp["_id"]})

        logger.info(f"Deleted bootcamp: {bootcamp['_id']} and {removed.deleted_count} courses")
        return {}

    def set_photo(self, bootcamp_id: str, filename: str) -> dict[str, Any]:
        """Point the bootcamp's photo at an uploaded file."""
        bootcamp = self.bootcamps.find_one_and_update(
            {"_id": parse_object_id(bootcamp_id)},
            {"$set": {"photo": filename}},
            return_document=ReturnDocument.AFTER,
        )
        if not bootcamp:
            raise ResourceNotFoundError("Bootcamp", bootcamp_id)
        return serialize_document(bootcamp)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _find(self, bootcamp_id: str) -> dict[str, Any]:
        bootcamp = self.bootcamps.find_one({"_id": parse_object_id(bootcamp_id)})
        if not bootcamp:
            raise ResourceNotFoundError("Bootcamp", bootcamp_id)
        return bootcamp

    def _locate(self, address: str) -> GeocodedLocation:
        try:
            location = self.geocoder.geocode(address)
        except GeocoderError as e:
            raise GeocodingUnavailableError(e.message) from e
        if location is None:
            raise AddressNotFoundError(address)
        return location

    def _locate_zipcode(self, zipcode: str) -> GeocodedLocation:
        try:
            location = self.geocoder.geocode_zipcode(zipcode)
        except GeocoderError as e:
            raise GeocodingUnavailableError(e.message) from e
        if location is None:
            raise AddressNotFoundError(zipcode)
        return location
