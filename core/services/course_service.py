# =============================================================================
# core/services/course_service.py - Course Business Logic
# =============================================================================
# Handles course CRUD operations and keeps each bootcamp's average_cost in
# step with the tuition of its courses.
#
# average_cost is recomputed after every write that can change it. The
# recomputation runs inline: if it fails the error is logged and re-raised so
# the request fails instead of leaving a silently stale value. There is no
# lock, so two concurrent writes for the same bootcamp are last-write-wins.
# =============================================================================

import logging
import math
from typing import Any

from bson import ObjectId
from pymongo import ReturnDocument
from pymongo.errors import PyMongoError

from app.config import settings
from app.exceptions import ResourceNotFoundError, ValidationFailedError
from core.models.course import COURSE_FILTER_FIELDS, CourseCreate, CourseUpdate
from core.query import Populate, QueryBuilder
from lib.mongo_client import BOOTCAMPS, COURSES, MongoDatabase
from lib.utils import parse_object_id, serialize_document, utcnow

logger = logging.getLogger(__name__)

# Bootcamp fields joined into course results
BOOTCAMP_SUMMARY = Populate(
    path="bootcamp",
    collection=BOOTCAMPS,
    local_field="bootcamp",
    select=("name", "description"),
)


def average_cost_from_mean(mean_tuition: float) -> int:
    """
    Round a mean tuition up to the next multiple of 10.

    Example:
        average_cost_from_mean(9333.33)  # 9340
        average_cost_from_mean(8000)     # 8000
    """
    return math.ceil(mean_tuition / 10) * 10


class CourseService:
    """
    Service for course management operations.

    Provides a clean interface between API routes and database.
    """

    def __init__(self, database: MongoDatabase):
        self.database = database
        self.courses = database.collection(COURSES)
        self.bootcamps = database.collection(BOOTCAMPS)

    # -------------------------------------------------------------------------
    # Reads
    # -------------------------------------------------------------------------

    def list_courses(self, params: Any) -> dict[str, Any]:
        """Advanced results over all courses, each with its bootcamp's name and description."""
        builder = QueryBuilder(
            self.database,
            COURSES,
            COURSE_FILTER_FIELDS,
            populate=BOOTCAMP_SUMMARY,
            default_limit=settings.PAGINATION_DEFAULT_LIMIT,
            max_limit=settings.PAGINATION_MAX_LIMIT,
            total_mode=settings.PAGINATION_TOTAL,
        )
        return builder.execute(params)

    def list_bootcamp_courses(self, bootcamp_id: str) -> dict[str, Any]:
        """All courses of one bootcamp, unpaginated."""
        oid = parse_object_id(bootcamp_id)
        courses = list(self.courses.find({"bootcamp": oid}))
        return {
            "success": True,
            "count": len(courses),
            "data": serialize_document(courses),
        }

    def get_course(self, course_id: str) -> dict[str, Any]:
        """
        Get a course with its bootcamp summary.

        Raises:
            MalformedIdError: If course_id is not an ObjectId
            ResourceNotFoundError: If the course doesn't exist
        """
        course = self._find(course_id)
        bootcamp = self.bootcamps.find_one(
            {"_id": course["bootcamp"]},
            {name: 1 for name in BOOTCAMP_SUMMARY.select},
        )
        if bootcamp:
            course["bootcamp"] = bootcamp
        return serialize_document(course)

    # -------------------------------------------------------------------------
    # Writes
    # -------------------------------------------------------------------------

    def create_course(
        self,
        data: CourseCreate,
        bootcamp_id: str | None = None,
        course_id: ObjectId | None = None,
    ) -> dict[str, Any]:
        """
        Create a course and refresh the bootcamp's average cost.

        Args:
            data: Validated course fields
            bootcamp_id: Owning bootcamp from the URL; falls back to data.bootcamp
            course_id: Fixed id (used by the seeder)

        Raises:
            ValidationFailedError: If no bootcamp was given
            ResourceNotFoundError: If the bootcamp doesn't exist
        """
        raw_bootcamp_id = bootcamp_id or data.bootcamp
        if not raw_bootcamp_id:
            raise ValidationFailedError(["bootcamp: Please add a bootcamp"])

        bootcamp_oid = self._require_bootcamp(raw_bootcamp_id)

        document = data.model_dump(exclude={"bootcamp"})
        document["bootcamp"] = bootcamp_oid
        document["created_at"] = utcnow()
        if course_id is not None:
            document["_id"] = course_id

        result = self.courses.insert_one(document)
        document["_id"] = result.inserted_id
        logger.info(f"Created course: {result.inserted_id} for bootcamp: {bootcamp_oid}")

        self.recompute_average_cost(bootcamp_oid)
        return serialize_document(document)

    def update_course(self, course_id: str, data: CourseUpdate) -> dict[str, Any]:
        """
        Update a course.

        Recomputes average cost when tuition changes, for both bootcamps when
        the course moves to another bootcamp.
        """
        current = self._find(course_id)
        updates = data.model_dump(exclude_unset=True, exclude_none=True)

        if not updates:
            return serialize_document(current)

        if "bootcamp" in updates:
            updates["bootcamp"] = self._require_bootcamp(updates["bootcamp"])

        updated = self.courses.find_one_and_update(
            {"_id": current["_id"]},
            {"$set": updates},
            return_document=ReturnDocument.AFTER,
        )
        if updated is None:
            # Deleted between the lookup and the update
            raise ResourceNotFoundError("Course", course_id)

        logger.info(f"Updated course: {current['_id']}")

        previous_bootcamp = current.get("bootcamp")
        new_bootcamp = updated.get("bootcamp")
        if new_bootcamp != previous_bootcamp:
            self.recompute_average_cost(previous_bootcamp)
            self.recompute_average_cost(new_bootcamp)
        elif "tuition" in updates:
            self.recompute_average_cost(new_bootcamp)

        return serialize_document(updated)

    def delete_course(self, course_id: str) -> dict[str, Any]:
        """Delete a course and refresh its bootcamp's average cost."""
        course = self._find(course_id)
        self.courses.delete_one({"_id": course["_id"]})
        logger.info(f"Deleted course: {course['_id']}")

        self.recompute_average_cost(course["bootcamp"])
        return {}

    # -------------------------------------------------------------------------
    # Average Cost
    # -------------------------------------------------------------------------

    def recompute_average_cost(self, bootcamp_id: ObjectId) -> int | None:
        """
        Store ceil(mean(tuition) / 10) * 10 on the bootcamp.

        The field is removed when the bootcamp has no courses left.

        Returns:
            The new average cost, or None when it was removed

        Raises:
            PyMongoError: Logged and re-raised if the aggregation or update fails
        """
        pipeline = [
            {"$match": {"bootcamp": bootcamp_id}},
            {"$group": {"_id": "$bootcamp", "average_cost": {"$avg": "$tuition"}}},
        ]

        try:
            results = list(self.courses.aggregate(pipeline))
            mean = results[0].get("average_cost") if results else None

            if mean is None:
                average_cost = None
                update = {"$unset": {"average_cost": ""}}
            else:
                average_cost = average_cost_from_mean(mean)
                update = {"$set": {"average_cost": average_cost}}

            self.bootcamps.update_one({"_id": bootcamp_id}, update)
        except PyMongoError as e:
            logger.error(f"Failed to recompute average cost for bootcamp {bootcamp_id}: {e}")
            raise

        logger.debug(f"Bootcamp {bootcamp_id} average_cost -> {average_cost}")
        return average_cost

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def _find(self, course_id: str) -> dict[str, Any]:
        course = self.courses.find_one({"_id": parse_object_id(course_id)})
        if not course:
            raise ResourceNotFoundError("Course", course_id)
        return course

    def _require_bootcamp(self, bootcamp_id: str | ObjectId) -> ObjectId:
        oid = parse_object_id(bootcamp_id)
        if not self.bootcamps.find_one({"_id": oid}, {"_id": 1}):
            raise ResourceNotFoundError("Bootcamp", str(bootcamp_id))
        return oid
