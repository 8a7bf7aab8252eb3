# =============================================================================
# core/models/course.py - Course Schemas
# =============================================================================
# These models define the API contract for course operations:
# - CourseCreate: Input for POST /courses and POST /bootcamps/{id}/courses
# - CourseUpdate: Input for PUT /courses/{id} (partial)
# - MinimumSkill: Enum for the skill level a course requires
#
# A course belongs to exactly one bootcamp. Its tuition feeds the bootcamp's
# average_cost.
# =============================================================================

from datetime import datetime
from enum import Enum

from bson import ObjectId
from pydantic import BaseModel, ConfigDict, Field


class MinimumSkill(str, Enum):
    """Skill level required to enroll."""
    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class CourseCreate(BaseModel):
    """
    Schema for creating a course.

    `bootcamp` is required on POST /courses and ignored on
    POST /bootcamps/{bootcamp_id}/courses, where the path decides.

    Example:
        {
            "title": "Front End Web Development",
            "description": "This course will provide you with all of the essentials ...",
            "weeks": "8",
            "tuition": 8000,
            "minimum_skill": "beginner",
            "scholarship_available": true
        }
    """

    model_config = ConfigDict(
        str_strip_whitespace=True,
        use_enum_values=True,
        coerce_numbers_to_str=True,
    )

    title: str = Field(..., min_length=1, description="Course title")
    description: str = Field(..., min_length=1)
    weeks: str = Field(..., min_length=1, description="Duration in weeks")
    tuition: float = Field(..., ge=0, description="Tuition cost")
    minimum_skill: MinimumSkill = Field(..., description="Required skill level")
    scholarship_available: bool = False
    bootcamp: str | None = Field(default=None, description="Owning bootcamp id")


class CourseUpdate(BaseModel):
    """
    Schema for updating a course.

    Changing `tuition` or `bootcamp` recomputes the affected bootcamps'
    average cost.
    """

    model_config = ConfigDict(
        str_strip_whitespace=True,
        use_enum_values=True,
        coerce_numbers_to_str=True,
    )

    title: str | None = Field(default=None, min_length=1)
    description: str | None = Field(default=None, min_length=1)
    weeks: str | None = Field(default=None, min_length=1)
    tuition: float | None = Field(default=None, ge=0)
    minimum_skill: MinimumSkill | None = None
    scholarship_available: bool | None = None
    bootcamp: str | None = None


COURSE_FILTER_FIELDS: dict[str, type] = {
    "title": str,
    "description": str,
    "weeks": str,
    "tuition": float,
    "minimum_skill": str,
    "scholarship_available": bool,
    "created_at": datetime,
    "bootcamp": ObjectId,
}
