# =============================================================================
# core/models/ - Pydantic Data Models
# =============================================================================
# This package contains Pydantic schemas for request validation:
# - bootcamp.py: Bootcamp create/update schemas and filter allow-list
# - course.py: Course create/update schemas and filter allow-list
#
# These models define the "contract" between API and clients.
# =============================================================================

from .bootcamp import (
    BOOTCAMP_FILTER_FIELDS,
    BootcampCreate,
    BootcampUpdate,
    Career,
)
from .course import (
    COURSE_FILTER_FIELDS,
    CourseCreate,
    CourseUpdate,
    MinimumSkill,
)

__all__ = [
    # Bootcamp
    "BOOTCAMP_FILTER_FIELDS",
    "BootcampCreate",
    "BootcampUpdate",
    "Career",
    # Course
    "COURSE_FILTER_FIELDS",
    "CourseCreate",
    "CourseUpdate",
    "MinimumSkill",
]
