# =============================================================================
# core/services/__init__.py - Service Layer Exports
# =============================================================================

from .bootcamp_service import BootcampService
from .course_service import CourseService, average_cost_from_mean
from .photo_service import PhotoService

__all__ = [
    "BootcampService",
    "CourseService",
    "PhotoService",
    "average_cost_from_mean",
]
