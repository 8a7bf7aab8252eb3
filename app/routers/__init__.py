# =============================================================================
# app/routers/ - API Route Definitions
# =============================================================================
# This package contains FastAPI routers organized by feature:
# - health.py: Health check endpoints
# - bootcamps.py: Bootcamp CRUD, radius search and photo upload
# - courses.py: Course CRUD, including routes nested under a bootcamp
#
# Each router is mounted in main.py under API_BASE_PATH.
# =============================================================================

from . import bootcamps
from . import courses
from . import health

__all__ = [
    "bootcamps",
    "courses",
    "health",
]
