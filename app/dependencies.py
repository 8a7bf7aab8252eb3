# =============================================================================
# app/dependencies.py - Shared Dependencies
# =============================================================================
# FastAPI dependency injection for shared resources.
# The database and geocoder are created once in the lifespan (app/main.py)
# and stored on app.state; these functions hand them to route handlers.
# =============================================================================

from typing import Annotated

from fastapi import Depends, Request

from app.config import settings
from core.services import BootcampService, CourseService, PhotoService
from lib.geocoder import Geocoder
from lib.mongo_client import MongoDatabase


def get_database(request: Request) -> MongoDatabase:
    """Get the MongoDB wrapper created at startup."""
    return request.app.state.database


def get_geocoder(request: Request) -> Geocoder:
    """Get the geocoder created at startup."""
    return request.app.state.geocoder


# Type aliases for dependency injection
DatabaseDep = Annotated[MongoDatabase, Depends(get_database)]
GeocoderDep = Annotated[Geocoder, Depends(get_geocoder)]


def get_bootcamp_service(database: DatabaseDep, geocoder: GeocoderDep) -> BootcampService:
    return BootcampService(database, geocoder)


def get_course_service(database: DatabaseDep) -> CourseService:
    return CourseService(database)


def get_photo_service() -> PhotoService:
    return PhotoService(settings.FILE_UPLOAD_PATH)


BootcampServiceDep = Annotated[BootcampService, Depends(get_bootcamp_service)]
CourseServiceDep = Annotated[CourseService, Depends(get_course_service)]
PhotoServiceDep = Annotated[PhotoService, Depends(get_photo_service)]
