# =============================================================================
# app/routers/bootcamps.py - Bootcamp Endpoints
# =============================================================================
# Bootcamp CRUD, radius search and photo upload.
# Mounted at {API_BASE_PATH}/bootcamps.
#
# Handlers are plain functions: pymongo and the geocoder block, so they run in
# FastAPI's threadpool.
# =============================================================================

import logging
from typing import Annotated

from fastapi import APIRouter, File, Path, Request, UploadFile

from app.config import settings
from app.dependencies import BootcampServiceDep, PhotoServiceDep
from app.exceptions import NoFileUploadedError
from core.models.bootcamp import BootcampCreate, BootcampUpdate
from core.services import PhotoService

logger = logging.getLogger(__name__)

router = APIRouter()


# =============================================================================
# Endpoints
# =============================================================================

@router.get("")
def get_bootcamps(request: Request, service: BootcampServiceDep):
    """
    List bootcamps.

    Supports filtering (`?housing=true`, `?average_cost[lte]=10000`,
    `?careers[in]=Business,UI/UX`), `select`, `sort`, `page` and `limit`.
    Each bootcamp includes its courses.
    """
    return service.list_bootcamps(request.query_params)


@router.get("/radius/{zipcode}/{distance}")
def get_bootcamps_in_radius(
    zipcode: Annotated[str, Path(min_length=1, description="Zipcode of the search center")],
    distance: Annotated[float, Path(gt=0, description="Search radius (RADIUS_UNIT)")],
    service: BootcampServiceDep,
):
    """
    Get bootcamps within a distance of a zipcode.
    """
    return service.bootcamps_in_radius(zipcode, distance)


@router.get("/{bootcamp_id}")
def get_bootcamp(
    bootcamp_id: Annotated[str, Path(description="Bootcamp id")],
    service: BootcampServiceDep,
):
    return {"success": True, "data": service.get_bootcamp(bootcamp_id)}


@router.post("", status_code=201)
def create_bootcamp(request: BootcampCreate, service: BootcampServiceDep):
    """
    Create a bootcamp.

    The address is geocoded to a location and is not stored.
    """
    return {"success": True, "data": service.create_bootcamp(request)}


@router.put("/{bootcamp_id}")
def update_bootcamp(
    bootcamp_id: Annotated[str, Path(description="Bootcamp id")],
    request: BootcampUpdate,
    service: BootcampServiceDep,
):
    return {"success": True, "data": service.update_bootcamp(bootcamp_id, request)}


@router.delete("/{bootcamp_id}")
def delete_bootcamp(
    bootcamp_id: Annotated[str, Path(description="Bootcamp id")],
    service: BootcampServiceDep,
):
    """
    Delete a bootcamp and all of its courses.
    """
    return {"success": True, "data": service.delete_bootcamp(bootcamp_id)}


@router.put("/{bootcamp_id}/photo")
def upload_bootcamp_photo(
    bootcamp_id: Annotated[str, Path(description="Bootcamp id")],
    service: BootcampServiceDep,
    photos: PhotoServiceDep,
    file: Annotated[UploadFile | None, File(description="Image file")] = None,
):
    """
    Upload a bootcamp photo.

    This endpoint:
    1. Verifies the bootcamp exists
    2. Validates the file (image/* content type, size limit)
    3. Writes it to FILE_UPLOAD_PATH as photo_<id><ext>
    4. Points the bootcamp's photo field at it
    """
    service.get_bootcamp(bootcamp_id)

    if file is None:
        raise NoFileUploadedError()

    # Reject on the declared size before buffering the body
    if file.size is not None:
        PhotoService.validate(
            file.filename,
            file.content_type,
            file.size,
            settings.MAX_UPLOAD_SIZE_BYTES,
        )

    content = file.file.read()
    PhotoService.validate(
        file.filename,
        file.content_type,
        len(content),
        settings.MAX_UPLOAD_SIZE_BYTES,
    )

    filename = photos.save(bootcamp_id, file.filename, content)
    service.set_photo(bootcamp_id, filename)

    logger.info(f"Uploaded photo for bootcamp {bootcamp_id}: {filename}")
    return {"success": True, "data": filename}
