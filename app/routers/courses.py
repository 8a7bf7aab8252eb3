# =============================================================================
# app/routers/courses.py - Course Endpoints
# =============================================================================
# Course CRUD, including the routes nested under a bootcamp:
#   /courses, /courses/{id}, /bootcamps/{bootcamp_id}/courses
# Mounted at {API_BASE_PATH}.
#
# Handlers are plain functions: pymongo blocks, so they run in FastAPI's
# threadpool.
# =============================================================================

from typing import Annotated

from fastapi import APIRouter, Path, Request

from app.dependencies import CourseServiceDep
from core.models.course import CourseCreate, CourseUpdate

router = APIRouter()


@router.get("/courses")
def get_courses(request: Request, service: CourseServiceDep):
    """
    List courses.

    Supports filtering (`?tuition[gte]=1000`, `?minimum_skill=beginner`),
    `select`, `sort`, `page` and `limit`. Each course includes its
    bootcamp's name and description.
    """
    return service.list_courses(request.query_params)


@router.get("/bootcamps/{bootcamp_id}/courses")
def get_bootcamp_courses(
    bootcamp_id: Annotated[str, Path(description="Bootcamp id")],
    service: CourseServiceDep,
):
    """
    List the courses of one bootcamp (not paginated).
    """
    return service.list_bootcamp_courses(bootcamp_id)


@router.get("/courses/{course_id}")
def get_course(
    course_id: Annotated[str, Path(description="Course id")],
    service: CourseServiceDep,
):
    return {"success": True, "data": service.get_course(course_id)}


@router.post("/courses", status_code=201)
def create_course(request: CourseCreate, service: CourseServiceDep):
    """
    Create a course. The owning bootcamp is given in the `bootcamp` field.
    """
    return {"success": True, "data": service.create_course(request)}


@router.post("/bootcamps/{bootcamp_id}/courses", status_code=201)
def create_bootcamp_course(
    bootcamp_id: Annotated[str, Path(description="Bootcamp id")],
    request: CourseCreate,
    service: CourseServiceDep,
):
    """
    Create a course under the bootcamp in the path.
    """
    return {"success": True, "data": service.create_course(request, bootcamp_id=bootcamp_id)}


@router.put("/courses/{course_id}")
def update_course(
    course_id: Annotated[str, Path(description="Course id")],
    request: CourseUpdate,
    service: CourseServiceDep,
):
    return {"success": True, "data": service.update_course(course_id, request)}


@router.delete("/courses/{course_id}")
def delete_course(
    course_id: Annotated[str, Path(description="Course id")],
    service: CourseServiceDep,
):
    return {"success": True, "data": service.delete_course(course_id)}
