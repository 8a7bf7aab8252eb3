# =============================================================================
# core/models/bootcamp.py - Bootcamp Schemas
# =============================================================================
# These models define the API contract for bootcamp operations:
# - BootcampCreate: Input for POST /bootcamps
# - BootcampUpdate: Input for PUT /bootcamps/{id} (partial)
# - Career: Enum of career tracks a bootcamp can offer
#
# `address` is accepted on input only: it is geocoded into `location` and
# never stored. `slug`, `location`, `average_cost`, `photo` and `created_at`
# are maintained by the service layer and cannot be written by clients.
# =============================================================================

import re
from datetime import datetime
from enum import Enum
from typing import Annotated

from pydantic import AfterValidator, BaseModel, ConfigDict, Field

# Same patterns the API has always validated contact fields with
URL_PATTERN = re.compile(
    r"https?://(www\.)?[-a-zA-Z0-9@:%._+~#=]{1,256}\.[a-zA-Z0-9()]{1,6}\b([-a-zA-Z0-9()@:%_+.~#?&/=]*)"
)
EMAIL_PATTERN = re.compile(r"^\w+([.-]?\w+)*@\w+([.-]?\w+)*(\.\w{2,3})+$")


def _check_website(value: str) -> str:
    if not URL_PATTERN.match(value):
        raise ValueError("Please use a valid URL with HTTP or HTTPS")
    return value


def _check_email(value: str) -> str:
    if not EMAIL_PATTERN.match(value):
        raise ValueError("Please add a valid email")
    return value


Website = Annotated[str, AfterValidator(_check_website)]
Email = Annotated[str, AfterValidator(_check_email)]


class Career(str, Enum):
    """Career tracks a bootcamp can prepare students for."""
    WEB_DEVELOPMENT = "Web Development"
    MOBILE_DEVELOPMENT = "Mobile Development"
    UI_UX = "UI/UX"
    DATA_SCIENCE = "Data Science"
    BUSINESS = "Business"
    OTHER = "Other"


class BootcampCreate(BaseModel):
    """
    Schema for creating a bootcamp.

    Example:
        {
            "name": "Devworks Bootcamp",
            "description": "Devworks is a full stack JavaScript Bootcamp ...",
            "website": "https://devworks.com",
            "phone": "(111) 111-1111",
            "email": "enroll@devworks.com",
            "address": "233 Bay State Rd Boston MA 02215",
            "careers": ["Web Development", "UI/UX", "Business"],
            "housing": true,
            "job_assistance": true
        }
    """

    model_config = ConfigDict(str_strip_whitespace=True, use_enum_values=True)

    name: str = Field(
        ...,
        min_length=1,
        max_length=50,
        description="Unique bootcamp name"
    )

    description: str = Field(
        ...,
        min_length=1,
        max_length=500,
        description="What the bootcamp offers"
    )

    website: Website | None = Field(default=None, description="http(s) URL")

    phone: str | None = Field(default=None, max_length=20)

    email: Email | None = Field(default=None)

    # Geocoded into `location`, never persisted
    address: str = Field(
        ...,
        min_length=1,
        description="Street address, resolved to coordinates on write"
    )

    careers: list[Career] = Field(
        ...,
        min_length=1,
        description="Career tracks offered"
    )

    average_rating: float | None = Field(default=None, ge=1, le=10)

    housing: bool = False
    job_assistance: bool = False
    job_guarantee: bool = False
    accept_gi: bool = False


class BootcampUpdate(BaseModel):
    """
    Schema for updating a bootcamp.

    Every field is optional; only the fields sent are changed.
    Sending `address` re-geocodes the location, sending `name` re-derives the slug.
    """

    model_config = ConfigDict(str_strip_whitespace=True, use_enum_values=True)

    name: str | None = Field(default=None, min_length=1, max_length=50)
    description: str | None = Field(default=None, min_length=1, max_length=500)
    website: Website | None = None
    phone: str | None = Field(default=None, max_length=20)
    email: Email | None = None
    address: str | None = Field(default=None, min_length=1)
    careers: list[Career] | None = Field(default=None, min_length=1)
    average_rating: float | None = Field(default=None, ge=1, le=10)
    housing: bool | None = None
    job_assistance: bool | None = None
    job_guarantee: bool | None = None
    accept_gi: bool | None = None


# -----------------------------------------------------------------------------
# Advanced results allow-list: field -> type query-string values are parsed as
# -----------------------------------------------------------------------------
BOOTCAMP_FILTER_FIELDS: dict[str, type] = {
    "name": str,
    "slug": str,
    "description": str,
    "website": str,
    "phone": str,
    "email": str,
    "careers": str,
    "average_rating": float,
    "average_cost": float,
    "photo": str,
    "housing": bool,
    "job_assistance": bool,
    "job_guarantee": bool,
    "accept_gi": bool,
    "created_at": datetime,
    "location": str,
    "location.city": str,
    "location.state": str,
    "location.zipcode": str,
    "location.country": str,
}
