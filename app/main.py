# =============================================================================
# app/main.py - FastAPI Application Entry Point
# =============================================================================
# This is the main entry point for the DevCamper API.
# It configures the FastAPI application with middleware, routers, and handlers.
#
# Usage:
#   uvicorn app.main:app --reload
#   python -m app.main
# =============================================================================

import logging
import time
from contextlib import asynccontextmanager
from logging.handlers import RotatingFileHandler

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from app.config import settings
from app.exceptions import (
    DevCamperException,
    devcamper_exception_handler,
    internal_exception_handler,
    validation_exception_handler,
)
from app.routers import bootcamps, courses, health
from lib.geocoder import Geocoder
from lib.mongo_client import MongoDatabase, MongoClientError

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
LOG_FILE_MAX_BYTES = 5_242_880
LOG_FILE_BACKUPS = 5


def configure_logging() -> None:
    """Console logging, plus a rotating file when LOG_FILE is set."""
    logging.basicConfig(
        level=logging.DEBUG if settings.DEBUG else logging.INFO,
        format=LOG_FORMAT,
    )
    if settings.LOG_FILE:
        handler = RotatingFileHandler(
            settings.LOG_FILE,
            maxBytes=LOG_FILE_MAX_BYTES,
            backupCount=LOG_FILE_BACKUPS,
        )
        handler.setLevel(logging.INFO)
        handler.setFormatter(logging.Formatter(LOG_FORMAT))
        logging.getLogger().addHandler(handler)


configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan handler.

    - Startup: connect to MongoDB, create indexes, open the geocoder client
    - Shutdown: close both
    """
    logger.info(f"Starting DevCamper API in {settings.ENVIRONMENT} mode")

    database = MongoDatabase.from_settings(settings)
    try:
        database.ensure_indexes()
    except MongoClientError as e:
        logger.error(f"MongoDB could not connect: {e.message}")
        database.close()
        raise

    geocoder = Geocoder.from_settings(settings)

    app.state.database = database
    app.state.geocoder = geocoder

    yield

    logger.info("Shutting down DevCamper API")
    geocoder.close()
    database.close()


# Create FastAPI application
app = FastAPI(
    title="DevCamper API",
    description="""
## Bootcamp Directory API

Manage bootcamps and their courses.

### Advanced Results

List endpoints (`GET /bootcamps`, `GET /courses`) accept:

| Parameter | Example | Meaning |
|-----------|---------|---------|
| field | `housing=true` | equality |
| field[op] | `average_cost[lte]=10000` | `gt`, `gte`, `lt`, `lte`, `in` |
| select | `select=name,careers` | fields to return |
| sort | `sort=-average_cost,name` | `-` = descending (default `-created_at`) |
| page / limit | `page=2&limit=10` | pagination (defaults 1 / 20) |

### Quick Start

```bash
# Create a bootcamp
curl -X POST http://localhost:5000/api/v1/bootcamps \\
  -H "Content-Type: application/json" \\
  -d '{"name": "Devworks Bootcamp", "description": "...", "address": "233 Bay State Rd Boston MA 02215", "careers": ["Web Development"]}'

# Bootcamps within 10 miles of a zipcode
curl http://localhost:5000/api/v1/bootcamps/radius/02118/10
```
""",
    version=health.API_VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
    lifespan=lifespan,
    openapi_tags=[
        {"name": "Bootcamps", "description": "Bootcamp CRUD, radius search and photos"},
        {"name": "Courses", "description": "Course CRUD"},
        {"name": "Health", "description": "API health and readiness checks"},
    ],
)


# =============================================================================
# Middleware
# =============================================================================

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins_list,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


if settings.is_development:
    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log method, path, status and duration of every request."""
        started = time.perf_counter()
        response = await call_next(request)
        elapsed_ms = (time.perf_counter() - started) * 1000
        logger.info(f"{request.method} {request.url.path} {response.status_code} - {elapsed_ms:.1f} ms")
        return response


# =============================================================================
# Exception Handlers
# =============================================================================

app.add_exception_handler(DevCamperException, devcamper_exception_handler)
app.add_exception_handler(RequestValidationError, validation_exception_handler)
app.add_exception_handler(Exception, internal_exception_handler)


# =============================================================================
# Routers
# =============================================================================

app.include_router(
    bootcamps.router,
    prefix=f"{settings.API_BASE_PATH}/bootcamps",
    tags=["Bootcamps"]
)

app.include_router(
    courses.router,
    prefix=settings.API_BASE_PATH,
    tags=["Courses"]
)

app.include_router(
    health.router,
    prefix=settings.API_BASE_PATH,
    tags=["Health"]
)

# Uploaded photos, served read-only
app.mount(
    "/uploads",
    StaticFiles(directory=settings.FILE_UPLOAD_PATH, check_dir=False),
    name="uploads",
)


# =============================================================================
# Root Endpoint
# =============================================================================

@app.get(settings.API_BASE_PATH, tags=["Root"])
async def root():
    """
    Root endpoint - returns API banner.
    """
    return {"message": "DevCamper API"}


if __name__ == "__main__":
    import uvicorn

    uvicorn.run("app.main:app", host=settings.API_HOST, port=settings.API_PORT, reload=settings.DEBUG)
