# =============================================================================
# tests/ - Test Suite
# =============================================================================
# This package contains all tests for the DevCamper API:
# - test_models.py: Unit tests for Pydantic model validation
# - test_query_builder.py: Filters, projection, sorting and pagination
# - test_course_service.py: Course CRUD and average cost recomputation
# - test_bootcamp_service.py: Bootcamp CRUD, geocoding and radius search
# - test_photo_service.py: Photo upload validation and storage
# - test_geocoder.py: Nominatim client (mocked HTTP transport)
# - test_utils.py: ObjectId parsing, serialization and slugs
# - test_api.py: Endpoint tests through FastAPI's TestClient
#
# Run tests with: pytest
# =============================================================================
