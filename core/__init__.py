# =============================================================================
# core/ - Business Logic Package
# =============================================================================
# This package contains the business logic behind the HTTP layer:
# - models/: Pydantic schemas for request validation
# - query/: Advanced results (filters, sorting, pagination, populate)
# - services/: Bootcamp, course and photo operations
#
# Services receive their database and geocoder explicitly, so they can be
# exercised in tests with mocked collections.
# =============================================================================
