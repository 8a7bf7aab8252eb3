# =============================================================================
# core/query/ - Advanced Results
# =============================================================================
# Query-string driven filtering, projection, sorting, pagination and
# relation expansion for list endpoints:
# - operators.py: Supported comparison operators
# - filters.py: Typed, allow-listed filter parsing
# - builder.py: QueryBuilder that runs the query and shapes the response
# =============================================================================

from .builder import PageWindow, ParsedQuery, Populate, QueryBuilder, parse_positive_int
from .filters import Filter, coerce_value, parse_filters, to_mongo_filter
from .operators import Operator, RESERVED_PARAMS

__all__ = [
    "Filter",
    "Operator",
    "PageWindow",
    "ParsedQuery",
    "Populate",
    "QueryBuilder",
    "RESERVED_PARAMS",
    "coerce_value",
    "parse_filters",
    "parse_positive_int",
    "to_mongo_filter",
]
