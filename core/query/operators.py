# =============================================================================
# core/query/operators.py - Filter Operators
# =============================================================================
# Maps the operator names accepted in query strings to MongoDB operators.
# For example, `?tuition[gte]=1000` uses 'gte' -> {"tuition": {"$gte": 1000}}.
# =============================================================================

from enum import Enum


class Operator(str, Enum):
    """Comparison applied by a single filter."""
    EQ = "eq"
    GT = "gt"
    GTE = "gte"
    LT = "lt"
    LTE = "lte"
    IN = "in"

    @property
    def mongo(self) -> str:
        return f"${self.value}"


# Operators that expect a list of values (comma-separated or repeated keys)
LIST_OPERATORS = {Operator.IN}

# Query parameters consumed by the builder itself, never treated as filters
RESERVED_PARAMS = {"select", "sort", "page", "limit"}
