# =============================================================================
# core/query/filters.py - Typed Query-String Filters
# =============================================================================
# Turns query parameters such as
#
#   ?tuition[gte]=1000&housing=true&careers[in]=Business,UI/UX
#
# into a list of typed Filter values, then into a MongoDB filter document.
#
# Only fields listed in the collection's allow-list are accepted, and every
# value is converted to the type declared for its field before it reaches the
# database. Parameters for unknown fields or operators are dropped.
# =============================================================================

import logging
import re
from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from datetime import datetime
from typing import Any

from bson import ObjectId
from bson.errors import InvalidId

from app.exceptions import InvalidQueryError
from .operators import LIST_OPERATORS, RESERVED_PARAMS, Operator

logger = logging.getLogger(__name__)

# "field" or "field[op]"; dotted fields address sub-documents (location.state)
_PARAM_KEY = re.compile(r"^(?P<field>[A-Za-z_][\w.]*)(?:\[(?P<op>[a-z]+)\])?$")

_TRUE_VALUES = {"true", "1", "yes"}
_FALSE_VALUES = {"false", "0", "no"}


@dataclass(frozen=True)
class Filter:
    """One comparison: `field <operator> value`."""
    field: str
    operator: Operator
    value: Any


def coerce_value(field: str, raw: str, field_type: type) -> Any:
    """
    Convert a raw query-string value to the field's declared type.

    Raises:
        InvalidQueryError: If the value does not parse as field_type
    """
    try:
        if field_type is str:
            return raw
        if field_type is bool:
            lowered = raw.strip().lower()
            if lowered in _TRUE_VALUES:
                return True
            if lowered in _FALSE_VALUES:
                return False
            raise ValueError(raw)
        if field_type is datetime:
            return datetime.fromisoformat(raw)
        if field_type is ObjectId:
            return ObjectId(raw)
        return field_type(raw)
    except (ValueError, TypeError, InvalidId):
        raise InvalidQueryError(field, raw, field_type.__name__)


def parse_filters(
    params: Iterable[tuple[str, str]],
    allowed_fields: Mapping[str, type],
) -> list[Filter]:
    """
    Build typed filters from query parameter pairs.

    Reserved parameters (select, sort, page, limit) are skipped.
    `in` values may be comma-separated and/or given as repeated keys.

    Args:
        params: (name, value) pairs, repeated names allowed
        allowed_fields: field name -> Python type

    Returns:
        Filters in the order their parameters first appeared
    """
    filters: list[Filter] = []
    list_values: dict[tuple[str, Operator], list[Any]] = {}

    for key, raw in params:
        if key in RESERVED_PARAMS:
            continue

        match = _PARAM_KEY.match(key)
        if not match:
            logger.warning(f"Ignoring malformed query parameter: {key}")
            continue

        field = match.group("field")
        if field not in allowed_fields:
            logger.warning(f"Ignoring filter on unknown field: {field}")
            continue

        try:
            operator = Operator(match.group("op") or Operator.EQ.value)
        except ValueError:
            logger.warning(f"Ignoring unsupported operator in: {key}")
            continue

        field_type = allowed_fields[field]

        if operator in LIST_OPERATORS:
            slot = (field, operator)
            if slot not in list_values:
                list_values[slot] = []
                filters.append(Filter(field, operator, list_values[slot]))
            list_values[slot].extend(
                coerce_value(field, part.strip(), field_type)
                for part in raw.split(",")
                if part.strip()
            )
            continue

        filters.append(Filter(field, operator, coerce_value(field, raw, field_type)))

    return filters


def to_mongo_filter(filters: Iterable[Filter]) -> dict[str, Any]:
    """
    Render filters as a MongoDB filter document.

    A lone equality stays a plain value ({"housing": True}); anything else on
    the same field is merged into one operator document
    ({"tuition": {"$gte": 1000, "$lte": 5000}}). A repeated operator keeps
    its last value.
    """
    grouped: dict[str, dict[str, Any]] = {}
    for item in filters:
        grouped.setdefault(item.field, {})[item.operator.mongo] = item.value

    query: dict[str, Any] = {}
    for field, operators in grouped.items():
        if list(operators) == [Operator.EQ.mongo]:
            query[field] = operators[Operator.EQ.mongo]
        else:
            query[field] = operators
    return query
