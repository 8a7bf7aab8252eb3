# =============================================================================
# tests/test_query_builder.py - Advanced Results Tests
# =============================================================================
# Tests for query-string filtering, projection, sorting, pagination and
# relation expansion. MongoDB is replaced by mocked collections.
#
# Run with: pytest tests/test_query_builder.py -v
# =============================================================================

from datetime import datetime, timedelta, timezone

import mongomock
import pytest
from bson import ObjectId
from pymongo import ASCENDING, DESCENDING

from app.exceptions import InvalidQueryError
from core.models import BOOTCAMP_FILTER_FIELDS, COURSE_FILTER_FIELDS
from core.query import (
    Filter,
    Operator,
    PageWindow,
    Populate,
    QueryBuilder,
    coerce_value,
    parse_filters,
    parse_positive_int,
    to_mongo_filter,
)
from core.query.builder import parse_projection, parse_sort
from lib.mongo_client import MongoDatabase


# =============================================================================
# Operators and Filters
# =============================================================================

class TestOperator:
    """Tests for Operator enum."""

    def test_mongo_names(self):
        assert Operator.GTE.mongo == "$gte"
        assert Operator.IN.mongo == "$in"

    def test_unknown_operator(self):
        with pytest.raises(ValueError):
            Operator("regex")


class TestCoerceValue:
    """Tests for converting raw query values to field types."""

    def test_float(self):
        assert coerce_value("tuition", "1000", float) == 1000.0

    @pytest.mark.parametrize("raw,expected", [
        ("true", True), ("TRUE", True), ("1", True),
        ("false", False), ("0", False), ("no", False),
    ])
    def test_bool(self, raw, expected):
        assert coerce_value("housing", raw, bool) is expected

    def test_datetime(self):
        assert coerce_value("created_at", "2024-01-15", datetime) == datetime(2024, 1, 15)

    def test_object_id(self):
        assert coerce_value("bootcamp", "5d713995b721c3bb38c1f5d0", ObjectId) == ObjectId("5d713995b721c3bb38c1f5d0")

    def test_string_passthrough(self):
        assert coerce_value("name", "$where", str) == "$where"

    @pytest.mark.parametrize("raw,field_type", [
        ("cheap", float),
        ("maybe", bool),
        ("yesterday", datetime),
        ("not-an-id", ObjectId),
    ])
    def test_invalid_values(self, raw, field_type):
        with pytest.raises(InvalidQueryError) as exc_info:
            coerce_value("field", raw, field_type)

        assert exc_info.value.status_code == 400
        assert exc_info.value.code == "INVALID_QUERY"


class TestParseFilters:
    """Tests for parse_filters and to_mongo_filter."""

    def test_equality(self):
        filters = parse_filters([("housing", "true")], BOOTCAMP_FILTER_FIELDS)

        assert filters == [Filter("housing", Operator.EQ, True)]
        assert to_mongo_filter(filters) == {"housing": True}

    def test_comparison_operator(self):
        filters = parse_filters([("average_cost[lte]", "10000")], BOOTCAMP_FILTER_FIELDS)

        assert to_mongo_filter(filters) == {"average_cost": {"$lte": 10000.0}}

    def test_range_on_same_field(self):
        filters = parse_filters(
            [("tuition[gte]", "1000"), ("tuition[lt]", "5000")],
            COURSE_FILTER_FIELDS,
        )

        assert to_mongo_filter(filters) == {"tuition": {"$gte": 1000.0, "$lt": 5000.0}}

    def test_in_comma_separated(self):
        filters = parse_filters([("careers[in]", "Business,UI/UX")], BOOTCAMP_FILTER_FIELDS)

        assert to_mongo_filter(filters) == {"careers": {"$in": ["Business", "UI/UX"]}}

    def test_in_repeated_keys_merge(self):
        filters = parse_filters(
            [("careers[in]", "Business"), ("careers[in]", "Data Science")],
            BOOTCAMP_FILTER_FIELDS,
        )

        assert len(filters) == 1
        assert filters[0].value == ["Business", "Data Science"]

    def test_dotted_field(self):
        filters = parse_filters([("location.state", "MA")], BOOTCAMP_FILTER_FIELDS)

        assert to_mongo_filter(filters) == {"location.state": "MA"}

    def test_reserved_params_skipped(self):
        params = [("select", "name"), ("sort", "name"), ("page", "2"), ("limit", "5"), ("housing", "true")]

        assert parse_filters(params, BOOTCAMP_FILTER_FIELDS) == [Filter("housing", Operator.EQ, True)]

    def test_unknown_field_dropped(self):
        assert parse_filters([("password", "x")], BOOTCAMP_FILTER_FIELDS) == []

    def test_unknown_operator_dropped(self):
        assert parse_filters([("name[regex]", ".*")], BOOTCAMP_FILTER_FIELDS) == []

    def test_operator_injection_dropped(self):
        """A raw Mongo operator in the key never reaches the filter."""
        assert parse_filters([("$where", "1"), ("name[$ne]", "x")], BOOTCAMP_FILTER_FIELDS) == []

    def test_object_id_field(self):
        filters = parse_filters([("bootcamp", "5d713995b721c3bb38c1f5d0")], COURSE_FILTER_FIELDS)

        assert to_mongo_filter(filters) == {"bootcamp": ObjectId("5d713995b721c3bb38c1f5d0")}

    def test_bad_value_raises(self):
        with pytest.raises(InvalidQueryError):
            parse_filters([("tuition[gt]", "lots")], COURSE_FILTER_FIELDS)


# =============================================================================
# Parsing Helpers
# =============================================================================

class TestParsingHelpers:
    """Tests for page/limit, select and sort parsing."""

    @pytest.mark.parametrize("raw,expected", [
        ("3", 3), (None, 7), ("", 7), ("abc", 7), ("0", 7), ("-2", 7), ("2.5", 7),
        (str(2**63 - 1), 2**63 - 1), (str(2**63), 7), ("1" + "0" * 30, 7),
    ])
    def test_parse_positive_int(self, raw, expected):
        assert parse_positive_int(raw, 7) == expected

    def test_projection(self):
        assert parse_projection("name,description", BOOTCAMP_FILTER_FIELDS) == {"name": 1, "description": 1}

    def test_projection_ignores_unknown(self):
        assert parse_projection("name,secret", BOOTCAMP_FILTER_FIELDS) == {"name": 1}
        assert parse_projection("secret", BOOTCAMP_FILTER_FIELDS) is None
        assert parse_projection(None, BOOTCAMP_FILTER_FIELDS) is None

    def test_sort(self):
        assert parse_sort("-average_cost,name", BOOTCAMP_FILTER_FIELDS) == [
            ("average_cost", DESCENDING),
            ("name", ASCENDING),
        ]

    def test_sort_default(self):
        assert parse_sort(None, BOOTCAMP_FILTER_FIELDS) == [("created_at", DESCENDING)]
        assert parse_sort("-unknown", BOOTCAMP_FILTER_FIELDS) == [("created_at", DESCENDING)]


class TestPageWindow:
    """Tests for pagination descriptors."""

    def test_first_page_has_only_next(self):
        assert PageWindow(page=1, limit=2).pagination(total=5) == {"next": {"page": 2, "limit": 2}}

    def test_middle_page(self):
        assert PageWindow(page=2, limit=2).pagination(total=5) == {
            "next": {"page": 3, "limit": 2},
            "prev": {"page": 1, "limit": 2},
        }

    def test_last_page_has_only_prev(self):
        assert PageWindow(page=3, limit=2).pagination(total=5) == {"prev": {"page": 2, "limit": 2}}

    def test_exact_fit_has_no_next(self):
        assert PageWindow(page=1, limit=5).pagination(total=5) == {}

    def test_empty(self):
        assert PageWindow().pagination(total=0) == {}


# =============================================================================
# QueryBuilder
# =============================================================================

class TestQueryBuilder:
    """Tests for QueryBuilder.execute against mocked collections."""

    def test_defaults(self, mock_database, bootcamps_collection, sample_bootcamp_doc):
        bootcamps_collection.count_documents.return_value = 1
        bootcamps_collection.find.return_value = [sample_bootcamp_doc]

        builder = QueryBuilder(mock_database, "bootcamps", BOOTCAMP_FILTER_FIELDS)
        result = builder.execute({})

        bootcamps_collection.count_documents.assert_called_once_with({})
        bootcamps_collection.find.assert_called_once_with(
            {}, None, sort=[("created_at", DESCENDING)], skip=0, limit=20
        )
        assert result["success"] is True
        assert result["count"] == 1
        assert result["pagination"] == {}
        assert result["data"][0]["id"] == str(sample_bootcamp_doc["_id"])
        assert "_id" not in result["data"][0]

    def test_full_query(self, mock_database, bootcamps_collection):
        bootcamps_collection.count_documents.return_value = 25
        bootcamps_collection.find.return_value = []

        builder = QueryBuilder(mock_database, "bootcamps", BOOTCAMP_FILTER_FIELDS)
        result = builder.execute([
            ("select", "name,housing"),
            ("sort", "name"),
            ("page", "2"),
            ("limit", "10"),
            ("housing", "true"),
        ])

        bootcamps_collection.count_documents.assert_called_once_with({"housing": True})
        bootcamps_collection.find.assert_called_once_with(
            {"housing": True},
            {"name": 1, "housing": 1},
            sort=[("name", ASCENDING)],
            skip=10,
            limit=10,
        )
        assert result["pagination"] == {
            "next": {"page": 3, "limit": 10},
            "prev": {"page": 1, "limit": 10},
        }

    def test_reserved_param_last_wins(self, mock_database):
        builder = QueryBuilder(mock_database, "bootcamps", BOOTCAMP_FILTER_FIELDS)

        parsed = builder.parse([("page", "2"), ("page", "4")])

        assert parsed.window.page == 4

    def test_max_limit_caps(self, mock_database):
        builder = QueryBuilder(mock_database, "bootcamps", BOOTCAMP_FILTER_FIELDS, max_limit=50)

        assert builder.parse({"limit": "1000"}).window.limit == 50

    @pytest.mark.parametrize("page,limit,expected_page,expected_limit", [
        ("10000000000", "10000000000", 1, 10_000_000_000),
        (str(2**62), "4", 1, 4),
        (str(2**60), "4", 2**60, 4),
        ("5", str(2**64), 5, 20),
    ])
    def test_window_stays_within_int64(self, mock_database, page, limit, expected_page, expected_limit):
        builder = QueryBuilder(mock_database, "bootcamps", BOOTCAMP_FILTER_FIELDS)

        window = builder.parse({"page": page, "limit": limit}).window

        assert (window.page, window.limit) == (expected_page, expected_limit)
        assert window.end <= 2**63 - 1

    def test_default_limit(self, mock_database):
        builder = QueryBuilder(mock_database, "bootcamps", BOOTCAMP_FILTER_FIELDS, default_limit=5)

        assert builder.parse({"limit": "zero"}).window.limit == 5

    def test_collection_total_mode(self, mock_database, bootcamps_collection):
        bootcamps_collection.count_documents.return_value = 0
        bootcamps_collection.find.return_value = []

        builder = QueryBuilder(
            mock_database, "bootcamps", BOOTCAMP_FILTER_FIELDS, total_mode="collection"
        )
        builder.execute({"housing": "true"})

        bootcamps_collection.count_documents.assert_called_once_with({})

    def test_forward_populate(self, mock_database, courses_collection, bootcamps_collection,
                              sample_course_doc, sample_bootcamp_doc):
        courses_collection.count_documents.return_value = 1
        courses_collection.find.return_value = [sample_course_doc]
        bootcamps_collection.find.return_value = [{
            "_id": sample_bootcamp_doc["_id"],
            "name": sample_bootcamp_doc["name"],
            "description": sample_bootcamp_doc["description"],
        }]

        populate = Populate("bootcamp", "bootcamps", local_field="bootcamp", select=("name", "description"))
        builder = QueryBuilder(mock_database, "courses", COURSE_FILTER_FIELDS, populate=populate)
        result = builder.execute({})

        bootcamps_collection.find.assert_called_once_with(
            {"_id": {"$in": [sample_bootcamp_doc["_id"]]}},
            {"name": 1, "description": 1, "_id": 1},
        )
        assert result["data"][0]["bootcamp"] == {
            "id": str(sample_bootcamp_doc["_id"]),
            "name": "Devworks Bootcamp",
            "description": sample_bootcamp_doc["description"],
        }

    def test_reverse_populate(self, mock_database, bootcamps_collection, courses_collection,
                              sample_bootcamp_doc, sample_course_doc):
        empty_bootcamp = {"_id": ObjectId(), "name": "Empty"}
        bootcamps_collection.count_documents.return_value = 2
        bootcamps_collection.find.return_value = [sample_bootcamp_doc, empty_bootcamp]
        courses_collection.find.return_value = [sample_course_doc]

        populate = Populate("courses", "courses", local_field="_id", foreign_field="bootcamp", many=True)
        builder = QueryBuilder(mock_database, "bootcamps", BOOTCAMP_FILTER_FIELDS, populate=populate)
        result = builder.execute({})

        assert [c["title"] for c in result["data"][0]["courses"]] == ["Front End Web Development"]
        assert result["data"][1]["courses"] == []

    def test_populate_skipped_when_empty(self, mock_database, bootcamps_collection, courses_collection):
        bootcamps_collection.count_documents.return_value = 0
        bootcamps_collection.find.return_value = []

        populate = Populate("courses", "courses", local_field="_id", foreign_field="bootcamp", many=True)
        QueryBuilder(mock_database, "bootcamps", BOOTCAMP_FILTER_FIELDS, populate=populate).execute({})

        courses_collection.find.assert_not_called()


# =============================================================================
# QueryBuilder against an in-memory MongoDB
# =============================================================================

SKILLS = ["beginner", "intermediate", "advanced"]
COURSE_COUNT = 25


@pytest.fixture
def memory_database():
    """MongoDatabase backed by mongomock, seeded with 2 bootcamps and 25 courses."""
    database = MongoDatabase("mongodb://memory", "devcamper_test", client=mongomock.MongoClient())
    first, second = ObjectId(), ObjectId()
    database.collection("bootcamps").insert_many([
        {"_id": first, "name": "Devworks Bootcamp", "description": "Boston"},
        {"_id": second, "name": "Codemasters", "description": "Burlington"},
    ])

    created = datetime(2024, 1, 1, tzinfo=timezone.utc)
    database.collection("courses").insert_many([
        {
            "title": f"Course {i}",
            "tuition": 500.0 * i,
            "minimum_skill": SKILLS[i % 3],
            "bootcamp": first if i % 2 else second,
            "created_at": created + timedelta(days=i),
        }
        for i in range(COURSE_COUNT)
    ])
    return database


class TestQueryBuilderResults:
    """Records actually returned by QueryBuilder.execute."""

    @pytest.mark.parametrize("page,limit", [
        (1, 10), (2, 10), (3, 10), (4, 10),
        (1, 25), (1, 30), (5, 5), (6, 5), (13, 2),
    ])
    def test_page_size_is_min_of_limit_and_remaining(self, memory_database, page, limit):
        builder = QueryBuilder(memory_database, "courses", COURSE_FILTER_FIELDS)

        result = builder.execute({"page": str(page), "limit": str(limit)})

        remaining = max(0, COURSE_COUNT - (page - 1) * limit)
        assert result["count"] == min(limit, remaining)
        assert len(result["data"]) == result["count"]
        assert ("next" in result["pagination"]) == (page * limit < COURSE_COUNT)
        assert ("prev" in result["pagination"]) == (page > 1)

    def test_pages_cover_collection_without_overlap(self, memory_database):
        builder = QueryBuilder(memory_database, "courses", COURSE_FILTER_FIELDS)

        seen = []
        for page in range(1, 4):
            result = builder.execute({"page": str(page), "limit": "10", "sort": "tuition"})
            seen.extend(course["tuition"] for course in result["data"])

        assert seen == [500.0 * i for i in range(COURSE_COUNT)]

    def test_default_sort_is_newest_first(self, memory_database):
        result = QueryBuilder(memory_database, "courses", COURSE_FILTER_FIELDS).execute({"limit": "3"})

        assert [course["title"] for course in result["data"]] == ["Course 24", "Course 23", "Course 22"]

    def test_gte_returns_only_matching(self, memory_database):
        builder = QueryBuilder(memory_database, "courses", COURSE_FILTER_FIELDS)

        result = builder.execute({"tuition[gte]": "1000", "limit": "100"})

        assert result["count"] == COURSE_COUNT - 2
        assert all(course["tuition"] >= 1000 for course in result["data"])

    def test_range_returns_only_matching(self, memory_database):
        builder = QueryBuilder(memory_database, "courses", COURSE_FILTER_FIELDS)

        result = builder.execute([("tuition[gt]", "2000"), ("tuition[lte]", "4000"), ("sort", "tuition")])

        assert [course["tuition"] for course in result["data"]] == [2500.0, 3000.0, 3500.0, 4000.0]

    def test_in_returns_only_matching(self, memory_database):
        builder = QueryBuilder(memory_database, "courses", COURSE_FILTER_FIELDS)

        result = builder.execute({"minimum_skill[in]": "beginner,advanced", "limit": "100"})

        expected = sum(1 for i in range(COURSE_COUNT) if SKILLS[i % 3] != "intermediate")
        assert result["count"] == expected
        assert {course["minimum_skill"] for course in result["data"]} == {"beginner", "advanced"}

    def test_filtered_total_drives_pagination(self, memory_database):
        builder = QueryBuilder(memory_database, "courses", COURSE_FILTER_FIELDS)

        # 23 courses have tuition >= 1000: page 3 of 10 is the last one
        result = builder.execute({"tuition[gte]": "1000", "page": "3", "limit": "10"})

        assert result["count"] == 3
        assert "next" not in result["pagination"]

    def test_collection_total_drives_pagination(self, memory_database):
        builder = QueryBuilder(memory_database, "courses", COURSE_FILTER_FIELDS, total_mode="collection")

        result = builder.execute({"tuition[gte]": "10000", "limit": "2"})

        assert result["count"] == 2
        assert result["pagination"] == {"next": {"page": 2, "limit": 2}}

    def test_select_limits_fields(self, memory_database):
        builder = QueryBuilder(memory_database, "courses", COURSE_FILTER_FIELDS)

        result = builder.execute({"select": "title", "limit": "1"})

        assert set(result["data"][0]) == {"id", "title"}

    def test_populates_bootcamp_summary(self, memory_database):
        populate = Populate("bootcamp", "bootcamps", local_field="bootcamp", select=("name",))
        builder = QueryBuilder(memory_database, "courses", COURSE_FILTER_FIELDS, populate=populate)

        result = builder.execute({"sort": "tuition", "limit": "2"})

        assert [course["bootcamp"]["name"] for course in result["data"]] == ["Codemasters", "Devworks Bootcamp"]
        assert "description" not in result["data"][0]["bootcamp"]

    def test_populates_courses_per_bootcamp(self, memory_database):
        populate = Populate("courses", "courses", local_field="_id", foreign_field="bootcamp", many=True)
        builder = QueryBuilder(memory_database, "bootcamps", BOOTCAMP_FILTER_FIELDS, populate=populate)

        result = builder.execute({"sort": "name"})

        assert [len(bootcamp["courses"]) for bootcamp in result["data"]] == [13, 12]
