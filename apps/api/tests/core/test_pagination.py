"""
Unit tests for the shared pagination, filtering and sorting contract.

These tests cover:
- Page/limit resolution, including malformed and out-of-range input
- Sort resolution against an allow-list
- Pagination metadata (including the empty result)
- Query parameter collection for list endpoints
- The count + windowed fetch helper
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
from pydantic import ValidationError

from app.core.pagination import (
    DEFAULT_LIMIT,
    MAX_LIMIT,
    MAX_PAGE,
    PageDirective,
    PageMeta,
    PageRequest,
    build_page_meta,
    order_by_clauses,
    page_query,
    paginate,
    resolve_page,
    resolve_sort,
)
from app.modules.students.repository import SORT_COLUMNS, build_school_query


class TestResolvePage:
    """Tests for resolve_page."""

    def test_clamps_page_and_limit(self):
        """Page 0 resolves to 1 and limit 500 is clamped to the maximum."""
        assert resolve_page(0, 500) == PageDirective(page=1, limit=100, skip=0, take=100)

    def test_non_numeric_values_use_defaults(self):
        assert resolve_page("abc", "xyz") == PageDirective(page=1, limit=10, skip=0, take=10)

    def test_missing_values_use_defaults(self):
        assert resolve_page() == PageDirective(page=1, limit=10, skip=0, take=10)

    def test_numeric_strings_are_parsed(self):
        directive = resolve_page("3", " 25 ")
        assert directive == PageDirective(page=3, limit=25, skip=50, take=25)

    @pytest.mark.parametrize("raw_limit", [0, -1, -500, "0", "-3", "1.5", None, True, [], {}])
    def test_unusable_limit_defaults(self, raw_limit):
        """Zero, negative and non-integer limits fall back to the default."""
        assert resolve_page(1, raw_limit).limit == DEFAULT_LIMIT

    @pytest.mark.parametrize("raw_page", [0, -7, "nope", 2.5, None, False])
    def test_unusable_page_defaults(self, raw_page):
        assert resolve_page(raw_page, 10).page == 1

    def test_integral_float_is_accepted(self):
        assert resolve_page(2.0, 20.0) == PageDirective(page=2, limit=20, skip=20, take=20)

    def test_limit_boundaries(self):
        assert resolve_page(1, 1).limit == 1
        assert resolve_page(1, MAX_LIMIT).limit == MAX_LIMIT
        assert resolve_page(1, MAX_LIMIT + 1).limit == MAX_LIMIT

    @pytest.mark.parametrize("page", [-3, 0, 1, 2, 17, 10_000])
    @pytest.mark.parametrize("limit", [-1, 0, 1, 10, 99, 100, 101, 5_000])
    def test_result_is_always_bounded(self, page, limit):
        """Any integer input yields page >= 1, limit in [1, 100] and consistent skip/take."""
        directive = resolve_page(page, limit)

        assert directive.page >= 1
        assert 1 <= directive.limit <= MAX_LIMIT
        assert directive.skip == (directive.page - 1) * directive.limit
        assert directive.take == directive.limit

    def test_huge_page_is_clamped(self):
        """An oversized page still yields an offset the database can bind."""
        directive = resolve_page("9" * 25, "10")

        assert directive.page == MAX_PAGE
        assert directive.skip == (MAX_PAGE - 1) * 10
        assert directive.skip < 2**63

    def test_largest_offset_fits_signed_64_bit(self):
        assert resolve_page(MAX_PAGE + 1, MAX_LIMIT).skip <= 2**63 - 1

    def test_is_idempotent(self):
        """Resolving an already-resolved directive changes nothing."""
        first = resolve_page("-2", "250")
        second = resolve_page(first.page, first.limit)
        assert first == second


class TestResolveSort:
    """Tests for resolve_sort."""

    ALLOWED = ["name", "created_at"]

    def test_rejected_field_uses_default_descending(self):
        """A field outside the allow-list is ignored, including its direction."""
        result = resolve_sort("secret_internal_field", "asc", self.ALLOWED, "created_at")
        assert result == {"created_at": "desc"}

    def test_allowed_field_keeps_direction(self):
        assert resolve_sort("name", "asc", self.ALLOWED, "created_at") == {"name": "asc"}
        assert resolve_sort("name", "desc", self.ALLOWED, "created_at") == {"name": "desc"}

    def test_direction_is_case_insensitive(self):
        assert resolve_sort("name", "ASC", self.ALLOWED, "created_at") == {"name": "asc"}

    @pytest.mark.parametrize("sort_order", [None, "", "up", "ascending", 1])
    def test_unknown_direction_is_descending(self, sort_order):
        assert resolve_sort("name", sort_order, self.ALLOWED, "created_at") == {"name": "desc"}

    @pytest.mark.parametrize("sort_by", [None, "", "NAME", "created_at; drop table", 42])
    def test_missing_or_unknown_field_uses_default(self, sort_by):
        assert resolve_sort(sort_by, "asc", self.ALLOWED, "created_at") == {"created_at": "desc"}

    def test_allow_list_can_be_a_mapping(self):
        """Resource column mappings double as the allow-list."""
        result = resolve_sort("last_name", "asc", SORT_COLUMNS, "created_at")
        assert result == {"last_name": "asc"}


class TestBuildPageMeta:
    """Tests for build_page_meta."""

    def test_last_page(self):
        meta = build_page_meta(25, 3, 10)

        assert meta.total_records == 25
        assert meta.total_pages == 3
        assert meta.current_page == 3
        assert meta.records_per_page == 10
        assert meta.has_next_page is False
        assert meta.has_previous_page is True

    def test_serializes_with_camel_case_keys(self):
        data = build_page_meta(25, 3, 10).model_dump(by_alias=True)

        assert data == {
            "totalRecords": 25,
            "totalPages": 3,
            "currentPage": 3,
            "recordsPerPage": 10,
            "hasNextPage": False,
            "hasPreviousPage": True,
        }

    def test_empty_result_has_zero_pages(self):
        """An empty result reports zero pages and no neighbours."""
        meta = build_page_meta(0, 1, 10)

        assert meta.total_pages == 0
        assert meta.has_next_page is False
        assert meta.has_previous_page is False

    def test_first_page_of_many(self):
        meta = build_page_meta(101, 1, 10)

        assert meta.total_pages == 11
        assert meta.has_next_page is True
        assert meta.has_previous_page is False

    def test_page_past_the_end_is_echoed(self):
        """The requested page is returned as-is even beyond the last page."""
        meta = build_page_meta(5, 4, 10)

        assert meta.current_page == 4
        assert meta.total_pages == 1
        assert meta.has_next_page is False

    @pytest.mark.parametrize("total", [0, 1, 9, 10, 11, 99, 100, 101])
    @pytest.mark.parametrize("limit", [1, 3, 10, 100])
    @pytest.mark.parametrize("page", [1, 2, 5])
    def test_metadata_formulas(self, total, limit, page):
        meta = build_page_meta(total, page, limit)

        assert meta.total_pages == (total + limit - 1) // limit
        assert meta.has_next_page == (page * limit < total)
        assert meta.has_previous_page == (page > 1)

    def test_meta_is_immutable(self):
        meta = build_page_meta(10, 1, 10)
        with pytest.raises(ValidationError):
            meta.total_records = 11

    def test_is_a_page_meta(self):
        assert isinstance(build_page_meta(1, 1, 1), PageMeta)


class TestPageRequest:
    """Tests for query parameter collection."""

    def test_page_query_defaults_malformed_values(self):
        page = page_query(page="abc", limit="-5", sort_by="", sort_order="sideways")

        assert page == PageRequest(page=1, limit=10, sort_by=None, sort_order="desc")

    def test_page_query_bounds_huge_page(self):
        page = page_query(page="9" * 25, limit="10", sort_by=None, sort_order=None)

        assert page.page == MAX_PAGE
        assert page.to_directive().skip < 2**63

    def test_page_query_keeps_valid_values(self):
        page = page_query(page="2", limit="500", sort_by="last_name", sort_order="asc")

        assert page.page == 2
        assert page.limit == 100
        assert page.sort_by == "last_name"
        assert page.sort_order == "asc"

    def test_to_directive(self):
        assert PageRequest(page=3, limit=20).to_directive() == PageDirective(
            page=3, limit=20, skip=40, take=20
        )


class TestOrderByClauses:
    """Tests for order_by_clauses."""

    def test_builds_direction_per_field(self):
        clauses = order_by_clauses({"last_name": "asc"}, SORT_COLUMNS)
        assert len(clauses) == 1
        assert "ASC" in str(clauses[0])

    def test_descending(self):
        clauses = order_by_clauses({"created_at": "desc"}, SORT_COLUMNS)
        assert "DESC" in str(clauses[0])


class TestPaginate:
    """Tests for the count + windowed fetch helper."""

    @pytest.mark.asyncio
    async def test_counts_then_fetches_window(self, mock_db, school_id):
        count_result = MagicMock()
        count_result.scalar.return_value = 42
        rows_result = MagicMock()
        rows_result.scalars.return_value.all.return_value = ["a", "b"]
        mock_db.execute = AsyncMock(side_effect=[count_result, rows_result])

        query = build_school_query(school_id)
        directive = resolve_page(3, 20)
        rows, total = await paginate(
            mock_db, query, directive, order_by_clauses({"created_at": "desc"}, SORT_COLUMNS)
        )

        assert rows == ["a", "b"]
        assert total == 42
        assert mock_db.execute.await_count == 2

        window_query = mock_db.execute.await_args_list[1].args[0]
        assert window_query._offset_clause.value == 40
        assert window_query._limit_clause.value == 20

    @pytest.mark.asyncio
    async def test_missing_count_is_zero(self, mock_db, school_id):
        count_result = MagicMock()
        count_result.scalar.return_value = None
        rows_result = MagicMock()
        rows_result.scalars.return_value.all.return_value = []
        mock_db.execute = AsyncMock(side_effect=[count_result, rows_result])

        rows, total = await paginate(mock_db, build_school_query(school_id), resolve_page(), [])

        assert rows == []
        assert total == 0
