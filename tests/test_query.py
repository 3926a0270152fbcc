from decimal import Decimal

import pytest
from sqlalchemy import select

from storefront.data.models import OrderModel, ProductModel
from storefront.domain.schemas import ListQuery, Page
from storefront.repos.order_repo import ADMIN_ORDERS_VIEW
from storefront.repos.product_repo import ADMIN_PRODUCTS_VIEW
from storefront.repos.query import build_list_statements, run_list_query

from tests.conftest import CUSTOMER_ID


class TestListQuery:
    def test_offset_from_page(self):
        assert ListQuery(page=1, page_size=10).offset == 0
        assert ListQuery(page=3, page_size=10).offset == 20

    def test_toggle_same_field_flips_direction(self):
        query = ListQuery(sort_field="created_at", sort_direction="desc")

        assert query.toggle_sort("created_at").sort_direction == "asc"
        assert query.toggle_sort("created_at").toggle_sort("created_at").sort_direction == "desc"

    def test_toggle_new_field_starts_ascending(self):
        query = ListQuery(sort_field="created_at", sort_direction="desc").toggle_sort("price")

        assert (query.sort_field, query.sort_direction) == ("price", "asc")

    def test_page_count(self):
        assert Page[int](items=[], total=0, page=1, page_size=10).pages == 0
        assert Page[int](items=[1], total=21, page=3, page_size=10).pages == 3


class TestBuildListStatements:
    def test_unknown_sort_field_is_rejected(self):
        with pytest.raises(ValueError):
            build_list_statements(select(ProductModel), ListQuery(sort_field="password"), ADMIN_PRODUCTS_VIEW)

    def test_unknown_filter_is_rejected(self):
        query = ListQuery(filters={"secret": 1})

        with pytest.raises(ValueError):
            build_list_statements(select(ProductModel), query, ADMIN_PRODUCTS_VIEW)


class TestRunListQuery:
    def test_pagination_and_sort(self, seeded):
        query = ListQuery(sort_field="price", sort_direction="asc", page=2, page_size=2)

        rows, total = run_list_query(seeded, select(ProductModel), query, ADMIN_PRODUCTS_VIEW)

        assert total == 5
        assert [p.name for p in rows] == ["Wireless Headphones", "Mechanical Keyboard"]

    def test_search_is_case_insensitive_and_counted(self, seeded):
        query = ListQuery(search="SPEAKER", sort_field="name", sort_direction="asc")

        rows, total = run_list_query(seeded, select(ProductModel), query, ADMIN_PRODUCTS_VIEW)

        assert total == 2
        assert [p.name for p in rows] == ["Bluetooth Speaker", "Studio Monitor Speaker"]

    def test_all_filter_value_means_no_filter(self, seeded):
        query = ListQuery(filters={"category_id": "all"}, sort_field="name")

        _, total = run_list_query(seeded, select(ProductModel), query, ADMIN_PRODUCTS_VIEW)

        assert total == 5

    def test_filter_narrows_results(self, seeded):
        query = ListQuery(filters={"category_id": 2}, sort_field="name", sort_direction="asc")

        rows, total = run_list_query(seeded, select(ProductModel), query, ADMIN_PRODUCTS_VIEW)

        assert total == 2
        assert [p.name for p in rows] == ["Desk Lamp", "Mechanical Keyboard"]


class TestStablePaging:
    def test_primary_key_breaks_ties_in_sort_direction(self):
        query = ListQuery(sort_field="status", sort_direction="desc")

        page_stmt, _ = build_list_statements(select(OrderModel), query, ADMIN_ORDERS_VIEW)

        assert "ORDER BY orders.status DESC, orders.id DESC" in str(page_stmt)

    def test_sorting_by_pk_does_not_repeat_it(self):
        query = ListQuery(sort_field="id", sort_direction="asc")

        page_stmt, _ = build_list_statements(select(OrderModel), query, ADMIN_ORDERS_VIEW)

        assert str(page_stmt).count("orders.id ASC") == 1

    def test_pages_over_duplicate_sort_values_cover_every_row_once(self, seeded):
        # Arrange: 4x processing, 2x shipped
        statuses = ["processing", "shipped", "processing", "processing", "shipped", "processing"]
        seeded.add_all([
            OrderModel(user_id=CUSTOMER_ID, status=s, total_amount=Decimal("10.00"), items=[]) for s in statuses
        ])
        seeded.commit()

        # Act
        pages = []
        for page in (1, 2):
            query = ListQuery(sort_field="status", sort_direction="asc", page=page, page_size=3)
            rows, total = run_list_query(seeded, select(OrderModel), query, ADMIN_ORDERS_VIEW)
            pages.append([o.id for o in rows])

        # Assert
        first, second = pages
        assert total == 6
        assert not set(first) & set(second)
        assert len(set(first) | set(second)) == 6
        assert first == sorted(first)
