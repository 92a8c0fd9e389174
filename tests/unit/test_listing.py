"""Unit tests for in-memory filtering and pagination helpers."""

import math

import pytest
from dashboard_client.listing import filter_records, paginate
from services.marketplace_service.schemas import Pagination
from services.marketplace_service.seed_marketplace_data import ADMIN_USERS


def _admin_rows():
    return [
        {
            "id": user["code"],
            "name": user["name"],
            "email": user["email"],
            "role": user["role"].value,
            "status": user["status"].value,
        }
        for user in ADMIN_USERS
    ]


# ---------------------------------------------------------------------------
# filter_records
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_role_and_status_filters_compose():
    rows = filter_records(_admin_rows(), role="admin", status="active")

    assert [r["name"] for r in rows] == ["Sarah Johnson"]


@pytest.mark.unit
def test_combined_filters_equal_intersection():
    rows = _admin_rows()
    by_search = {r["id"] for r in filter_records(rows, search="son")}
    by_status = {r["id"] for r in filter_records(rows, status="active")}
    combined = {r["id"] for r in filter_records(rows, search="son", status="active")}

    assert combined == by_search & by_status


@pytest.mark.unit
def test_search_is_case_insensitive_across_fields():
    rows = _admin_rows()

    assert [r["name"] for r in filter_records(rows, search="EMMA")] == ["Emma Wilson"]
    assert [r["name"] for r in filter_records(rows, search="adm003")] == [
        "Michael Brown"
    ]
    assert len(filter_records(rows, search="@afrigos.com")) == 4


@pytest.mark.unit
def test_all_and_none_disable_a_filter():
    rows = _admin_rows()

    assert filter_records(rows, role="all", status=None) == rows
    assert filter_records(rows, search="   ") == rows


# ---------------------------------------------------------------------------
# paginate
# ---------------------------------------------------------------------------


@pytest.mark.unit
@pytest.mark.parametrize("total, limit", [(0, 10), (1, 10), (10, 10), (23, 10), (7, 3)])
def test_page_count(total, limit):
    records = [{"id": i} for i in range(total)]

    _, pagination = paginate(records, page=1, limit=limit)

    assert pagination.total == total
    assert pagination.pages == math.ceil(total / limit)


@pytest.mark.unit
def test_pages_partition_records():
    records = [{"id": i} for i in range(23)]
    seen = []

    for page in range(1, 4):
        items, _ = paginate(records, page=page, limit=10)
        assert items == records[(page - 1) * 10 : page * 10]
        seen.extend(items)

    assert seen == records


@pytest.mark.unit
def test_page_past_the_end_is_empty():
    items, pagination = paginate([{"id": 1}], page=3, limit=10)

    assert items == []
    assert pagination.page == 3


@pytest.mark.unit
def test_pagination_build_matches_envelope():
    assert Pagination.build(total=25, page=2, limit=10).model_dump() == {
        "page": 2,
        "limit": 10,
        "total": 25,
        "pages": 3,
    }
