"""In-memory filtering and pagination for dashboard tables.

Mirrors the server listings: every supplied filter must match, and page K of
size P holds records ``[(K-1)*P, K*P)``.
"""

from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from services.marketplace_service.schemas import Pagination

# Filter value meaning "no filter" in dashboard dropdowns
ALL = "all"


def _matches_search(record: Dict[str, Any], term: str, fields: Sequence[str]) -> bool:
    return any(term in str(record.get(field) or "").lower() for field in fields)


def filter_records(
    records: Iterable[Dict[str, Any]],
    search: Optional[str] = None,
    search_fields: Sequence[str] = ("name", "email", "id"),
    **filters: Optional[str],
) -> List[Dict[str, Any]]:
    """Keep records matching the search term AND every exact-value filter.

    ``filters`` maps a record key to the wanted value; ``None`` or ``"all"``
    disables that filter.
    """
    term = (search or "").strip().lower()
    active = {key: value for key, value in filters.items() if value not in (None, ALL)}

    return [
        record
        for record in records
        if (not term or _matches_search(record, term, search_fields))
        and all(record.get(key) == value for key, value in active.items())
    ]


def paginate(
    records: Sequence[Dict[str, Any]], page: int = 1, limit: int = 10
) -> Tuple[List[Dict[str, Any]], Pagination]:
    if page < 1 or limit < 1:
        raise ValueError("page and limit must be positive")
    start = (page - 1) * limit
    return list(records[start : start + limit]), Pagination.build(
        len(records), page, limit
    )
