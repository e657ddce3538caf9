"""Read path of the table: filter, then sort, then paginate.

Every function here is pure; callers hand in the rows and query parameters of
a committed snapshot and get back a new list.
"""
from __future__ import annotations

import locale
from dataclasses import dataclass
from functools import cmp_to_key
from typing import Any, Iterable, List, Mapping, Sequence

from ..data_model import Column, Pagination, Row, SortSpec, cell_text, is_absent


@dataclass(frozen=True)
class QueryResult:
    rows: List[Row]
    total: int
    page: int
    page_size: int

    @property
    def page_count(self) -> int:
        return Pagination(page=self.page, page_size=self.page_size).page_count(self.total)


def _sign(value: int) -> int:
    return (value > 0) - (value < 0)


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def compare_text(left: str, right: str) -> int:
    primary = _sign(locale.strcoll(left.casefold(), right.casefold()))
    if primary:
        return primary
    return _sign(locale.strcoll(left, right))


def compare_values(left: Any, right: Any) -> int:
    """Order two present cell values: numerically if both are numbers, else as text."""
    if _is_number(left) and _is_number(right):
        return (left > right) - (left < right)
    return compare_text(cell_text(left), cell_text(right))


def filter_rows(rows: Iterable[Mapping[str, Any]], columns: Sequence[Column], search: str) -> List[Row]:
    if not search:
        return list(rows)
    needle = search.lower()
    return [
        row
        for row in rows
        if any(needle in cell_text(row.get(column.id)).lower() for column in columns)
    ]


def sort_rows(rows: Iterable[Mapping[str, Any]], sorting: SortSpec) -> List[Row]:
    if not sorting.active:
        return list(rows)
    column_id = sorting.column_id
    sign = -1 if sorting.direction == "desc" else 1

    def _compare(left: Mapping[str, Any], right: Mapping[str, Any]) -> int:
        a = left.get(column_id)
        b = right.get(column_id)
        a_absent, b_absent = is_absent(a), is_absent(b)
        # absent values go last in both directions
        if a_absent or b_absent:
            return int(a_absent) - int(b_absent)
        return sign * compare_values(a, b)

    return sorted(rows, key=cmp_to_key(_compare))


def paginate(rows: Sequence[Row], pagination: Pagination) -> List[Row]:
    if pagination.page < 0:
        return []
    start = pagination.page * pagination.page_size
    return [dict(row) for row in rows[start:start + pagination.page_size]]


def run_query(
    rows: Iterable[Mapping[str, Any]],
    columns: Sequence[Column],
    search: str,
    sorting: SortSpec,
    pagination: Pagination,
) -> QueryResult:
    filtered = filter_rows(rows, columns, search)
    ordered = sort_rows(filtered, sorting)
    return QueryResult(
        rows=paginate(ordered, pagination),
        total=len(filtered),
        page=pagination.page,
        page_size=pagination.page_size,
    )


def next_sort(current: SortSpec, column_id: str) -> SortSpec:
    """Header-click cycle: asc, then desc, then unsorted; a new column starts at asc."""
    if current.column_id != column_id:
        return SortSpec(column_id=column_id, direction="asc")
    if current.direction == "asc":
        return SortSpec(column_id=column_id, direction="desc")
    if current.direction == "desc":
        return SortSpec()
    return SortSpec(column_id=column_id, direction="asc")
