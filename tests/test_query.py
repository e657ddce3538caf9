from table_manager.data_model import Column, Pagination, SortSpec, default_columns, default_people_rows
from table_manager.engine.query import (
    compare_values,
    filter_rows,
    next_sort,
    paginate,
    run_query,
    sort_rows,
)

COLUMNS = default_columns()


def _numbered_rows(count: int) -> list[dict]:
    return [{"name": f"Person {i}", "email": f"p{i}@example.com", "age": i, "role": "User"} for i in range(count)]


def test_empty_search_returns_rows_unchanged():
    rows = default_people_rows()

    filtered = filter_rows(rows, COLUMNS, "")

    assert filtered == rows


def test_search_with_no_match_returns_nothing():
    rows = default_people_rows()

    assert filter_rows(rows, COLUMNS, "zzz-not-present") == []


def test_search_is_case_insensitive_over_seed_rows():
    result = run_query(default_people_rows(), COLUMNS, "admin", SortSpec(), Pagination(page=0, page_size=10))

    assert result.total == 5
    assert [row["name"] for row in result.rows] == ["Alice", "Faith", "Karl", "Paula", "Steve"]


def test_search_only_looks_at_visible_columns():
    visible = [column for column in COLUMNS if column.id != "role"]

    assert filter_rows(default_people_rows(), visible, "admin") == []


def test_search_matches_numbers_and_skips_absent_values():
    rows = [
        {"name": "Alice", "age": 22},
        {"name": "Bob", "age": 22.0},
        {"name": "Cara", "age": None},
        {"name": "Dan"},
    ]

    assert [row["name"] for row in filter_rows(rows, COLUMNS, "22")] == ["Alice", "Bob"]
    assert filter_rows(rows, COLUMNS, "none") == []


def test_sort_is_stable_in_both_directions():
    rows = default_people_rows()
    users_in_input_order = [row["name"] for row in rows if row["role"] == "User"]

    ascending = sort_rows(rows, SortSpec("role", "asc"))
    descending = sort_rows(rows, SortSpec("role", "desc"))

    assert [row["name"] for row in ascending if row["role"] == "User"] == users_in_input_order
    assert [row["name"] for row in descending if row["role"] == "User"] == users_in_input_order
    assert [row["role"] for row in ascending][:5] == ["Admin"] * 5
    assert [row["role"] for row in descending][:12] == ["User"] * 12


def test_absent_values_sort_last_regardless_of_direction():
    rows = [
        {"name": "a", "age": None},
        {"name": "b", "age": 30},
        {"name": "c"},
        {"name": "d", "age": 20},
        {"name": "e", "age": float("nan")},
    ]

    ascending = [row["name"] for row in sort_rows(rows, SortSpec("age", "asc"))]
    descending = [row["name"] for row in sort_rows(rows, SortSpec("age", "desc"))]

    assert ascending == ["d", "b", "a", "c", "e"]
    assert descending == ["b", "d", "a", "c", "e"]


def test_numbers_compare_numerically_and_text_compares_case_insensitively():
    numbers = [{"age": 10}, {"age": 9}, {"age": 100}]
    names = [{"name": "bob"}, {"name": "Alice"}, {"name": "charlie"}]

    assert [row["age"] for row in sort_rows(numbers, SortSpec("age", "asc"))] == [9, 10, 100]
    assert [row["name"] for row in sort_rows(names, SortSpec("name", "asc"))] == ["Alice", "bob", "charlie"]
    assert compare_values(2, 10) < 0
    assert compare_values("2", "10") > 0


def test_inactive_sort_preserves_order():
    rows = default_people_rows()

    assert sort_rows(rows, SortSpec("age", None)) == rows
    assert sort_rows(rows, SortSpec("", "asc")) == rows


def test_pagination_of_23_rows():
    rows = _numbered_rows(23)

    sizes = [len(paginate(rows, Pagination(page=page, page_size=10))) for page in range(4)]

    assert sizes == [10, 10, 3, 0]
    assert paginate(rows, Pagination(page=-1, page_size=10)) == []


def test_pages_concatenate_to_the_sorted_filtered_sequence():
    rows = _numbered_rows(23) + [{"name": "Nobody", "age": None, "role": "Guest"}]
    sorting = SortSpec("age", "desc")
    expected = sort_rows(filter_rows(rows, COLUMNS, "user"), sorting)

    pages = []
    page = 0
    while True:
        result = run_query(rows, COLUMNS, "user", sorting, Pagination(page=page, page_size=7))
        if not result.rows:
            break
        pages.extend(result.rows)
        page += 1

    assert pages == expected
    assert result.total == 23
    assert result.page_count == 4


def test_total_counts_filtered_rows_before_pagination():
    result = run_query(_numbered_rows(23), COLUMNS, "", SortSpec(), Pagination(page=2, page_size=10))

    assert result.total == 23
    assert len(result.rows) == 3


def test_next_sort_cycles_asc_desc_off():
    first = next_sort(SortSpec(), "age")
    second = next_sort(first, "age")
    third = next_sort(second, "age")
    switched = next_sort(second, "name")

    assert first == SortSpec("age", "asc")
    assert second == SortSpec("age", "desc")
    assert third == SortSpec()
    assert switched == SortSpec("name", "asc")


def test_hidden_column_still_sorts():
    rows = [{"name": "b", "secret": 2}, {"name": "a", "secret": 1}]
    visible = [Column("name", "Name")]

    result = run_query(rows, visible, "", SortSpec("secret", "asc"), Pagination())

    assert [row["name"] for row in result.rows] == ["a", "b"]
