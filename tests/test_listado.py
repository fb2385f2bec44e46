"""Tests for the list pipeline: search, stable sort and pagination."""

import pandas as pd
import pytest

from ohsansi.listado import (
    ASC,
    DESC,
    ListState,
    compare_values,
    filter_rows,
    page_window,
    paginate,
    range_label,
    run_pipeline,
    sort_rows,
    total_pages,
)


@pytest.fixture
def olimpistas():
    return pd.DataFrame([
        {"nombre": "ana", "area": "Matemática", "edad": 15},
        {"nombre": "Bruno", "area": "Física", "edad": 9},
        {"nombre": "carla", "area": "Química", "edad": 12},
        {"nombre": "Ana", "area": "Robótica", "edad": 12},
        {"nombre": "diego", "area": "Física", "edad": None},
    ])


def test_filter_is_case_insensitive_substring(olimpistas):
    result = filter_rows(olimpistas, "FÍS")
    assert list(result["nombre"]) == ["Bruno", "diego"]


def test_filter_blank_query_returns_all(olimpistas):
    assert len(filter_rows(olimpistas, "   ")) == 5


def test_filter_limited_to_columns(olimpistas):
    assert filter_rows(olimpistas, "ana", columns=["area"]).empty


def test_filter_matches_numbers_as_text(olimpistas):
    assert list(filter_rows(olimpistas, "12")["nombre"]) == ["carla", "Ana"]


def test_compare_values():
    assert compare_values(2, 10) == -1
    assert compare_values("b", "A") == 1
    assert compare_values("a", "A") == 0
    assert compare_values(1, "a") == 0
    assert compare_values(None, None) == 0


def test_sort_strings_stable(olimpistas):
    result = sort_rows(olimpistas, "nombre", ASC)
    # "ana" y "Ana" empatan y mantienen su orden original
    assert list(result["nombre"]) == ["ana", "Ana", "Bruno", "carla", "diego"]


def test_sort_numbers_desc(olimpistas):
    result = sort_rows(olimpistas.dropna(), "edad", DESC)
    assert list(result["edad"]) == [15, 12, 12, 9]
    assert list(result["nombre"])[1:3] == ["carla", "Ana"]


def test_sort_unknown_key_keeps_order(olimpistas):
    assert list(sort_rows(olimpistas, "nope")["nombre"]) == list(olimpistas["nombre"])


def test_total_pages_never_zero():
    assert total_pages(0, 7) == 1
    assert total_pages(7, 7) == 1
    assert total_pages(8, 7) == 2


def test_paginate_clamps_page():
    df = pd.DataFrame({"n": range(20)})
    page = paginate(df, 10, 7)
    assert page.page == 3
    assert list(page.rows["n"]) == [14, 15, 16, 17, 18, 19]
    assert (page.start, page.end) == (15, 20)

    page = paginate(df, 0, 7)
    assert page.page == 1


def test_paginate_empty():
    page = paginate(pd.DataFrame(), 3, 7)
    assert page.page == 1
    assert page.total_pages == 1
    assert range_label(page) == "Mostrando 0 a 0 de 0"


def test_paginate_rejects_bad_size():
    with pytest.raises(ValueError):
        paginate(pd.DataFrame({"n": [1]}), 1, 0)


def test_new_query_resets_page(olimpistas):
    state = ListState(sort_key="nombre", page_size=2, page=3)
    state.set_query("a")
    assert state.page == 1


def test_toggle_sort():
    state = ListState(sort_key="nombre")
    state.toggle_sort("nombre")
    assert state.sort_dir == DESC
    state.toggle_sort("area")
    assert (state.sort_key, state.sort_dir) == ("area", ASC)


def test_pipeline_filter_sort_paginate(olimpistas):
    state = ListState(query="a", sort_key="nombre", sort_dir=DESC, page=5, page_size=2)
    page = run_pipeline(olimpistas, state, columns=["nombre"])
    assert page.total == 3
    assert page.page == 2
    assert state.page == 2
    assert list(page.rows["nombre"]) == ["Ana"]
    assert range_label(page) == "Mostrando 3 a 3 de 3"

    state.page = 1
    page = run_pipeline(olimpistas, state, columns=["nombre"])
    assert list(page.rows["nombre"]) == ["carla", "ana"]


def test_pipeline_accepts_records():
    state = ListState(page_size=7)
    page = run_pipeline([{"x": 1}, {"x": 2}], state)
    assert page.total == 2


def test_page_window():
    assert page_window(1, 3) == [1, 2, 3]
    assert page_window(1, 10) == [1, 2, 3, 4, 5]
    assert page_window(6, 10) == [4, 5, 6, 7, 8]
    assert page_window(10, 10) == [6, 7, 8, 9, 10]


def test_pages_concatenate_to_sorted_rows():
    df = pd.DataFrame({"n": [5, 3, 9, 1, 7, 2, 8, 4, 6, 0, 11]})
    expected = sort_rows(df, "n", ASC)
    pages = [paginate(expected, p, 3) for p in range(1, total_pages(len(df), 3) + 1)]
    joined = pd.concat([p.rows for p in pages])
    assert list(joined["n"]) == list(expected["n"])
    assert list(joined["n"]) == sorted(df["n"])
