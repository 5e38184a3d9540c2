from sqlalchemy import column

from academy.libs.filters import FilterState, classification_clauses, paginate

STUDENTS = [
    {"full_name": "Mona Adel", "email": "mona@mail.com", "phone_number": "01000000001",
     "curriculum": "egyptian", "level": "primary", "language": "arabic", "grade": "p1_arabic"},
    {"full_name": "Omar Said", "email": "omar@mail.com", "phone_number": "01000000002",
     "curriculum": "saudi", "level": "kg", "language": None, "grade": "kg1_saudi"},
    {"full_name": "Sara Ali", "email": "sara@mail.com", "phone_number": None,
     "curriculum": "egyptian", "level": "kg", "language": None, "grade": "kg2"},
]


def test_changing_a_parent_clears_children():
    state = FilterState().with_curriculum("egyptian").with_level("primary").with_language("arabic")
    state = state.with_grade("p1_arabic")

    assert state.with_curriculum("saudi") == FilterState(curriculum="saudi")
    assert state.with_level("kg") == FilterState(curriculum="egyptian", level="kg")
    assert state.with_language("languages").grade is None
    assert state.with_search("x").grade == "p1_arabic"


def test_option_lists_follow_selection():
    state = FilterState()
    assert state.level_options() == []
    assert state.grade_options() == []

    state = state.with_curriculum("egyptian")
    assert [lvl.id for lvl in state.level_options()] == ["kg", "primary", "preparatory", "secondary"]
    assert state.language_options() == []
    assert len(state.grade_options()) == 31

    state = state.with_level("primary")
    assert len(state.grade_options()) == 12
    assert len(state.with_language("arabic").grade_options()) == 6


def test_search_matches_name_email_and_phone():
    assert [s["full_name"] for s in FilterState(search="OMAR").apply(STUDENTS)] == ["Omar Said"]
    assert [s["full_name"] for s in FilterState(search="sara@").apply(STUDENTS)] == ["Sara Ali"]
    assert [s["full_name"] for s in FilterState(search="0000001").apply(STUDENTS)] == ["Mona Adel"]
    assert len(FilterState(search="   ").apply(STUDENTS)) == 3


def test_classification_and_search_combine():
    state = FilterState(search="a", curriculum="egyptian", level="kg")
    assert [s["full_name"] for s in state.apply(STUDENTS)] == ["Sara Ali"]


def test_query_params_and_clear():
    state = FilterState(search=" mona ", curriculum="egyptian")
    assert state.as_query_params() == {"curriculum": "egyptian", "search": "mona"}
    assert state.cleared() == FilterState()


def test_paginate():
    items = list(range(25))
    page = paginate(items, 3, 10)
    assert page["items"] == [20, 21, 22, 23, 24]
    assert page["total_pages"] == 3
    assert not page["has_next"]
    assert page["has_previous"]

    empty = paginate([], 1, 10)
    assert empty["total_pages"] == 0
    assert empty["items"] == []


def test_classification_clauses_only_for_set_fields():
    columns = {name: column(name) for name in ("curriculum", "level", "language", "grade")}
    clauses = classification_clauses(FilterState(curriculum="egyptian", grade="kg1"), columns)
    assert [str(c) for c in clauses] == ["curriculum = :curriculum_1", "grade = :grade_1"]
    assert classification_clauses(FilterState(search="x"), columns) == []
