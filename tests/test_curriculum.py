from academy.libs.curriculum import (
    CURRICULA,
    get_grade_by_id,
    get_grades_by_curriculum,
    get_grades_by_language,
    get_grades_by_level,
    get_languages_by_level,
    get_levels_by_curriculum,
    is_valid_selection,
    taxonomy_as_dict,
)


def test_curricula_ids():
    assert [c.id for c in CURRICULA] == ["egyptian", "saudi", "summer_courses", "center_mhm_academy"]


def test_unknown_ids_give_empty_results():
    assert get_levels_by_curriculum("nope") == []
    assert get_levels_by_curriculum(None) == []
    assert get_languages_by_level("nope", "primary") == []
    assert get_grades_by_curriculum("") == []
    assert get_grade_by_id("missing") is None


def test_egyptian_primary_languages():
    languages = get_languages_by_level("egyptian", "primary")
    assert [lang.id for lang in languages] == ["arabic", "languages"]
    assert get_languages_by_level("egyptian", "secondary") == []
    assert get_languages_by_level("saudi", "primary") == []


def test_grades_narrow_by_level_and_language():
    kg = get_grades_by_level("egyptian", "kg")
    assert [g.id for g in kg] == ["kg1", "kg2"]

    arabic = get_grades_by_language("egyptian", "primary", "arabic")
    assert all(g.language == "arabic" and g.level == "primary" for g in arabic)
    assert len(arabic) == 6


def test_grade_order_is_declaration_order():
    grades = get_grades_by_curriculum("saudi")
    assert [g.order for g in grades] == list(range(1, len(grades) + 1))


def test_is_valid_selection():
    assert is_valid_selection()
    assert is_valid_selection("egyptian", "primary", "arabic", "p1_arabic")
    assert is_valid_selection(grade="kg1_saudi")
    assert not is_valid_selection("egyptian", grade="kg1_saudi")
    assert not is_valid_selection("saudi", "secondary")
    assert not is_valid_selection("unknown")
    assert not is_valid_selection("egyptian", "primary", "arabic", "p1_languages")


def test_taxonomy_as_dict_is_serialisable():
    data = taxonomy_as_dict()
    egyptian = data[0]
    assert egyptian["id"] == "egyptian"
    assert egyptian["levels"][0] == {"id": "kg", "name": "كجي", "curriculum": "egyptian", "order": 1}
    assert {"id", "name", "levels", "languages", "grades"} <= set(egyptian)


async def test_curriculum_routes(client):
    body = (await client.get("/api/curriculum")).json()
    assert len(body) == 4

    options = (
        await client.get("/api/curriculum/options", params={"curriculum": "egyptian", "level": "primary"})
    ).json()
    assert [lang["id"] for lang in options["languages"]] == ["arabic", "languages"]
    assert len(options["grades"]) == 12

    empty = (await client.get("/api/curriculum/options")).json()
    assert empty == {"levels": [], "languages": [], "grades": []}
