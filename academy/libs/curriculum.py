"""
Static student classification taxonomy: curriculum → level → language → grade.

Every lookup is a pure function over ``CURRICULA``; unknown ids yield an empty
list or ``None`` rather than raising.
"""

from dataclasses import asdict, dataclass, field
from typing import Optional


@dataclass(frozen=True)
class Level:
    id: str
    name: str
    curriculum: str
    order: int


@dataclass(frozen=True)
class Language:
    id: str
    name: str
    curriculum: str
    level: str
    order: int


@dataclass(frozen=True)
class Grade:
    id: str
    name: str
    curriculum: str
    level: str
    language: Optional[str]
    order: int


@dataclass(frozen=True)
class Curriculum:
    id: str
    name: str
    levels: tuple[Level, ...] = field(default_factory=tuple)
    languages: tuple[Language, ...] = field(default_factory=tuple)
    grades: tuple[Grade, ...] = field(default_factory=tuple)


def _grades(curriculum: str, rows: list[tuple]) -> tuple[Grade, ...]:
    return tuple(
        Grade(id=gid, name=name, curriculum=curriculum, level=level, language=lang, order=i)
        for i, (gid, name, level, lang) in enumerate(rows, start=1)
    )


EGYPTIAN = Curriculum(
    id="egyptian",
    name="المنهج المصري",
    levels=(
        Level("kg", "كجي", "egyptian", 1),
        Level("primary", "المرحلة الابتدائية", "egyptian", 2),
        Level("preparatory", "المرحلة الاعدادية", "egyptian", 3),
        Level("secondary", "المرحلة الثانوية", "egyptian", 4),
    ),
    languages=(
        Language("arabic", "عربي", "egyptian", "primary", 1),
        Language("languages", "لغات", "egyptian", "primary", 2),
        Language("arabic", "عربي", "egyptian", "preparatory", 3),
        Language("languages", "لغات", "egyptian", "preparatory", 4),
    ),
    grades=_grades(
        "egyptian",
        [
            ("kg1", "كجي 1", "kg", None),
            ("kg2", "كجي 2", "kg", None),
            ("p1_arabic", "الصف الاول الابتدائي عربي", "primary", "arabic"),
            ("p1_languages", "الصف الاول الابتدائي لغات", "primary", "languages"),
            ("p2_arabic", "الصف الثاني عربي", "primary", "arabic"),
            ("p2_languages", "الصف الثاني لغات", "primary", "languages"),
            ("p3_arabic", "الصف التالت عربي", "primary", "arabic"),
            ("p3_languages", "الصف التالت لغات", "primary", "languages"),
            ("p4_arabic", "الصف الرابع عربي", "primary", "arabic"),
            ("p4_languages", "الصف الرابع لغات", "primary", "languages"),
            ("p5_arabic", "الصف الخامس عربي", "primary", "arabic"),
            ("p5_languages", "الصف الخامس لغات", "primary", "languages"),
            ("p6_arabic", "الصف السادس عربي", "primary", "arabic"),
            ("p6_languages", "الصف السادس لغات", "primary", "languages"),
            ("prep1_general", "الصف الاول الاعدادي عام", "preparatory", "arabic"),
            ("prep1_azhar", "الصف الاول الاعدادي ازهر", "preparatory", "arabic"),
            ("prep1_languages", "الصف الاول الاعدادي لغات", "preparatory", "languages"),
            ("prep2_general", "الصف الثاني الاعدادي عام", "preparatory", "arabic"),
            ("prep2_azhar", "الصف الثاني الاعدادي ازهر", "preparatory", "arabic"),
            ("prep2_languages", "الصف الثاني الاعدادي لغات", "preparatory", "languages"),
            ("prep3_general", "الصف التالت الاعدادي عام", "preparatory", "arabic"),
            ("prep3_azhar", "الصف التالت الاعدادي ازهر", "preparatory", "arabic"),
            ("prep3_languages", "الصف التالت الاعدادي لغات", "preparatory", "languages"),
            ("sec1_general", "الصف الاول الثانوي عام", "secondary", "arabic"),
            ("sec1_azhar", "الصف الاول الثانوي ازهر", "secondary", "arabic"),
            ("sec2_science_general", "الصف الثاني الثانوي علمي عام", "secondary", "arabic"),
            ("sec2_science_azhar", "الصف الثاني الثانوي علمي ازهر", "secondary", "arabic"),
            ("sec3_science_general", "الصف الثالث الثانوي علمي عام", "secondary", "arabic"),
            ("sec3_science_azhar", "الصف الثالث الثانوي علمي ازهر", "secondary", "arabic"),
            ("sec2_literary_general", "الصف الثاني الثانوي ادبي عام", "secondary", "arabic"),
            ("sec2_literary_azhar", "الصف الثاني الثانوي ادبي ازهر", "secondary", "arabic"),
        ],
    ),
)

SAUDI = Curriculum(
    id="saudi",
    name="المنهج السعودي",
    levels=(
        Level("kg", "كجي", "saudi", 1),
        Level("primary", "المرحلة الابتدائية", "saudi", 2),
        Level("preparatory", "المرحلة المتوسطة", "saudi", 3),
    ),
    grades=_grades(
        "saudi",
        [
            ("kg1_saudi", "Kg1", "kg", None),
            ("kg2_saudi", "Kg2", "kg", None),
            ("kg3_saudi", "Kg3", "kg", None),
            ("p1_saudi", "الصف الاول", "primary", None),
            ("p2_saudi", "الصف الثاني", "primary", None),
            ("p3_saudi", "الصف الثالث", "primary", None),
            ("p4_saudi", "الصف الرابع", "primary", None),
            ("p5_saudi", "الصف الخامس", "primary", None),
            ("p6_saudi", "الصف السادس", "primary", None),
            ("int1_saudi", "الصف الاول المتوسط", "preparatory", None),
            ("int2_saudi", "الصف الثاني المتوسط", "preparatory", None),
            ("int3_saudi", "الصف الثالث المتوسط", "preparatory", None),
        ],
    ),
)

SUMMER_COURSES = Curriculum(
    id="summer_courses",
    name="الكورسات الصيفية",
    levels=(Level("summer_levels", "مستويات الكورسات الصيفية", "summer_courses", 1),),
    grades=_grades(
        "summer_courses",
        [
            ("uc_math_1", "UC Math - Level 1", "summer_levels", None),
            ("uc_math_2", "UC Math - Level 2", "summer_levels", None),
            ("programming_1", "البرمجة - Level 1", "summer_levels", None),
            ("programming_2", "البرمجة - Level 2", "summer_levels", None),
            ("programming_3", "البرمجة - Level 3", "summer_levels", None),
            ("english_1", "English - Level 1", "summer_levels", None),
            ("english_2", "English - Level 2", "summer_levels", None),
            ("english_3", "English - Level 3", "summer_levels", None),
            ("arabic_foundation_1", "تأسيس عربي - مستوي أول", "summer_levels", None),
            ("arabic_foundation_2", "تأسيس عربي - مستوي ثان", "summer_levels", None),
            ("quran_1", "القرآن الكريم - مستوي أول", "summer_levels", None),
            ("quran_2", "القرآن الكريم - مستوي ثان", "summer_levels", None),
            ("senior_training_1", "تدريب كبار - مستوي أول", "summer_levels", None),
            ("senior_training_2", "تدريب كبار - مستوي ثان", "summer_levels", None),
        ],
    ),
)

CENTER_MHM_ACADEMY = Curriculum(
    id="center_mhm_academy",
    name="Center MHM Academy",
    levels=(Level("summer_levels", "مستويات متخصصة", "center_mhm_academy", 1),),
    grades=_grades(
        "center_mhm_academy",
        [
            ("grade1_primary", "الصف الاول الابتدائي عربي /لغات", "summer_levels", None),
            ("grade2_primary", "الصف الثاني عربي /لغات", "summer_levels", None),
            ("grade3_primary", "الصف التالت عربي/لغات", "summer_levels", None),
            ("grade4_primary", "الصف الرابع عربي /لغات", "summer_levels", None),
            ("grade5_primary", "الصف الخامس عربي /لغات", "summer_levels", None),
            ("grade6_primary", "الصف السادس عربي /لغات", "summer_levels", None),
            ("grade1_preparatory", "الصف الاول الاعدادي عام عربي/لغات", "summer_levels", None),
            ("grade2_preparatory", "الصف الثاني الاعدادي عام عربي/لغات", "summer_levels", None),
            ("grade3_preparatory", "الصف التالت الاعدادي عام عربي/لغات", "summer_levels", None),
        ],
    ),
)

CURRICULA: tuple[Curriculum, ...] = (EGYPTIAN, SAUDI, SUMMER_COURSES, CENTER_MHM_ACADEMY)

_BY_ID = {c.id: c for c in CURRICULA}


def get_curriculum_by_id(curriculum_id: str | None) -> Curriculum | None:
    if not curriculum_id:
        return None
    return _BY_ID.get(curriculum_id)


def get_levels_by_curriculum(curriculum_id: str | None) -> list[Level]:
    curriculum = get_curriculum_by_id(curriculum_id)
    return list(curriculum.levels) if curriculum else []


def get_level_by_id(level_id: str | None, curriculum_id: str | None) -> Level | None:
    for level in get_levels_by_curriculum(curriculum_id):
        if level.id == level_id:
            return level
    return None


def get_languages_by_level(curriculum_id: str | None, level_id: str | None) -> list[Language]:
    curriculum = get_curriculum_by_id(curriculum_id)
    if not curriculum:
        return []
    return [lang for lang in curriculum.languages if lang.level == level_id]


def get_grades_by_curriculum(curriculum_id: str | None) -> list[Grade]:
    curriculum = get_curriculum_by_id(curriculum_id)
    return list(curriculum.grades) if curriculum else []


def get_grades_by_level(curriculum_id: str | None, level_id: str | None) -> list[Grade]:
    return [g for g in get_grades_by_curriculum(curriculum_id) if g.level == level_id]


def get_grades_by_language(
    curriculum_id: str | None, level_id: str | None, language_id: str | None
) -> list[Grade]:
    return [
        g
        for g in get_grades_by_curriculum(curriculum_id)
        if g.level == level_id and g.language == language_id
    ]


def get_grade_by_id(grade_id: str | None) -> Grade | None:
    if not grade_id:
        return None
    for curriculum in CURRICULA:
        for grade in curriculum.grades:
            if grade.id == grade_id:
                return grade
    return None


def is_valid_selection(
    curriculum: str | None = None,
    level: str | None = None,
    language: str | None = None,
    grade: str | None = None,
) -> bool:
    """True when every non-empty value belongs under its selected parents.

    Children may be set without parents (a grade alone is a valid target);
    in that case the grade must simply exist.
    """
    if curriculum and not get_curriculum_by_id(curriculum):
        return False
    if level:
        if curriculum and not get_level_by_id(level, curriculum):
            return False
        if not curriculum and not any(get_level_by_id(level, c.id) for c in CURRICULA):
            return False
    if language and curriculum and level:
        if not any(lang.id == language for lang in get_languages_by_level(curriculum, level)):
            return False
    if grade:
        found = get_grade_by_id(grade)
        if not found:
            return False
        if curriculum and found.curriculum != curriculum:
            return False
        if level and found.level != level:
            return False
        if language and found.language is not None and found.language != language:
            return False
    return True


def taxonomy_as_dict() -> list[dict]:
    return [
        {
            "id": c.id,
            "name": c.name,
            "levels": [asdict(level) for level in c.levels],
            "languages": [asdict(lang) for lang in c.languages],
            "grades": [asdict(g) for g in c.grades],
        }
        for c in CURRICULA
    ]
