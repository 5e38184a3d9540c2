from dataclasses import dataclass, replace
from typing import Any, Iterable, Mapping, Sequence

from academy.libs.curriculum import (
    Grade,
    Language,
    Level,
    get_grades_by_curriculum,
    get_grades_by_language,
    get_grades_by_level,
    get_languages_by_level,
    get_levels_by_curriculum,
)

CLASSIFICATION_FIELDS = ("curriculum", "level", "language", "grade")


def _field(record: Any, name: str) -> Any:
    if isinstance(record, Mapping):
        return record.get(name)
    return getattr(record, name, None)


@dataclass(frozen=True)
class FilterState:
    """Search text plus the four taxonomy selections of one list view.

    Setters return a new state and clear every selection below the one
    being changed, so option lists can never reference a stale parent.
    """

    search: str = ""
    curriculum: str | None = None
    level: str | None = None
    language: str | None = None
    grade: str | None = None

    def with_search(self, search: str | None) -> "FilterState":
        return replace(self, search=search or "")

    def with_curriculum(self, curriculum: str | None) -> "FilterState":
        return replace(self, curriculum=curriculum or None, level=None, language=None, grade=None)

    def with_level(self, level: str | None) -> "FilterState":
        return replace(self, level=level or None, language=None, grade=None)

    def with_language(self, language: str | None) -> "FilterState":
        return replace(self, language=language or None, grade=None)

    def with_grade(self, grade: str | None) -> "FilterState":
        return replace(self, grade=grade or None)

    def cleared(self) -> "FilterState":
        return FilterState()

    # --- derived option lists ---

    def level_options(self) -> list[Level]:
        return get_levels_by_curriculum(self.curriculum)

    def language_options(self) -> list[Language]:
        if not self.level:
            return []
        return get_languages_by_level(self.curriculum, self.level)

    def grade_options(self) -> list[Grade]:
        if not self.curriculum:
            return []
        if not self.level:
            return get_grades_by_curriculum(self.curriculum)
        if self.language:
            return get_grades_by_language(self.curriculum, self.level, self.language)
        return get_grades_by_level(self.curriculum, self.level)

    # --- predicates ---

    def matches_search(self, record: Any) -> bool:
        term = self.search.strip()
        if not term:
            return True
        lowered = term.lower()
        full_name = (_field(record, "full_name") or "").lower()
        email = (_field(record, "email") or "").lower()
        phone = _field(record, "phone_number") or ""
        return lowered in full_name or lowered in email or term in phone

    def matches(self, record: Any) -> bool:
        if not self.matches_search(record):
            return False
        for name in CLASSIFICATION_FIELDS:
            wanted = getattr(self, name)
            if wanted and _field(record, name) != wanted:
                return False
        return True

    def apply(self, records: Iterable[Any]) -> list[Any]:
        return [r for r in records if self.matches(r)]

    def as_query_params(self) -> dict[str, str]:
        params = {name: getattr(self, name) for name in CLASSIFICATION_FIELDS}
        params["search"] = self.search.strip()
        return {k: v for k, v in params.items() if v}


def classification_clauses(filters: FilterState, columns: Mapping[str, Any]) -> list[Any]:
    """Equality clauses for each selection set on ``filters``; ``columns`` maps field name to SQL column."""
    return [
        columns[name] == getattr(filters, name)
        for name in CLASSIFICATION_FIELDS
        if getattr(filters, name)
    ]


def page_envelope(items: list[Any], page: int, size: int, total_items: int) -> dict[str, Any]:
    total_pages = (total_items + size - 1) // size
    return {
        "page": page,
        "size": size,
        "total_items": total_items,
        "total_pages": total_pages,
        "has_next": page < total_pages,
        "has_previous": page > 1,
        "items": items,
    }


def paginate(items: Sequence[Any], page: int, size: int) -> dict[str, Any]:
    """Slice an in-memory sequence into the page envelope used by list routes."""
    page = max(page, 1)
    size = max(size, 1)
    start = (page - 1) * size
    return page_envelope(list(items[start : start + size]), page, size, len(items))
