from collections import defaultdict
from typing import Any, Iterable, Mapping


def _get(record: Any, name: str, default: Any = None) -> Any:
    if isinstance(record, Mapping):
        return record.get(name, default)
    return getattr(record, name, default)


def completion_percentage(progress_records: Iterable[Any], chapters: Iterable[Any]) -> float:
    """Share of assignable chapters the student has completed, in percent.

    Only completed records whose chapter is in ``chapters`` count, so stale
    progress on deleted or unpublished chapters cannot push the value past 100.
    """
    chapter_ids = {str(_get(ch, "id")) for ch in chapters}
    if not chapter_ids:
        return 0.0
    completed = {
        str(_get(p, "chapter_id"))
        for p in progress_records
        if _get(p, "is_completed") and str(_get(p, "chapter_id")) in chapter_ids
    }
    return round(min(len(completed) / len(chapter_ids), 1.0) * 100, 2)


def course_breakdown(progress_records: Iterable[Any], chapters: Iterable[Any]) -> dict[str, dict]:
    """Per-course ``{completed, total, percentage}`` keyed by course id."""
    chapters_by_course: dict[str, set[str]] = defaultdict(set)
    for ch in chapters:
        chapters_by_course[str(_get(ch, "course_id"))].add(str(_get(ch, "id")))

    completed_ids = {
        str(_get(p, "chapter_id")) for p in progress_records if _get(p, "is_completed")
    }

    result: dict[str, dict] = {}
    for course_id, ids in chapters_by_course.items():
        done = len(ids & completed_ids)
        result[course_id] = {
            "completed": done,
            "total": len(ids),
            "percentage": round(done / len(ids) * 100, 2) if ids else 0.0,
        }
    return result
