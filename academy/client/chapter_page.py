import asyncio
from dataclasses import dataclass, field, replace
from typing import Any, Awaitable, Optional, TypeVar

from loguru import logger

from academy.client.api import ApiClient
from academy.client.errors import ClientError, NotFoundError

T = TypeVar("T")


@dataclass(frozen=True)
class ChapterPageState:
    course_id: str
    chapter_id: str
    chapter: Optional[dict[str, Any]] = None
    is_completed: bool = False
    course_progress: float = 0.0
    has_access: bool = False
    homework: Optional[dict[str, Any]] = None
    activities: list[dict[str, Any]] = field(default_factory=list)
    activity_submissions: dict[str, Optional[dict[str, Any]]] = field(default_factory=dict)
    error: Optional[str] = None
    not_found: bool = False
    action_error: Optional[str] = None

    @property
    def loaded(self) -> bool:
        return self.chapter is not None and self.error is None


class ChapterPageLoader:
    """Loads and mutates everything a student's chapter page shows."""

    def __init__(self, api: ApiClient):
        self.api = api

    @staticmethod
    def _chapter_path(course_id: str, chapter_id: str) -> str:
        return f"/api/courses/{course_id}/chapters/{chapter_id}"

    async def _optional(self, call: Awaitable[T], default: T, what: str) -> T:
        try:
            result = await call
        except ClientError as e:
            logger.warning(f"⚠ optional {what} unavailable: {e}")
            return default
        return default if result is None else result

    # ==============================
    # 📥 LOAD
    # ==============================

    async def load(self, course_id: str, chapter_id: str) -> ChapterPageState:
        state = ChapterPageState(course_id=str(course_id), chapter_id=str(chapter_id))
        base = self._chapter_path(course_id, chapter_id)

        try:
            chapter, progress, access = await asyncio.gather(
                self.api.get(base),
                self.api.get(f"/api/courses/{course_id}/progress"),
                self.api.get(f"/api/courses/{course_id}/access"),
            )
        except NotFoundError as e:
            return replace(state, error=e.message, not_found=True)
        except ClientError as e:
            return replace(state, error=str(e))

        state = replace(
            state,
            chapter=chapter,
            is_completed=bool(chapter.get("is_completed")),
            course_progress=float((progress or {}).get("progress", 0)),
            has_access=bool((access or {}).get("has_access")),
        )

        homework, activities = await asyncio.gather(
            self._optional(self.api.get_optional(f"{base}/homework"), None, "homework"),
            self._optional(self.api.get(f"{base}/activities"), [], "activities"),
        )

        submissions = await asyncio.gather(
            *(
                self._optional(
                    self.api.get_optional(f"{base}/activities/{activity['id']}/submission"),
                    None,
                    "activity submission",
                )
                for activity in activities
            )
        )

        return replace(
            state,
            homework=homework,
            activities=list(activities),
            activity_submissions={
                str(activity["id"]): submission for activity, submission in zip(activities, submissions)
            },
        )

    # ==============================
    # ✏️ MUTATIONS
    # ==============================

    async def toggle_completion(self, state: ChapterPageState) -> ChapterPageState:
        path = f"{self._chapter_path(state.course_id, state.chapter_id)}/progress"
        try:
            if state.is_completed:
                await self.api.delete(path)
            else:
                await self.api.put(path)
        except ClientError as e:
            logger.error(f"❌ toggle completion failed: {e}")
            return replace(state, action_error=str(e))
        return replace(state, is_completed=not state.is_completed, action_error=None)

    async def submit_homework(self, state: ChapterPageState, image_url: str) -> ChapterPageState:
        path = f"{self._chapter_path(state.course_id, state.chapter_id)}/homework"
        try:
            created = await self.api.post(path, json={"image_url": image_url})
        except ClientError as e:
            logger.error(f"❌ homework submission failed: {e}")
            return replace(state, action_error=str(e))

        confirmed = await self._optional(self.api.get_optional(path), None, "homework")
        return replace(state, homework=confirmed or created, action_error=None)

    async def submit_activity(
        self, state: ChapterPageState, activity_id: str, image_url: str
    ) -> ChapterPageState:
        path = f"{self._chapter_path(state.course_id, state.chapter_id)}/activities/{activity_id}/submission"
        try:
            created = await self.api.post(path, json={"image_url": image_url})
        except ClientError as e:
            logger.error(f"❌ activity submission failed: {e}")
            return replace(state, action_error=str(e))

        confirmed = await self._optional(self.api.get_optional(path), None, "activity submission")
        submissions = {**state.activity_submissions, str(activity_id): confirmed or created}
        return replace(state, activity_submissions=submissions, action_error=None)
