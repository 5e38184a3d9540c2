from typing import Any, Optional

from loguru import logger

from academy.client.api import ApiClient
from academy.client.errors import ClientError
from academy.libs.ordering import move, renumber


class ContentListEditor:
    """Teacher-side ordered list of a course's chapters, quizzes and live streams."""

    def __init__(self, api: ApiClient, course_id: str, items: Optional[list[dict[str, Any]]] = None):
        self.api = api
        self.course_id = str(course_id)
        self.items: list[dict[str, Any]] = list(items or [])
        self.error: Optional[str] = None

    async def refresh(self) -> list[dict[str, Any]]:
        self.items = list(await self.api.get(f"/api/courses/{self.course_id}/content") or [])
        return self.items

    async def reorder(self, source: int, destination: int) -> bool:
        """Apply the move locally, persist it in one batch, roll back on failure."""
        previous = self.items
        moved = move(previous, source, destination)
        payload = renumber(moved)
        self.items = [{**item, "position": entry["position"]} for item, entry in zip(moved, payload)]

        try:
            await self.api.put(f"/api/courses/{self.course_id}/reorder", json={"list": payload})
        except ClientError as e:
            logger.error(f"❌ reorder failed, rolling back: {e}")
            self.items = previous
            self.error = "Something went wrong"
            return False

        self.error = None
        return True
