from typing import Any, Optional

from academy.client.api import ApiClient
from academy.libs.filters import FilterState


class UserListView:
    """Filterable, paginated view over /api/admin/users."""

    def __init__(
        self,
        api: ApiClient,
        path: str = "/api/admin/users",
        size: int = 10,
        role: Optional[str] = None,
    ):
        self.api = api
        self.path = path
        self.size = size
        self.role = role
        self.filters = FilterState()
        self.page = 1
        self.items: list[dict[str, Any]] = []
        self.total_items = 0
        self.total_pages = 0

    def params(self) -> dict[str, Any]:
        params: dict[str, Any] = {**self.filters.as_query_params(), "page": self.page, "size": self.size}
        if self.role:
            params["role"] = self.role
        return params

    async def load(self) -> list[dict[str, Any]]:
        data = await self.api.get(self.path, params=self.params())
        self.items = data["items"]
        self.total_items = data["total_items"]
        self.total_pages = data["total_pages"]
        return self.items

    async def _apply(self, filters: FilterState) -> list[dict[str, Any]]:
        self.filters = filters
        self.page = 1
        return await self.load()

    async def set_search(self, search: str | None):
        return await self._apply(self.filters.with_search(search))

    async def set_curriculum(self, curriculum: str | None):
        return await self._apply(self.filters.with_curriculum(curriculum))

    async def set_level(self, level: str | None):
        return await self._apply(self.filters.with_level(level))

    async def set_language(self, language: str | None):
        return await self._apply(self.filters.with_language(language))

    async def set_grade(self, grade: str | None):
        return await self._apply(self.filters.with_grade(grade))

    async def clear_filters(self):
        return await self._apply(self.filters.cleared())

    async def go_to(self, page: int):
        self.page = max(1, min(page, max(self.total_pages, 1)))
        return await self.load()

    async def next_page(self):
        return await self.go_to(self.page + 1)

    async def previous_page(self):
        return await self.go_to(self.page - 1)
