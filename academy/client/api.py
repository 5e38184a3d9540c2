from typing import Any, Optional

import httpx
from loguru import logger

from academy.client.errors import ApiError, NotFoundError, TransportError
from academy.core.settings import settings


def _error_message(resp: httpx.Response) -> Optional[str]:
    try:
        body = resp.json()
    except ValueError:
        return resp.text or None
    if isinstance(body, dict):
        detail = body.get("detail", body.get("message"))
        if isinstance(detail, str):
            return detail
        if detail is not None:
            return str(detail)
    return None


class ApiClient:
    """
    Thin JSON client over the academy REST API:
    - transport failures → TransportError
    - non-2xx → ApiError (404 → NotFoundError) carrying the server's detail
    - 204 / empty body → None
    """

    def __init__(
        self,
        http: httpx.AsyncClient,
        base_url: str | None = None,
        token: str | None = None,
    ):
        self.http = http
        self.base_url = (base_url or settings.API_BASE_URL).rstrip("/")
        self.token = token

    def _headers(self) -> dict[str, str]:
        if not self.token:
            return {}
        return {"Authorization": f"Bearer {self.token}"}

    async def request(self, method: str, path: str, **kwargs: Any) -> Any:
        url = f"{self.base_url}{path}"
        try:
            resp = await self.http.request(method, url, headers=self._headers(), **kwargs)
        except httpx.HTTPError as e:
            logger.error(f"❌ {method} {path} transport error: {e}")
            raise TransportError(str(e)) from e

        if resp.status_code == 404:
            raise NotFoundError(_error_message(resp))
        if resp.status_code >= 400:
            raise ApiError(resp.status_code, _error_message(resp))

        if resp.status_code == 204 or not resp.content:
            return None
        return resp.json()

    async def get(self, path: str, **kwargs: Any) -> Any:
        return await self.request("GET", path, **kwargs)

    async def post(self, path: str, **kwargs: Any) -> Any:
        return await self.request("POST", path, **kwargs)

    async def put(self, path: str, **kwargs: Any) -> Any:
        return await self.request("PUT", path, **kwargs)

    async def patch(self, path: str, **kwargs: Any) -> Any:
        return await self.request("PATCH", path, **kwargs)

    async def delete(self, path: str, **kwargs: Any) -> Any:
        return await self.request("DELETE", path, **kwargs)

    async def get_optional(self, path: str, **kwargs: Any) -> Any:
        """GET that treats 404 as an absent resource."""
        try:
            return await self.get(path, **kwargs)
        except NotFoundError:
            return None
