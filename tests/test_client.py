import json

import httpx
import pytest

from academy.client.api import ApiClient
from academy.client.chapter_page import ChapterPageLoader
from academy.client.content_editor import ContentListEditor
from academy.client.errors import ApiError, NotFoundError, TransportError
from academy.client.user_list import UserListView

BASE = "http://api.test"
CHAPTER = "/api/courses/c1/chapters/ch1"


class FakeServer:
    """Routes (method, path) to canned responses and records every call."""

    def __init__(self, routes):
        self.routes = routes
        self.calls = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.calls.append((request.method, request.url.path, dict(request.url.params)))
        handler = self.routes.get((request.method, request.url.path))
        if handler is None:
            return httpx.Response(404, json={"detail": "Not Found"})
        if callable(handler):
            return handler(request)
        status, body = handler
        if body is None:
            return httpx.Response(status)
        return httpx.Response(status, json=body)

    def paths(self, method="GET"):
        return [path for m, path, _ in self.calls if m == method]


def make_api(server):
    http = httpx.AsyncClient(transport=httpx.MockTransport(server))
    return http, ApiClient(http, base_url=BASE, token="t0ken")


async def test_api_client_maps_errors():
    server = FakeServer(
        {
            ("GET", "/ok"): (200, {"a": 1}),
            ("DELETE", "/gone"): (204, None),
            ("GET", "/denied"): (403, {"detail": "Permission denied"}),
        }
    )
    http, api = make_api(server)
    async with http:
        assert await api.get("/ok") == {"a": 1}
        assert await api.delete("/gone") is None
        assert await api.get_optional("/missing") is None
        with pytest.raises(NotFoundError):
            await api.get("/missing")
        with pytest.raises(ApiError) as exc:
            await api.get("/denied")
        assert exc.value.status_code == 403
        assert exc.value.message == "Permission denied"


async def test_api_client_transport_error():
    def boom(request):
        raise httpx.ConnectError("refused", request=request)

    http = httpx.AsyncClient(transport=httpx.MockTransport(boom))
    async with http:
        with pytest.raises(TransportError):
            await ApiClient(http, base_url=BASE).get("/anything")


def _chapter_routes(overrides: dict | None = None):
    routes = {
        ("GET", CHAPTER): (200, {"id": "ch1", "title": "Fractions", "is_completed": False}),
        ("GET", "/api/courses/c1/progress"): (200, {"progress": 25.0}),
        ("GET", "/api/courses/c1/access"): (200, {"has_access": True, "subscription_expired": False}),
        ("GET", f"{CHAPTER}/homework"): (200, None),
        ("GET", f"{CHAPTER}/activities"): (200, [{"id": "a1", "title": "Cut a pie"}, {"id": "a2", "title": "Draw"}]),
        ("GET", f"{CHAPTER}/activities/a1/submission"): (200, {"id": "s1", "image_url": "x.png"}),
        ("GET", f"{CHAPTER}/activities/a2/submission"): (500, {"detail": "boom"}),
    }
    routes.update(overrides or {})
    return routes


async def test_chapter_page_loads_everything():
    server = FakeServer(_chapter_routes())
    http, api = make_api(server)
    async with http:
        state = await ChapterPageLoader(api).load("c1", "ch1")

    assert state.loaded
    assert state.course_progress == 25.0
    assert state.has_access is True
    assert state.homework is None
    assert [a["id"] for a in state.activities] == ["a1", "a2"]
    # a failing optional call degrades to its default
    assert state.activity_submissions == {"a1": {"id": "s1", "image_url": "x.png"}, "a2": None}


async def test_missing_chapter_stops_before_dependent_calls():
    routes = _chapter_routes()
    routes.pop(("GET", CHAPTER))
    server = FakeServer(routes)
    http, api = make_api(server)
    async with http:
        state = await ChapterPageLoader(api).load("c1", "ch1")

    assert state.not_found is True
    assert not state.loaded
    assert not any(path.startswith(f"{CHAPTER}/") for path in server.paths())


async def test_toggle_completion_alternates_put_and_delete():
    routes = _chapter_routes(
        {
            ("PUT", f"{CHAPTER}/progress"): (200, {"is_completed": True}),
            ("DELETE", f"{CHAPTER}/progress"): (204, None),
        }
    )
    server = FakeServer(routes)
    http, api = make_api(server)
    loader = ChapterPageLoader(api)
    async with http:
        state = await loader.load("c1", "ch1")
        state = await loader.toggle_completion(state)
        assert state.is_completed is True
        state = await loader.toggle_completion(state)
        assert state.is_completed is False

    mutations = [(m, p) for m, p, _ in server.calls if m in ("PUT", "DELETE")]
    assert mutations == [("PUT", f"{CHAPTER}/progress"), ("DELETE", f"{CHAPTER}/progress")]


async def test_toggle_failure_keeps_state():
    server = FakeServer(_chapter_routes({("PUT", f"{CHAPTER}/progress"): (403, {"detail": "Course access required"})}))
    http, api = make_api(server)
    loader = ChapterPageLoader(api)
    async with http:
        state = await loader.load("c1", "ch1")
        after = await loader.toggle_completion(state)

    assert after.is_completed is False
    assert after.action_error == "Course access required"


async def test_homework_submission_refetches():
    stored = {}

    def submit(request):
        stored["homework"] = {"id": "h1", "image_url": "hw.png", "feedback": None}
        return httpx.Response(200, json={"id": "h1"})

    def fetch(request):
        return httpx.Response(200, json=stored.get("homework"))

    server = FakeServer(
        _chapter_routes({("POST", f"{CHAPTER}/homework"): submit, ("GET", f"{CHAPTER}/homework"): fetch})
    )
    http, api = make_api(server)
    loader = ChapterPageLoader(api)
    async with http:
        state = await loader.load("c1", "ch1")
        state = await loader.submit_homework(state, "hw.png")

    assert state.homework == {"id": "h1", "image_url": "hw.png", "feedback": None}
    assert server.paths("GET").count(f"{CHAPTER}/homework") == 2


async def test_reorder_rolls_back_on_failure():
    items = [
        {"id": "x", "type": "chapter", "position": 1},
        {"id": "y", "type": "quiz", "position": 2},
        {"id": "z", "type": "livestream", "position": 3},
    ]
    server = FakeServer({("PUT", "/api/courses/c1/reorder"): (500, {"detail": "db down"})})
    http, api = make_api(server)
    async with http:
        editor = ContentListEditor(api, "c1", items)
        assert await editor.reorder(2, 0) is False

    assert editor.items == items
    assert editor.error == "Something went wrong"


async def test_reorder_sends_full_batch():
    captured = {}

    def save(request):
        captured.update(json.loads(request.content))
        return httpx.Response(200, json={"message": "Success"})

    items = [{"id": "x", "type": "chapter", "position": 1}, {"id": "y", "type": "quiz", "position": 2}]
    server = FakeServer({("PUT", "/api/courses/c1/reorder"): save})
    http, api = make_api(server)
    async with http:
        editor = ContentListEditor(api, "c1", items)
        assert await editor.reorder(1, 0) is True

    assert captured == {
        "list": [{"id": "y", "position": 1, "type": "quiz"}, {"id": "x", "position": 2, "type": "chapter"}]
    }
    assert [(i["id"], i["position"]) for i in editor.items] == [("y", 1), ("x", 2)]


async def test_user_list_view_resets_page_on_filter_change():
    page = {"items": [{"id": "u1"}], "total_items": 25, "total_pages": 3}
    server = FakeServer({("GET", "/api/admin/users"): (200, page)})
    http, api = make_api(server)
    async with http:
        view = UserListView(api, role="USER")
        await view.load()
        await view.next_page()
        assert view.page == 2
        await view.set_curriculum("egyptian")
        assert view.page == 1
        await view.set_level("primary")
        await view.set_curriculum("saudi")
        await view.go_to(10)

    assert view.page == 3
    assert view.filters.level is None
    assert server.calls[-1][2] == {"curriculum": "saudi", "page": "3", "size": "10", "role": "USER"}
