import time
import uuid
from contextvars import ContextVar
from dataclasses import dataclass, field

from loguru import logger
from starlette.requests import Request
from starlette.types import ASGIApp, Message, Receive, Scope, Send

REQUEST_ID_HEADER = "x-request-id"


@dataclass
class RequestContext:
    request: Request
    request_id: str
    started: float = field(default_factory=time.perf_counter)


_current: ContextVar[RequestContext | None] = ContextVar("request_context", default=None)


def get_request_context() -> RequestContext:
    ctx = _current.get()
    if ctx is None:
        raise RuntimeError("No request in context; RequestContextMiddleware is not installed")
    return ctx


def get_request() -> Request:
    return get_request_context().request


class RequestContextMiddleware:
    """
    Pure ASGI middleware:
    - exposes the current Request through a context var (used by AuthorizationService)
    - tags every loguru record of the request with its request id
    - echoes the id back in the X-Request-ID response header
    """

    def __init__(self, app: ASGIApp):
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        request = Request(scope, receive)
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        ctx = RequestContext(request=request, request_id=request_id)
        token = _current.set(ctx)

        async def send_with_id(message: Message) -> None:
            if message["type"] == "http.response.start":
                headers = list(message.get("headers", []))
                headers.append((REQUEST_ID_HEADER.encode(), request_id.encode()))
                message["headers"] = headers
                elapsed = (time.perf_counter() - ctx.started) * 1000
                logger.debug(f"{request.method} {request.url.path} → {message['status']} ({elapsed:.1f} ms)")
            await send(message)

        try:
            with logger.contextualize(request_id=request_id):
                await self.app(scope, receive, send_with_id)
        finally:
            _current.reset(token)
