class ClientError(RuntimeError):
    """Base class for every failure raised by the API client."""


class TransportError(ClientError):
    """The request never produced an HTTP response (connection, timeout, ...)."""


class ApiError(ClientError):
    def __init__(self, status_code: int, message: str | None = None):
        self.status_code = status_code
        self.message = message or f"Request failed with status {status_code}"
        super().__init__(self.message)


class NotFoundError(ApiError):
    def __init__(self, message: str | None = None):
        super().__init__(404, message or "Not found")
