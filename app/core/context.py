import uuid
from contextvars import ContextVar
from typing import Optional

REQUEST_ID_HEADER = "X-Request-ID"
NO_REQUEST_ID = "n/a"

_request_id: ContextVar[Optional[str]] = ContextVar("jsonapi_request_id", default=None)


def get_request_id() -> str:
    """Correlation id of the request served on this task, for log lines and error documents."""
    return _request_id.get() or NO_REQUEST_ID


def bind_request_id(incoming: Optional[str] = None) -> str:
    """Adopts the caller's id when one was sent, otherwise mints one. Returns the bound id."""
    request_id = incoming or uuid.uuid4().hex
    _request_id.set(request_id)
    return request_id
