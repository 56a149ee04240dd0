import logging

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from app.core.context import get_request_id
from app.schemas.errors import ErrorDocument, ErrorMeta, ErrorObject
from domain.errors import ClientInputError, JsonApiError

logger = logging.getLogger(__name__)

JSON_API_MEDIA_TYPE = "application/vnd.api+json"


def _error_response(status_code: int, error: ErrorObject) -> JSONResponse:
    document = ErrorDocument(errors=[error], meta=ErrorMeta(request_id=get_request_id()))
    return JSONResponse(
        status_code=status_code,
        content=document.model_dump(exclude_none=True),
        media_type=JSON_API_MEDIA_TYPE,
    )


async def json_api_error_handler(request: Request, exc: JsonApiError):
    if isinstance(exc, ClientInputError):
        logger.warning(f"Rejected request: {exc.detail}")
    else:
        logger.error(f"JSON:API error: {exc.detail}", exc_info=exc)
    return _error_response(exc.status, ErrorObject(**exc.to_error_object()))


async def global_exception_handler(request: Request, exc: Exception):
    logger.error(f"Global Exception: {exc}", exc_info=True)
    return _error_response(500, ErrorObject(status="500", title="Internal Server Error"))


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(JsonApiError, json_api_error_handler)
    app.add_exception_handler(Exception, global_exception_handler)
