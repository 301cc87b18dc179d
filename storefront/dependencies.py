from fastapi import HTTPException, Request

from storefront.config import get_settings
from storefront.core.errors import NotFound, TransitionConflict, ValidationFailed
from storefront.core.security import authenticate_request
from storefront.database.session import get_db


def require_auth(request: Request):
    header_name = get_settings().API_KEY_HEADER
    api_key = request.headers.get(header_name) or request.headers.get("api-key")
    return authenticate_request(api_key=api_key, require_auth=True)


def http_error(exc: Exception) -> HTTPException:
    if isinstance(exc, NotFound):
        return HTTPException(status_code=404, detail=str(exc))
    if isinstance(exc, TransitionConflict):
        return HTTPException(status_code=409, detail=str(exc))
    if isinstance(exc, ValidationFailed):
        return HTTPException(status_code=400, detail=str(exc))
    return HTTPException(status_code=500, detail=str(exc))


__all__ = ["get_db", "http_error", "require_auth"]
