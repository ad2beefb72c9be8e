from typing import Optional

from fastapi import Header, HTTPException, Request, status

from shopledger.config import get_settings
from shopledger.core.errors import (
    LedgerError,
    NotAuthenticatedError,
    RecordNotFoundError,
    RecordValidationError,
    StoreError,
)
from shopledger.core.security import authenticate_request
from shopledger.core.session import SessionContext


def get_store(request: Request):
    return request.app.state.store


def get_live_ledger(request: Request):
    return request.app.state.live_ledger


def get_ledger_service(request: Request):
    return request.app.state.ledger_service


def require_auth(
    api_key: Optional[str] = Header(None, alias=get_settings().API_KEY_HEADER),
    authorization: Optional[str] = Header(None),
) -> SessionContext:
    return authenticate_request(
        api_key=api_key,
        authorization=authorization,
        require_auth=True,
    )


def to_http_exception(exc: LedgerError) -> HTTPException:
    if isinstance(exc, RecordValidationError):
        return HTTPException(
            status_code=422,
            detail={"message": str(exc), "errors": exc.errors},
        )
    if isinstance(exc, NotAuthenticatedError):
        return HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail=str(exc))
    if isinstance(exc, RecordNotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=str(exc))
    if isinstance(exc, StoreError):
        return HTTPException(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=str(exc))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))


__all__ = [
    "get_ledger_service",
    "get_live_ledger",
    "get_store",
    "require_auth",
    "to_http_exception",
]
