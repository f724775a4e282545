"""Map domain errors from the services to HTTP responses."""

from typing import NoReturn

from fastapi import HTTPException, status
from pydantic import ValidationError as PydanticValidationError

from permitflow.services.errors import (
    AuthenticationError,
    AuthorizationError,
    ConflictError,
    InfrastructureError,
    NotFoundError,
    PermitFlowError,
    ValidationError,
)

_STATUS_BY_ERROR: tuple[tuple[type[PermitFlowError], int], ...] = (
    (ValidationError, status.HTTP_422_UNPROCESSABLE_ENTITY),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (ConflictError, status.HTTP_409_CONFLICT),
    (AuthenticationError, status.HTTP_401_UNAUTHORIZED),
    (AuthorizationError, status.HTTP_403_FORBIDDEN),
    (InfrastructureError, status.HTTP_503_SERVICE_UNAVAILABLE),
)


def raise_http(e: PermitFlowError) -> NoReturn:
    """Re-raise a domain error as HTTPException with the matching status code."""
    for error_type, code in _STATUS_BY_ERROR:
        if isinstance(e, error_type):
            headers = {"WWW-Authenticate": "Bearer"} if code == 401 else None
            raise HTTPException(status_code=code, detail=e.message, headers=headers) from e
    raise HTTPException(status_code=500, detail=e.message) from e


def raise_unprocessable(e: PydanticValidationError) -> NoReturn:
    """422 for a schema built by hand inside a route (e.g. from query parameters)."""
    raise HTTPException(
        status_code=status.HTTP_422_UNPROCESSABLE_ENTITY,
        detail=e.errors(include_url=False, include_context=False, include_input=False),
    ) from e
