from fastapi import HTTPException, status

from backoffice.core.exceptions import (
    BackOfficeError,
    DuplicateKeyError,
    InvalidQueryError,
    RecordNotFoundError,
    RemoteFetchError,
    RemoteWriteError,
    ValidationError,
)

_STATUS_BY_ERROR = (
    (RecordNotFoundError, status.HTTP_404_NOT_FOUND),
    (DuplicateKeyError, status.HTTP_409_CONFLICT),
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (InvalidQueryError, status.HTTP_400_BAD_REQUEST),
    (RemoteWriteError, status.HTTP_502_BAD_GATEWAY),
    (RemoteFetchError, status.HTTP_503_SERVICE_UNAVAILABLE),
)


def http_error(exc: BackOfficeError) -> HTTPException:
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(exc, error_type):
            return HTTPException(status_code=status_code, detail=str(exc))
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=str(exc))
