"""Back-office error taxonomy.

Services raise these; routers translate them into HTTP responses. Fetch
failures never reach a router: the list-query boundary turns them into an
empty page.
"""


class BackOfficeError(Exception):
    """Base class for all back-office errors."""


class ValidationError(BackOfficeError):
    """A business rule or invariant was violated."""


class DuplicateKeyError(ValidationError):
    """Another record already uses this business key."""


class DuplicateSkuError(DuplicateKeyError):
    """Another inventory record already uses this SKU."""


class RecordNotFoundError(BackOfficeError):
    """A requested record does not exist."""


class InvalidQueryError(BackOfficeError):
    """List query parameters reference unknown fields or impossible pages."""


class RemoteFetchError(BackOfficeError):
    """The database could not serve a read."""


class RemoteWriteError(BackOfficeError):
    """The database rejected a write; the local change was reverted."""


__all__ = [
    "BackOfficeError",
    "DuplicateKeyError",
    "DuplicateSkuError",
    "InvalidQueryError",
    "RecordNotFoundError",
    "RemoteFetchError",
    "RemoteWriteError",
    "ValidationError",
]
