"""Domain errors raised by the service layer.

Routers translate these into HTTP responses; database and fastapi-users
errors are not wrapped and propagate as they are.
"""

from fastapi import HTTPException, status


class StockServiceError(Exception):
    """Base class for errors raised by the stock services."""


class InsufficientStockError(StockServiceError):
    def __init__(self, item: str, available=None, requested=None):
        self.item = item
        self.available = available
        self.requested = requested
        if available is None:
            message = f"Insufficient stock for {item}"
        else:
            message = f"Insufficient stock for {item}. Available={available} requested={requested}"
        super().__init__(message)


class NotFoundError(StockServiceError):
    pass


class InvalidOperationError(StockServiceError):
    pass


class ApprovalStateError(StockServiceError):
    pass


class InvalidCredentialsError(StockServiceError):
    pass


def to_http_exception(exc: StockServiceError):
    """Map a domain error onto the HTTP status the routers answer with."""
    if isinstance(exc, NotFoundError):
        code = status.HTTP_404_NOT_FOUND
    elif isinstance(exc, (InsufficientStockError, ApprovalStateError)):
        code = status.HTTP_409_CONFLICT
    else:
        code = status.HTTP_400_BAD_REQUEST
    return HTTPException(status_code=code, detail=str(exc))
