"""Domain errors raised by services and mapped to HTTP responses by the app."""

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse


class InvoiceAppError(Exception):
    status_code = status.HTTP_400_BAD_REQUEST

    def __init__(self, detail: str):
        super().__init__(detail)
        self.detail = detail


class AuthorizationError(InvoiceAppError):
    """No resolvable identity for a write operation."""

    status_code = status.HTTP_401_UNAUTHORIZED

    def __init__(self, detail: str = "Unauthorized"):
        super().__init__(detail)


class NotFoundError(InvoiceAppError):
    """Unknown, foreign or soft-deleted entity. Callers cannot tell these apart."""

    status_code = status.HTTP_404_NOT_FOUND

    def __init__(self, entity: str = "Resource"):
        super().__init__(f"{entity} not found")
        self.entity = entity


class ValidationError(InvoiceAppError):
    status_code = status.HTTP_400_BAD_REQUEST


class LockedError(ValidationError):
    """Move attempted on a locked invoice or out of a locked folder."""


class InvoiceNumberConflictError(ValidationError):
    status_code = status.HTTP_409_CONFLICT

    def __init__(self, invoice_number: str):
        super().__init__(f"Invoice number {invoice_number} already exists in this folder")
        self.invoice_number = invoice_number


def register_exception_handlers(app: FastAPI) -> None:
    @app.exception_handler(InvoiceAppError)
    async def handle_invoice_app_error(request: Request, exc: InvoiceAppError):
        headers = {"WWW-Authenticate": "Bearer"} if isinstance(exc, AuthorizationError) else None
        return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail}, headers=headers)
