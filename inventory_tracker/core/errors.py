from fastapi import FastAPI, Request
from fastapi.encoders import jsonable_encoder
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger


class InventoryError(Exception):
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    def to_content(self) -> dict:
        return {"detail": self.message}


class ValidationFailed(InventoryError):
    """A field failed validation outside of request parsing (upload checks, date parsing)."""

    def __init__(self, message: str, field: str | None = None):
        super().__init__(message)
        self.field = field

    def to_content(self) -> dict:
        error = {"msg": self.message}
        if self.field:
            error["loc"] = [self.field]
        return {"detail": "Validation error", "errors": [error]}


class NotFoundError(InventoryError):
    status_code = 404

    def __init__(self, entity: str, entity_id: int | None = None):
        super().__init__(f"{entity} not found")
        self.entity = entity
        self.entity_id = entity_id


class InsufficientQuantityError(InventoryError):
    def __init__(self, item_id: int, requested: int, available: int):
        super().__init__(f"Insufficient quantity. Only {available} items available.")
        self.item_id = item_id
        self.requested = requested
        self.available = available

    def to_content(self) -> dict:
        return {"detail": self.message, "available": self.available}


class DuplicateInvoiceError(InventoryError):
    def __init__(self, invoice_number: str):
        super().__init__(f"Invoice {invoice_number} already exists")
        self.invoice_number = invoice_number


class StorageError(InventoryError):
    status_code = 500

    def to_content(self) -> dict:
        return {"detail": "Internal storage error"}


async def _inventory_error_handler(request: Request, exc: InventoryError) -> JSONResponse:
    if isinstance(exc, StorageError):
        logger.error(f"Storage failure on {request.method} {request.url.path}: {exc.message}")
    return JSONResponse(status_code=exc.status_code, content=exc.to_content())


async def _request_validation_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=400,
        content={"detail": "Validation error", "errors": jsonable_encoder(exc.errors())},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(InventoryError, _inventory_error_handler)
    app.add_exception_handler(RequestValidationError, _request_validation_handler)
