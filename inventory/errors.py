"""Error taxonomy for stock movements.

Every rejection carries a stable ``code`` so clients can tell an
insufficient-stock failure apart from an already-verified one, plus the HTTP
status the API answers with and any identifying context (product, store,
field).
"""


class MovementError(Exception):
    """Base class for rejected movement operations."""

    code = "invalid"
    status_code = 400
    default_message = "Invalid movement request."

    def __init__(self, message: str | None = None, **context):
        self.message = message or self.default_message
        self.context = {key: value for key, value in context.items() if value is not None}
        super().__init__(self.message)

    def as_dict(self) -> dict:
        return {"detail": self.message, "code": self.code, **self.context}


class MovementValidationError(MovementError):
    """Missing or invalid field; ``field`` names the offender."""

    def __init__(self, message: str | None = None, *, field: str | None = None, **context):
        self.field = field
        super().__init__(message, field=field, **context)


class MissingRoutingField(MovementValidationError):
    code = "missing_routing_field"

    def __init__(self, field: str, message: str | None = None):
        super().__init__(message or f"{field} is required for this movement.", field=field)


class InvalidLine(MovementValidationError):
    code = "invalid_line"

    def __init__(self, message: str, *, product_id=None):
        self.product_id = product_id
        super().__init__(message, field="lines", product_id=product_id)


class DuplicateTransactionCode(MovementError):
    code = "duplicate_transaction_code"
    status_code = 409

    def __init__(self, transaction_code: str):
        self.transaction_code = transaction_code
        super().__init__(
            f"A movement with transaction code {transaction_code} already exists.",
            transaction_code=transaction_code,
        )


class NotFound(MovementError):
    code = "not_found"
    status_code = 404
    default_message = "Not found."


class MovementNotFound(NotFound):
    def __init__(self, kind: str, movement_id):
        super().__init__(f"Stock {kind} movement {movement_id} not found.", movement_id=movement_id)


class ProductNotFound(NotFound):
    code = "product_not_found"

    def __init__(self, product_id):
        self.product_id = product_id
        super().__init__(f"Product with ID {product_id} does not exist.", product_id=product_id)


class StoreNotFound(NotFound):
    code = "store_not_found"

    def __init__(self, store_id, *, field: str | None = None):
        self.store_id = store_id
        super().__init__(f"Store with ID {store_id} does not exist.", store_id=store_id, field=field)


class AlreadyVerified(MovementError):
    code = "already_verified"
    status_code = 409

    def __init__(self, transaction_code: str):
        super().__init__(f"Movement {transaction_code} is already verified.", transaction_code=transaction_code)


class InsufficientStock(MovementError):
    """Applying a debit would drive a balance below zero."""

    code = "insufficient_stock"
    status_code = 409

    def __init__(self, *, product_id, location: str, store_id=None, available: int = 0, requested: int = 0):
        self.product_id = product_id
        self.store_id = store_id
        self.available = available
        self.requested = requested
        super().__init__(
            f"Insufficient stock for product ID {product_id} at {location}: "
            f"requested {requested}, available {available}.",
            product_id=product_id,
            store_id=store_id,
            location=location,
            available=available,
            requested=requested,
        )


class CannotDeleteCompleted(MovementError):
    code = "cannot_delete_completed"
    status_code = 409

    def __init__(self, transaction_code: str):
        super().__init__(f"Cannot delete completed movement {transaction_code}.", transaction_code=transaction_code)


class CannotEditCompleted(MovementError):
    code = "cannot_edit_completed"
    status_code = 409

    def __init__(self, transaction_code: str):
        super().__init__(f"Cannot edit completed movement {transaction_code}.", transaction_code=transaction_code)


class StoreFailure(MovementError):
    """Data store unavailable or transaction conflict; the whole call may be retried."""

    code = "store_failure"
    status_code = 503
    default_message = "Unable to commit the movement. Please retry."


# EOF
