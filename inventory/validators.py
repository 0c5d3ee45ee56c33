"""Pre-persistence checks for pending movements.

Balance sufficiency is deliberately not checked here: balances may change
between creating a pending movement and verifying it.
"""

from catalog.models import Product

from .errors import DuplicateTransactionCode, InvalidLine, MovementValidationError, StoreNotFound
from .kinds import get_kind
from .models import Store
from .payloads import InboundPayload, MovementPayload, MutationPayload, OutboundPayload


def validate_transaction_code(kind: str, transaction_code: str) -> None:
    if not transaction_code:
        raise MovementValidationError("Transaction code is required.", field="transaction_code")
    if get_kind(kind).model.objects.filter(transaction_code=transaction_code).exists():
        raise DuplicateTransactionCode(transaction_code)


def validate_lines(lines) -> dict[int, Product]:
    """Check every line and return the referenced products keyed by id."""

    if not lines:
        raise MovementValidationError("At least one product line is required.", field="lines")
    for line in lines:
        if line.quantity is None or int(line.quantity) <= 0:
            raise InvalidLine(
                f"Quantity for product ID {line.product_id} must be greater than zero.",
                product_id=line.product_id,
            )
    product_ids = {line.product_id for line in lines}
    products = Product.objects.in_bulk(product_ids)
    for line in lines:
        if line.product_id not in products:
            raise InvalidLine(f"Product with ID {line.product_id} does not exist.", product_id=line.product_id)
    return products


def _require_store(store_id, field: str) -> None:
    if not Store.objects.filter(id=store_id).exists():
        raise StoreNotFound(store_id, field=field)


def validate_routing(payload: MovementPayload) -> None:
    if isinstance(payload, InboundPayload):
        if not payload.to_warehouse:
            _require_store(payload.store_id, "store_id")
    elif isinstance(payload, OutboundPayload):
        _require_store(payload.store_id, "store_id")
    elif isinstance(payload, MutationPayload):
        if not payload.from_warehouse:
            _require_store(payload.from_store_id, "from_store_id")
        _require_store(payload.to_store_id, "to_store_id")


def validate_movement(kind: str, payload: MovementPayload) -> dict[int, Product]:
    """Run all creation checks for ``payload``; returns the resolved products."""

    if payload.kind != kind:
        raise MovementValidationError(f"Payload does not describe a stock {kind} movement.", field="kind")
    validate_transaction_code(kind, payload.transaction_code)
    products = validate_lines(payload.lines)
    validate_routing(payload)
    return products


# EOF
