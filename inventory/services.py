"""Inventory services: staging and verifying stock movements.

Pending movements are created, edited and deleted here; verification commits
a movement's line effects into the balance ledger as one atomic unit.
"""

import logging

from catalog.models import Product
from django.apps import apps
from django.db import DatabaseError, IntegrityError, transaction
from django.utils import timezone

from .errors import (
    AlreadyVerified,
    CannotDeleteCompleted,
    CannotEditCompleted,
    DuplicateTransactionCode,
    InsufficientStock,
    MovementNotFound,
    ProductNotFound,
    StoreFailure,
)
from .kinds import get_kind
from .ledger import Location, get_balance, upsert_delta
from .models import StockIn, StockMutation, StockOut
from .notifications import NotificationAggregator
from .payloads import InboundPayload, MovementPayload, MutationPayload, OutboundPayload
from .validators import validate_lines, validate_movement

logger = logging.getLogger("stockledger.inventory")


def _routing_fields(payload: MovementPayload) -> dict:
    if isinstance(payload, InboundPayload):
        return {"to_warehouse": payload.to_warehouse, "store_id": payload.store_id}
    if isinstance(payload, OutboundPayload):
        return {"store_id": payload.store_id}
    if isinstance(payload, MutationPayload):
        return {
            "from_warehouse": payload.from_warehouse,
            "from_store_id": payload.from_store_id,
            "to_store_id": payload.to_store_id,
        }
    raise TypeError(f"Unsupported payload: {type(payload).__name__}")


def _write_lines(spec, movement, lines) -> None:
    spec.line_model.objects.bulk_create(
        [spec.line_model(movement=movement, product_id=line.product_id, quantity=line.quantity) for line in lines]
    )


@transaction.atomic
def create_movement(*, kind: str, payload: MovementPayload, user):
    """Validate and persist a pending movement with its lines."""

    spec = get_kind(kind)
    validate_movement(kind, payload)
    try:
        with transaction.atomic():
            movement = spec.model.objects.create(
                transaction_code=payload.transaction_code,
                date=payload.date,
                created_by=user,
                **_routing_fields(payload),
            )
    except IntegrityError:
        # Lost a race for the same code after validation passed
        raise DuplicateTransactionCode(payload.transaction_code)
    _write_lines(spec, movement, payload.lines)
    logger.info(
        "inventory.movement_created",
        extra={
            "event": "inventory.movement_created",
            "kind": spec.label,
            "movement_id": movement.id,
            "transaction_code": movement.transaction_code,
            "user_id": getattr(user, "id", None),
            "lines": len(payload.lines),
        },
    )
    return movement


def _lock_movement(kind: str, movement_id):
    spec = get_kind(kind)
    try:
        return spec.model.objects.select_for_update().get(id=movement_id)
    except spec.model.DoesNotExist:
        raise MovementNotFound(spec.label, movement_id)


@transaction.atomic
def update_movement(*, kind: str, movement_id, date, lines, user):
    """Replace a pending movement's date and lines wholesale.

    Routing and transaction code are fixed at creation. Completed movements
    cannot be edited.
    """

    spec = get_kind(kind)
    movement = _lock_movement(kind, movement_id)
    if movement.is_completed:
        raise CannotEditCompleted(movement.transaction_code)
    validate_lines(lines)
    movement.date = date
    movement.save(update_fields=["date", "updated_at"])
    spec.line_model.objects.filter(movement=movement).delete()
    _write_lines(spec, movement, lines)
    logger.info(
        "inventory.movement_updated",
        extra={
            "event": "inventory.movement_updated",
            "kind": spec.label,
            "movement_id": movement.id,
            "user_id": getattr(user, "id", None),
            "lines": len(lines),
        },
    )
    return movement


@transaction.atomic
def delete_movement(*, kind: str, movement_id) -> None:
    """Delete a pending movement and its lines."""

    spec = get_kind(kind)
    movement = _lock_movement(kind, movement_id)
    if movement.is_completed:
        raise CannotDeleteCompleted(movement.transaction_code)
    code = movement.transaction_code
    movement.delete()
    logger.info(
        "inventory.movement_deleted",
        extra={
            "event": "inventory.movement_deleted",
            "kind": spec.label,
            "movement_id": movement_id,
            "transaction_code": code,
        },
    )


class VerificationEngine:
    """Commit pending movements into the balance ledger.

    All balance changes of one movement and its status flip happen in a
    single transaction; any failure leaves both untouched. The notification
    snapshot is published only after that transaction has been left, and a
    publishing failure never undoes the commit.
    """

    def __init__(self, *, aggregator: NotificationAggregator | None = None):
        self.aggregator = aggregator

    def verify(self, *, kind: str, movement_id, user):
        spec = get_kind(kind)
        try:
            with transaction.atomic():
                movement = _lock_movement(kind, movement_id)
                if movement.is_completed:
                    raise AlreadyVerified(movement.transaction_code)
                lines = list(movement.lines.order_by("id"))
                products = self._resolve_products(lines)
                for line in lines:
                    self._apply_line(movement, line, products[line.product_id])
                movement.status = movement.STATUS_COMPLETED
                movement.verified_by = user
                movement.verified_at = timezone.now()
                movement.save(update_fields=["status", "verified_by", "verified_at", "updated_at"])
        except DatabaseError as exc:
            logger.exception(
                "inventory.verification_store_failure",
                extra={"event": "inventory.verification_store_failure", "kind": spec.label, "movement_id": movement_id},
            )
            raise StoreFailure() from exc

        logger.info(
            "inventory.movement_verified",
            extra={
                "event": "inventory.movement_verified",
                "kind": spec.label,
                "movement_id": movement.id,
                "transaction_code": movement.transaction_code,
                "user_id": getattr(user, "id", None),
                "lines": len(lines),
            },
        )
        self._notify(spec.label, movement)
        return movement

    def _resolve_products(self, lines) -> dict:
        products = Product.objects.in_bulk({line.product_id for line in lines})
        for line in lines:
            if line.product_id not in products:
                raise ProductNotFound(line.product_id)
        return products

    def _apply_line(self, movement, line, product) -> None:
        quantity = int(line.quantity)
        if isinstance(movement, StockIn):
            destination = Location.warehouse() if movement.to_warehouse else Location.store(movement.store_id)
            upsert_delta(destination, product, quantity)
        elif isinstance(movement, StockOut):
            self._debit(Location.store(movement.store_id), product, quantity)
        elif isinstance(movement, StockMutation):
            source = Location.warehouse() if movement.from_warehouse else Location.store(movement.from_store_id)
            self._debit(source, product, quantity)
            upsert_delta(Location.store(movement.to_store_id), product, quantity)
        else:
            raise TypeError(f"Unsupported movement: {type(movement).__name__}")

    def _debit(self, location: Location, product, quantity: int) -> None:
        # Reads the locked row, which already reflects earlier lines of this movement
        balance = get_balance(location, product.id, for_update=True)
        available = int(balance.quantity) if balance is not None else 0
        if available < quantity:
            raise InsufficientStock(
                product_id=product.id,
                store_id=location.store_id,
                location=location.label,
                available=available,
                requested=quantity,
            )
        upsert_delta(location, product, -quantity)

    def _notify(self, label: str, movement) -> None:
        if self.aggregator is None:
            return
        try:
            self.aggregator.publish()
        except Exception:
            logger.exception(
                "inventory.notification_failed",
                extra={"event": "inventory.notification_failed", "kind": label, "movement_id": movement.id},
            )


def default_engine() -> VerificationEngine:
    """Engine wired to the channel bound by the inventory app at startup."""

    channel = getattr(apps.get_app_config("inventory"), "channel", None)
    return VerificationEngine(aggregator=NotificationAggregator(channel=channel))


def verify_movement(*, kind: str, movement_id, user, engine: VerificationEngine | None = None):
    return (engine or default_engine()).verify(kind=kind, movement_id=movement_id, user=user)


# EOF
