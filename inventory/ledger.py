"""Balance store for the inventory ledger.

Balances are only written through :func:`upsert_delta`, which always
reclassifies ``status`` from the new quantity and the product threshold.
Callers must hold an open ``transaction.atomic()`` block so that every read
of a balance and its subsequent write happen under the same row lock.
"""

from dataclasses import dataclass

from common.choices import StockStatus
from django.conf import settings
from django.db import IntegrityError, transaction

from .errors import InsufficientStock
from .models import StockBalance


def classify_stock(quantity: int, threshold: int) -> str:
    """Map a quantity to its availability status.

    Both boundaries are inclusive: zero or less is out of stock, anything up
    to and including the threshold is low stock.
    """

    if quantity <= 0:
        return StockStatus.OUT_OF_STOCK
    if quantity <= threshold:
        return StockStatus.LOW_STOCK
    return StockStatus.AVAILABLE


@dataclass(frozen=True)
class Location:
    """Either the warehouse (``store_id is None``) or a single store."""

    store_id: int | None = None

    @classmethod
    def warehouse(cls) -> "Location":
        return cls(store_id=None)

    @classmethod
    def store(cls, store_id: int) -> "Location":
        return cls(store_id=store_id)

    @property
    def is_warehouse(self) -> bool:
        return self.store_id is None

    @property
    def label(self) -> str:
        if self.is_warehouse:
            return getattr(settings, "INVENTORY_WAREHOUSE_LABEL", "Gudang")
        return f"store {self.store_id}"


def _balance_queryset(location: Location, product_id: int):
    if location.is_warehouse:
        return StockBalance.objects.filter(store__isnull=True, product_id=product_id)
    return StockBalance.objects.filter(store_id=location.store_id, product_id=product_id)


def get_balance(location: Location, product_id: int, *, for_update: bool = False) -> StockBalance | None:
    qs = _balance_queryset(location, product_id)
    if for_update:
        qs = qs.select_for_update()
    return qs.first()


def upsert_delta(location: Location, product, delta: int) -> StockBalance:
    """Apply a signed quantity change to the balance of ``product`` at ``location``.

    A missing balance is created on a positive delta. Any change that would
    leave the balance below zero raises :class:`InsufficientStock` before the
    row is written.
    """

    balance = get_balance(location, product.id, for_update=True)
    if balance is None:
        if delta <= 0:
            raise InsufficientStock(
                product_id=product.id,
                store_id=location.store_id,
                location=location.label,
                available=0,
                requested=-delta,
            )
        try:
            with transaction.atomic():
                return StockBalance.objects.create(
                    store_id=location.store_id,
                    product=product,
                    quantity=delta,
                    status=classify_stock(delta, product.threshold),
                )
        except IntegrityError:
            # Another transaction created the row first; lock it and fall through
            balance = get_balance(location, product.id, for_update=True)
            if balance is None:
                raise

    new_quantity = int(balance.quantity) + int(delta)
    if new_quantity < 0:
        raise InsufficientStock(
            product_id=product.id,
            store_id=location.store_id,
            location=location.label,
            available=int(balance.quantity),
            requested=-delta,
        )
    balance.quantity = new_quantity
    balance.status = classify_stock(new_quantity, product.threshold)
    balance.save(update_fields=["quantity", "status", "updated_at"])
    return balance


# EOF
