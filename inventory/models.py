"""Inventory models (multi-location ledger).

Balances are kept per (location, product) where a location is either the
single warehouse (``store`` is null) or one of many stores. Movements are
staged as pending records and only touch balances once verified.
"""

from common.choices import MovementStatus, StockStatus
from django.conf import settings
from django.db import models


class TimeStampedModel(models.Model):
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class Store(TimeStampedModel):
    """Retail location receiving stock from the warehouse or other stores."""

    name = models.CharField(max_length=120)
    address = models.CharField(max_length=255, blank=True)

    class Meta:
        ordering = ["name", "id"]

    def __str__(self) -> str:  # pragma: no cover
        return self.name


class StockBalance(TimeStampedModel):
    """Quantity on hand for a product at one location.

    A null ``store`` means the warehouse. ``status`` is only ever written
    together with ``quantity`` by the ledger.
    """

    STATUS_AVAILABLE = StockStatus.AVAILABLE
    STATUS_LOW_STOCK = StockStatus.LOW_STOCK
    STATUS_OUT_OF_STOCK = StockStatus.OUT_OF_STOCK
    STATUS_CHOICES = StockStatus.choices

    store = models.ForeignKey(Store, null=True, blank=True, related_name="balances", on_delete=models.CASCADE)
    product = models.ForeignKey("catalog.Product", related_name="balances", on_delete=models.CASCADE)
    quantity = models.IntegerField(default=0)
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_OUT_OF_STOCK)

    class Meta:
        ordering = ["store_id", "product_id"]
        constraints = [
            models.CheckConstraint(name="balance_non_negative", condition=models.Q(quantity__gte=0)),
            models.UniqueConstraint(
                fields=["store", "product"],
                condition=models.Q(store__isnull=False),
                name="unique_store_balance_per_product",
            ),
            models.UniqueConstraint(
                fields=["product"],
                condition=models.Q(store__isnull=True),
                name="unique_warehouse_balance_per_product",
            ),
        ]
        indexes = [
            models.Index(fields=["status"], name="inventory_balance_status_idx"),
        ]

    def __str__(self) -> str:  # pragma: no cover
        where = f"store={self.store_id}" if self.store_id else "warehouse"
        return f"Balance<{where} product={self.product_id}> q={self.quantity} {self.status}"

    @property
    def is_warehouse(self) -> bool:
        return self.store_id is None


class StockMovement(TimeStampedModel):
    """Common shape of the three movement variants."""

    STATUS_PENDING = MovementStatus.PENDING
    STATUS_COMPLETED = MovementStatus.COMPLETED
    STATUS_CHOICES = MovementStatus.choices

    transaction_code = models.CharField(max_length=64, unique=True)
    date = models.DateField()
    status = models.CharField(max_length=16, choices=STATUS_CHOICES, default=STATUS_PENDING, db_index=True)
    created_by = models.ForeignKey(
        settings.AUTH_USER_MODEL, related_name="%(class)s_created", on_delete=models.PROTECT
    )
    verified_by = models.ForeignKey(
        settings.AUTH_USER_MODEL,
        null=True,
        blank=True,
        related_name="%(class)s_verified",
        on_delete=models.PROTECT,
    )
    verified_at = models.DateTimeField(null=True, blank=True)

    class Meta:
        abstract = True
        ordering = ["-created_at", "-id"]

    @property
    def is_completed(self) -> bool:
        return self.status == self.STATUS_COMPLETED

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.__class__.__name__}#{self.id} {self.transaction_code} ({self.status})"


class MovementLine(models.Model):
    """Line item shared by all movement variants.

    The product reference carries no database constraint: a product may be
    removed while a pending movement still names it, which verification
    reports as a missing product.
    """

    product = models.ForeignKey(
        "catalog.Product",
        related_name="+",
        on_delete=models.DO_NOTHING,
        db_constraint=False,
    )
    quantity = models.PositiveIntegerField()

    class Meta:
        abstract = True
        ordering = ["id"]


class StockIn(StockMovement):
    """Inbound receipt into the warehouse or a store."""

    to_warehouse = models.BooleanField(default=True)
    store = models.ForeignKey(
        Store, null=True, blank=True, related_name="stock_ins", on_delete=models.PROTECT
    )

    class Meta(StockMovement.Meta):
        constraints = [
            models.CheckConstraint(
                name="stockin_destination_exclusive",
                condition=(
                    models.Q(to_warehouse=True, store__isnull=True) | models.Q(to_warehouse=False, store__isnull=False)
                ),
            ),
        ]


class StockInLine(MovementLine):
    movement = models.ForeignKey(StockIn, related_name="lines", on_delete=models.CASCADE)

    class Meta(MovementLine.Meta):
        constraints = [
            models.CheckConstraint(name="stockinline_quantity_positive", condition=models.Q(quantity__gt=0)),
        ]


class StockOut(StockMovement):
    """Outbound shipment leaving a store."""

    store = models.ForeignKey(Store, related_name="stock_outs", on_delete=models.PROTECT)


class StockOutLine(MovementLine):
    movement = models.ForeignKey(StockOut, related_name="lines", on_delete=models.CASCADE)

    class Meta(MovementLine.Meta):
        constraints = [
            models.CheckConstraint(name="stockoutline_quantity_positive", condition=models.Q(quantity__gt=0)),
        ]


class StockMutation(StockMovement):
    """Transfer from the warehouse or a store into another store."""

    from_warehouse = models.BooleanField(default=True)
    from_store = models.ForeignKey(
        Store, null=True, blank=True, related_name="mutations_out", on_delete=models.PROTECT
    )
    to_store = models.ForeignKey(Store, related_name="mutations_in", on_delete=models.PROTECT)

    class Meta(StockMovement.Meta):
        constraints = [
            models.CheckConstraint(
                name="stockmutation_source_exclusive",
                condition=(
                    models.Q(from_warehouse=True, from_store__isnull=True)
                    | models.Q(from_warehouse=False, from_store__isnull=False)
                ),
            ),
            models.CheckConstraint(
                name="stockmutation_distinct_stores",
                condition=~models.Q(from_store=models.F("to_store")),
            ),
        ]


class StockMutationLine(MovementLine):
    movement = models.ForeignKey(StockMutation, related_name="lines", on_delete=models.CASCADE)

    class Meta(MovementLine.Meta):
        constraints = [
            models.CheckConstraint(name="stockmutationline_quantity_positive", condition=models.Q(quantity__gt=0)),
        ]


# EOF
