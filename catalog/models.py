"""Catalog app models.

Only the product fields the inventory ledger reads live here; brands,
categories and units are managed elsewhere.
"""

from django.db import models


class TimeStampedModel(models.Model):
    """Abstract base model adding created/updated timestamps."""

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        abstract = True


class Product(TimeStampedModel):
    """Stocked product.

    ``threshold`` is the quantity at or below which a balance is reported as
    low stock.
    """

    name = models.CharField(max_length=200)
    code = models.CharField(max_length=64, unique=True)
    threshold = models.PositiveIntegerField(default=0)

    class Meta:
        ordering = ["name", "id"]
        constraints = [
            models.CheckConstraint(name="product_threshold_non_negative", condition=models.Q(threshold__gte=0)),
        ]

    def __str__(self) -> str:  # pragma: no cover
        return f"{self.name} [{self.code}]"
