"""Shared enumerations and choices used across apps."""

from django.db import models


class StockStatus(models.TextChoices):
    """Availability of a balance relative to its product threshold."""

    AVAILABLE = "available", "Available"
    LOW_STOCK = "lowStock", "Low stock"
    OUT_OF_STOCK = "outOfStock", "Out of stock"


class MovementStatus(models.TextChoices):
    """Lifecycle statuses for stock movements."""

    PENDING = "pending", "Pending"
    COMPLETED = "completed", "Completed"


class MovementKind(models.TextChoices):
    INBOUND = "in", "Stock in"
    OUTBOUND = "out", "Stock out"
    MUTATION = "mutation", "Stock mutation"
