"""Selectors for inventory reads (movements and balances)."""

from django.db.models import Max

from .kinds import get_kind
from .models import StockBalance


def list_movements(*, kind: str):
    spec = get_kind(kind)
    return spec.model.objects.select_related("created_by", "verified_by").prefetch_related("lines").order_by(
        "-created_at", "-id"
    )


def get_movement(*, kind: str, movement_id):
    """Return the movement or ``None`` when it does not exist."""

    return list_movements(kind=kind).filter(id=movement_id).first()


def next_transaction_code(*, kind: str) -> str:
    """Suggest the next transaction code, e.g. ``IN-000042``.

    Derived from the highest id; the unique constraint stays authoritative.
    """

    spec = get_kind(kind)
    last_id = spec.model.objects.aggregate(last=Max("id"))["last"] or 0
    return f"{spec.code_prefix}-{int(last_id) + 1:06d}"


def list_warehouse_balances():
    return StockBalance.objects.filter(store__isnull=True).select_related("product").order_by("product__name", "id")


def list_store_balances(*, store_id: int):
    return (
        StockBalance.objects.filter(store_id=store_id)
        .select_related("product", "store")
        .order_by("product__name", "id")
    )


# EOF
