"""Low/out-of-stock notification snapshots and their pub/sub channel.

The aggregator rebuilds the snapshot from the balance table on every call;
it keeps no state between calls. Snapshots are pushed through a channel
injected at construction time.
"""

import logging
from dataclasses import asdict, dataclass, field

from common.choices import StockStatus
from django.conf import settings
from django.dispatch import Signal

from .models import StockBalance

logger = logging.getLogger("stockledger.inventory")


@dataclass
class LowStockEntry:
    productName: str
    quantity: int
    location: str


@dataclass
class OutOfStockEntry:
    productName: str
    location: str


@dataclass
class Snapshot:
    lowStock: list[LowStockEntry] = field(default_factory=list)
    outOfStock: list[OutOfStockEntry] = field(default_factory=list)

    @property
    def length(self) -> int:
        return len(self.lowStock) + len(self.outOfStock)

    def as_dict(self) -> dict:
        return {
            "length": self.length,
            "lowStock": [asdict(entry) for entry in self.lowStock],
            "outOfStock": [asdict(entry) for entry in self.outOfStock],
        }


class SignalChannel:
    """In-process pub/sub channel backed by a Django signal.

    Receivers are called as ``receiver(sender=..., snapshot=...)``. A
    failing receiver is logged and does not prevent delivery to the others.
    """

    def __init__(self):
        self.signal = Signal()
        self._subscribers = []

    def subscribe(self, receiver) -> None:
        self.signal.connect(receiver, weak=False)
        if receiver not in self._subscribers:
            self._subscribers.append(receiver)

    def unsubscribe(self, receiver) -> None:
        self.signal.disconnect(receiver)
        if receiver in self._subscribers:
            self._subscribers.remove(receiver)

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    def push(self, receiver, snapshot: Snapshot) -> None:
        receiver(sender=self.__class__, snapshot=snapshot)

    def publish(self, snapshot: Snapshot) -> None:
        for receiver, result in self.signal.send_robust(sender=self.__class__, snapshot=snapshot):
            if isinstance(result, Exception):
                logger.error(
                    "inventory.notification_delivery_failed",
                    extra={
                        "event": "inventory.notification_delivery_failed",
                        "receiver": repr(receiver),
                        "error": repr(result),
                    },
                )

    def close(self) -> None:
        for receiver in list(self._subscribers):
            self.unsubscribe(receiver)


class NotificationAggregator:
    """Recompute and publish the set of low and out-of-stock balances."""

    def __init__(self, *, channel=None, warehouse_label: str | None = None):
        self.channel = channel
        self.warehouse_label = warehouse_label or getattr(settings, "INVENTORY_WAREHOUSE_LABEL", "Gudang")

    def recompute(self) -> Snapshot:
        snapshot = Snapshot()
        flagged = [StockStatus.LOW_STOCK, StockStatus.OUT_OF_STOCK]
        store_balances = (
            StockBalance.objects.filter(store__isnull=False, status__in=flagged)
            .select_related("store", "product")
            .order_by("store__name", "product__name", "id")
        )
        warehouse_balances = (
            StockBalance.objects.filter(store__isnull=True, status__in=flagged)
            .select_related("product")
            .order_by("product__name", "id")
        )
        for balance in store_balances:
            self._append(snapshot, balance, balance.store.name)
        for balance in warehouse_balances:
            self._append(snapshot, balance, self.warehouse_label)
        return snapshot

    def _append(self, snapshot: Snapshot, balance: StockBalance, location: str) -> None:
        if balance.status == StockStatus.OUT_OF_STOCK:
            snapshot.outOfStock.append(OutOfStockEntry(productName=balance.product.name, location=location))
        elif balance.status == StockStatus.LOW_STOCK:
            snapshot.lowStock.append(
                LowStockEntry(productName=balance.product.name, quantity=int(balance.quantity), location=location)
            )

    def publish(self) -> Snapshot:
        """Recompute once and push exactly one snapshot to the channel."""

        snapshot = self.recompute()
        if self.channel is not None:
            self.channel.publish(snapshot)
        logger.info(
            "inventory.snapshot_published",
            extra={
                "event": "inventory.snapshot_published",
                "length": snapshot.length,
                "low_stock": len(snapshot.lowStock),
                "out_of_stock": len(snapshot.outOfStock),
            },
        )
        return snapshot

    def connect(self, receiver) -> Snapshot:
        """Subscribe ``receiver`` and push it the current snapshot only."""

        if self.channel is None:
            raise RuntimeError("No notification channel is bound.")
        self.channel.subscribe(receiver)
        snapshot = self.recompute()
        self.channel.push(receiver, snapshot)
        return snapshot

    def disconnect(self, receiver) -> None:
        if self.channel is not None:
            self.channel.unsubscribe(receiver)


# EOF
