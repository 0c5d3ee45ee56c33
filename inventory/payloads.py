"""Typed movement payloads.

Each variant carries only the routing fields valid for it and rejects a
missing one at construction, so a payload that exists is always routable.
"""

from dataclasses import dataclass, field
from datetime import date as date_type

from common.choices import MovementKind

from .errors import MissingRoutingField, MovementValidationError


@dataclass(frozen=True)
class LinePayload:
    product_id: int
    quantity: int


@dataclass(frozen=True)
class MovementPayload:
    transaction_code: str
    date: date_type
    lines: tuple[LinePayload, ...] = field(default_factory=tuple)

    kind = None

    def __post_init__(self):
        object.__setattr__(self, "transaction_code", (self.transaction_code or "").strip())
        object.__setattr__(self, "lines", tuple(self.lines))
        if self.date is None:
            raise MovementValidationError("Date is required.", field="date")


@dataclass(frozen=True)
class InboundPayload(MovementPayload):
    to_warehouse: bool = True
    store_id: int | None = None

    kind = MovementKind.INBOUND

    def __post_init__(self):
        super().__post_init__()
        if self.to_warehouse:
            object.__setattr__(self, "store_id", None)
        elif self.store_id is None:
            raise MissingRoutingField("store_id", "Store ID is required when not receiving into the warehouse.")


@dataclass(frozen=True)
class OutboundPayload(MovementPayload):
    store_id: int | None = None

    kind = MovementKind.OUTBOUND

    def __post_init__(self):
        super().__post_init__()
        if self.store_id is None:
            raise MissingRoutingField("store_id", "Store ID is required for stock out.")


@dataclass(frozen=True)
class MutationPayload(MovementPayload):
    from_warehouse: bool = True
    from_store_id: int | None = None
    to_store_id: int | None = None

    kind = MovementKind.MUTATION

    def __post_init__(self):
        super().__post_init__()
        if self.to_store_id is None:
            raise MissingRoutingField("to_store_id", "To Store ID is required for stock mutation.")
        if self.from_warehouse:
            object.__setattr__(self, "from_store_id", None)
        elif self.from_store_id is None:
            raise MissingRoutingField("from_store_id", "From Store ID is required for store stock mutation.")
        if self.from_store_id is not None and self.from_store_id == self.to_store_id:
            raise MovementValidationError("Source and destination store must differ.", field="to_store_id")


PAYLOADS = {
    MovementKind.INBOUND: InboundPayload,
    MovementKind.OUTBOUND: OutboundPayload,
    MovementKind.MUTATION: MutationPayload,
}


def build_lines(raw_lines) -> tuple[LinePayload, ...]:
    return tuple(LinePayload(product_id=line["product_id"], quantity=line["quantity"]) for line in raw_lines or [])


def build_payload(kind: str, data: dict) -> MovementPayload:
    """Build the payload variant for ``kind`` from validated request data.

    Keys that do not belong to the variant are ignored.
    """

    payload_cls = PAYLOADS[MovementKind(kind)]
    common = {
        "transaction_code": data.get("transaction_code", ""),
        "date": data.get("date"),
        "lines": build_lines(data.get("lines")),
    }
    if payload_cls is InboundPayload:
        return InboundPayload(**common, to_warehouse=data.get("to_warehouse", True), store_id=data.get("store_id"))
    if payload_cls is OutboundPayload:
        return OutboundPayload(**common, store_id=data.get("store_id"))
    return MutationPayload(
        **common,
        from_warehouse=data.get("from_warehouse", True),
        from_store_id=data.get("from_store_id"),
        to_store_id=data.get("to_store_id"),
    )


# EOF
