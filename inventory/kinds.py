"""Registry mapping each movement kind to its tables and code prefix."""

from dataclasses import dataclass

from common.choices import MovementKind

from .models import StockIn, StockInLine, StockMutation, StockMutationLine, StockOut, StockOutLine


@dataclass(frozen=True)
class KindSpec:
    kind: str
    model: type
    line_model: type
    code_prefix: str
    label: str


KINDS = {
    MovementKind.INBOUND: KindSpec(MovementKind.INBOUND, StockIn, StockInLine, "IN", "in"),
    MovementKind.OUTBOUND: KindSpec(MovementKind.OUTBOUND, StockOut, StockOutLine, "OUT", "out"),
    MovementKind.MUTATION: KindSpec(MovementKind.MUTATION, StockMutation, StockMutationLine, "MUT", "mutation"),
}


def get_kind(kind: str) -> KindSpec:
    try:
        return KINDS[MovementKind(kind)]
    except ValueError:
        raise LookupError(f"Unknown movement kind: {kind!r}")


# EOF
