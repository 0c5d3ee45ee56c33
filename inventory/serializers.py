"""Serializers for inventory domain.

Write serializers only check shapes and types; routing and business rules
are enforced by the payload variants and the validator so that every
rejection carries a domain error code.
"""

from django.conf import settings
from rest_framework import serializers

from .models import (
    StockBalance,
    StockIn,
    StockInLine,
    StockMutation,
    StockMutationLine,
    StockOut,
    StockOutLine,
)
from .payloads import build_lines, build_payload


class LineInputSerializer(serializers.Serializer):
    product_id = serializers.IntegerField()
    quantity = serializers.IntegerField()


class MovementCreateSerializer(serializers.Serializer):
    """Common input for creating any movement kind."""

    transaction_code = serializers.CharField(max_length=64, allow_blank=True)
    date = serializers.DateField()
    lines = LineInputSerializer(many=True, allow_empty=True)

    def to_payload(self, kind: str):
        return build_payload(kind, self.validated_data)


class StockInCreateSerializer(MovementCreateSerializer):
    to_warehouse = serializers.BooleanField(default=True)
    store_id = serializers.IntegerField(required=False, allow_null=True)


class StockOutCreateSerializer(MovementCreateSerializer):
    store_id = serializers.IntegerField(required=False, allow_null=True)


class StockMutationCreateSerializer(MovementCreateSerializer):
    from_warehouse = serializers.BooleanField(default=True)
    from_store_id = serializers.IntegerField(required=False, allow_null=True)
    to_store_id = serializers.IntegerField(required=False, allow_null=True)


class MovementUpdateSerializer(serializers.Serializer):
    """Wholesale replacement of a pending movement's date and lines."""

    date = serializers.DateField()
    lines = LineInputSerializer(many=True, allow_empty=True)

    def to_lines(self):
        return build_lines(self.validated_data["lines"])


class StockInLineSerializer(serializers.ModelSerializer):
    product_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = StockInLine
        fields = ["id", "product_id", "quantity"]
        read_only_fields = fields


class StockOutLineSerializer(serializers.ModelSerializer):
    product_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = StockOutLine
        fields = ["id", "product_id", "quantity"]
        read_only_fields = fields


class StockMutationLineSerializer(serializers.ModelSerializer):
    product_id = serializers.IntegerField(read_only=True)

    class Meta:
        model = StockMutationLine
        fields = ["id", "product_id", "quantity"]
        read_only_fields = fields


MOVEMENT_FIELDS = [
    "id",
    "transaction_code",
    "date",
    "status",
    "created_by",
    "verified_by",
    "verified_at",
    "created_at",
    "updated_at",
    "lines",
]


class StockInSerializer(serializers.ModelSerializer):
    """Read-only representation of a stock in and its lines."""

    lines = StockInLineSerializer(many=True, read_only=True)

    class Meta:
        model = StockIn
        fields = MOVEMENT_FIELDS + ["to_warehouse", "store"]
        read_only_fields = fields


class StockOutSerializer(serializers.ModelSerializer):
    """Read-only representation of a stock out and its lines."""

    lines = StockOutLineSerializer(many=True, read_only=True)

    class Meta:
        model = StockOut
        fields = MOVEMENT_FIELDS + ["store"]
        read_only_fields = fields


class StockMutationSerializer(serializers.ModelSerializer):
    """Read-only representation of a stock mutation and its lines."""

    lines = StockMutationLineSerializer(many=True, read_only=True)

    class Meta:
        model = StockMutation
        fields = MOVEMENT_FIELDS + ["from_warehouse", "from_store", "to_store"]
        read_only_fields = fields


class StockBalanceSerializer(serializers.ModelSerializer):
    """Read-only representation of a balance.

    ``location`` is the store name or the warehouse label.
    """

    product_name = serializers.CharField(source="product.name", read_only=True)
    threshold = serializers.IntegerField(source="product.threshold", read_only=True)
    location = serializers.SerializerMethodField(read_only=True)

    class Meta:
        model = StockBalance
        fields = ["id", "store", "product", "product_name", "threshold", "quantity", "status", "location", "updated_at"]
        read_only_fields = fields

    def get_location(self, obj) -> str:
        if obj.store_id is None:
            return getattr(settings, "INVENTORY_WAREHOUSE_LABEL", "Gudang")
        return obj.store.name


class LowStockEntrySerializer(serializers.Serializer):
    productName = serializers.CharField()
    quantity = serializers.IntegerField()
    location = serializers.CharField()


class OutOfStockEntrySerializer(serializers.Serializer):
    productName = serializers.CharField()
    location = serializers.CharField()


class SnapshotSerializer(serializers.Serializer):
    length = serializers.IntegerField()
    lowStock = LowStockEntrySerializer(many=True)
    outOfStock = OutOfStockEntrySerializer(many=True)


# EOF
