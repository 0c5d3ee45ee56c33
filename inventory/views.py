"""Inventory API views: movement lifecycle, balances and stock notifications.

Movement views are shared by the three kinds; the URLconf binds ``kind``.
"""

from common.choices import MovementKind
from drf_spectacular.utils import OpenApiExample, extend_schema, inline_serializer
from rest_framework import generics
from rest_framework import serializers as rf_serializers
from rest_framework import status
from rest_framework.permissions import SAFE_METHODS, IsAuthenticated
from rest_framework.response import Response
from rest_framework.views import APIView

from .errors import MovementError, StoreNotFound
from .models import Store
from .notifications import NotificationAggregator
from .selectors import (
    get_movement,
    list_movements,
    list_store_balances,
    list_warehouse_balances,
    next_transaction_code,
)
from .serializers import (
    MovementUpdateSerializer,
    SnapshotSerializer,
    StockBalanceSerializer,
    StockInCreateSerializer,
    StockInSerializer,
    StockMutationCreateSerializer,
    StockMutationSerializer,
    StockOutCreateSerializer,
    StockOutSerializer,
)
from .services import create_movement, delete_movement, update_movement, verify_movement

READ_SERIALIZERS = {
    MovementKind.INBOUND: StockInSerializer,
    MovementKind.OUTBOUND: StockOutSerializer,
    MovementKind.MUTATION: StockMutationSerializer,
}

CREATE_SERIALIZERS = {
    MovementKind.INBOUND: StockInCreateSerializer,
    MovementKind.OUTBOUND: StockOutCreateSerializer,
    MovementKind.MUTATION: StockMutationCreateSerializer,
}

MovementErrorSerializer = inline_serializer(
    name="MovementError",
    fields={
        "detail": rf_serializers.CharField(),
        "code": rf_serializers.CharField(),
    },
)

MovementCreatedSerializer = inline_serializer(
    name="MovementCreatedResponse",
    fields={"id": rf_serializers.IntegerField()},
)


def error_response(exc: MovementError) -> Response:
    return Response(exc.as_dict(), status=exc.status_code)


def not_found_response(kind: str, movement_id) -> Response:
    return Response(
        {"detail": f"Stock {kind} movement {movement_id} not found.", "code": "not_found", "movement_id": movement_id},
        status=status.HTTP_404_NOT_FOUND,
    )


class MovementViewMixin:
    """Binds a view to one movement kind and splits read/write throttling."""

    kind = None
    permission_classes = [IsAuthenticated]

    @property
    def throttle_scope(self):
        request = getattr(self, "request", None)
        if request is not None and request.method not in SAFE_METHODS:
            return "inventory_write"
        return "inventory"

    def read_serializer(self, *args, **kwargs):
        return READ_SERIALIZERS[self.kind](*args, **kwargs)


def movement_list_schema(label: str, read_serializer):
    return extend_schema(
        tags=["Inventory Movements"],
        summary=f"List stock {label} movements",
        description="All movements of this kind with their lines, newest first.",
        responses={200: read_serializer(many=True)},
    )


def movement_create_schema(label: str, create_serializer, example: dict):
    return extend_schema(
        tags=["Inventory Movements"],
        summary=f"Create pending stock {label}",
        description=(
            "Validates routing, transaction code uniqueness and lines, then stores the movement as `pending`. "
            "Balances are not touched until the movement is verified."
        ),
        request=create_serializer,
        responses={
            201: MovementCreatedSerializer,
            400: MovementErrorSerializer,
            404: MovementErrorSerializer,
            409: MovementErrorSerializer,
        },
        examples=[
            OpenApiExample(f"Stock {label}", value=example, request_only=True),
            OpenApiExample("Created", value={"id": 1}, response_only=True),
        ],
    )


class MovementListCreateView(MovementViewMixin, APIView):
    """List movements of one kind or stage a new pending movement.

    Routed through the per-kind subclasses below so each documents its own
    request and response shapes.
    """

    def get(self, request):
        movements = list_movements(kind=self.kind)
        return Response(self.read_serializer(movements, many=True).data)

    def post(self, request):
        serializer = CREATE_SERIALIZERS[self.kind](data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            payload = serializer.to_payload(self.kind)
            movement = create_movement(kind=self.kind, payload=payload, user=request.user)
        except MovementError as exc:
            return error_response(exc)
        return Response({"id": movement.id}, status=status.HTTP_201_CREATED)


class StockInListCreateView(MovementListCreateView):
    kind = MovementKind.INBOUND

    @movement_list_schema("in", StockInSerializer)
    def get(self, request):
        return super().get(request)

    @movement_create_schema(
        "in",
        StockInCreateSerializer,
        {
            "transaction_code": "IN-000001",
            "date": "2025-01-15",
            "to_warehouse": True,
            "lines": [{"product_id": 1, "quantity": 20}],
        },
    )
    def post(self, request):
        return super().post(request)


class StockOutListCreateView(MovementListCreateView):
    kind = MovementKind.OUTBOUND

    @movement_list_schema("out", StockOutSerializer)
    def get(self, request):
        return super().get(request)

    @movement_create_schema(
        "out",
        StockOutCreateSerializer,
        {
            "transaction_code": "OUT-000001",
            "date": "2025-01-15",
            "store_id": 1,
            "lines": [{"product_id": 1, "quantity": 5}],
        },
    )
    def post(self, request):
        return super().post(request)


class StockMutationListCreateView(MovementListCreateView):
    kind = MovementKind.MUTATION

    @movement_list_schema("mutation", StockMutationSerializer)
    def get(self, request):
        return super().get(request)

    @movement_create_schema(
        "mutation",
        StockMutationCreateSerializer,
        {
            "transaction_code": "MUT-000001",
            "date": "2025-01-15",
            "from_warehouse": True,
            "to_store_id": 1,
            "lines": [{"product_id": 1, "quantity": 5}],
        },
    )
    def post(self, request):
        return super().post(request)


class MovementDetailView(MovementViewMixin, APIView):
    """Read, edit or delete a single movement."""

    @extend_schema(tags=["Inventory Movements"], summary="Get movement detail")
    def get(self, request, movement_id: int):
        movement = get_movement(kind=self.kind, movement_id=movement_id)
        if movement is None:
            return not_found_response(self.kind, movement_id)
        return Response(self.read_serializer(movement).data)

    @extend_schema(
        tags=["Inventory Movements"],
        summary="Replace movement date and lines",
        description="Only pending movements can be edited; completed ones answer 409 `cannot_edit_completed`.",
        request=MovementUpdateSerializer,
        responses={400: MovementErrorSerializer, 404: MovementErrorSerializer, 409: MovementErrorSerializer},
    )
    def put(self, request, movement_id: int):
        serializer = MovementUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        try:
            update_movement(
                kind=self.kind,
                movement_id=movement_id,
                date=serializer.validated_data["date"],
                lines=serializer.to_lines(),
                user=request.user,
            )
        except MovementError as exc:
            return error_response(exc)
        movement = get_movement(kind=self.kind, movement_id=movement_id)
        return Response(self.read_serializer(movement).data, status=status.HTTP_200_OK)

    @extend_schema(
        tags=["Inventory Movements"],
        summary="Delete pending movement",
        responses={204: None, 404: MovementErrorSerializer, 409: MovementErrorSerializer},
    )
    def delete(self, request, movement_id: int):
        try:
            delete_movement(kind=self.kind, movement_id=movement_id)
        except MovementError as exc:
            return error_response(exc)
        return Response(status=status.HTTP_204_NO_CONTENT)


class MovementVerifyView(MovementViewMixin, APIView):
    """Commit a pending movement into the balance ledger."""

    @extend_schema(
        tags=["Inventory Movements"],
        summary="Verify movement",
        description=(
            "Applies every line to the affected balances and marks the movement completed, atomically. "
            "Rejections: `already_verified`, `insufficient_stock`, `product_not_found`, `store_failure`."
        ),
        request=None,
        responses={404: MovementErrorSerializer, 409: MovementErrorSerializer, 503: MovementErrorSerializer},
        examples=[
            OpenApiExample(
                "Insufficient stock",
                value={
                    "detail": "Insufficient stock for product ID 3 at store 1: requested 30, available 10.",
                    "code": "insufficient_stock",
                    "product_id": 3,
                    "store_id": 1,
                    "location": "store 1",
                    "available": 10,
                    "requested": 30,
                },
                response_only=True,
                status_codes=["409"],
            )
        ],
    )
    def post(self, request, movement_id: int):
        try:
            movement = verify_movement(kind=self.kind, movement_id=movement_id, user=request.user)
        except MovementError as exc:
            return error_response(exc)
        return Response(self.read_serializer(movement).data, status=status.HTTP_200_OK)


class NextTransactionCodeView(MovementViewMixin, APIView):
    @extend_schema(
        tags=["Inventory Movements"],
        summary="Suggest next transaction code",
        responses={200: inline_serializer(name="NextCode", fields={"next_code": rf_serializers.CharField()})},
        examples=[OpenApiExample("Next code", value={"next_code": "IN-000042"})],
    )
    def get(self, request):
        return Response({"next_code": next_transaction_code(kind=self.kind)})


class WarehouseBalanceListView(generics.ListAPIView):
    """Warehouse balances for every product received so far."""

    permission_classes = [IsAuthenticated]
    throttle_scope = "inventory"
    serializer_class = StockBalanceSerializer
    pagination_class = None

    def get_queryset(self):
        return list_warehouse_balances()

    @extend_schema(tags=["Inventory Balances"], summary="List warehouse balances")
    def get(self, request, *args, **kwargs):
        return super().get(request, *args, **kwargs)


class StoreBalanceListView(generics.ListAPIView):
    permission_classes = [IsAuthenticated]
    throttle_scope = "inventory"
    serializer_class = StockBalanceSerializer
    pagination_class = None

    def get_queryset(self):
        return list_store_balances(store_id=self.kwargs["store_id"])

    @extend_schema(
        tags=["Inventory Balances"],
        summary="List store balances",
        responses={200: StockBalanceSerializer(many=True), 404: MovementErrorSerializer},
    )
    def get(self, request, *args, **kwargs):
        store_id = self.kwargs["store_id"]
        if not Store.objects.filter(id=store_id).exists():
            return error_response(StoreNotFound(store_id))
        return super().get(request, *args, **kwargs)


class StockNotificationView(APIView):
    """Current low/out-of-stock snapshot, rebuilt on every request."""

    permission_classes = [IsAuthenticated]
    throttle_scope = "inventory"

    @extend_schema(
        tags=["Inventory Balances"],
        summary="Stock notification snapshot",
        responses={200: SnapshotSerializer},
        examples=[
            OpenApiExample(
                "Snapshot",
                value={
                    "length": 2,
                    "lowStock": [{"productName": "Kopi Arabica", "quantity": 4, "location": "Gudang"}],
                    "outOfStock": [{"productName": "Teh Hijau", "location": "Store A"}],
                },
            )
        ],
    )
    def get(self, request):
        snapshot = NotificationAggregator().recompute()
        return Response(SnapshotSerializer(snapshot.as_dict()).data)


class InventoryHealthView(APIView):
    throttle_classes = []

    @extend_schema(
        tags=["Inventory Endpoints"],
        summary="Inventory health",
        description="Simple healthcheck endpoint for the inventory app",
        examples=[OpenApiExample("Health OK", value={"status": "ok", "app": "inventory"})],
    )
    def get(self, request):
        return Response({"status": "ok", "app": "inventory"})


# EOF
