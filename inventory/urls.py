from common.choices import MovementKind
from django.urls import path

from .views import (
    InventoryHealthView,
    MovementDetailView,
    MovementVerifyView,
    NextTransactionCodeView,
    StockInListCreateView,
    StockMutationListCreateView,
    StockNotificationView,
    StockOutListCreateView,
    StoreBalanceListView,
    WarehouseBalanceListView,
)

app_name = "inventory"


def movement_routes(prefix: str, kind: str, list_view):
    return [
        path(f"{prefix}/", list_view.as_view(), name=f"{prefix}-list"),
        path(f"{prefix}/next-code/", NextTransactionCodeView.as_view(kind=kind), name=f"{prefix}-next-code"),
        path(f"{prefix}/<int:movement_id>/", MovementDetailView.as_view(kind=kind), name=f"{prefix}-detail"),
        path(f"{prefix}/<int:movement_id>/verify/", MovementVerifyView.as_view(kind=kind), name=f"{prefix}-verify"),
    ]


urlpatterns = [
    path("health/", InventoryHealthView.as_view(), name="inventory-health"),
    path("balances/warehouse/", WarehouseBalanceListView.as_view(), name="warehouse-balances"),
    path("balances/stores/<int:store_id>/", StoreBalanceListView.as_view(), name="store-balances"),
    path("notifications/", StockNotificationView.as_view(), name="stock-notifications"),
    *movement_routes("in", MovementKind.INBOUND, StockInListCreateView),
    *movement_routes("out", MovementKind.OUTBOUND, StockOutListCreateView),
    *movement_routes("mutation", MovementKind.MUTATION, StockMutationListCreateView),
]

# EOF
