"""Admin registrations for inventory app.

Balances are read-only here: only movement verification may change them.
Movements can be verified from the changelist through an admin action that
goes through the same engine as the API.
"""

from common.choices import MovementKind
from django.contrib import admin, messages

from .errors import MovementError
from .models import (
    StockBalance,
    StockIn,
    StockInLine,
    StockMutation,
    StockMutationLine,
    StockOut,
    StockOutLine,
    Store,
)
from .services import default_engine, delete_movement


@admin.register(Store)
class StoreAdmin(admin.ModelAdmin):
    list_display = ("id", "name", "address", "updated_at")
    search_fields = ("name",)


@admin.register(StockBalance)
class StockBalanceAdmin(admin.ModelAdmin):
    list_display = ("id", "store", "product", "quantity", "status", "updated_at")
    list_filter = ("status",)
    search_fields = ("product__name", "product__code", "store__name")
    readonly_fields = ("store", "product", "quantity", "status", "created_at", "updated_at")

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False


class MovementAdmin(admin.ModelAdmin):
    """Shared changelist setup and the verify action for movement kinds.

    Completed movements are view-only, lines included. Deleting a pending
    movement goes through the same service as the API.
    """

    kind = None
    routing_fields = ()
    list_filter = ("status",)
    search_fields = ("transaction_code",)
    ordering = ("-created_at",)
    actions = ["action_verify"]

    def get_readonly_fields(self, request, obj=None):
        return (
            "transaction_code",
            *self.routing_fields,
            "status",
            "created_by",
            "verified_by",
            "verified_at",
            "created_at",
            "updated_at",
        )

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        if obj is not None and obj.is_completed:
            return False
        return super().has_change_permission(request, obj)

    def has_delete_permission(self, request, obj=None):
        if obj is not None and obj.is_completed:
            return False
        return super().has_delete_permission(request, obj)

    def delete_model(self, request, obj):
        try:
            delete_movement(kind=self.kind, movement_id=obj.id)
        except MovementError as exc:
            messages.error(request, exc.message)

    def delete_queryset(self, request, queryset):
        for movement_id in queryset.order_by("id").values_list("id", flat=True):
            try:
                delete_movement(kind=self.kind, movement_id=movement_id)
            except MovementError as exc:
                messages.error(request, exc.message)

    @admin.action(description="Verify selected movements (apply to balances)")
    def action_verify(self, request, queryset):
        engine = default_engine()
        successes = 0
        failures = []
        for movement in queryset.order_by("id"):
            try:
                engine.verify(kind=self.kind, movement_id=movement.id, user=request.user)
                successes += 1
            except MovementError as exc:
                failures.append(f"{movement.transaction_code}: {exc.message}")
        if successes:
            messages.success(request, f"Verified {successes} movement(s).")
        for failure in failures:
            messages.error(request, failure)


class MovementLineInline(admin.TabularInline):
    """Lines are editable only while the parent movement is pending."""

    extra = 0
    raw_id_fields = ("product",)

    def _parent_is_pending(self, obj) -> bool:
        return obj is None or not obj.is_completed

    def has_add_permission(self, request, obj=None):
        return self._parent_is_pending(obj) and super().has_add_permission(request, obj)

    def has_change_permission(self, request, obj=None):
        return self._parent_is_pending(obj) and super().has_change_permission(request, obj)

    def has_delete_permission(self, request, obj=None):
        return self._parent_is_pending(obj) and super().has_delete_permission(request, obj)


class StockInLineInline(MovementLineInline):
    model = StockInLine


class StockOutLineInline(MovementLineInline):
    model = StockOutLine


class StockMutationLineInline(MovementLineInline):
    model = StockMutationLine


@admin.register(StockIn)
class StockInAdmin(MovementAdmin):
    kind = MovementKind.INBOUND
    routing_fields = ("to_warehouse", "store")
    list_display = ("id", "transaction_code", "date", "to_warehouse", "store", "status", "created_by")
    inlines = [StockInLineInline]


@admin.register(StockOut)
class StockOutAdmin(MovementAdmin):
    kind = MovementKind.OUTBOUND
    routing_fields = ("store",)
    list_display = ("id", "transaction_code", "date", "store", "status", "created_by")
    inlines = [StockOutLineInline]


@admin.register(StockMutation)
class StockMutationAdmin(MovementAdmin):
    kind = MovementKind.MUTATION
    routing_fields = ("from_warehouse", "from_store", "to_store")
    list_display = ("id", "transaction_code", "date", "from_warehouse", "from_store", "to_store", "status")
    inlines = [StockMutationLineInline]


# EOF
