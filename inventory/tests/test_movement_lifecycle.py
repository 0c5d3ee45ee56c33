import datetime

import pytest
from catalog.tests.factories import ProductFactory
from common.choices import MovementKind, MovementStatus
from inventory.errors import CannotDeleteCompleted, CannotEditCompleted, InvalidLine, MovementNotFound
from inventory.models import StockOut, StockOutLine
from inventory.payloads import LinePayload
from inventory.selectors import get_movement, list_movements, next_transaction_code
from inventory.services import delete_movement, update_movement
from inventory.tests.factories import (
    StockInFactory,
    StockMutationFactory,
    StockOutFactory,
    StockOutLineFactory,
    UserFactory,
)


@pytest.mark.django_db
def test_update_replaces_date_and_lines():
    user = UserFactory()
    line = StockOutLineFactory(quantity=2)
    movement = line.movement
    product = ProductFactory()

    update_movement(
        kind=MovementKind.OUTBOUND,
        movement_id=movement.id,
        date=datetime.date(2025, 2, 1),
        lines=[LinePayload(product.id, 4), LinePayload(line.product_id, 1)],
        user=user,
    )

    movement.refresh_from_db()
    assert movement.date == datetime.date(2025, 2, 1)
    assert movement.status == MovementStatus.PENDING
    assert [(ln.product_id, ln.quantity) for ln in movement.lines.all()] == [(product.id, 4), (line.product_id, 1)]
    assert not StockOutLine.objects.filter(id=line.id).exists()


@pytest.mark.django_db
def test_update_with_invalid_lines_keeps_previous_lines():
    line = StockOutLineFactory(quantity=2)

    with pytest.raises(InvalidLine):
        update_movement(
            kind=MovementKind.OUTBOUND,
            movement_id=line.movement_id,
            date=datetime.date(2025, 2, 1),
            lines=[LinePayload(line.product_id, 0)],
            user=UserFactory(),
        )

    assert list(StockOutLine.objects.filter(movement_id=line.movement_id).values_list("quantity", flat=True)) == [2]


@pytest.mark.django_db
def test_update_of_completed_movement_is_rejected():
    movement = StockOutFactory(status=MovementStatus.COMPLETED)
    original_date = movement.date

    with pytest.raises(CannotEditCompleted) as exc:
        update_movement(
            kind=MovementKind.OUTBOUND,
            movement_id=movement.id,
            date=datetime.date(2030, 1, 1),
            lines=[LinePayload(ProductFactory().id, 1)],
            user=UserFactory(),
        )

    assert exc.value.status_code == 409
    movement.refresh_from_db()
    assert movement.date == original_date


@pytest.mark.django_db
def test_delete_pending_removes_movement_and_lines():
    line = StockOutLineFactory()
    movement_id = line.movement_id

    delete_movement(kind=MovementKind.OUTBOUND, movement_id=movement_id)

    assert not StockOut.objects.filter(id=movement_id).exists()
    assert not StockOutLine.objects.filter(movement_id=movement_id).exists()


@pytest.mark.django_db
def test_delete_completed_is_rejected():
    movement = StockMutationFactory(status=MovementStatus.COMPLETED)

    with pytest.raises(CannotDeleteCompleted):
        delete_movement(kind=MovementKind.MUTATION, movement_id=movement.id)

    assert get_movement(kind=MovementKind.MUTATION, movement_id=movement.id) is not None


@pytest.mark.django_db
def test_delete_unknown_movement():
    with pytest.raises(MovementNotFound) as exc:
        delete_movement(kind=MovementKind.INBOUND, movement_id=424242)
    assert exc.value.status_code == 404


@pytest.mark.django_db
def test_list_is_newest_first_and_scoped_to_kind():
    older = StockInFactory()
    newer = StockInFactory()
    StockOutFactory()

    ids = [m.id for m in list_movements(kind=MovementKind.INBOUND)]

    assert ids == [newer.id, older.id]


@pytest.mark.django_db
def test_next_transaction_code_follows_highest_id():
    assert next_transaction_code(kind=MovementKind.MUTATION) == "MUT-000001"
    movement = StockInFactory()
    assert next_transaction_code(kind=MovementKind.INBOUND) == f"IN-{movement.id + 1:06d}"


def test_unknown_kind_is_a_lookup_error():
    with pytest.raises(LookupError):
        next_transaction_code(kind="transfer")


# EOF
