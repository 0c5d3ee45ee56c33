import datetime

import factory
from django.contrib.auth import get_user_model
from factory.django import DjangoModelFactory
from inventory.ledger import classify_stock
from inventory.models import (
    StockBalance,
    StockIn,
    StockInLine,
    StockMutation,
    StockMutationLine,
    StockOut,
    StockOutLine,
    Store,
)


class UserFactory(DjangoModelFactory):
    class Meta:
        model = get_user_model()

    username = factory.Sequence(lambda n: f"clerk{n}")
    email = factory.LazyAttribute(lambda o: f"{o.username}@example.com")
    password = factory.PostGenerationMethodCall("set_password", "pass")


class StoreFactory(DjangoModelFactory):
    class Meta:
        model = Store

    name = factory.Sequence(lambda n: f"Store {n:03d}")
    address = factory.Faker("street_address")


class StockBalanceFactory(DjangoModelFactory):
    """Seed a balance directly; ``store=None`` is the warehouse."""

    class Meta:
        model = StockBalance

    store = None
    product = factory.SubFactory("catalog.tests.factories.ProductFactory")
    quantity = 10
    status = factory.LazyAttribute(lambda o: classify_stock(o.quantity, o.product.threshold))


class StockInFactory(DjangoModelFactory):
    class Meta:
        model = StockIn

    transaction_code = factory.Sequence(lambda n: f"IN-T{n:05d}")
    date = factory.LazyFunction(datetime.date.today)
    created_by = factory.SubFactory(UserFactory)
    to_warehouse = True
    store = None


class StockInLineFactory(DjangoModelFactory):
    class Meta:
        model = StockInLine

    movement = factory.SubFactory(StockInFactory)
    product = factory.SubFactory("catalog.tests.factories.ProductFactory")
    quantity = 1


class StockOutFactory(DjangoModelFactory):
    class Meta:
        model = StockOut

    transaction_code = factory.Sequence(lambda n: f"OUT-T{n:05d}")
    date = factory.LazyFunction(datetime.date.today)
    created_by = factory.SubFactory(UserFactory)
    store = factory.SubFactory(StoreFactory)


class StockOutLineFactory(DjangoModelFactory):
    class Meta:
        model = StockOutLine

    movement = factory.SubFactory(StockOutFactory)
    product = factory.SubFactory("catalog.tests.factories.ProductFactory")
    quantity = 1


class StockMutationFactory(DjangoModelFactory):
    class Meta:
        model = StockMutation

    transaction_code = factory.Sequence(lambda n: f"MUT-T{n:05d}")
    date = factory.LazyFunction(datetime.date.today)
    created_by = factory.SubFactory(UserFactory)
    from_warehouse = True
    from_store = None
    to_store = factory.SubFactory(StoreFactory)


class StockMutationLineFactory(DjangoModelFactory):
    class Meta:
        model = StockMutationLine

    movement = factory.SubFactory(StockMutationFactory)
    product = factory.SubFactory("catalog.tests.factories.ProductFactory")
    quantity = 1
