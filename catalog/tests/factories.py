import factory
from catalog.models import Product
from factory import Faker
from factory.django import DjangoModelFactory


class ProductFactory(DjangoModelFactory):
    class Meta:
        model = Product

    name = Faker("sentence", nb_words=2)
    code = factory.Sequence(lambda n: f"PRD-{n:05d}")
    threshold = 5
