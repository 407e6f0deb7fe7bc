"""
Pytest configuration and fixtures.
"""
from decimal import Decimal
from unittest.mock import MagicMock

import pytest


@pytest.fixture
def api_client():
    """Create an API client for testing."""
    from rest_framework.test import APIClient
    return APIClient()


@pytest.fixture
def admin_client(django_user_model):
    """Create an API client authenticated as a staff user."""
    from rest_framework.test import APIClient

    user = django_user_model.objects.create_user(
        username='catalog-admin',
        email='admin@example.com',
        password='testpass123',
        is_staff=True,
    )
    client = APIClient()
    client.force_authenticate(user=user)
    return client


@pytest.fixture
def es_client():
    """Stand-in Elasticsearch client."""
    return MagicMock()


@pytest.fixture
def product_index(es_client):
    from modules.search.indexer import ProductIndex
    return ProductIndex(client=es_client, index_name='test_products')


@pytest.fixture
def category(db):
    from modules.categories.models import CategoryModel
    return CategoryModel.objects.create(name='Phones', slug='phones')


@pytest.fixture
def make_product(db, category):
    """Factory for products with sensible defaults."""
    from modules.products.models import ProductModel, ProductTagModel

    counter = {'n': 0}

    def factory(tags=None, **overrides):
        counter['n'] += 1
        fields = {
            'name': f"Product {counter['n']}",
            'slug': f"product-{counter['n']}",
            'price': Decimal('1000000'),
            'stock_quantity': 10,
            'category': category,
        }
        fields.update(overrides)
        product = ProductModel.objects.create(**fields)
        for tag in tags or []:
            ProductTagModel.objects.create(product=product, tag_name=tag)
        return product

    return factory
