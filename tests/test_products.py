from datetime import timedelta
from decimal import Decimal
from unittest.mock import patch

import pytest
from django.utils import timezone

from modules.categories.exceptions import CategoryNotFoundError
from modules.products.exceptions import (
    DuplicateSKUError,
    InvalidStockOperationError,
    ProductNotFoundError,
)
from modules.products.models import ProductModel, ProductViewModel
from modules.products import services as product_services
from modules.products.services import ProductService
from modules.search.models import SearchSyncOutboxModel
from shared.domain.exceptions import ValidationError

pytestmark = pytest.mark.django_db


@pytest.fixture
def service():
    return ProductService()


def _outbox(product_id):
    return list(
        SearchSyncOutboxModel.objects.filter(product_id=product_id).values_list('action', flat=True)
    )


def test_create_product_writes_tags_and_enqueues_sync(service, category):
    product = service.create_product({
        'name': 'Galaxy S24 Ultra',
        'sku': 'SM-S928',
        'price': Decimal('30000000'),
        'sale_price': Decimal('27000000'),
        'category_id': category.id,
        'tags': ['5g', 'android', '5g'],
    })

    assert product.slug == 'galaxy-s24-ultra'
    assert product.tag_names == ['5g', 'android']
    assert product.final_price == Decimal('27000000')
    assert _outbox(product.id) == ['index']


def test_create_product_slug_collision_gets_suffix(service, category, make_product):
    make_product(name='Pixel 9', slug='pixel-9')

    product = service.create_product({'name': 'Pixel 9', 'price': Decimal('100'), 'category_id': category.id})

    assert product.slug.startswith('pixel-9-')
    assert product.slug[len('pixel-9-'):].isdigit()


def test_create_product_rejects_duplicate_sku(service, category, make_product):
    make_product(sku='SKU-1')

    with pytest.raises(DuplicateSKUError):
        service.create_product({'name': 'Copy', 'sku': 'SKU-1', 'price': Decimal('1'), 'category_id': category.id})


def test_create_product_requires_category(service):
    with pytest.raises(CategoryNotFoundError):
        service.create_product({'name': 'Nowhere', 'price': Decimal('1'), 'category_id': 404})


def test_update_product_rederives_slug_and_replaces_tags(service, make_product):
    product = make_product(name='Old name', slug='old-name', tags=['old'])

    updated = service.update_product(product.id, {'name': 'New name', 'tags': ['fresh']})

    assert updated.slug == 'new-name'
    assert updated.tag_names == ['fresh']
    assert _outbox(product.id) == ['index']


def test_delete_product_is_soft_and_enqueues_removal(service, make_product):
    product = make_product()

    service.delete_product(product.id)

    product.refresh_from_db()
    assert product.status == 'inactive'
    assert _outbox(product.id) == ['delete']


def test_update_stock_operations(service, make_product):
    product = make_product(stock_quantity=5)

    assert service.update_stock(product.id, 3, 'add').stock_quantity == 8
    assert service.update_stock(product.id, 2, 'subtract').stock_quantity == 6
    assert service.update_stock(product.id, 1, 'set').stock_quantity == 1

    with pytest.raises(InvalidStockOperationError):
        service.update_stock(product.id, 2, 'subtract')
    with pytest.raises(ValidationError):
        service.update_stock(product.id, 2, 'multiply')

    product.refresh_from_db()
    assert product.stock_quantity == 1


def test_bulk_update_only_touches_whitelisted_fields(service, make_product):
    first = make_product()
    second = make_product()

    result = service.bulk_update_products(
        [first.id, second.id],
        {'is_featured': True, 'name': 'hijacked', 'view_count': 10 ** 6},
    )

    assert result['updated_count'] == 2
    first.refresh_from_db()
    assert first.is_featured is True
    assert first.name != 'hijacked'
    assert first.view_count == 0


def test_bulk_update_requires_known_ids_and_fields(service, make_product):
    product = make_product()

    with pytest.raises(ProductNotFoundError):
        service.bulk_update_products([product.id, 9999], {'is_featured': True})
    with pytest.raises(ValidationError):
        service.bulk_update_products([product.id], {'name': 'x'})


def test_product_detail_by_id_or_slug_tracks_views(service, make_product):
    product = make_product(slug='pixel-9')
    for _ in range(5):
        make_product()

    result = service.get_product_detail('pixel-9', view_data={'ip_address': '10.0.0.1', 'user_agent': 'pytest'})

    assert result['product'].id == product.id
    assert result['product'].view_count == 1
    assert len(result['related_products']) == 4
    assert product.id not in [related.id for related in result['related_products']]
    assert ProductViewModel.objects.get(product=product).ip_address == '10.0.0.1'

    assert service.get_product_detail(str(product.id))['product'].view_count == 1


def test_product_detail_missing_product(service, make_product):
    make_product(slug='hidden', status='draft')

    with pytest.raises(ProductNotFoundError):
        service.get_product_detail('hidden')
    with pytest.raises(ProductNotFoundError):
        service.get_product_detail('12345')


def test_trending_counts_recent_views_only(service, make_product):
    hot = make_product()
    cold = make_product(purchase_count=50)
    ProductViewModel.objects.create(product=hot)
    ProductViewModel.objects.create(product=hot)
    old_view = ProductViewModel.objects.create(product=cold)
    ProductViewModel.objects.filter(id=old_view.id).update(created_at=timezone.now() - timedelta(days=30))

    assert [product.id for product in service.get_trending_products(days=7)] == [hot.id]


def test_popular_products_order_by_views(service, make_product):
    low = make_product(view_count=5)
    high = make_product(view_count=500)

    assert [product.id for product in service.get_popular_products()] == [high.id, low.id]


def test_low_stock_and_stats(service, make_product):
    make_product(stock_quantity=0)
    make_product(stock_quantity=3, is_featured=True)
    make_product(stock_quantity=50)
    make_product(status='inactive')

    low = service.get_low_stock_products(threshold=5)
    assert [product.stock_quantity for product in low['products']] == [0, 3]
    assert low['pagination']['total_records'] == 2

    stats = service.get_product_stats()
    assert stats['total_products'] == 4
    assert stats['active_products'] == 3
    assert stats['inactive_products'] == 1
    assert stats['featured_products'] == 1
    assert stats['out_of_stock'] == 1
    assert stats['low_stock'] == 1
    assert stats['category_distribution'][0]['product_count'] == 3


def test_sale_price_above_list_price_is_accepted_but_not_on_sale(service, category):
    product = service.create_product({
        'name': 'Odd pricing',
        'price': Decimal('100'),
        'sale_price': Decimal('150'),
        'category_id': category.id,
    })

    assert product.is_on_sale is False
    assert product.final_price == Decimal('100')
    assert ProductModel.objects.get(id=product.id).sale_price == Decimal('150')


def test_bulk_update_warns_on_sale_price_not_below_list_price(service, make_product):
    product = make_product(price=Decimal('100'))

    with patch.object(product_services.logger, 'warning') as warning:
        service.bulk_update_products([product.id], {'sale_price': Decimal('120')})

    warning.assert_called_once()
    assert f"Product {product.id}: sale price 120" in warning.call_args.args[0]
