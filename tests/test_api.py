from unittest.mock import MagicMock

import pytest
from elasticsearch import ConnectionError as ESConnectionError

from modules.products.models import ProductModel, ProductViewModel
from modules.search import views as search_views
from modules.search.services import SearchService

pytestmark = pytest.mark.django_db


@pytest.fixture
def patched_search(monkeypatch, product_index):
    service = SearchService(index=product_index)
    monkeypatch.setattr(search_views, 'search_service', service)
    return service


def test_product_list_envelope(api_client, make_product):
    product = make_product(name='Galaxy S24')
    make_product(status='draft')

    response = api_client.get('/api/v1/products/', {'search': 'galaxy'})

    assert response.status_code == 200
    body = response.json()
    assert body['status'] == 200
    assert [item['id'] for item in body['data']['products']] == [product.id]
    assert body['data']['pagination']['total_records'] == 1


def test_product_list_rejects_inverted_price_range(api_client):
    response = api_client.get('/api/v1/products/', {'min_price': '500', 'max_price': '100'})

    assert response.status_code == 400


def test_create_product_requires_staff(api_client, category):
    response = api_client.post(
        '/api/v1/products/',
        {'name': 'Pixel 9', 'price': '999.00', 'category_id': category.id},
        format='json',
    )

    assert response.status_code in (401, 403)
    assert not ProductModel.objects.exists()


def test_admin_creates_product(admin_client, category):
    response = admin_client.post(
        '/api/v1/products/',
        {
            'name': 'Pixel 9',
            'price': '999.00',
            'sale_price': '899.00',
            'category_id': category.id,
            'tags': ['android'],
        },
        format='json',
    )

    assert response.status_code == 201
    data = response.json()['data']
    assert data['slug'] == 'pixel-9'
    assert data['tags'] == ['android']
    assert data['is_on_sale'] is True
    assert data['discount_percentage'] == 10


def test_product_detail_records_view(api_client, make_product):
    product = make_product(slug='pixel-9')

    response = api_client.get('/api/v1/products/pixel-9/', HTTP_USER_AGENT='pytest-agent')

    assert response.status_code == 200
    assert response.json()['data']['product']['view_count'] == 1
    view = ProductViewModel.objects.get(product=product)
    assert view.user_agent == 'pytest-agent'


def test_unknown_product_maps_to_404(api_client, admin_client):
    assert api_client.get('/api/v1/products/no-such-product/').status_code == 404
    assert admin_client.delete('/api/v1/products/no-such-product/').status_code == 404


def test_stock_update_rejects_negative_result(admin_client, make_product):
    product = make_product(stock_quantity=2)

    response = admin_client.patch(
        f'/api/v1/products/{product.id}/stock/',
        {'quantity': 5, 'operation': 'subtract'},
        format='json',
    )

    assert response.status_code == 400
    product.refresh_from_db()
    assert product.stock_quantity == 2


def test_bulk_update_endpoint(admin_client, make_product):
    first = make_product()
    second = make_product()

    response = admin_client.patch(
        '/api/v1/products/bulk-update/',
        {'product_ids': [first.id, second.id], 'data': {'is_featured': True}},
        format='json',
    )

    assert response.status_code == 200
    assert response.json()['data']['updated_count'] == 2
    assert ProductModel.objects.filter(is_featured=True).count() == 2


def test_admin_only_product_endpoints(api_client):
    assert api_client.get('/api/v1/products/stats/').status_code in (401, 403)
    assert api_client.get('/api/v1/products/low-stock/').status_code in (401, 403)


def test_delete_product_is_soft(admin_client, api_client, make_product):
    product = make_product(slug='old-phone')

    assert admin_client.delete(f'/api/v1/products/{product.id}/').status_code == 200

    product.refresh_from_db()
    assert product.status == 'inactive'
    assert api_client.get('/api/v1/products/old-phone/').status_code == 404


def test_search_endpoint_falls_back_when_index_down(api_client, patched_search, es_client, make_product):
    product = make_product(name='Galaxy S24')
    es_client.search.side_effect = ESConnectionError('down')

    response = api_client.get('/api/v1/search/', {'q': 'galaxy'})

    assert response.status_code == 200
    data = response.json()['data']
    assert data['search_engine'] == 'mysql_fallback'
    assert [item['id'] for item in data['products']] == [product.id]


def test_search_endpoint_rejects_short_query(api_client, patched_search, es_client):
    response = api_client.get('/api/v1/search/', {'q': 'a'})

    assert response.status_code == 400
    es_client.search.assert_not_called()


def test_search_health_endpoint(api_client, patched_search, es_client):
    es_client.cluster.health.side_effect = ESConnectionError('down')

    response = api_client.get('/api/v1/search/health/')

    assert response.status_code == 200
    assert response.json()['data']['status'] == 'red'


def test_search_sync_requires_staff(api_client, admin_client, monkeypatch):
    sync_service = MagicMock()
    sync_service.sync_all.return_value = {'synced': 0, 'errors': [], 'total': 0}
    monkeypatch.setattr(search_views, 'search_service', SearchService(index=MagicMock(), sync_service=sync_service))

    assert api_client.post('/api/v1/search/sync/').status_code in (401, 403)

    response = admin_client.post('/api/v1/search/sync/')
    assert response.status_code == 200
    sync_service.sync_all.assert_called_once_with()


@pytest.mark.parametrize('data', [{'stock_quantity': -5}, {'price': 'abc'}, {'status': 'archived'}])
def test_bulk_update_rejects_invalid_values(admin_client, make_product, data):
    product = make_product(stock_quantity=3)

    response = admin_client.patch(
        '/api/v1/products/bulk-update/',
        {'product_ids': [product.id], 'data': data},
        format='json',
    )

    assert response.status_code == 400
    product.refresh_from_db()
    assert product.stock_quantity == 3
    assert product.status == 'active'


def test_bulk_update_ignores_non_bulk_fields(admin_client, make_product):
    product = make_product(name='Keep me')

    response = admin_client.patch(
        '/api/v1/products/bulk-update/',
        {'product_ids': [product.id], 'data': {'name': 'hijacked'}},
        format='json',
    )

    assert response.status_code == 400
    product.refresh_from_db()
    assert product.name == 'Keep me'


def test_product_list_accepts_full_filter_set(api_client, make_product):
    match = make_product(average_rating=4.6, view_count=300, tags=['5g', 'android'])
    make_product(average_rating=4.6, view_count=300, tags=['lte'])
    make_product(average_rating=3.0, view_count=300, tags=['5g'])
    make_product(average_rating=4.6, view_count=10, tags=['5g'])

    response = api_client.get('/api/v1/products/', {
        'category_slug': 'phones',
        'tags': '5g, android',
        'min_rating': '4',
        'view_count_min': '100',
    })

    assert response.status_code == 200
    assert [item['id'] for item in response.json()['data']['products']] == [match.id]
