from unittest.mock import MagicMock

import pytest
from elasticsearch import ConnectionError as ESConnectionError

from modules.search.services import SearchService
from shared.domain.exceptions import ValidationError
from shared.infrastructure.cache.redis_cache import RedisCache

pytestmark = pytest.mark.django_db


EMPTY_RESPONSE = {
    'took': 3,
    'timed_out': False,
    'hits': {'total': {'value': 0, 'relation': 'eq'}, 'hits': []},
    'aggregations': {
        'categories': {'buckets': []},
        'price_stats': {'count': 0, 'min': None, 'max': None, 'avg': None, 'sum': 0},
        'avg_rating': {'value': None},
    },
}


@pytest.fixture
def service(product_index):
    return SearchService(index=product_index, cache=RedisCache(prefix='test-search'))


def test_search_uses_index_when_available(service, es_client):
    es_client.search.return_value = EMPTY_RESPONSE

    result = service.search_products('phone', {'limit': 5})

    assert result['search_engine'] == 'elasticsearch'
    assert result['query_info']['query'] == 'phone'
    assert es_client.search.call_args.kwargs['index'] == 'test_products'
    assert es_client.search.call_args.kwargs['size'] == 5


def test_search_falls_back_to_database_when_index_is_down(service, es_client, make_product):
    product = make_product(name='Phone Max')
    make_product(name='Tablet')
    es_client.search.side_effect = ESConnectionError('down')

    result = service.search_products('phone')

    assert result['search_engine'] == 'mysql_fallback'
    assert [item['id'] for item in result['products']] == [product.id]
    assert result['pagination']['total_records'] == 1


@pytest.mark.parametrize('query', ['', ' ', 'a'])
def test_search_rejects_short_queries_before_touching_stores(service, es_client, query):
    with pytest.raises(ValidationError):
        service.search_products(query)
    es_client.search.assert_not_called()


def test_advanced_search_allows_missing_query(service, es_client):
    es_client.search.return_value = EMPTY_RESPONSE

    result = service.advanced_search({'category_id': 1, 'sort_by': 'price'})

    assert result['search_engine'] == 'elasticsearch'
    assert es_client.search.call_args.kwargs['sort'][0] == {'final_price': {'order': 'desc'}}


def test_filter_products_maps_listing_options(service, es_client):
    es_client.search.return_value = EMPTY_RESPONSE

    service.filter_products(categories=[4], price_min=10, featured_only=True, rating_min=3.5)

    clauses = es_client.search.call_args.kwargs['query']['bool']['filter']
    assert {'term': {'category_id': 4}} in clauses
    assert {'term': {'is_featured': True}} in clauses
    assert {'range': {'final_price': {'gte': 10.0}}} in clauses
    assert {'range': {'average_rating': {'gte': 3.5}}} in clauses
    assert es_client.search.call_args.kwargs['size'] == 12


def test_suggestions_short_query_returns_empty(service, es_client):
    assert service.get_search_suggestions('a') == []
    es_client.search.assert_not_called()


def test_suggestions_fall_back_to_product_names(service, es_client, make_product):
    for index in range(7):
        make_product(name=f'Phone {index}')
    es_client.search.side_effect = ESConnectionError('down')

    suggestions = service.get_search_suggestions('phone', limit=10)

    assert len(suggestions) == 5
    assert all(item['type'] == 'product' for item in suggestions)
    assert suggestions[0]['category'] == 'Phones'


def test_popular_terms_are_cached(service, es_client):
    es_client.search.return_value = {
        'aggregations': {
            'popular_categories': {'buckets': [{'key': 'Phones', 'doc_count': 3}]},
            'popular_tags': {'buckets': []},
        },
    }

    first = service.get_popular_search_terms(limit=5)
    second = service.get_popular_search_terms(limit=5)

    assert first == second == {'categories': [{'key': 'Phones', 'doc_count': 3}], 'tags': []}
    assert es_client.search.call_count == 1


def test_popular_terms_empty_on_failure(service, es_client):
    es_client.search.side_effect = ESConnectionError('down')

    assert service.get_popular_search_terms(limit=3) == {'categories': [], 'tags': []}


def test_health_reports_index_and_outbox(service, es_client):
    es_client.cluster.health.return_value = {
        'status': 'green',
        'cluster_name': 'catalog',
        'number_of_nodes': 1,
        'active_shards': 1,
    }
    es_client.indices.stats.return_value = {
        'indices': {'test_products': {'total': {'docs': {'count': 12}, 'store': {'size_in_bytes': 2048}}}},
    }

    health = service.get_search_health()

    assert health['status'] == 'green'
    assert health['index_health'] == {'total_docs': 12, 'index_size': 2048}
    assert health['sync_outbox']['pending'] == 0


def test_health_is_red_when_cluster_unreachable(service, es_client):
    es_client.cluster.health.side_effect = ESConnectionError('down')

    health = service.get_search_health()

    assert health['status'] == 'red'
    assert 'down' in health['error']


def test_sync_all_products_summarises_result(product_index, es_client, make_product):
    sync_service = MagicMock()
    sync_service.sync_all.return_value = {'synced': 3, 'errors': [], 'total': 3}
    service = SearchService(index=product_index, sync_service=sync_service)

    result = service.sync_all_products()

    assert result['message'] == 'Synced 3 products to search index'
    assert result['synced'] == 3
