from unittest.mock import MagicMock

import pytest
from elasticsearch import ApiError, ConnectionError as ESConnectionError, NotFoundError

from modules.search.exceptions import SearchIndexUnavailableError
from modules.search.indexer import describe_error
from modules.search.models import SearchSyncOutboxModel
from modules.search.sync import IndexSyncService

pytestmark = pytest.mark.django_db


@pytest.fixture
def sync_service(product_index):
    return IndexSyncService(index=product_index)


def test_sync_product_indexes_active_product(sync_service, es_client, make_product):
    product = make_product(name='Galaxy S24', tags=['5g'], sale_price=800000)

    assert sync_service.sync_product(product.id) == {'action': 'indexed'}

    kwargs = es_client.index.call_args.kwargs
    assert kwargs['index'] == 'test_products'
    assert kwargs['id'] == str(product.id)
    document = kwargs['document']
    assert document['name'] == 'Galaxy S24'
    assert document['category_name'] == 'Phones'
    assert document['tags'] == ['5g']
    assert document['final_price'] == 800000.0
    assert document['discount_percentage'] == 20


def test_sync_product_removes_inactive_product(sync_service, es_client, make_product):
    product = make_product(status='inactive')

    assert sync_service.sync_product(product.id) == {'action': 'deleted'}
    es_client.delete.assert_called_once_with(index='test_products', id=str(product.id))
    es_client.index.assert_not_called()


def test_remove_product_treats_missing_document_as_success(sync_service, es_client):
    es_client.delete.side_effect = NotFoundError('not found', MagicMock(status=404), {})

    assert sync_service.remove_product(42) == {'action': 'deleted'}


def test_sync_all_reports_bulk_errors(sync_service, es_client, make_product):
    first = make_product()
    second = make_product()
    make_product(status='draft')
    es_client.indices.exists.return_value = True
    es_client.bulk.return_value = {
        'items': [
            {'index': {'_id': str(first.id), 'status': 201}},
            {'index': {'_id': str(second.id), 'status': 400, 'error': {'type': 'mapper_parsing_exception'}}},
        ],
    }

    result = sync_service.sync_all()

    assert result['synced'] == 1
    assert result['total'] == 2
    assert result['errors'] == [{'id': str(second.id), 'error': {'type': 'mapper_parsing_exception'}}]
    operations = es_client.bulk.call_args.kwargs['operations']
    assert len(operations) == 4


def test_enqueue_schedules_drain_after_commit(sync_service, django_capture_on_commit_callbacks):
    with django_capture_on_commit_callbacks() as callbacks:
        entry = sync_service.enqueue(7)

    assert entry.status == SearchSyncOutboxModel.STATUS_PENDING
    assert len(callbacks) == 1


def test_process_pending_marks_entries_done(sync_service, es_client, make_product):
    product = make_product()
    sync_service.enqueue(product.id)
    sync_service.enqueue(product.id)

    stats = sync_service.process_pending()

    assert stats == {'processed': 2, 'retrying': 0, 'failed': 0}
    assert es_client.index.call_count == 1
    assert not SearchSyncOutboxModel.objects.filter(status=SearchSyncOutboxModel.STATUS_PENDING).exists()


def test_process_pending_retries_then_gives_up(sync_service, es_client, make_product, settings):
    settings.SEARCH_SYNC = {**settings.SEARCH_SYNC, 'MAX_ATTEMPTS': 2}
    product = make_product()
    sync_service.enqueue(product.id)
    es_client.index.side_effect = ESConnectionError('connection refused')

    assert sync_service.process_pending() == {'processed': 0, 'retrying': 1, 'failed': 0}
    entry = SearchSyncOutboxModel.objects.get()
    assert entry.status == SearchSyncOutboxModel.STATUS_PENDING
    assert entry.attempts == 1
    assert 'connection refused' in entry.last_error

    assert sync_service.process_pending() == {'processed': 0, 'retrying': 0, 'failed': 1}
    entry.refresh_from_db()
    assert entry.status == SearchSyncOutboxModel.STATUS_FAILED
    assert entry.attempts == 2


def test_outbox_stats_reports_backlog(sync_service):
    sync_service.enqueue(1)
    SearchSyncOutboxModel.objects.create(product_id=2, status=SearchSyncOutboxModel.STATUS_FAILED)

    stats = sync_service.outbox_stats()

    assert stats['pending'] == 1
    assert stats['failed'] == 1
    assert stats['oldest_pending_seconds'] >= 0


def test_index_failures_keep_the_transport_cause(product_index, es_client):
    es_client.search.side_effect = ESConnectionError('connection refused')

    with pytest.raises(SearchIndexUnavailableError) as excinfo:
        product_index.search(query={'match_all': {}})

    assert excinfo.value.message == 'Search index search failed: connection refused'
    assert excinfo.value.operation == 'search'


def test_api_errors_report_cluster_status():
    error = ApiError('index_not_found_exception', MagicMock(status=404), {})

    assert describe_error(error) == 'index_not_found_exception (status 404)'
