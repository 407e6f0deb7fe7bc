"""
Gateway to the product search index.

Every call goes through `_call`, which turns transport and API failures
into SearchIndexUnavailableError so callers only ever handle one error type.
"""
import logging
from typing import Any, Dict, Iterable, List, Optional

from elasticsearch import ApiError, NotFoundError, TransportError

from shared.infrastructure.search import elasticsearch_client, get_search_client
from .documents import PRODUCT_INDEX_MAPPINGS, PRODUCT_INDEX_SETTINGS
from .exceptions import SearchIndexUnavailableError

logger = logging.getLogger(__name__)


def _body(response):
    """Plain dict body of a client response."""
    return getattr(response, 'body', response)


def describe_error(error) -> str:
    """
    Readable cause of a client failure.

    Transport errors keep their message and the underlying errors; API errors
    carry the HTTP status reported by the cluster.
    """
    if isinstance(error, ApiError):
        status = getattr(error.meta, 'status', None)
        return f"{error.message} (status {status})" if status else str(error.message)
    parts = [str(getattr(error, 'message', error))]
    parts.extend(str(cause) for cause in getattr(error, 'errors', ()) or ())
    return ': '.join(parts)


class ProductIndex:
    """Product index operations on top of an Elasticsearch client."""

    def __init__(self, client=None, index_name: Optional[str] = None):
        self._client = client
        self.index_name = index_name or elasticsearch_client.product_index

    @property
    def client(self):
        if self._client is None:
            self._client = get_search_client()
        return self._client

    def _call(self, operation: str, func, *args, **kwargs):
        try:
            return func(*args, **kwargs)
        except (ApiError, TransportError) as e:
            reason = describe_error(e)
            logger.warning(f"Search index {operation} failed on '{self.index_name}': {reason}")
            raise SearchIndexUnavailableError(
                message=f"Search index {operation} failed: {reason}",
                operation=operation,
            ) from e

    def ping(self) -> bool:
        return bool(self._call('ping', self.client.ping))

    def exists(self) -> bool:
        return bool(self._call('exists', self.client.indices.exists, index=self.index_name))

    def create(self) -> bool:
        """Create the index with the catalog analyzer and mappings unless it exists."""
        if self.exists():
            return False
        self._call(
            'create',
            self.client.indices.create,
            index=self.index_name,
            settings=PRODUCT_INDEX_SETTINGS,
            mappings=PRODUCT_INDEX_MAPPINGS,
        )
        logger.info(f"Created search index '{self.index_name}'")
        return True

    def index_document(self, document: Dict[str, Any]) -> None:
        self._call(
            'index',
            self.client.index,
            index=self.index_name,
            id=str(document['id']),
            document=document,
        )

    def bulk_index(self, documents: Iterable[Dict[str, Any]]) -> Dict[str, Any]:
        """
        Index documents in one bulk request.

        Returns:
            {'indexed': <count>, 'errors': [{'id', 'error'}, ...]}
        """
        operations: List[Dict[str, Any]] = []
        for document in documents:
            operations.append({'index': {'_index': self.index_name, '_id': str(document['id'])}})
            operations.append(document)

        if not operations:
            return {'indexed': 0, 'errors': []}

        response = _body(self._call('bulk', self.client.bulk, operations=operations, refresh=True))

        errors = []
        indexed = 0
        for item in response.get('items', []):
            result = item.get('index', {})
            if result.get('error'):
                errors.append({'id': result.get('_id'), 'error': result['error']})
            else:
                indexed += 1
        return {'indexed': indexed, 'errors': errors}

    def delete_document(self, product_id) -> bool:
        """Remove a document. A missing document counts as already removed."""
        try:
            self.client.delete(index=self.index_name, id=str(product_id))
        except NotFoundError:
            return False
        except (ApiError, TransportError) as e:
            reason = describe_error(e)
            logger.warning(f"Search index delete failed for product {product_id}: {reason}")
            raise SearchIndexUnavailableError(
                message=f"Search index delete failed: {reason}",
                operation='delete',
            ) from e
        return True

    def search(self, **body):
        return _body(self._call('search', self.client.search, index=self.index_name, **body))

    def health(self) -> Dict[str, Any]:
        """Cluster health with document count and size of the product index."""
        health = _body(self._call('health', self.client.cluster.health))
        stats = _body(self._call('stats', self.client.indices.stats, index=self.index_name))
        index_stats = (stats.get('indices') or {}).get(self.index_name, {}).get('total', {})
        return {
            'status': health.get('status'),
            'cluster_name': health.get('cluster_name'),
            'number_of_nodes': health.get('number_of_nodes'),
            'active_shards': health.get('active_shards'),
            'index_health': {
                'total_docs': index_stats.get('docs', {}).get('count', 0),
                'index_size': index_stats.get('store', {}).get('size_in_bytes', 0),
            },
        }
