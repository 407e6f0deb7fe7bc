"""
Keeps the search index in step with the catalog.

Catalog writes call `enqueue`, which stores a SearchSyncOutboxModel row in
the caller's transaction and schedules a drain once it commits. The drain
re-reads each product, so replaying an entry is always safe.
"""
import logging
from collections import OrderedDict
from typing import Any, Dict, Optional

from django.conf import settings
from django.db import transaction
from django.utils import timezone

from modules.products.models import ProductModel
from .documents import build_search_document
from .exceptions import SearchIndexUnavailableError
from .indexer import ProductIndex
from .models import SearchSyncOutboxModel

logger = logging.getLogger(__name__)


def _schedule_drain():
    from .tasks import process_sync_outbox

    try:
        process_sync_outbox.delay()
    except Exception as e:
        # Beat picks up pending rows on its next run.
        logger.warning(f"Could not schedule search sync drain: {e}")


class IndexSyncService:
    """Service for pushing catalog state into the search index."""

    def __init__(self, index: Optional[ProductIndex] = None):
        self._index = index

    @property
    def index(self) -> ProductIndex:
        if self._index is None:
            self._index = ProductIndex()
        return self._index

    def sync_product(self, product_id: int) -> Dict[str, str]:
        """
        Index an active product, or remove it when missing or not active.

        Raises:
            SearchIndexUnavailableError: if the index call fails
        """
        product = (
            ProductModel.objects.active()
            .with_details()
            .filter(id=product_id)
            .first()
        )
        if product is None:
            self.index.delete_document(product_id)
            logger.info(f"Removed product {product_id} from search index")
            return {'action': 'deleted'}

        self.index.index_document(build_search_document(product))
        logger.info(f"Indexed product {product_id}")
        return {'action': 'indexed'}

    def remove_product(self, product_id: int) -> Dict[str, str]:
        self.index.delete_document(product_id)
        logger.info(f"Removed product {product_id} from search index")
        return {'action': 'deleted'}

    def sync_all(self) -> Dict[str, Any]:
        """Bulk index every active product in a single request."""
        self.index.create()
        products = list(ProductModel.objects.active().with_details().order_by('id'))
        if not products:
            logger.info("No products found to sync")
            return {'synced': 0, 'errors': [], 'total': 0}

        result = self.index.bulk_index(build_search_document(product) for product in products)
        if result['errors']:
            logger.error(f"Bulk sync finished with {len(result['errors'])} errors: {result['errors'][:5]}")
        logger.info(f"Bulk sync completed: {result['indexed']} of {len(products)} products indexed")

        return {
            'synced': result['indexed'],
            'errors': result['errors'],
            'total': len(products),
        }

    def enqueue(self, product_id: int, action: str = SearchSyncOutboxModel.ACTION_INDEX) -> SearchSyncOutboxModel:
        """Record a sync intent and drain the outbox after the surrounding transaction commits."""
        entry = SearchSyncOutboxModel.objects.create(product_id=product_id, action=action)
        transaction.on_commit(_schedule_drain, robust=True)
        return entry

    def process_pending(self, batch_size: Optional[int] = None) -> Dict[str, int]:
        """
        Drain pending outbox entries.

        Entries for the same product are applied once, using the latest
        action. A failed entry stays pending until it has been tried
        SEARCH_SYNC['MAX_ATTEMPTS'] times, then it is marked failed.
        """
        config = settings.SEARCH_SYNC
        batch_size = batch_size or config['BATCH_SIZE']
        max_attempts = config['MAX_ATTEMPTS']

        entries = list(
            SearchSyncOutboxModel.objects
            .filter(status=SearchSyncOutboxModel.STATUS_PENDING)
            .order_by('id')[:batch_size]
        )
        by_product = OrderedDict()
        for entry in entries:
            by_product.setdefault(entry.product_id, []).append(entry)

        stats = {'processed': 0, 'retrying': 0, 'failed': 0}
        for product_id, product_entries in by_product.items():
            latest = product_entries[-1]
            try:
                if latest.action == SearchSyncOutboxModel.ACTION_DELETE:
                    self.remove_product(product_id)
                else:
                    self.sync_product(product_id)
            except SearchIndexUnavailableError as e:
                outcome = self._record_failure(product_entries, str(e), max_attempts)
                stats[outcome] += len(product_entries)
                continue

            SearchSyncOutboxModel.objects.filter(
                id__in=[entry.id for entry in product_entries]
            ).update(
                status=SearchSyncOutboxModel.STATUS_DONE,
                processed_at=timezone.now(),
                last_error='',
            )
            stats['processed'] += len(product_entries)

        if entries:
            logger.info(
                f"Search sync drain: {stats['processed']} done, "
                f"{stats['retrying']} retrying, {stats['failed']} failed"
            )
        return stats

    def _record_failure(self, entries, error: str, max_attempts: int) -> str:
        attempts = max(entry.attempts for entry in entries) + 1
        exhausted = attempts >= max_attempts
        SearchSyncOutboxModel.objects.filter(
            id__in=[entry.id for entry in entries]
        ).update(
            attempts=attempts,
            last_error=error[:2000],
            status=SearchSyncOutboxModel.STATUS_FAILED if exhausted else SearchSyncOutboxModel.STATUS_PENDING,
            processed_at=timezone.now() if exhausted else None,
        )
        product_id = entries[0].product_id
        if exhausted:
            logger.error(f"Giving up on search sync for product {product_id} after {attempts} attempts: {error}")
            return 'failed'
        logger.warning(f"Search sync for product {product_id} failed (attempt {attempts}/{max_attempts}): {error}")
        return 'retrying'

    def outbox_stats(self) -> Dict[str, Any]:
        """Pending and failed counts plus the age of the oldest pending entry."""
        pending = SearchSyncOutboxModel.objects.filter(status=SearchSyncOutboxModel.STATUS_PENDING)
        oldest = pending.order_by('created_at').values_list('created_at', flat=True).first()
        return {
            'pending': pending.count(),
            'failed': SearchSyncOutboxModel.objects.filter(status=SearchSyncOutboxModel.STATUS_FAILED).count(),
            'oldest_pending_seconds': int((timezone.now() - oldest).total_seconds()) if oldest else 0,
        }


index_sync_service = IndexSyncService()
