"""
Search module Celery tasks.
"""
import logging

from celery import shared_task

logger = logging.getLogger(__name__)


@shared_task(name='search.process_sync_outbox')
def process_sync_outbox(batch_size: int = None) -> dict:
    """Drain pending search sync entries. Also run periodically by beat."""
    from .sync import index_sync_service

    return index_sync_service.process_pending(batch_size=batch_size)


@shared_task(name='search.sync_all_products')
def sync_all_products() -> dict:
    """Rebuild every active product document in one bulk request."""
    from .sync import index_sync_service
    from .exceptions import SearchIndexUnavailableError

    try:
        return index_sync_service.sync_all()
    except SearchIndexUnavailableError as e:
        logger.error(f"Full search sync failed: {e}")
        return {'synced': 0, 'errors': [str(e)], 'total': 0}
