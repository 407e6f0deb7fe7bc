"""
Search business logic services.
"""
import logging
from typing import Any, Dict, List, Optional, Union

from modules.products.models import ProductModel
from shared.infrastructure.cache.redis_cache import RedisCache
from .exceptions import SearchIndexUnavailableError
from .fallback import RelationalProductSearch
from .filters import SearchFilters, MIN_QUERY_LENGTH
from .indexer import ProductIndex
from .query_builder import (
    build_popular_terms_body,
    build_search_body,
    build_suggestion_body,
    parse_popular_terms_response,
    parse_search_response,
    parse_suggestion_response,
)
from .sync import IndexSyncService

logger = logging.getLogger(__name__)

ENGINE_INDEX = 'elasticsearch'
ENGINE_FALLBACK = 'mysql_fallback'

POPULAR_TERMS_TIMEOUT = 300
FALLBACK_SUGGESTION_LIMIT = 5


class SearchService:
    """Service for product search with a relational fallback."""

    def __init__(
        self,
        index: Optional[ProductIndex] = None,
        fallback: Optional[RelationalProductSearch] = None,
        sync_service: Optional[IndexSyncService] = None,
        cache: Optional[RedisCache] = None,
    ):
        self.index = index or ProductIndex()
        self.fallback = fallback or RelationalProductSearch()
        self.sync_service = sync_service or IndexSyncService(index=self.index)
        self.cache = cache or RedisCache(prefix='search')

    def _as_filters(self, filters: Union[SearchFilters, Dict[str, Any], None]) -> SearchFilters:
        if isinstance(filters, SearchFilters):
            return filters
        return SearchFilters.from_dict(filters or {})

    def _run(self, filters: SearchFilters) -> Dict[str, Any]:
        try:
            response = self.index.search(**build_search_body(filters))
        except SearchIndexUnavailableError as e:
            logger.warning(f"Index search failed, falling back to database: {e}")
            result = self.fallback.search(filters)
            result['search_engine'] = ENGINE_FALLBACK
            return result

        result = parse_search_response(response, filters)
        result['search_engine'] = ENGINE_INDEX
        return result

    def search_products(
        self,
        query: str,
        filters: Union[SearchFilters, Dict[str, Any], None] = None,
    ) -> Dict[str, Any]:
        """
        Full text product search.

        Args:
            query: Search text, at least two characters
            filters: Optional structured filters applied on top of the text

        Raises:
            ValidationError: on a missing or short query, or bad paging
        """
        filters = self._as_filters(filters)
        filters.query = (query or '').strip()
        filters.validate(require_query=True)
        return self._run(filters)

    def advanced_search(self, filters: Union[SearchFilters, Dict[str, Any], None] = None) -> Dict[str, Any]:
        """Structured search where the text query is optional."""
        filters = self._as_filters(filters)
        filters.validate()
        return self._run(filters)

    def filter_products(
        self,
        categories: Optional[List[int]] = None,
        price_min=None,
        price_max=None,
        rating_min: Optional[float] = None,
        in_stock_only: bool = False,
        on_sale_only: bool = False,
        featured_only: bool = False,
        tags: Optional[List[str]] = None,
        sort_by: str = 'relevance',
        sort_order: str = 'desc',
        page: int = 1,
        limit: int = 12,
    ) -> Dict[str, Any]:
        """Listing filter; a single entry in categories narrows to that category."""
        categories = categories or []
        filters = SearchFilters(
            category_id=categories[0] if len(categories) == 1 else None,
            min_price=price_min,
            max_price=price_max,
            min_rating=rating_min,
            in_stock_only=in_stock_only,
            on_sale_only=on_sale_only,
            is_featured=True if featured_only else None,
            tags=tags or [],
            sort_by=sort_by,
            sort_order=sort_order,
            page=page,
            limit=limit,
        )
        return self.advanced_search(filters)

    def get_search_suggestions(self, query: str, limit: int = 10) -> List[Dict[str, Any]]:
        """Autocomplete entries for a partial query."""
        query = (query or '').strip()
        if len(query) < MIN_QUERY_LENGTH:
            return []

        try:
            response = self.index.search(**build_suggestion_body(query, limit))
            return parse_suggestion_response(response)
        except SearchIndexUnavailableError as e:
            logger.warning(f"Index suggestions failed, falling back to database: {e}")

        products = (
            ProductModel.objects.active()
            .filter(name__icontains=query)
            .select_related('category')
            .order_by('-view_count', 'name')[:min(limit, FALLBACK_SUGGESTION_LIMIT)]
        )
        return [
            {
                'text': product.name,
                'type': 'product',
                'category': product.category.name,
                'slug': product.slug,
            }
            for product in products
        ]

    def get_popular_search_terms(self, limit: int = 20) -> Dict[str, List[Dict[str, Any]]]:
        """Categories and tags ranked by average product views, cached for five minutes."""
        def compute():
            response = self.index.search(**build_popular_terms_body(limit))
            return parse_popular_terms_response(response)

        try:
            return self.cache.get_or_set(f'popular_terms:{limit}', compute, timeout=POPULAR_TERMS_TIMEOUT)
        except SearchIndexUnavailableError as e:
            logger.warning(f"Popular search terms unavailable: {e}")
            return {'categories': [], 'tags': []}

    def get_search_health(self) -> Dict[str, Any]:
        """Cluster and index health along with sync outbox backlog."""
        outbox = self.sync_service.outbox_stats()
        try:
            health = self.index.health()
        except SearchIndexUnavailableError as e:
            return {'status': 'red', 'error': e.message, 'sync_outbox': outbox}

        health['sync_outbox'] = outbox
        return health

    def sync_all_products(self) -> Dict[str, Any]:
        """Re-index every active product. Admin operation."""
        result = self.sync_service.sync_all()
        return {
            'message': f"Synced {result['synced']} products to search index",
            **result,
        }
