"""
Relational product search used when the search index is unavailable.
"""
from typing import Any, Dict

from django.db.models import Case, DecimalField, F, Q, QuerySet, When

from modules.products.models import ProductModel
from shared.interfaces.pagination import build_pagination
from .documents import build_search_document
from .filters import RELEVANCE, SearchFilters

ORDERING_FIELDS = {
    'name.keyword': 'name',
    'final_price': 'effective_price',
    'created_at': 'created_at',
    'updated_at': 'updated_at',
    'view_count': 'view_count',
    'purchase_count': 'purchase_count',
    'average_rating': 'average_rating',
}


def annotate_effective_price(queryset: QuerySet) -> QuerySet:
    """Annotate the sale price when it undercuts the list price, else the list price."""
    return queryset.annotate(
        effective_price=Case(
            When(
                sale_price__isnull=False,
                sale_price__lt=F('price'),
                then=F('sale_price'),
            ),
            default=F('price'),
            output_field=DecimalField(max_digits=12, decimal_places=2),
        )
    )


class RelationalProductSearch:
    """Runs SearchFilters against the catalog tables with the ORM."""

    def filter_queryset(self, filters: SearchFilters) -> QuerySet:
        queryset = annotate_effective_price(ProductModel.objects.active())

        if filters.has_query:
            queryset = queryset.filter(
                Q(name__icontains=filters.query)
                | Q(description__icontains=filters.query)
                | Q(short_description__icontains=filters.query)
            )
        if filters.category_id is not None:
            queryset = queryset.filter(category_id=filters.category_id)
        if filters.category_slug:
            queryset = queryset.filter(category__slug=filters.category_slug)
        if filters.min_price is not None:
            queryset = queryset.filter(effective_price__gte=filters.min_price)
        if filters.max_price is not None:
            queryset = queryset.filter(effective_price__lte=filters.max_price)
        if filters.is_featured is not None:
            queryset = queryset.filter(is_featured=filters.is_featured)
        if filters.tags:
            queryset = queryset.filter(tags__tag_name__in=filters.tags).distinct()
        if filters.min_rating is not None:
            queryset = queryset.filter(average_rating__gte=filters.min_rating)
        if filters.in_stock_only:
            queryset = queryset.filter(stock_quantity__gt=0)
        if filters.view_count_min is not None:
            queryset = queryset.filter(view_count__gte=filters.view_count_min)
        if filters.on_sale_only:
            queryset = queryset.filter(sale_price__isnull=False, sale_price__lt=F('price'))

        return queryset

    def order_queryset(self, queryset: QuerySet, filters: SearchFilters) -> QuerySet:
        field = filters.sort_field
        if field == RELEVANCE:
            return queryset.order_by('-created_at', '-id')
        column = ORDERING_FIELDS[field]
        prefix = '' if filters.sort_direction == 'asc' else '-'
        return queryset.order_by(f'{prefix}{column}', '-id')

    def search(self, filters: SearchFilters) -> Dict[str, Any]:
        """
        Run a filtered, sorted and paginated product listing.

        Returns the same products/pagination shape as the index search,
        without facets, suggestions or boosting.
        """
        queryset = self.filter_queryset(filters)
        total = queryset.count()
        page = self.order_queryset(queryset, filters).select_related('category').prefetch_related('tags')
        products = page[filters.offset:filters.offset + filters.limit]

        return {
            'products': [build_search_document(product) for product in products],
            'pagination': build_pagination(filters.page, filters.limit, total),
        }


relational_product_search = RelationalProductSearch()
