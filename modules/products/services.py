"""
Products business logic services.
"""
import logging
import time
from typing import Any, Dict, List, Optional, Union

from dateutil.relativedelta import relativedelta
from django.db import transaction
from django.db.models import Avg, Count, F, Max, Min, Q
from django.utils import timezone
from django.utils.text import slugify

from modules.categories.exceptions import CategoryNotFoundError
from modules.categories.models import CategoryModel
from modules.search.fallback import RelationalProductSearch
from modules.search.filters import SearchFilters
from modules.search.models import SearchSyncOutboxModel
from modules.search.sync import IndexSyncService, index_sync_service
from shared.domain.exceptions import ValidationError
from shared.domain.lifecycle import LifecycleStatus, ensure_can_deactivate
from shared.interfaces.pagination import build_pagination, page_offset
from .exceptions import DuplicateSKUError, InvalidStockOperationError, ProductNotFoundError
from .models import ProductModel, ProductTagModel, ProductViewModel
from . import pricing

logger = logging.getLogger(__name__)

PRODUCT_FIELDS = (
    'name',
    'sku',
    'description',
    'short_description',
    'price',
    'sale_price',
    'stock_quantity',
    'featured_image',
    'gallery',
    'status',
    'is_featured',
    'meta_title',
    'meta_description',
)

BULK_UPDATE_FIELDS = frozenset({
    'status',
    'is_featured',
    'category_id',
    'price',
    'sale_price',
    'stock_quantity',
})

STOCK_OPERATIONS = ('set', 'add', 'subtract')

LOW_STOCK_THRESHOLD = 10
RELATED_PRODUCTS_LIMIT = 4


class ProductService:
    """Service for product operations."""

    def __init__(
        self,
        sync_service: Optional[IndexSyncService] = None,
        listing: Optional[RelationalProductSearch] = None,
    ):
        self.sync_service = sync_service or index_sync_service
        self.listing = listing or RelationalProductSearch()

    def get_product_by_id(self, product_id: int, active_only: bool = True) -> Optional[ProductModel]:
        """Get product by ID."""
        queryset = ProductModel.objects.with_details()
        if active_only:
            queryset = queryset.active()
        return queryset.filter(id=product_id).first()

    def get_product_by_slug(self, slug: str) -> Optional[ProductModel]:
        """Get active product by slug."""
        return ProductModel.objects.active().with_details().filter(slug=slug).first()

    def _require_product(self, product_id: int, active_only: bool = False) -> ProductModel:
        product = self.get_product_by_id(product_id, active_only=active_only)
        if not product:
            raise ProductNotFoundError(product_id=product_id)
        return product

    def _require_category(self, category_id: int) -> CategoryModel:
        category = CategoryModel.objects.filter(id=category_id, is_active=True).first()
        if not category:
            raise CategoryNotFoundError(category_id=category_id)
        return category

    def get_products(self, filters: Union[SearchFilters, Dict[str, Any], None] = None) -> Dict[str, Any]:
        """Filtered, sorted and paginated listing of active products."""
        if not isinstance(filters, SearchFilters):
            filters = SearchFilters.from_dict({'sort_by': 'created_at', **(filters or {})})
        filters.validate()
        return self.listing.search(filters)

    def get_products_by_category(
        self,
        slug: str,
        filters: Union[SearchFilters, Dict[str, Any], None] = None,
    ) -> Dict[str, Any]:
        """Listing restricted to one active category."""
        category = CategoryModel.objects.filter(slug=slug, is_active=True).first()
        if not category:
            raise CategoryNotFoundError(slug=slug)

        if not isinstance(filters, SearchFilters):
            filters = SearchFilters.from_dict({'sort_by': 'created_at', **(filters or {})})
        filters.category_id = category.id
        filters.category_slug = None

        result = self.get_products(filters)
        result['category'] = category
        return result

    def get_product_detail(self, identifier: str, view_data: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """
        Get a product by numeric id or slug with related products.

        Args:
            identifier: All-digit id, otherwise a slug
            view_data: Request metadata; when given a view is recorded

        Raises:
            ProductNotFoundError: if no active product matches
        """
        identifier = str(identifier)
        if identifier.isdigit():
            product = self.get_product_by_id(int(identifier))
        else:
            product = self.get_product_by_slug(identifier)
        if not product:
            raise ProductNotFoundError(product_id=identifier)

        if view_data is not None:
            self.track_product_view(product.id, view_data)
            product.refresh_from_db(fields=['view_count'])

        related = list(
            ProductModel.objects.active()
            .filter(category_id=product.category_id)
            .exclude(id=product.id)
            .select_related('category')
            .order_by('?')[:RELATED_PRODUCTS_LIMIT]
        )
        return {
            'product': product,
            'related_products': related,
        }

    def get_featured_products(self, limit: int = 8) -> List[ProductModel]:
        return list(
            ProductModel.objects.active().with_details()
            .filter(is_featured=True)
            .order_by('-created_at')[:limit]
        )

    def get_latest_products(self, limit: int = 8) -> List[ProductModel]:
        return list(ProductModel.objects.active().with_details().order_by('-created_at')[:limit])

    def get_popular_products(self, limit: int = 10) -> List[ProductModel]:
        """Most viewed products, ties broken by purchases."""
        return list(
            ProductModel.objects.active().with_details()
            .order_by('-view_count', '-purchase_count', '-id')[:limit]
        )

    def get_trending_products(self, limit: int = 10, days: int = 7) -> List[ProductModel]:
        """Products with the most views in the last `days` days."""
        since = timezone.now() - relativedelta(days=days)
        return list(
            ProductModel.objects.active().with_details()
            .annotate(recent_views=Count('views', filter=Q(views__created_at__gte=since)))
            .filter(recent_views__gt=0)
            .order_by('-recent_views', '-purchase_count', '-id')[:limit]
        )

    def get_low_stock_products(
        self,
        threshold: int = LOW_STOCK_THRESHOLD,
        page: int = 1,
        limit: int = 20,
    ) -> Dict[str, Any]:
        """Active products at or below the stock threshold, lowest first."""
        queryset = ProductModel.objects.active().filter(stock_quantity__lte=threshold)
        total = queryset.count()
        offset = page_offset(page, limit)
        products = list(
            queryset.select_related('category')
            .order_by('stock_quantity', 'name')[offset:offset + limit]
        )
        return {
            'products': products,
            'pagination': build_pagination(page, limit, total),
            'threshold': threshold,
        }

    def get_product_stats(self) -> Dict[str, Any]:
        """Catalog counters, price aggregates and per-category distribution."""
        products = ProductModel.objects.all()
        active = products.filter(status=LifecycleStatus.ACTIVE.value)

        by_status = {
            row['status']: row['total']
            for row in products.values('status').annotate(total=Count('id'))
        }
        prices = active.aggregate(
            average_price=Avg('price'),
            min_price=Min('price'),
            max_price=Max('price'),
        )
        categories = (
            CategoryModel.objects.filter(is_active=True)
            .annotate(product_count=Count(
                'products',
                filter=Q(products__status=LifecycleStatus.ACTIVE.value),
            ))
            .filter(product_count__gt=0)
            .order_by('-product_count', 'name')
            .values('id', 'name', 'slug', 'product_count')
        )
        recent = active.order_by('-created_at').values('id', 'name', 'slug', 'created_at')[:5]

        return {
            'total_products': products.count(),
            'active_products': by_status.get(LifecycleStatus.ACTIVE.value, 0),
            'inactive_products': by_status.get(LifecycleStatus.INACTIVE.value, 0),
            'draft_products': by_status.get(LifecycleStatus.DRAFT.value, 0),
            'featured_products': active.filter(is_featured=True).count(),
            'out_of_stock': active.filter(stock_quantity=0).count(),
            'low_stock': active.filter(stock_quantity__gt=0, stock_quantity__lte=LOW_STOCK_THRESHOLD).count(),
            'price_stats': {
                key: float(value) if value is not None else None
                for key, value in prices.items()
            },
            'category_distribution': list(categories),
            'recent_products': list(recent),
        }

    def _unique_slug(self, name: str, exclude_id: Optional[int] = None) -> str:
        slug = slugify(name) or 'product'
        taken = ProductModel.objects.filter(slug=slug)
        if exclude_id is not None:
            taken = taken.exclude(id=exclude_id)
        if taken.exists():
            slug = f"{slug}-{int(time.time() * 1000)}"
        return slug

    def _check_sku(self, sku: Optional[str], exclude_id: Optional[int] = None) -> None:
        if not sku:
            return
        taken = ProductModel.objects.filter(sku=sku)
        if exclude_id is not None:
            taken = taken.exclude(id=exclude_id)
        if taken.exists():
            raise DuplicateSKUError(sku=sku)

    def _check_status(self, status: Optional[str]) -> None:
        if status is not None and status not in {member.value for member in LifecycleStatus}:
            raise ValidationError(f"Invalid status '{status}'", field='status')

    def _warn_on_sale_price(self, product_id, price, sale_price) -> None:
        if sale_price is not None and price is not None and not pricing.is_on_sale(price, sale_price):
            logger.warning(
                f"Product {product_id}: sale price {sale_price} is not below list price {price}; "
                f"treating as not on sale"
            )

    def _replace_tags(self, product: ProductModel, tags: List[str]) -> None:
        product.tags.all().delete()
        names = sorted({tag.strip() for tag in tags if tag and tag.strip()})
        ProductTagModel.objects.bulk_create(
            [ProductTagModel(product=product, tag_name=name) for name in names]
        )

    @transaction.atomic
    def create_product(self, data: Dict[str, Any]) -> ProductModel:
        """
        Create a product with its tags.

        Raises:
            CategoryNotFoundError: if the category does not exist
            DuplicateSKUError: if the SKU is taken
        """
        category = self._require_category(data['category_id'])
        self._check_sku(data.get('sku'))
        self._check_status(data.get('status'))

        fields = {key: data[key] for key in PRODUCT_FIELDS if data.get(key) is not None}
        fields['sku'] = data.get('sku') or None
        product = ProductModel.objects.create(
            slug=self._unique_slug(data['name']),
            category=category,
            **fields,
        )
        if data.get('tags'):
            self._replace_tags(product, data['tags'])

        self._warn_on_sale_price(product.id, product.price, product.sale_price)
        self.sync_service.enqueue(product.id)
        logger.info(f"Created product: {product.name} ({product.id})")
        return self.get_product_by_id(product.id, active_only=False)

    @transaction.atomic
    def update_product(self, product_id: int, data: Dict[str, Any]) -> ProductModel:
        """
        Update a product. A new name re-derives the slug; a tag list replaces the tags.
        """
        product = self._require_product(product_id)

        if 'sku' in data and data['sku'] != product.sku:
            self._check_sku(data['sku'], exclude_id=product.id)
        if data.get('category_id') is not None:
            product.category = self._require_category(data['category_id'])
        self._check_status(data.get('status'))

        if data.get('name') and data['name'] != product.name:
            product.slug = self._unique_slug(data['name'], exclude_id=product.id)

        for key in PRODUCT_FIELDS:
            if key in data:
                setattr(product, key, data[key])
        if 'sku' in data:
            product.sku = data['sku'] or None

        product.save()
        if 'tags' in data and data['tags'] is not None:
            self._replace_tags(product, data['tags'])

        self._warn_on_sale_price(product.id, product.price, product.sale_price)
        self.sync_service.enqueue(product.id)
        logger.info(f"Updated product: {product.name} ({product.id})")
        return self.get_product_by_id(product.id, active_only=False)

    @transaction.atomic
    def delete_product(self, product_id: int) -> bool:
        """Soft delete: the product becomes inactive and leaves the search index."""
        product = self._require_product(product_id)
        # No catalog table references products yet.
        ensure_can_deactivate('Product', product_id, {})

        product.status = LifecycleStatus.INACTIVE.value
        product.save(update_fields=['status', 'updated_at'])
        self.sync_service.enqueue(product.id, action=SearchSyncOutboxModel.ACTION_DELETE)
        logger.info(f"Deleted product: {product_id}")
        return True

    @transaction.atomic
    def update_stock(self, product_id: int, quantity: int, operation: str = 'set') -> ProductModel:
        """
        Set, add to or subtract from the stock quantity.

        Raises:
            ValidationError: on an unknown operation
            InvalidStockOperationError: if the result would be negative
        """
        if operation not in STOCK_OPERATIONS:
            raise ValidationError(
                f"Operation must be one of {', '.join(STOCK_OPERATIONS)}",
                field='operation',
            )

        product = ProductModel.objects.select_for_update().filter(id=product_id).first()
        if not product:
            raise ProductNotFoundError(product_id=product_id)

        if operation == 'set':
            new_quantity = quantity
        elif operation == 'add':
            new_quantity = product.stock_quantity + quantity
        else:
            new_quantity = product.stock_quantity - quantity

        if new_quantity < 0:
            raise InvalidStockOperationError(
                product_id=product_id,
                current=product.stock_quantity,
                requested=quantity if operation != 'subtract' else -quantity,
            )

        product.stock_quantity = new_quantity
        product.save(update_fields=['stock_quantity', 'updated_at'])
        self.sync_service.enqueue(product.id)
        logger.info(f"Stock for product {product_id} {operation} {quantity} -> {new_quantity}")
        return product

    @transaction.atomic
    def bulk_update_products(self, product_ids: List[int], data: Dict[str, Any]) -> Dict[str, Any]:
        """
        Apply the same whitelisted column values to many products.

        Raises:
            ValidationError: on an empty id list or no updatable fields
            ProductNotFoundError: if any id does not exist
        """
        if not product_ids:
            raise ValidationError("Product IDs are required", field='product_ids')

        updates = {key: value for key, value in data.items() if key in BULK_UPDATE_FIELDS}
        if not updates:
            raise ValidationError("No fields to update", field='data')

        unique_ids = sorted(set(product_ids))
        found = set(ProductModel.objects.filter(id__in=unique_ids).values_list('id', flat=True))
        missing = [product_id for product_id in unique_ids if product_id not in found]
        if missing:
            raise ProductNotFoundError(product_id=', '.join(str(product_id) for product_id in missing))

        self._check_status(updates.get('status'))
        if updates.get('category_id') is not None:
            self._require_category(updates['category_id'])

        updated_count = ProductModel.objects.filter(id__in=unique_ids).update(
            updated_at=timezone.now(),
            **updates,
        )
        if 'price' in updates or 'sale_price' in updates:
            rows = ProductModel.objects.filter(id__in=unique_ids).values_list('id', 'price', 'sale_price')
            for product_id, price, sale_price in rows:
                self._warn_on_sale_price(product_id, price, sale_price)

        action = (
            SearchSyncOutboxModel.ACTION_DELETE
            if updates.get('status') not in (None, LifecycleStatus.ACTIVE.value)
            else SearchSyncOutboxModel.ACTION_INDEX
        )
        for product_id in unique_ids:
            self.sync_service.enqueue(product_id, action=action)

        logger.info(f"Bulk updated {updated_count} products: {sorted(updates)}")
        return {
            'updated_count': updated_count,
            'message': f"{updated_count} products updated successfully",
        }

    @transaction.atomic
    def track_product_view(self, product_id: int, view_data: Optional[Dict[str, Any]] = None) -> bool:
        """Record a view row and bump the product's view counter."""
        if not ProductModel.objects.filter(id=product_id).exists():
            raise ProductNotFoundError(product_id=product_id)

        view_data = view_data or {}
        ProductViewModel.objects.create(
            product_id=product_id,
            user_id=view_data.get('user_id'),
            ip_address=view_data.get('ip_address') or None,
            user_agent=(view_data.get('user_agent') or '')[:500],
            referer=(view_data.get('referer') or '')[:500],
            session_id=(view_data.get('session_id') or '')[:100],
        )
        ProductModel.objects.filter(id=product_id).update(view_count=F('view_count') + 1)
        self.sync_service.enqueue(product_id)
        return True
