"""
Categories business logic services.
"""
import logging
from typing import List, Optional, Dict, Any

from django.db import transaction
from django.db.models import Count, Q, QuerySet
from django.utils.text import slugify

from modules.search.sync import IndexSyncService, index_sync_service
from shared.domain.lifecycle import LifecycleStatus, ensure_can_deactivate
from shared.interfaces.pagination import build_pagination, page_offset
from .models import CategoryModel
from .exceptions import (
    CategoryNotFoundError,
    CategoryAlreadyExistsError,
    InvalidCategoryHierarchyError,
)

logger = logging.getLogger(__name__)


class CategoryService:
    """Service for category operations."""

    def __init__(self, sync_service: Optional[IndexSyncService] = None):
        self.sync_service = sync_service or index_sync_service

    def _with_product_count(self, queryset: QuerySet) -> QuerySet:
        return queryset.annotate(
            product_count=Count(
                'products',
                filter=Q(products__status=LifecycleStatus.ACTIVE.value),
                distinct=True,
            )
        )

    def get_category_by_id(self, category_id: int) -> Optional[CategoryModel]:
        """Get active category by ID."""
        try:
            return self._with_product_count(
                CategoryModel.objects.select_related('parent')
            ).get(id=category_id, is_active=True)
        except CategoryModel.DoesNotExist:
            return None

    def get_category_by_slug(self, slug: str) -> Optional[CategoryModel]:
        """Get active category by slug."""
        try:
            return self._with_product_count(
                CategoryModel.objects.select_related('parent')
            ).get(slug=slug, is_active=True)
        except CategoryModel.DoesNotExist:
            return None

    def get_all_categories(
        self,
        include_inactive: bool = False,
        include_product_count: bool = False,
    ) -> List[CategoryModel]:
        """Get all categories ordered for display."""
        queryset = CategoryModel.objects.select_related('parent')
        if not include_inactive:
            queryset = queryset.filter(is_active=True)
        if include_product_count:
            queryset = self._with_product_count(queryset)
        return list(queryset.order_by('sort_order', 'name'))

    def get_categories(
        self,
        page: int = 1,
        limit: int = 10,
        search: str = '',
        parent_id: Optional[int] = None,
    ) -> Dict[str, Any]:
        """Get a page of active categories with product counts."""
        queryset = CategoryModel.objects.filter(is_active=True)
        if search:
            queryset = queryset.filter(name__icontains=search)
        if parent_id is not None:
            queryset = queryset.filter(parent_id=parent_id)

        total = queryset.count()
        offset = page_offset(page, limit)
        categories = list(
            self._with_product_count(queryset.select_related('parent'))
            .order_by('sort_order', 'name')[offset:offset + limit]
        )
        return {
            'categories': categories,
            'pagination': build_pagination(page, limit, total),
        }

    def get_root_categories(self) -> List[CategoryModel]:
        """Get top-level categories (no parent)."""
        return list(
            self._with_product_count(
                CategoryModel.objects.filter(parent__isnull=True, is_active=True)
            ).order_by('sort_order', 'name')
        )

    def get_subcategories(self, parent_id: int) -> List[CategoryModel]:
        """Get direct children of a category."""
        if not self.get_category_by_id(parent_id):
            raise CategoryNotFoundError(category_id=parent_id)
        return list(
            self._with_product_count(
                CategoryModel.objects.filter(parent_id=parent_id, is_active=True)
            ).order_by('sort_order', 'name')
        )

    def get_category_tree(self) -> List[Dict[str, Any]]:
        """Get full category tree structure."""
        categories = self.get_all_categories(include_product_count=True)
        children_by_parent: Dict[Optional[int], List[CategoryModel]] = {}
        for category in categories:
            children_by_parent.setdefault(category.parent_id, []).append(category)

        return [
            self._build_tree_node(category, children_by_parent, level=0)
            for category in children_by_parent.get(None, [])
        ]

    @transaction.atomic
    def create_category(
        self,
        name: str,
        slug: str = None,
        description: str = '',
        image: str = '',
        parent_id: Optional[int] = None,
        sort_order: int = 0,
    ) -> CategoryModel:
        """Create a new category."""
        parent = None
        if parent_id:
            parent = self.get_category_by_id(parent_id)
            if not parent:
                raise CategoryNotFoundError(category_id=parent_id)

        slug = slug or slugify(name)
        if CategoryModel.objects.filter(slug=slug).exists():
            raise CategoryAlreadyExistsError(slug=slug)

        category = CategoryModel.objects.create(
            name=name,
            slug=slug,
            description=description or '',
            image=image or '',
            parent=parent,
            sort_order=sort_order,
        )

        logger.info(f"Created category: {category.name} ({category.id})")
        return category

    def _resync_products(self, category: CategoryModel) -> None:
        """Queue an index refresh for every active product carrying the category name and slug."""
        product_ids = list(
            category.products.filter(status=LifecycleStatus.ACTIVE.value).values_list('id', flat=True)
        )
        for product_id in product_ids:
            self.sync_service.enqueue(product_id)
        if product_ids:
            logger.info(f"Queued {len(product_ids)} products for reindex after category {category.id} changed")

    @transaction.atomic
    def update_category(
        self,
        category_id: int,
        name: str = None,
        slug: str = None,
        description: str = None,
        image: str = None,
        parent_id: int = None,
        sort_order: int = None,
    ) -> CategoryModel:
        """
        Update a category.

        parent_id=0 moves the category to the root.
        """
        category = self.get_category_by_id(category_id)
        if not category:
            raise CategoryNotFoundError(category_id=category_id)

        renamed = (name is not None and name != category.name) or (slug is not None and slug != category.slug)

        if name is not None:
            category.name = name
        if slug is not None and slug != category.slug:
            if CategoryModel.objects.filter(slug=slug).exclude(id=category.id).exists():
                raise CategoryAlreadyExistsError(slug=slug)
            category.slug = slug
        if description is not None:
            category.description = description
        if image is not None:
            category.image = image
        if sort_order is not None:
            category.sort_order = sort_order

        if parent_id is not None:
            if parent_id == category_id:
                raise InvalidCategoryHierarchyError("Category cannot be its own parent")
            if parent_id == 0:
                category.parent = None
            else:
                new_parent = self.get_category_by_id(parent_id)
                if not new_parent:
                    raise CategoryNotFoundError(category_id=parent_id)
                if self._is_descendant(new_parent, category.id):
                    raise InvalidCategoryHierarchyError("Category cannot be moved under its own descendant")
                category.parent = new_parent

        category.save()
        if renamed:
            self._resync_products(category)
        logger.info(f"Updated category: {category.name} ({category.id})")
        return category

    @transaction.atomic
    def delete_category(self, category_id: int) -> bool:
        """Soft delete a category that has no active children or products."""
        category = self.get_category_by_id(category_id)
        if not category:
            raise CategoryNotFoundError(category_id=category_id)

        ensure_can_deactivate(
            'Category',
            category_id,
            {
                'products': category.products.filter(status=LifecycleStatus.ACTIVE.value).count(),
                'children': category.children.filter(is_active=True).count(),
            },
        )

        category.is_active = False
        category.save(update_fields=['is_active', 'updated_at'])
        logger.info(f"Deleted category: {category_id}")
        return True

    def _is_descendant(self, candidate: CategoryModel, ancestor_id: int) -> bool:
        node = candidate
        while node is not None:
            if node.id == ancestor_id:
                return True
            node = node.parent
        return False

    def _build_tree_node(
        self,
        category: CategoryModel,
        children_by_parent: Dict[Optional[int], List[CategoryModel]],
        level: int,
    ) -> Dict[str, Any]:
        """Build a tree node for category."""
        return {
            'id': category.id,
            'name': category.name,
            'slug': category.slug,
            'level': level,
            'product_count': getattr(category, 'product_count', 0),
            'children': [
                self._build_tree_node(child, children_by_parent, level + 1)
                for child in children_by_parent.get(category.id, [])
            ]
        }
