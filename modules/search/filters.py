"""
Search filter object shared by the index and relational search paths.
"""
from dataclasses import dataclass, field
from decimal import Decimal
from typing import Any, Dict, List, Optional

from shared.domain.exceptions import ValidationError
from shared.interfaces.pagination import page_offset

MIN_QUERY_LENGTH = 2
MAX_PAGE_SIZE = 100
DEFAULT_PAGE_SIZE = 10

RELEVANCE = '_score'

SORT_FIELDS = {
    'name': 'name.keyword',
    'price': 'final_price',
    'created_at': 'created_at',
    'updated_at': 'updated_at',
    'view_count': 'view_count',
    'purchase_count': 'purchase_count',
    'rating': 'average_rating',
    'popularity': 'view_count',
    'relevance': RELEVANCE,
    '_score': RELEVANCE,
}


def resolve_sort_field(sort_by: Optional[str]) -> str:
    """Map a public sort key to an index field; unknown keys sort by relevance."""
    return SORT_FIELDS.get(sort_by or '', RELEVANCE)


def resolve_sort_order(sort_order: Optional[str]) -> str:
    return 'asc' if str(sort_order or '').lower() == 'asc' else 'desc'


@dataclass
class SearchFilters:
    """Flat filter set accepted by every product search entry point."""

    query: str = ''
    category_id: Optional[int] = None
    category_slug: Optional[str] = None
    min_price: Optional[Decimal] = None
    max_price: Optional[Decimal] = None
    min_rating: Optional[float] = None
    is_featured: Optional[bool] = None
    in_stock_only: bool = False
    on_sale_only: bool = False
    view_count_min: Optional[int] = None
    tags: List[str] = field(default_factory=list)
    sort_by: str = 'relevance'
    sort_order: str = 'desc'
    page: int = 1
    limit: int = DEFAULT_PAGE_SIZE

    def __post_init__(self):
        self.query = (self.query or '').strip()
        self.tags = [tag.strip() for tag in (self.tags or []) if tag and tag.strip()]

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'SearchFilters':
        """Build filters from validated serializer data, ignoring unknown keys."""
        known = cls.__dataclass_fields__.keys()
        return cls(**{key: value for key, value in data.items() if key in known and value is not None})

    @property
    def has_query(self) -> bool:
        return bool(self.query)

    @property
    def offset(self) -> int:
        return page_offset(self.page, self.limit)

    @property
    def sort_field(self) -> str:
        return resolve_sort_field(self.sort_by)

    @property
    def sort_direction(self) -> str:
        return resolve_sort_order(self.sort_order)

    def validate(self, require_query: bool = False) -> 'SearchFilters':
        """
        Reject malformed input before any store is queried.

        Raises:
            ValidationError: on a short or missing query, an out-of-range
                page or limit, or an inverted price range
        """
        if require_query and not self.has_query:
            raise ValidationError("Search query is required", field='q')
        if self.has_query and len(self.query) < MIN_QUERY_LENGTH:
            raise ValidationError(
                f"Search query must be at least {MIN_QUERY_LENGTH} characters",
                field='q',
            )
        if self.page < 1:
            raise ValidationError("Page must be at least 1", field='page')
        if self.limit < 1 or self.limit > MAX_PAGE_SIZE:
            raise ValidationError(f"Limit must be between 1 and {MAX_PAGE_SIZE}", field='limit')
        if (
            self.min_price is not None
            and self.max_price is not None
            and self.min_price > self.max_price
        ):
            raise ValidationError("min_price cannot be greater than max_price", field='min_price')
        return self
