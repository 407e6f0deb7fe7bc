"""
Product exceptions.
"""
from shared.domain.exceptions import (
    DomainException,
    EntityNotFoundError,
    ValidationError,
)


class ProductNotFoundError(EntityNotFoundError):
    """Raised when a product is not found."""

    def __init__(self, product_id=None, slug: str = None):
        identifier = product_id if product_id is not None else slug
        super().__init__(
            entity_name='Product',
            entity_id=str(identifier),
            code='PRODUCT_NOT_FOUND',
        )


class DuplicateSKUError(DomainException):
    """Raised when a SKU is already used by another product."""

    def __init__(self, sku: str):
        super().__init__(
            message=f"Product with SKU '{sku}' already exists",
            code='DUPLICATE_SKU'
        )
        self.sku = sku


class InvalidStockOperationError(ValidationError):
    """Raised when a stock change would leave a negative quantity."""

    def __init__(self, product_id: int, current: int, requested: int):
        super().__init__(
            message=f"Stock for product {product_id} cannot go below zero "
                    f"(current {current}, change {requested})",
            field='quantity',
        )
        self.product_id = product_id
        self.current = current
        self.requested = requested
