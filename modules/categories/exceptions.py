"""
Category exceptions.
"""
from shared.domain.exceptions import (
    DomainException,
    EntityNotFoundError,
    ValidationError,
)


class CategoryNotFoundError(EntityNotFoundError):
    """Raised when a category is not found."""

    def __init__(self, category_id=None, slug: str = None):
        identifier = category_id if category_id is not None else slug
        super().__init__(
            entity_name='Category',
            entity_id=str(identifier),
            code='CATEGORY_NOT_FOUND',
        )


class CategoryAlreadyExistsError(DomainException):
    """Raised when a category slug is already taken."""

    def __init__(self, slug: str):
        super().__init__(
            message=f"Category with slug '{slug}' already exists",
            code='CATEGORY_ALREADY_EXISTS'
        )
        self.slug = slug


class InvalidCategoryHierarchyError(ValidationError):
    """Raised when a parent assignment would break the tree."""

    def __init__(self, message: str):
        super().__init__(message=message, field='parent_id')
