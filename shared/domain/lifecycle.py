"""
Lifecycle states and soft-delete guards shared by catalog entities.
"""
from enum import Enum
from typing import Dict, List, Tuple

from .exceptions import BusinessRuleViolationError


class LifecycleStatus(str, Enum):
    """Publication state of a catalog record."""
    ACTIVE = 'active'
    INACTIVE = 'inactive'
    DRAFT = 'draft'

    @classmethod
    def choices(cls) -> List[Tuple[str, str]]:
        """Choices tuple for model fields."""
        return [(member.value, member.name.title()) for member in cls]


def ensure_can_deactivate(entity_name: str, entity_id, blockers: Dict[str, int]) -> None:
    """
    Refuse a soft delete while active dependents still reference the entity.

    Args:
        entity_name: Human readable entity name (e.g. 'Category')
        entity_id: Identifier used in the error message
        blockers: Mapping of dependent kind to the number of active dependents

    Raises:
        BusinessRuleViolationError: if any dependent count is positive
    """
    for dependent, count in blockers.items():
        if count > 0:
            raise BusinessRuleViolationError(
                message=f"Cannot delete {entity_name.lower()} '{entity_id}' that has {count} active {dependent}",
                rule=f"{entity_name.upper()}_HAS_ACTIVE_{dependent.upper()}",
            )
