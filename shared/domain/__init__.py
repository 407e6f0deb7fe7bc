# Shared domain module
from .exceptions import (
    DomainException,
    EntityNotFoundError,
    ValidationError,
    BusinessRuleViolationError,
)
from .lifecycle import LifecycleStatus, ensure_can_deactivate

__all__ = [
    'DomainException',
    'EntityNotFoundError',
    'ValidationError',
    'BusinessRuleViolationError',
    'LifecycleStatus',
    'ensure_can_deactivate',
]
