# Shared interfaces module
from .exception_handlers import custom_exception_handler
from .pagination import build_pagination, page_offset

__all__ = ['custom_exception_handler', 'build_pagination', 'page_offset']
