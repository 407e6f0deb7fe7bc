"""
Page/limit pagination helpers.
"""
import math
from typing import Any, Dict


def build_pagination(page: int, limit: int, total: int) -> Dict[str, Any]:
    """
    Build the pagination block shared by listing and search responses.

    has_next is true exactly when page < total_pages, has_prev exactly when page > 1.
    """
    total_pages = math.ceil(total / limit) if total > 0 else 0
    return {
        'current_page': page,
        'total_pages': total_pages,
        'total_records': total,
        'limit': limit,
        'has_next': page < total_pages,
        'has_prev': page > 1,
    }


def page_offset(page: int, limit: int) -> int:
    """Row offset of the first item on a page."""
    return (page - 1) * limit
