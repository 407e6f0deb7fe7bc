"""
Search admin configuration.
"""
from django.contrib import admin

from .models import SearchSyncOutboxModel


@admin.register(SearchSyncOutboxModel)
class SearchSyncOutboxAdmin(admin.ModelAdmin):
    """Admin for pending and failed index sync entries."""

    list_display = [
        'id',
        'product_id',
        'action',
        'status',
        'attempts',
        'created_at',
        'processed_at',
    ]
    list_filter = ['status', 'action', 'created_at']
    search_fields = ['product_id', 'last_error']
    readonly_fields = ['id', 'created_at', 'processed_at']
    ordering = ['-id']
