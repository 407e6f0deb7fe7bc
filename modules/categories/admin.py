"""
Categories admin configuration.
"""
from django.contrib import admin

from .models import CategoryModel


@admin.register(CategoryModel)
class CategoryAdmin(admin.ModelAdmin):
    """Admin for categories."""

    list_display = [
        'id',
        'name',
        'slug',
        'parent',
        'sort_order',
        'is_active',
        'created_at',
    ]
    list_filter = ['is_active', 'created_at']
    search_fields = ['name', 'slug']
    prepopulated_fields = {'slug': ('name',)}
    readonly_fields = ['id', 'created_at', 'updated_at']
    ordering = ['sort_order', 'name']
