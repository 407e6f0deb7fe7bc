"""
Products admin configuration.
"""
from django.contrib import admin

from .models import ProductModel, ProductTagModel, ProductViewModel


class ProductTagInline(admin.TabularInline):
    model = ProductTagModel
    extra = 0


@admin.register(ProductModel)
class ProductAdmin(admin.ModelAdmin):
    """Admin for catalog products."""

    list_display = [
        'id',
        'name',
        'sku',
        'category',
        'price',
        'sale_price',
        'stock_quantity',
        'status',
        'is_featured',
        'view_count',
        'created_at',
    ]
    list_filter = ['status', 'is_featured', 'category']
    search_fields = ['name', 'sku', 'slug']
    readonly_fields = ['id', 'view_count', 'purchase_count', 'created_at', 'updated_at']
    ordering = ['-created_at']
    inlines = [ProductTagInline]


@admin.register(ProductViewModel)
class ProductViewAdmin(admin.ModelAdmin):
    """Admin for product view records."""

    list_display = ['id', 'product', 'user_id', 'ip_address', 'created_at']
    list_filter = ['created_at']
    search_fields = ['product__name', 'session_id']
    readonly_fields = ['id', 'created_at']
    ordering = ['-created_at']
