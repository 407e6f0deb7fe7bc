"""
Products URL configuration.
"""
from django.urls import path

from .views import (
    ProductListCreateView,
    FeaturedProductsView,
    LatestProductsView,
    PopularProductsView,
    TrendingProductsView,
    ProductStatsView,
    LowStockProductsView,
    ProductBulkUpdateView,
    ProductDetailView,
    ProductStockView,
)

app_name = 'products'

urlpatterns = [
    path('', ProductListCreateView.as_view(), name='product-list-create'),
    path('featured/', FeaturedProductsView.as_view(), name='product-featured'),
    path('latest/', LatestProductsView.as_view(), name='product-latest'),
    path('popular/', PopularProductsView.as_view(), name='product-popular'),
    path('trending/', TrendingProductsView.as_view(), name='product-trending'),
    path('stats/', ProductStatsView.as_view(), name='product-stats'),
    path('low-stock/', LowStockProductsView.as_view(), name='product-low-stock'),
    path('bulk-update/', ProductBulkUpdateView.as_view(), name='product-bulk-update'),
    path('<int:product_id>/stock/', ProductStockView.as_view(), name='product-stock'),
    path('<str:identifier>/', ProductDetailView.as_view(), name='product-detail'),
]
