"""
Categories URL configuration.
"""
from django.urls import path

from .views import (
    CategoryListCreateView,
    CategoryDetailView,
    CategoryTreeView,
    CategoryRootsView,
    CategoryChildrenView,
    CategoryProductsView,
)

app_name = 'categories'

urlpatterns = [
    path('', CategoryListCreateView.as_view(), name='category-list-create'),
    path('tree/', CategoryTreeView.as_view(), name='category-tree'),
    path('roots/', CategoryRootsView.as_view(), name='category-roots'),
    path('<int:category_id>/', CategoryDetailView.as_view(), name='category-detail'),
    path('<int:category_id>/children/', CategoryChildrenView.as_view(), name='category-children'),
    path('<slug:slug>/products/', CategoryProductsView.as_view(), name='category-products'),
]
