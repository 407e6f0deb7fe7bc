"""
Search URL configuration.
"""
from django.urls import path

from .views import (
    SearchView,
    AdvancedSearchView,
    FilterProductsView,
    SuggestionsView,
    PopularTermsView,
    SearchHealthView,
    SearchSyncView,
)

app_name = 'search'

urlpatterns = [
    path('', SearchView.as_view(), name='search'),
    path('advanced/', AdvancedSearchView.as_view(), name='search-advanced'),
    path('filter/', FilterProductsView.as_view(), name='search-filter'),
    path('suggestions/', SuggestionsView.as_view(), name='search-suggestions'),
    path('popular-terms/', PopularTermsView.as_view(), name='search-popular-terms'),
    path('health/', SearchHealthView.as_view(), name='search-health'),
    path('sync/', SearchSyncView.as_view(), name='search-sync'),
]
