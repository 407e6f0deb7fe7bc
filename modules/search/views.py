"""
Search API views.
"""
import logging

from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAdminUser
from rest_framework.response import Response
from rest_framework.views import APIView

from .exceptions import SearchIndexUnavailableError
from .services import SearchService
from .serializers import (
    FilterQuerySerializer,
    PopularTermsQuerySerializer,
    SearchQuerySerializer,
    SuggestionQuerySerializer,
    SuggestionSerializer,
)

logger = logging.getLogger(__name__)

search_service = SearchService()


@extend_schema(tags=['Search'])
class SearchView(APIView):
    """Full text product search."""
    permission_classes = [AllowAny]

    @extend_schema(
        parameters=[SearchQuerySerializer],
        summary="Search products",
        description="Fuzzy search with filters. Falls back to the database when the index is down.",
    )
    def get(self, request):
        query = SearchQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        filters = query.to_filters()
        result = search_service.search_products(filters.pop('query'), filters)
        return Response({
            'status': status.HTTP_200_OK,
            'data': result,
        })


@extend_schema(tags=['Search'])
class AdvancedSearchView(APIView):
    """Structured product search with an optional text query."""
    permission_classes = [AllowAny]

    @extend_schema(parameters=[SearchQuerySerializer], summary="Advanced product search")
    def get(self, request):
        query = SearchQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        result = search_service.advanced_search(query.to_filters())
        return Response({
            'status': status.HTTP_200_OK,
            'data': result,
        })


@extend_schema(tags=['Search'])
class FilterProductsView(APIView):
    """Listing filter by categories, price, rating and flags."""
    permission_classes = [AllowAny]

    @extend_schema(parameters=[FilterQuerySerializer], summary="Filter products")
    def get(self, request):
        query = FilterQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        result = search_service.filter_products(**query.validated_data)
        return Response({
            'status': status.HTTP_200_OK,
            'data': result,
        })


@extend_schema(tags=['Search'])
class SuggestionsView(APIView):
    """Search-as-you-type suggestions."""
    permission_classes = [AllowAny]

    @extend_schema(
        parameters=[SuggestionQuerySerializer],
        responses={200: SuggestionSerializer(many=True)},
        summary="Search suggestions",
    )
    def get(self, request):
        query = SuggestionQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        suggestions = search_service.get_search_suggestions(
            query.validated_data['q'],
            limit=query.validated_data['limit'],
        )
        return Response({
            'status': status.HTTP_200_OK,
            'data': suggestions,
        })


@extend_schema(tags=['Search'])
class PopularTermsView(APIView):
    """Popular categories and tags."""
    permission_classes = [AllowAny]

    @extend_schema(parameters=[PopularTermsQuerySerializer], summary="Popular search terms")
    def get(self, request):
        query = PopularTermsQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        return Response({
            'status': status.HTTP_200_OK,
            'data': search_service.get_popular_search_terms(**query.validated_data),
        })


@extend_schema(tags=['Search'])
class SearchHealthView(APIView):
    """Search cluster, index and sync backlog status."""
    permission_classes = [AllowAny]

    @extend_schema(summary="Search health")
    def get(self, request):
        return Response({
            'status': status.HTTP_200_OK,
            'data': search_service.get_search_health(),
        })


@extend_schema(tags=['Search'])
class SearchSyncView(APIView):
    """Rebuild the product index from the catalog."""
    permission_classes = [IsAdminUser]

    @extend_schema(request=None, summary="Sync all products to the search index")
    def post(self, request):
        try:
            result = search_service.sync_all_products()
        except SearchIndexUnavailableError as e:
            logger.error(f"Full search sync failed: {e}")
            return Response(
                {
                    'status': status.HTTP_503_SERVICE_UNAVAILABLE,
                    'error': e.message,
                    'code': e.code,
                },
                status=status.HTTP_503_SERVICE_UNAVAILABLE,
            )

        return Response({
            'status': status.HTTP_200_OK,
            'message': result.pop('message'),
            'data': result,
        })
