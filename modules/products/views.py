"""
Products module API views.
"""
from drf_spectacular.utils import OpenApiParameter, extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny, IsAdminUser
from rest_framework.response import Response
from rest_framework.views import APIView

from shared.interfaces.permissions import AdminWriteMixin
from .exceptions import ProductNotFoundError
from .services import ProductService
from .serializers import (
    LimitQuerySerializer,
    LowStockQuerySerializer,
    ProductBulkUpdateSerializer,
    ProductCreateSerializer,
    ProductListQuerySerializer,
    ProductListSerializer,
    ProductSerializer,
    ProductStockSerializer,
    ProductUpdateSerializer,
    TrendingQuerySerializer,
)


product_service = ProductService()


def _client_ip(request):
    forwarded = request.META.get('HTTP_X_FORWARDED_FOR')
    if forwarded:
        return forwarded.split(',')[0].strip()
    return request.META.get('REMOTE_ADDR')


def view_data_from_request(request) -> dict:
    """Collect the request metadata stored with a product view."""
    user = getattr(request, 'user', None)
    session = getattr(request, 'session', None)
    return {
        'user_id': user.id if user is not None and user.is_authenticated else None,
        'ip_address': _client_ip(request),
        'user_agent': request.META.get('HTTP_USER_AGENT', ''),
        'referer': request.META.get('HTTP_REFERER', ''),
        'session_id': getattr(session, 'session_key', None) or '',
    }


def _product_id(identifier: str) -> int:
    if not identifier.isdigit():
        raise ProductNotFoundError(product_id=identifier)
    return int(identifier)


@extend_schema(tags=['Products'])
class ProductListCreateView(AdminWriteMixin, APIView):
    """Product list and create endpoint."""

    @extend_schema(
        parameters=[ProductListQuerySerializer],
        summary="List products",
    )
    def get(self, request):
        query = ProductListQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        result = product_service.get_products(query.to_filters())
        return Response({
            'status': status.HTTP_200_OK,
            'data': result,
        })

    @extend_schema(
        request=ProductCreateSerializer,
        responses={201: ProductSerializer},
        summary="Create a product",
    )
    def post(self, request):
        serializer = ProductCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        product = product_service.create_product(serializer.validated_data)
        return Response(
            {
                'status': status.HTTP_201_CREATED,
                'message': 'Product created successfully',
                'data': ProductSerializer(product).data,
            },
            status=status.HTTP_201_CREATED,
        )


class _ProductCollectionView(APIView):
    """Base for the fixed product collections (featured, latest, popular)."""
    permission_classes = [AllowAny]
    loader = None

    def get(self, request):
        query = LimitQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        products = getattr(product_service, self.loader)(limit=query.validated_data['limit'])
        return Response({
            'status': status.HTTP_200_OK,
            'data': ProductListSerializer(products, many=True).data,
        })


@extend_schema(tags=['Products'], parameters=[LimitQuerySerializer], summary="Featured products")
class FeaturedProductsView(_ProductCollectionView):
    loader = 'get_featured_products'


@extend_schema(tags=['Products'], parameters=[LimitQuerySerializer], summary="Latest products")
class LatestProductsView(_ProductCollectionView):
    loader = 'get_latest_products'


@extend_schema(tags=['Products'], parameters=[LimitQuerySerializer], summary="Most viewed products")
class PopularProductsView(_ProductCollectionView):
    loader = 'get_popular_products'


@extend_schema(tags=['Products'])
class TrendingProductsView(APIView):
    """Products with the most recent views."""
    permission_classes = [AllowAny]

    @extend_schema(parameters=[TrendingQuerySerializer], summary="Trending products")
    def get(self, request):
        query = TrendingQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        products = product_service.get_trending_products(**query.validated_data)
        return Response({
            'status': status.HTTP_200_OK,
            'data': ProductListSerializer(products, many=True).data,
        })


@extend_schema(tags=['Products'])
class ProductStatsView(APIView):
    """Catalog statistics for administrators."""
    permission_classes = [IsAdminUser]

    @extend_schema(summary="Product statistics")
    def get(self, request):
        return Response({
            'status': status.HTTP_200_OK,
            'data': product_service.get_product_stats(),
        })


@extend_schema(tags=['Products'])
class LowStockProductsView(APIView):
    """Products running out of stock."""
    permission_classes = [IsAdminUser]

    @extend_schema(parameters=[LowStockQuerySerializer], summary="Low stock products")
    def get(self, request):
        query = LowStockQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        result = product_service.get_low_stock_products(**query.validated_data)
        result['products'] = ProductListSerializer(result['products'], many=True).data
        return Response({
            'status': status.HTTP_200_OK,
            'data': result,
        })


@extend_schema(tags=['Products'])
class ProductBulkUpdateView(APIView):
    """Apply the same values to many products."""
    permission_classes = [IsAdminUser]

    @extend_schema(request=ProductBulkUpdateSerializer, summary="Bulk update products")
    def patch(self, request):
        serializer = ProductBulkUpdateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        result = product_service.bulk_update_products(
            serializer.validated_data['product_ids'],
            serializer.validated_data['data'],
        )
        return Response({
            'status': status.HTTP_200_OK,
            'message': result['message'],
            'data': {'updated_count': result['updated_count']},
        })


@extend_schema(tags=['Products'])
class ProductDetailView(AdminWriteMixin, APIView):
    """Product detail endpoint. The identifier is an id or a slug."""

    @extend_schema(
        parameters=[OpenApiParameter(name='identifier', type=str, location=OpenApiParameter.PATH)],
        summary="Get product detail",
    )
    def get(self, request, identifier: str):
        result = product_service.get_product_detail(identifier, view_data=view_data_from_request(request))
        return Response({
            'status': status.HTTP_200_OK,
            'data': {
                'product': ProductSerializer(result['product']).data,
                'related_products': ProductListSerializer(result['related_products'], many=True).data,
            },
        })

    @extend_schema(
        request=ProductUpdateSerializer,
        responses={200: ProductSerializer},
        summary="Update a product",
    )
    def put(self, request, identifier: str):
        serializer = ProductUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        product = product_service.update_product(_product_id(identifier), serializer.validated_data)
        return Response({
            'status': status.HTTP_200_OK,
            'message': 'Product updated successfully',
            'data': ProductSerializer(product).data,
        })

    patch = put

    @extend_schema(summary="Delete a product")
    def delete(self, request, identifier: str):
        product_service.delete_product(_product_id(identifier))
        return Response({
            'status': status.HTTP_200_OK,
            'message': 'Product deleted successfully',
        })


@extend_schema(tags=['Products'])
class ProductStockView(APIView):
    """Stock adjustments."""
    permission_classes = [IsAdminUser]

    @extend_schema(request=ProductStockSerializer, responses={200: ProductSerializer}, summary="Update stock")
    def patch(self, request, product_id: int):
        serializer = ProductStockSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        product = product_service.update_stock(product_id, **serializer.validated_data)
        return Response({
            'status': status.HTTP_200_OK,
            'message': 'Stock updated successfully',
            'data': {
                'id': product.id,
                'stock_quantity': product.stock_quantity,
            },
        })
