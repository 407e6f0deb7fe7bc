"""
Categories module API views.
"""
from drf_spectacular.utils import extend_schema
from rest_framework import status
from rest_framework.permissions import AllowAny
from rest_framework.response import Response
from rest_framework.views import APIView

from modules.products.serializers import ProductListQuerySerializer
from modules.products.services import ProductService
from shared.interfaces.permissions import AdminWriteMixin
from .exceptions import CategoryNotFoundError
from .services import CategoryService
from .serializers import (
    CategorySerializer,
    CategoryCreateSerializer,
    CategoryUpdateSerializer,
    CategoryListQuerySerializer,
    CategoryTreeNodeSerializer,
)


category_service = CategoryService()
product_service = ProductService()


@extend_schema(tags=['Categories'])
class CategoryListCreateView(AdminWriteMixin, APIView):
    """Category list and create endpoint."""

    @extend_schema(
        parameters=[CategoryListQuerySerializer],
        responses={200: CategorySerializer(many=True)},
        summary="List categories",
    )
    def get(self, request):
        query = CategoryListQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        result = category_service.get_categories(**query.validated_data)
        return Response({
            'status': status.HTTP_200_OK,
            'data': {
                'categories': CategorySerializer(result['categories'], many=True).data,
                'pagination': result['pagination'],
            },
        })

    @extend_schema(
        request=CategoryCreateSerializer,
        responses={201: CategorySerializer},
        summary="Create a category",
    )
    def post(self, request):
        serializer = CategoryCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)

        category = category_service.create_category(**serializer.validated_data)
        return Response(
            {
                'status': status.HTTP_201_CREATED,
                'message': 'Category created successfully',
                'data': CategorySerializer(category).data,
            },
            status=status.HTTP_201_CREATED,
        )


@extend_schema(tags=['Categories'])
class CategoryTreeView(APIView):
    """Category tree endpoint."""
    permission_classes = [AllowAny]

    @extend_schema(
        responses={200: CategoryTreeNodeSerializer(many=True)},
        summary="Get category tree",
    )
    def get(self, request):
        return Response({
            'status': status.HTTP_200_OK,
            'data': category_service.get_category_tree(),
        })


@extend_schema(tags=['Categories'])
class CategoryDetailView(AdminWriteMixin, APIView):
    """Category detail, update and delete endpoint."""

    @extend_schema(
        responses={200: CategorySerializer},
        summary="Get category detail",
    )
    def get(self, request, category_id: int):
        category = category_service.get_category_by_id(category_id)
        if not category:
            raise CategoryNotFoundError(category_id=category_id)

        return Response({
            'status': status.HTTP_200_OK,
            'data': CategorySerializer(category).data,
        })

    @extend_schema(
        request=CategoryUpdateSerializer,
        responses={200: CategorySerializer},
        summary="Update a category",
    )
    def put(self, request, category_id: int):
        serializer = CategoryUpdateSerializer(data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)

        category = category_service.update_category(category_id, **serializer.validated_data)
        return Response({
            'status': status.HTTP_200_OK,
            'message': 'Category updated successfully',
            'data': CategorySerializer(category).data,
        })

    patch = put

    @extend_schema(summary="Delete a category")
    def delete(self, request, category_id: int):
        category_service.delete_category(category_id)
        return Response({
            'status': status.HTTP_200_OK,
            'message': 'Category deleted successfully',
        })


@extend_schema(tags=['Categories'])
class CategoryRootsView(APIView):
    """Top-level categories endpoint."""
    permission_classes = [AllowAny]

    @extend_schema(
        responses={200: CategorySerializer(many=True)},
        summary="Get root categories",
    )
    def get(self, request):
        roots = category_service.get_root_categories()
        return Response({
            'status': status.HTTP_200_OK,
            'data': CategorySerializer(roots, many=True).data,
        })


@extend_schema(tags=['Categories'])
class CategoryChildrenView(APIView):
    """Direct subcategories endpoint."""
    permission_classes = [AllowAny]

    @extend_schema(
        responses={200: CategorySerializer(many=True)},
        summary="Get subcategories",
    )
    def get(self, request, category_id: int):
        children = category_service.get_subcategories(category_id)
        return Response({
            'status': status.HTTP_200_OK,
            'data': CategorySerializer(children, many=True).data,
        })


@extend_schema(tags=['Categories'])
class CategoryProductsView(APIView):
    """Products listed under a category slug."""
    permission_classes = [AllowAny]

    @extend_schema(
        parameters=[ProductListQuerySerializer],
        summary="List products in a category",
    )
    def get(self, request, slug: str):
        query = ProductListQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)

        result = product_service.get_products_by_category(slug, query.to_filters())
        return Response({
            'status': status.HTTP_200_OK,
            'data': {
                'category': CategorySerializer(result['category']).data,
                'products': result['products'],
                'pagination': result['pagination'],
            },
        })
