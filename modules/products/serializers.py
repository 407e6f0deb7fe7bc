"""
Products module serializers.
"""
from rest_framework import serializers

from shared.domain.lifecycle import LifecycleStatus
from .models import ProductModel


class ProductSerializer(serializers.ModelSerializer):
    """Serializer for product output."""
    category_name = serializers.CharField(source='category.name', read_only=True)
    category_slug = serializers.CharField(source='category.slug', read_only=True)
    tags = serializers.ListField(source='tag_names', child=serializers.CharField(), read_only=True)
    final_price = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    discount_percentage = serializers.IntegerField(read_only=True)
    is_on_sale = serializers.BooleanField(read_only=True)
    boost_score = serializers.FloatField(read_only=True)

    class Meta:
        model = ProductModel
        fields = [
            'id',
            'name',
            'slug',
            'sku',
            'description',
            'short_description',
            'price',
            'sale_price',
            'final_price',
            'discount_percentage',
            'is_on_sale',
            'stock_quantity',
            'category',
            'category_name',
            'category_slug',
            'featured_image',
            'gallery',
            'status',
            'is_featured',
            'meta_title',
            'meta_description',
            'view_count',
            'purchase_count',
            'average_rating',
            'review_count',
            'boost_score',
            'tags',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class ProductListSerializer(serializers.ModelSerializer):
    """Simplified serializer for product list."""
    category_name = serializers.CharField(source='category.name', read_only=True)
    final_price = serializers.DecimalField(max_digits=12, decimal_places=2, read_only=True)
    discount_percentage = serializers.IntegerField(read_only=True)

    class Meta:
        model = ProductModel
        fields = [
            'id',
            'name',
            'slug',
            'price',
            'sale_price',
            'final_price',
            'discount_percentage',
            'stock_quantity',
            'category',
            'category_name',
            'featured_image',
            'is_featured',
            'view_count',
            'average_rating',
            'created_at',
        ]
        read_only_fields = fields


class ProductCreateSerializer(serializers.Serializer):
    """Serializer for product creation."""
    name = serializers.CharField(min_length=2, max_length=255)
    sku = serializers.CharField(max_length=100, required=False, allow_blank=True, allow_null=True)
    description = serializers.CharField(required=False, allow_blank=True, default='')
    short_description = serializers.CharField(max_length=500, required=False, allow_blank=True, default='')
    price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0)
    sale_price = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=0, required=False, allow_null=True
    )
    stock_quantity = serializers.IntegerField(min_value=0, required=False, default=0)
    category_id = serializers.IntegerField()
    featured_image = serializers.CharField(max_length=500, required=False, allow_blank=True, default='')
    gallery = serializers.ListField(child=serializers.CharField(max_length=500), required=False, default=list)
    status = serializers.ChoiceField(
        choices=LifecycleStatus.choices(), required=False, default=LifecycleStatus.ACTIVE.value
    )
    is_featured = serializers.BooleanField(required=False, default=False)
    meta_title = serializers.CharField(max_length=255, required=False, allow_blank=True, default='')
    meta_description = serializers.CharField(required=False, allow_blank=True, default='')
    tags = serializers.ListField(child=serializers.CharField(max_length=50), required=False, default=list)


class ProductUpdateSerializer(serializers.Serializer):
    """Serializer for product update. Every field is optional."""
    name = serializers.CharField(min_length=2, max_length=255, required=False)
    sku = serializers.CharField(max_length=100, required=False, allow_blank=True, allow_null=True)
    description = serializers.CharField(required=False, allow_blank=True)
    short_description = serializers.CharField(max_length=500, required=False, allow_blank=True)
    price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False)
    sale_price = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=0, required=False, allow_null=True
    )
    stock_quantity = serializers.IntegerField(min_value=0, required=False)
    category_id = serializers.IntegerField(required=False)
    featured_image = serializers.CharField(max_length=500, required=False, allow_blank=True)
    gallery = serializers.ListField(child=serializers.CharField(max_length=500), required=False)
    status = serializers.ChoiceField(choices=LifecycleStatus.choices(), required=False)
    is_featured = serializers.BooleanField(required=False)
    meta_title = serializers.CharField(max_length=255, required=False, allow_blank=True)
    meta_description = serializers.CharField(required=False, allow_blank=True)
    tags = serializers.ListField(child=serializers.CharField(max_length=50), required=False)


class ProductStockSerializer(serializers.Serializer):
    """Serializer for stock changes."""
    quantity = serializers.IntegerField(min_value=0)
    operation = serializers.ChoiceField(choices=['set', 'add', 'subtract'], default='set')


class ProductBulkFieldsSerializer(serializers.Serializer):
    """Columns a bulk update may touch. Other keys are dropped."""
    status = serializers.ChoiceField(choices=LifecycleStatus.choices(), required=False)
    is_featured = serializers.BooleanField(required=False)
    category_id = serializers.IntegerField(min_value=1, required=False)
    price = serializers.DecimalField(max_digits=12, decimal_places=2, min_value=0, required=False)
    sale_price = serializers.DecimalField(
        max_digits=12, decimal_places=2, min_value=0, required=False, allow_null=True
    )
    stock_quantity = serializers.IntegerField(min_value=0, required=False)


class ProductBulkUpdateSerializer(serializers.Serializer):
    """Serializer for bulk updates."""
    product_ids = serializers.ListField(child=serializers.IntegerField(min_value=1), allow_empty=False)
    data = ProductBulkFieldsSerializer()


class ProductListQuerySerializer(serializers.Serializer):
    """Query parameters shared by relational product listings."""
    page = serializers.IntegerField(min_value=1, default=1)
    limit = serializers.IntegerField(min_value=1, max_value=100, default=12)
    search = serializers.CharField(required=False, allow_blank=True, default='')
    category_id = serializers.IntegerField(required=False)
    category_slug = serializers.SlugField(required=False)
    min_price = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)
    max_price = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)
    min_rating = serializers.FloatField(min_value=0, max_value=5, required=False)
    is_featured = serializers.BooleanField(required=False, allow_null=True, default=None)
    in_stock_only = serializers.BooleanField(required=False, default=False)
    on_sale_only = serializers.BooleanField(required=False, default=False)
    view_count_min = serializers.IntegerField(min_value=0, required=False)
    tags = serializers.CharField(required=False, allow_blank=True, default='')
    sort_by = serializers.CharField(required=False, default='created_at')
    sort_order = serializers.ChoiceField(choices=['asc', 'desc', 'ASC', 'DESC'], default='desc')

    def to_filters(self) -> dict:
        data = dict(self.validated_data)
        data['query'] = data.pop('search', '')
        data['tags'] = [tag.strip() for tag in data.get('tags', '').split(',') if tag.strip()]
        return data


class LimitQuerySerializer(serializers.Serializer):
    limit = serializers.IntegerField(min_value=1, max_value=100, default=8)


class TrendingQuerySerializer(serializers.Serializer):
    limit = serializers.IntegerField(min_value=1, max_value=100, default=10)
    days = serializers.IntegerField(min_value=1, max_value=365, default=7)


class LowStockQuerySerializer(serializers.Serializer):
    threshold = serializers.IntegerField(min_value=0, default=10)
    page = serializers.IntegerField(min_value=1, default=1)
    limit = serializers.IntegerField(min_value=1, max_value=100, default=20)
