"""
Categories serializers.
"""
from rest_framework import serializers

from .models import CategoryModel


class CategorySerializer(serializers.ModelSerializer):
    """Serializer for category output."""
    parent_name = serializers.CharField(source='parent.name', read_only=True, allow_null=True)
    product_count = serializers.IntegerField(read_only=True, default=0)

    class Meta:
        model = CategoryModel
        fields = [
            'id',
            'name',
            'slug',
            'description',
            'image',
            'parent',
            'parent_name',
            'sort_order',
            'is_active',
            'product_count',
            'created_at',
            'updated_at',
        ]
        read_only_fields = fields


class CategoryCreateSerializer(serializers.Serializer):
    """Serializer for category creation."""
    name = serializers.CharField(min_length=2, max_length=100)
    slug = serializers.SlugField(max_length=120, required=False)
    description = serializers.CharField(required=False, allow_blank=True, default='')
    image = serializers.CharField(max_length=500, required=False, allow_blank=True, default='')
    parent_id = serializers.IntegerField(required=False, allow_null=True)
    sort_order = serializers.IntegerField(required=False, default=0)


class CategoryUpdateSerializer(serializers.Serializer):
    """Serializer for category update. parent_id=0 detaches the category."""
    name = serializers.CharField(min_length=2, max_length=100, required=False)
    slug = serializers.SlugField(max_length=120, required=False)
    description = serializers.CharField(required=False, allow_blank=True)
    image = serializers.CharField(max_length=500, required=False, allow_blank=True)
    parent_id = serializers.IntegerField(required=False, min_value=0)
    sort_order = serializers.IntegerField(required=False)


class CategoryListQuerySerializer(serializers.Serializer):
    """Query parameters for the paginated category list."""
    page = serializers.IntegerField(min_value=1, default=1)
    limit = serializers.IntegerField(min_value=1, max_value=100, default=10)
    search = serializers.CharField(required=False, allow_blank=True, default='')
    parent_id = serializers.IntegerField(required=False, allow_null=True, default=None)


class CategoryTreeNodeSerializer(serializers.Serializer):
    """Recursive category tree node."""
    id = serializers.IntegerField()
    name = serializers.CharField()
    slug = serializers.CharField()
    level = serializers.IntegerField()
    product_count = serializers.IntegerField()
    children = serializers.ListField(child=serializers.DictField())
