"""
Search serializers.
"""
from rest_framework import serializers


def _split_csv(value: str) -> list:
    return [item.strip() for item in (value or '').split(',') if item.strip()]


class SearchQuerySerializer(serializers.Serializer):
    """
    Query parameters for product search.

    Paging and price bounds are checked by SearchFilters.validate so the
    index and relational paths reject exactly the same input.
    """
    q = serializers.CharField(required=False, allow_blank=True, default='')
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
    sort_by = serializers.CharField(required=False, default='relevance')
    sort_order = serializers.CharField(required=False, default='desc')
    page = serializers.IntegerField(required=False, default=1)
    limit = serializers.IntegerField(required=False, default=10)

    def to_filters(self) -> dict:
        data = dict(self.validated_data)
        data['query'] = data.pop('q', '')
        data['tags'] = _split_csv(data.get('tags'))
        return data


class FilterQuerySerializer(serializers.Serializer):
    """Query parameters for the listing filter; list values are comma separated."""
    categories = serializers.CharField(required=False, allow_blank=True, default='')
    price_min = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)
    price_max = serializers.DecimalField(max_digits=12, decimal_places=2, required=False)
    rating_min = serializers.FloatField(min_value=0, max_value=5, required=False)
    in_stock_only = serializers.BooleanField(required=False, default=False)
    on_sale_only = serializers.BooleanField(required=False, default=False)
    featured_only = serializers.BooleanField(required=False, default=False)
    tags = serializers.CharField(required=False, allow_blank=True, default='')
    sort_by = serializers.CharField(required=False, default='relevance')
    sort_order = serializers.CharField(required=False, default='desc')
    page = serializers.IntegerField(required=False, default=1)
    limit = serializers.IntegerField(required=False, default=12)

    def validate_categories(self, value):
        items = _split_csv(value)
        if not all(item.isdigit() for item in items):
            raise serializers.ValidationError("Categories must be a comma separated list of ids")
        return [int(item) for item in items]

    def validate_tags(self, value):
        return _split_csv(value)


class SuggestionQuerySerializer(serializers.Serializer):
    q = serializers.CharField(required=False, allow_blank=True, default='')
    limit = serializers.IntegerField(min_value=1, max_value=20, default=10)


class PopularTermsQuerySerializer(serializers.Serializer):
    limit = serializers.IntegerField(min_value=1, max_value=50, default=20)


class SuggestionSerializer(serializers.Serializer):
    """Autocomplete entry."""
    text = serializers.CharField()
    type = serializers.ChoiceField(choices=['completion', 'product'])
    category = serializers.CharField(required=False, allow_null=True)
    slug = serializers.CharField(required=False, allow_null=True)
