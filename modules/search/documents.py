"""
Denormalized product documents and the index definition they are stored under.
"""
from typing import Any, Dict

from modules.products import pricing

PRODUCT_INDEX_SETTINGS = {
    'number_of_shards': 1,
    'number_of_replicas': 0,
    'analysis': {
        'analyzer': {
            'catalog_analyzer': {
                'type': 'custom',
                'tokenizer': 'standard',
                'filter': ['lowercase', 'asciifolding'],
            },
        },
    },
}

PRODUCT_INDEX_MAPPINGS = {
    'properties': {
        'id': {'type': 'integer'},
        'name': {
            'type': 'text',
            'analyzer': 'catalog_analyzer',
            'fields': {
                'keyword': {'type': 'keyword'},
                'suggest': {'type': 'completion', 'analyzer': 'catalog_analyzer'},
            },
        },
        'slug': {'type': 'keyword'},
        'sku': {'type': 'keyword'},
        'description': {'type': 'text', 'analyzer': 'catalog_analyzer'},
        'short_description': {'type': 'text', 'analyzer': 'catalog_analyzer'},
        'price': {'type': 'float'},
        'sale_price': {'type': 'float'},
        'final_price': {'type': 'float'},
        'discount_percentage': {'type': 'integer'},
        'is_on_sale': {'type': 'boolean'},
        'stock_quantity': {'type': 'integer'},
        'category_id': {'type': 'integer'},
        'category_name': {
            'type': 'text',
            'analyzer': 'catalog_analyzer',
            'fields': {'keyword': {'type': 'keyword'}},
        },
        'category_slug': {'type': 'keyword'},
        'featured_image': {'type': 'keyword', 'index': False},
        'gallery': {'type': 'keyword', 'index': False},
        'status': {'type': 'keyword'},
        'is_featured': {'type': 'boolean'},
        'meta_title': {'type': 'text', 'analyzer': 'catalog_analyzer'},
        'meta_description': {'type': 'text', 'analyzer': 'catalog_analyzer'},
        'view_count': {'type': 'integer'},
        'purchase_count': {'type': 'integer'},
        'average_rating': {'type': 'float'},
        'review_count': {'type': 'integer'},
        'tags': {'type': 'keyword'},
        'boost_score': {'type': 'float'},
        'created_at': {'type': 'date'},
        'updated_at': {'type': 'date'},
    },
}


def _as_float(value):
    return float(value) if value is not None else None


def build_search_document(product) -> Dict[str, Any]:
    """
    Flatten a product with its category and tags into one search document.

    The caller is expected to have loaded `category` and `tags`
    (see ProductQuerySet.with_details).
    """
    category = product.category
    return {
        'id': product.id,
        'name': product.name,
        'slug': product.slug,
        'sku': product.sku,
        'description': product.description,
        'short_description': product.short_description,
        'price': _as_float(product.price),
        'sale_price': _as_float(product.sale_price),
        'final_price': float(pricing.effective_price(product.price, product.sale_price)),
        'discount_percentage': pricing.discount_percentage(product.price, product.sale_price),
        'is_on_sale': pricing.is_on_sale(product.price, product.sale_price),
        'stock_quantity': product.stock_quantity,
        'category_id': product.category_id,
        'category_name': category.name if category else None,
        'category_slug': category.slug if category else None,
        'featured_image': product.featured_image,
        'gallery': list(product.gallery or []),
        'status': product.status,
        'is_featured': product.is_featured,
        'meta_title': product.meta_title,
        'meta_description': product.meta_description,
        'view_count': product.view_count,
        'purchase_count': product.purchase_count,
        'average_rating': float(product.average_rating or 0),
        'review_count': product.review_count,
        'tags': product.tag_names,
        'boost_score': pricing.calculate_boost_score(product),
        'created_at': product.created_at.isoformat() if product.created_at else None,
        'updated_at': product.updated_at.isoformat() if product.updated_at else None,
    }
