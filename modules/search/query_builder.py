"""
Elasticsearch request bodies and response parsing for product search.

Builders return keyword arguments for `Elasticsearch.search`, so the
indexer can pass them straight through.
"""
from typing import Any, Dict, List

from shared.domain.lifecycle import LifecycleStatus
from shared.interfaces.pagination import build_pagination
from .filters import RELEVANCE, SearchFilters

SEARCH_FIELDS = [
    'name^3',
    'name.keyword^4',
    'description^1.5',
    'short_description^2',
    'category_name^2',
    'tags^1.5',
    'sku^2',
    'meta_title^1.2',
    'meta_description',
]

SUGGESTION_FIELDS = ['name^3', 'category_name^2', 'tags']

HIGHLIGHT = {
    'fields': {
        'name': {'fragment_size': 150, 'number_of_fragments': 1},
        'description': {'fragment_size': 200, 'number_of_fragments': 2},
        'short_description': {'fragment_size': 150, 'number_of_fragments': 1},
    },
    'pre_tags': ['<mark>'],
    'post_tags': ['</mark>'],
}

AGGREGATIONS = {
    'categories': {'terms': {'field': 'category_name.keyword', 'size': 20}},
    'price_stats': {'stats': {'field': 'final_price'}},
    'avg_rating': {'avg': {'field': 'average_rating'}},
}

ACTIVE_FILTER = {'term': {'status': LifecycleStatus.ACTIVE.value}}


def _filter_clauses(filters: SearchFilters) -> List[Dict[str, Any]]:
    clauses = [ACTIVE_FILTER]

    if filters.category_id is not None:
        clauses.append({'term': {'category_id': filters.category_id}})
    if filters.category_slug:
        clauses.append({'term': {'category_slug': filters.category_slug}})

    price_range = {}
    if filters.min_price is not None:
        price_range['gte'] = float(filters.min_price)
    if filters.max_price is not None:
        price_range['lte'] = float(filters.max_price)
    if price_range:
        clauses.append({'range': {'final_price': price_range}})

    if filters.is_featured is not None:
        clauses.append({'term': {'is_featured': filters.is_featured}})
    if filters.tags:
        clauses.append({'terms': {'tags': filters.tags}})
    if filters.min_rating is not None:
        clauses.append({'range': {'average_rating': {'gte': filters.min_rating}}})
    if filters.in_stock_only:
        clauses.append({'range': {'stock_quantity': {'gt': 0}}})
    if filters.view_count_min is not None:
        clauses.append({'range': {'view_count': {'gte': filters.view_count_min}}})
    if filters.on_sale_only:
        clauses.append({'term': {'is_on_sale': True}})

    return clauses


def _sort_clauses(filters: SearchFilters) -> List[Dict[str, Any]]:
    field = filters.sort_field
    direction = filters.sort_direction
    if field == RELEVANCE:
        return [
            {RELEVANCE: {'order': direction}},
            {'boost_score': {'order': 'desc'}},
            {'view_count': {'order': 'desc'}},
        ]
    return [
        {field: {'order': direction}},
        {RELEVANCE: {'order': 'desc'}},
    ]


def build_search_body(filters: SearchFilters) -> Dict[str, Any]:
    """
    Build the search request for a product query.

    Free text becomes a fuzzy multi_match plus a term suggester. Without
    text, featured, popular and well rated products are boosted instead.
    Every structured filter is a hard filter.
    """
    bool_query: Dict[str, Any] = {
        'must': [],
        'filter': _filter_clauses(filters),
        'should': [],
    }
    body: Dict[str, Any] = {
        'query': {'bool': bool_query},
        'sort': _sort_clauses(filters),
        'from_': filters.offset,
        'size': filters.limit,
        'track_total_hits': True,
        'highlight': HIGHLIGHT,
        'aggs': AGGREGATIONS,
    }

    if filters.has_query:
        bool_query['must'].append({
            'multi_match': {
                'query': filters.query,
                'fields': SEARCH_FIELDS,
                'type': 'best_fields',
                'fuzziness': 'AUTO',
                'operator': 'or',
                'minimum_should_match': '50%',
            }
        })
        body['suggest'] = {
            'name_suggestion': {
                'text': filters.query,
                'term': {
                    'field': 'name',
                    'suggest_mode': 'popular',
                    'min_word_length': 3,
                },
            },
        }
    else:
        bool_query['should'] = [
            {'term': {'is_featured': {'value': True, 'boost': 2.0}}},
            {'range': {'view_count': {'gte': 100, 'boost': 1.5}}},
            {'range': {'average_rating': {'gte': 4.0, 'boost': 1.3}}},
        ]
        bool_query['minimum_should_match'] = 0

    return body


def parse_search_response(response, filters: SearchFilters) -> Dict[str, Any]:
    """Turn a raw search response into the public result shape."""
    hits = response['hits']
    total = hits['total']['value'] if isinstance(hits['total'], dict) else hits['total']
    products = [
        {
            **hit['_source'],
            '_score': hit.get('_score'),
            'highlight': hit.get('highlight'),
        }
        for hit in hits['hits']
    ]

    aggregations = response.get('aggregations') or {}
    suggest = response.get('suggest')

    return {
        'products': products,
        'pagination': build_pagination(filters.page, filters.limit, total),
        'aggregations': {
            'categories': aggregations.get('categories', {}).get('buckets', []),
            'price_stats': aggregations.get('price_stats'),
            'avg_rating': aggregations.get('avg_rating', {}).get('value'),
        },
        'suggestions': {'name_suggestions': suggest.get('name_suggestion', [])} if suggest else None,
        'query_info': {
            'query': filters.query,
            'took': response.get('took'),
            'timed_out': response.get('timed_out', False),
        },
    }


def build_suggestion_body(query: str, limit: int) -> Dict[str, Any]:
    """Completion on name.suggest plus phrase-prefix product hits."""
    return {
        'suggest': {
            'product_suggestions': {
                'prefix': query,
                'completion': {
                    'field': 'name.suggest',
                    'size': limit,
                    'skip_duplicates': True,
                },
            },
        },
        'query': {
            'bool': {
                'must': {
                    'multi_match': {
                        'query': query,
                        'fields': SUGGESTION_FIELDS,
                        'type': 'phrase_prefix',
                        'max_expansions': 5,
                    }
                },
                'filter': [ACTIVE_FILTER],
            }
        },
        'source': ['name', 'category_name', 'slug'],
        'size': min(limit, 10),
    }


def parse_suggestion_response(response) -> List[Dict[str, Any]]:
    suggestions = []
    suggest = response.get('suggest') or {}
    for entry in suggest.get('product_suggestions', []):
        for option in entry.get('options', []):
            suggestions.append({'text': option['text'], 'type': 'completion'})

    for hit in response.get('hits', {}).get('hits', []):
        source = hit['_source']
        suggestions.append({
            'text': source.get('name'),
            'category': source.get('category_name'),
            'slug': source.get('slug'),
            'type': 'product',
        })
    return suggestions


def build_popular_terms_body(limit: int) -> Dict[str, Any]:
    """Categories and tags ranked by the average views of their products."""
    def ranked_terms(field):
        return {
            'terms': {'field': field, 'size': limit, 'order': {'avg_views': 'desc'}},
            'aggs': {'avg_views': {'avg': {'field': 'view_count'}}},
        }

    return {
        'query': {'bool': {'filter': [ACTIVE_FILTER]}},
        'aggs': {
            'popular_categories': ranked_terms('category_name.keyword'),
            'popular_tags': ranked_terms('tags'),
        },
        'size': 0,
    }


def parse_popular_terms_response(response) -> Dict[str, List[Dict[str, Any]]]:
    aggregations = response.get('aggregations') or {}
    return {
        'categories': aggregations.get('popular_categories', {}).get('buckets', []),
        'tags': aggregations.get('popular_tags', {}).get('buckets', []),
    }
