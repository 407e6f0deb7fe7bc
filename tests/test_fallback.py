from decimal import Decimal

import pytest

from modules.categories.models import CategoryModel
from modules.products.models import ProductModel
from modules.search.documents import build_search_document
from modules.search.fallback import RelationalProductSearch
from modules.search.filters import SearchFilters

pytestmark = pytest.mark.django_db


@pytest.fixture
def search():
    return RelationalProductSearch()


def _ids(result):
    return [product['id'] for product in result['products']]


def test_price_range_uses_effective_price(search, make_product):
    on_sale = make_product(price=Decimal('20000000'), sale_price=Decimal('9000000'))
    in_range = make_product(price=Decimal('12000000'))
    bogus_sale = make_product(price=Decimal('4000000'), sale_price=Decimal('6000000'))
    make_product(price=Decimal('16000000'))

    result = search.search(SearchFilters(
        category_slug='phones',
        min_price=Decimal('5000000'),
        max_price=Decimal('15000000'),
        sort_by='price',
        sort_order='asc',
    ))

    assert _ids(result) == [on_sale.id, in_range.id]
    assert bogus_sale.id not in _ids(result)
    assert result['products'][0]['final_price'] == 9000000.0


def test_only_active_products_are_returned(search, make_product):
    active = make_product()
    make_product(status='inactive')
    make_product(status='draft')

    assert _ids(search.search(SearchFilters())) == [active.id]


def test_text_query_matches_name_and_descriptions(search, make_product):
    by_name = make_product(name='Galaxy S24')
    by_short = make_product(short_description='Flagship galaxy phone')
    make_product(name='Pixel 9')

    result = search.search(SearchFilters(query='galaxy'))

    assert set(_ids(result)) == {by_name.id, by_short.id}


def test_flag_filters(search, make_product):
    match = make_product(
        is_featured=True,
        stock_quantity=5,
        price=Decimal('100'),
        sale_price=Decimal('90'),
        average_rating=4.5,
        view_count=200,
        tags=['5g'],
    )
    make_product(is_featured=True, stock_quantity=0, tags=['5g'])
    make_product(is_featured=True, stock_quantity=5, price=Decimal('100'), sale_price=Decimal('100'), tags=['5g'])
    make_product(is_featured=False, stock_quantity=5, tags=['5g'])

    result = search.search(SearchFilters(
        is_featured=True,
        in_stock_only=True,
        on_sale_only=True,
        min_rating=4,
        view_count_min=100,
        tags=['5g'],
    ))

    assert _ids(result) == [match.id]


def test_category_id_filter(search, make_product):
    laptops = CategoryModel.objects.create(name='Laptops', slug='laptops')
    laptop = make_product(category=laptops)
    make_product()

    assert _ids(search.search(SearchFilters(category_id=laptops.id))) == [laptop.id]


def test_pagination_counts_all_matches(search, make_product):
    for _ in range(5):
        make_product()

    result = search.search(SearchFilters(page=2, limit=2))

    assert len(result['products']) == 2
    assert result['pagination']['total_records'] == 5
    assert result['pagination']['total_pages'] == 3
    assert result['pagination']['has_next'] is True
    assert result['pagination']['has_prev'] is True


def test_relevance_sort_falls_back_to_newest_first(search, make_product):
    first = make_product()
    second = make_product()

    assert _ids(search.search(SearchFilters(sort_by='relevance'))) == [second.id, first.id]


def test_result_has_no_facets_or_suggestions(search, make_product):
    make_product(tags=['b', 'a'])

    result = search.search(SearchFilters())

    assert set(result) == {'products', 'pagination'}
    assert result['products'][0]['tags'] == ['a', 'b']
    assert result['products'][0]['category_slug'] == 'phones'


def test_tiny_discount_counts_as_on_sale_on_both_paths(search, make_product):
    product = make_product(price=Decimal('1000'), sale_price=Decimal('999'))
    make_product(price=Decimal('1000'))

    document = build_search_document(ProductModel.objects.with_details().get(id=product.id))

    assert document['discount_percentage'] == 0
    assert document['is_on_sale'] is True
    assert _ids(search.search(SearchFilters(on_sale_only=True))) == [product.id]
