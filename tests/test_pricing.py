from decimal import Decimal

import pytest

from modules.products.pricing import (
    calculate_boost_score,
    discount_percentage,
    effective_price,
    is_on_sale,
)


BASE = {
    'is_featured': False,
    'price': 1000000,
    'sale_price': None,
    'average_rating': 0,
    'review_count': 0,
    'view_count': 0,
    'stock_quantity': 0,
}


def test_boost_score_worked_example():
    product = {
        'price': 1000000,
        'sale_price': 800000,
        'is_featured': True,
        'average_rating': 5,
        'review_count': 150,
        'view_count': 2000,
        'stock_quantity': 10,
    }
    # 1.5 * 1.3 * 1.5 * 1.5 * 1.3 * 1.2 = 6.8445
    assert calculate_boost_score(product) == 6.84


def test_boost_score_without_signals_is_one():
    assert calculate_boost_score(BASE) == 1.0


def test_boost_score_caps_review_and_view_bonus():
    capped = calculate_boost_score({**BASE, 'review_count': 50, 'view_count': 300})
    beyond = calculate_boost_score({**BASE, 'review_count': 5000, 'view_count': 10 ** 6})
    assert capped == beyond == 1.95


@pytest.mark.parametrize('signal,values', [
    ('average_rating', [0, 1, 2.5, 4, 5, 7]),
    ('review_count', [0, 1, 10, 50, 100, 1000]),
    ('view_count', [0, 5, 100, 300, 1000, 50000]),
])
def test_boost_score_is_monotonic_and_at_least_one(signal, values):
    scores = [calculate_boost_score({**BASE, signal: value}) for value in values]
    assert all(score >= 1.0 for score in scores)
    assert scores == sorted(scores)


def test_boost_score_accepts_model_instances(make_product):
    product = make_product(is_featured=True, stock_quantity=0)
    assert calculate_boost_score(product) == 1.5


def test_effective_price_prefers_lower_sale_price():
    assert effective_price(Decimal('100'), Decimal('80')) == Decimal('80')
    assert effective_price(Decimal('100'), None) == Decimal('100')


def test_sale_price_not_below_list_price_is_ignored():
    assert not is_on_sale(Decimal('100'), Decimal('100'))
    assert not is_on_sale(Decimal('100'), Decimal('120'))
    assert effective_price(Decimal('100'), Decimal('120')) == Decimal('100')
    assert discount_percentage(Decimal('100'), Decimal('120')) == 0


def test_discount_percentage_rounds_half_up():
    assert discount_percentage(Decimal('1000000'), Decimal('800000')) == 20
    assert discount_percentage(Decimal('200'), Decimal('199')) == 1
    assert discount_percentage(Decimal('8'), Decimal('7')) == 13
