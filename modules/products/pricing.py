"""
Pricing and ranking signals derived from a product record.

Everything here is a pure function of the values passed in, so the same
numbers come out of the ORM, the search document builder and the tests.
"""
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Mapping, Optional, Union

Number = Union[int, float, Decimal]

FEATURED_MULTIPLIER = Decimal('1.5')
ON_SALE_MULTIPLIER = Decimal('1.3')
IN_STOCK_MULTIPLIER = Decimal('1.2')
RATING_WEIGHT = Decimal('0.5')
MAX_RATING = Decimal('5')
REVIEW_SATURATION = Decimal('100')
REVIEW_BONUS_CAP = Decimal('0.5')
VIEW_SATURATION = Decimal('1000')
VIEW_BONUS_CAP = Decimal('0.3')


def _to_decimal(value: Optional[Number]) -> Decimal:
    if value is None:
        return Decimal('0')
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def is_on_sale(price: Optional[Number], sale_price: Optional[Number]) -> bool:
    """A product is on sale only when its sale price undercuts the list price."""
    if sale_price is None or price is None:
        return False
    return _to_decimal(sale_price) < _to_decimal(price)


def effective_price(price: Number, sale_price: Optional[Number]) -> Decimal:
    """Sale price if set and lower than list price, otherwise list price."""
    if is_on_sale(price, sale_price):
        return _to_decimal(sale_price)
    return _to_decimal(price)


def discount_percentage(price: Optional[Number], sale_price: Optional[Number]) -> int:
    """Whole-number discount off the list price, 0 when not on sale."""
    if not is_on_sale(price, sale_price):
        return 0
    list_price = _to_decimal(price)
    if list_price <= 0:
        return 0
    ratio = (list_price - _to_decimal(sale_price)) / list_price * 100
    return int(ratio.quantize(Decimal('1'), rounding=ROUND_HALF_UP))


def calculate_boost_score(product: Any) -> float:
    """
    Multiplicative ranking boost from business signals.

    Accepts a model instance or a mapping with the same field names.
    Every factor is >= 1, so the score never drops below 1.0.

    Args:
        product: object/mapping exposing is_featured, price, sale_price,
            average_rating, review_count, view_count, stock_quantity

    Returns:
        Score rounded half-up to two decimals
    """
    get = _field_getter(product)
    score = Decimal('1.0')

    if get('is_featured'):
        score *= FEATURED_MULTIPLIER

    if is_on_sale(get('price'), get('sale_price')):
        score *= ON_SALE_MULTIPLIER

    rating = _to_decimal(get('average_rating'))
    if rating > 0:
        score *= 1 + min(rating / MAX_RATING, Decimal('1')) * RATING_WEIGHT

    reviews = _to_decimal(get('review_count'))
    if reviews > 0:
        score *= 1 + min(reviews / REVIEW_SATURATION, REVIEW_BONUS_CAP)

    views = _to_decimal(get('view_count'))
    if views > 0:
        score *= 1 + min(views / VIEW_SATURATION, VIEW_BONUS_CAP)

    if _to_decimal(get('stock_quantity')) > 0:
        score *= IN_STOCK_MULTIPLIER

    return float(score.quantize(Decimal('0.01'), rounding=ROUND_HALF_UP))


def _field_getter(product: Any):
    if isinstance(product, Mapping):
        return product.get
    return lambda name: getattr(product, name, None)
