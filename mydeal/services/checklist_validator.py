from typing import Iterable, Optional
from mydeal.models.requests import PriceRange


def validate_requirement(
    title: str,
    category: str,
    city: str,
    estimated_market_price: PriceRange,
    known_cities: Optional[Iterable[str]] = None,
) -> list[str]:

    errors = []

    if not title or not title.strip():
        errors.append("Missing requirement title")
    if not category or not category.strip():
        errors.append("Missing requirement category")
    if not city:
        errors.append("Missing requirement city")
    elif known_cities is not None and city not in known_cities:
        errors.append(f"Unknown city: {city}")

    if not is_valid_price_range(estimated_market_price):
        errors.append(
            f"Implausible market price range: {estimated_market_price.min}-{estimated_market_price.max}"
        )

    return errors


def validate_bid(amount, delivery_days) -> list[str]:

    errors = []

    if not is_positive_int(amount):
        errors.append(f"Bid amount must be a positive integer, got {amount!r}")
    if not is_positive_int(delivery_days):
        errors.append(f"Delivery days must be a positive integer, got {delivery_days!r}")

    return errors


def is_positive_int(value) -> bool:
    """Целое > 0, bool не считается числом"""
    return isinstance(value, int) and not isinstance(value, bool) and value > 0


def is_valid_price_range(price: PriceRange) -> bool:
    """min <= max, оба > 0"""
    return price.is_plausible()
