from typing import Iterable, List, Optional, Sequence

from mydeal.core.logging_config import logger
from mydeal.models.requests import Bid, ProductRequirement, RequestStatus
from mydeal.models.users import User, UserRole

ALL_CATEGORIES = "All"

# Синонимы категорий, в обе стороны
CATEGORY_SYNONYMS = {
    "fridge": "refrigerator",
    "refrigerator": "fridge",
    "ac": "air conditioner",
    "air conditioner": "ac",
    "tv": "television",
    "television": "tv",
    "mobile": "phone",
    "phone": "mobile",
}


def matches_category(category: str, category_filter: str) -> bool:
    if category_filter == ALL_CATEGORIES:
        return True

    wanted = category_filter.strip().lower()
    actual = (category or "").strip().lower()
    if not wanted:
        return True
    if not actual:
        return False

    if wanted in actual or actual in wanted:
        return True

    synonym = CATEGORY_SYNONYMS.get(wanted)
    if synonym and synonym in actual:
        return True
    synonym = CATEGORY_SYNONYMS.get(actual)
    if synonym and synonym in wanted:
        return True
    return False


def is_visible_to(requirement: ProductRequirement, viewer: Optional[User], selected_city: str) -> bool:
    if viewer is None:
        return requirement.status == RequestStatus.OPEN and requirement.location == selected_city

    if viewer.role == UserRole.BUYER:
        return requirement.user_id == viewer.id

    if requirement.status == RequestStatus.OPEN:
        return requirement.location == viewer.city

    winner = requirement.winning_bid
    return (
        requirement.status == RequestStatus.CLOSED
        and winner is not None
        and bool(viewer.vendor_name)
        and winner.seller_name == viewer.vendor_name
    )


def visible_requests(
    all_requests: Iterable[ProductRequirement],
    viewer: Optional[User],
    category_filter: str = ALL_CATEGORIES,
    selected_city: str = "",
) -> List[ProductRequirement]:
    filtered = [r for r in all_requests if matches_category(r.category, category_filter)]
    visible = [r for r in filtered if is_visible_to(r, viewer, selected_city)]
    visible.sort(key=lambda r: r.created_at, reverse=True)
    logger.debug(
        f"Visibility: viewer={viewer.id if viewer else 'anonymous'}, category={category_filter}, "
        f"city={selected_city}, {len(visible)} of {len(filtered)} requests visible"
    )
    return visible


def ranked_bids(requirement: ProductRequirement) -> List[Bid]:
    """Ставки от самой дешёвой к самой дорогой, при равенстве раньше поданная выше."""
    return sorted(requirement.bids, key=lambda b: (b.amount, b.timestamp))


def lowest_bid_amount(bids: Sequence[Bid]) -> Optional[int]:
    if not bids:
        return None
    return min(b.amount for b in bids)
