import os
import tempfile

os.environ.setdefault("LOG_FILE", os.path.join(tempfile.gettempdir(), "mydeal-tests.log"))
os.environ["SEED_DEMO_DATA"] = "false"

import pytest

from mydeal.db.store import reset_store
from mydeal.models.requests import Bid, PriceRange, ProductRequirement, RequestStatus
from mydeal.models.users import User, UserRole
from mydeal.services.bid_lifecycle import BidLifecycleManager
from mydeal.services.identity import CITIES


def make_seller(vendor_name: str, city: str = "Kolhapur", user_id: str | None = None) -> User:
    return User(
        id=user_id or f"u-{vendor_name.lower().replace(' ', '-')}",
        name="Demo Vendor",
        role=UserRole.SELLER,
        city=city,
        vendor_name=vendor_name,
    )


def make_buyer(user_id: str = "buyer-1") -> User:
    return User(id=user_id, name="Demo User", role=UserRole.BUYER)


def make_requirement(
    request_id: str = "req-test",
    user_id: str = "buyer-1",
    category: str = "AC",
    location: str = "Kolhapur",
    created_at: int = 1_000,
    status: RequestStatus = RequestStatus.OPEN,
    bids: tuple = (),
    winning_bid_id: str | None = None,
) -> ProductRequirement:
    return ProductRequirement(
        id=request_id,
        user_id=user_id,
        title="LG 1.5 Ton 5 Star Split AC",
        category=category,
        estimated_market_price=PriceRange(min=42000, max=48000),
        bids=bids,
        status=status,
        created_at=created_at,
        location=location,
        winning_bid_id=winning_bid_id,
    )


def make_bid(bid_id: str, seller_name: str, amount: int, timestamp: int = 500) -> Bid:
    return Bid(
        id=bid_id,
        seller_name=seller_name,
        amount=amount,
        delivery_days=2,
        notes="",
        timestamp=timestamp,
    )


@pytest.fixture
def store():
    return reset_store()


@pytest.fixture
def manager(store):
    return BidLifecycleManager(store, known_cities=CITIES)


@pytest.fixture
def buyer():
    return make_buyer()


@pytest.fixture
def vendor_a():
    return make_seller("ORANGE HOME APPLIANCES")


@pytest.fixture
def vendor_b():
    return make_seller("NOVE APPLIANCES")


@pytest.fixture
def vendor_c():
    return make_seller("E STORE", city="Satara")
