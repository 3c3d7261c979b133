from typing import List, Optional

from mydeal.core.logging_config import logger
from mydeal.core.utils import now_ms
from mydeal.db.store import MarketplaceStore
from mydeal.models.requests import Bid, PriceRange, ProductRequirement


def demo_requests(now: Optional[int] = None) -> List[ProductRequirement]:
    now = now if now is not None else now_ms()
    return [
        ProductRequirement(
            id="req-1",
            user_id="user-1",
            title="Samsung 500L Double Door Refrigerator",
            category="Fridge",
            description="Looking for a silver finish, convertable 5-in-1 model. Must be energy efficient.",
            specs={"brand": "Samsung", "capacity": "500L", "type": "Double Door", "energyRating": "3 Star"},
            estimated_market_price=PriceRange(min=38000, max=45000),
            bids=(
                Bid(id="bid-1", seller_name="RAJDHANI HOME APPLIANCES", amount=39500, delivery_days=2,
                    notes="Includes free installation", timestamp=now - 100000),
                Bid(id="bid-2", seller_name="Shisa Appliances", amount=38900, delivery_days=5,
                    notes="Cardboard slightly damaged, product new", timestamp=now - 80000),
            ),
            created_at=now - 200000,
            location="Satara",
        ),
        ProductRequirement(
            id="req-2",
            user_id="user-2",
            title="Michelin Primacy 4 ST Tyres (Set of 4)",
            category="Tyres",
            description="For my Honda City. Size 195/65 R15.",
            specs={"brand": "Michelin", "size": "195/65 R15", "quantity": 4, "type": "Tubeless"},
            estimated_market_price=PriceRange(min=24000, max=28000),
            created_at=now - 50000,
            location="Pune",
        ),
        ProductRequirement(
            id="req-3",
            user_id="user-1",
            title="LG 1.5 Ton 5 Star Split AC",
            category="AC",
            description="Dual Inverter Split AC, Copper Condenser, 5 Star rating for bedroom.",
            specs={"brand": "LG", "capacity": "1.5 Ton", "type": "Split", "energyRating": "5 Star"},
            estimated_market_price=PriceRange(min=42000, max=48000),
            bids=(
                Bid(id="bid-4", seller_name="ORANGE HOME APPLIANCES", amount=43500, delivery_days=1,
                    notes="Free stabilizer included", timestamp=now - 20000),
            ),
            created_at=now - 10000,
            location="Kolhapur",
        ),
        ProductRequirement(
            id="req-4",
            user_id="user-3",
            title="Sony Bravia 55 inch 4K Google TV",
            category="TV",
            description="Latest model with XR processor and PS5 gaming features.",
            specs={"brand": "Sony", "size": "55 inch", "resolution": "4K", "type": "LED"},
            estimated_market_price=PriceRange(min=75000, max=85000),
            created_at=now - 800000,
            location="Satara",
        ),
        ProductRequirement(
            id="req-5",
            user_id="user-4",
            title="Apple iPhone 15 Pro Max (256GB)",
            category="Mobile",
            description="Natural Titanium color, brand new sealed box required. Urgent requirement.",
            specs={"brand": "Apple", "model": "iPhone 15 Pro Max", "storage": "256GB", "color": "Natural Titanium"},
            estimated_market_price=PriceRange(min=140000, max=155000),
            created_at=now - 5000,
            location="Pune",
        ),
        ProductRequirement(
            id="req-6",
            user_id="user-5",
            title="Samsung Galaxy S24 Ultra",
            category="Mobile",
            description="Looking for the AI phone, 512GB variant in Titanium Gray.",
            specs={"brand": "Samsung", "model": "S24 Ultra", "storage": "512GB", "color": "Titanium Gray"},
            estimated_market_price=PriceRange(min=115000, max=130000),
            bids=(
                Bid(id="bid-5", seller_name="REAL HOME APPLIANCES", amount=118000, delivery_days=1,
                    notes="Includes Galaxy Watch offer", timestamp=now - 1000),
            ),
            created_at=now - 60000,
            location="Pune",
        ),
    ]


def seed_demo_data(store: MarketplaceStore) -> int:
    loaded = 0
    for requirement in demo_requests():
        if store.requests.get(requirement.id) is None:
            store.add_request(requirement)
            loaded += 1
    logger.info(f"Seeded {loaded} demo requirements")
    return loaded
