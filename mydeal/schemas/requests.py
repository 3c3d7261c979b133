from pydantic import BaseModel, Field, StrictInt
from typing import Dict, List, Optional
from mydeal.models.requests import Bid, PaymentMethod, PriceRange, ProductRequirement, SpecValue


class RequirementCreate(BaseModel):
    title: str = Field(..., min_length=1)
    category: str = Field(..., min_length=1)
    description: str = ""
    specs: Dict[str, SpecValue] = {}
    estimated_market_price: PriceRange
    city: str


class RequirementListResponse(BaseModel):
    requests: List[ProductRequirement]
    total: int
    category: str
    city: str


class RequirementDetail(BaseModel):
    request: ProductRequirement
    ranked_bids: List[Bid]
    lowest_bid: Optional[int] = None


class BidCreate(BaseModel):
    amount: StrictInt = Field(..., description="Сумма ставки, целое положительное")
    delivery_days: StrictInt = Field(..., description="Срок доставки в днях")
    notes: str = ""


class BidResponse(BaseModel):
    request: ProductRequirement
    bid: Bid
    notified_competitors: int


class PaymentConfirm(BaseModel):
    method: PaymentMethod = PaymentMethod.COD


class DealResponse(BaseModel):
    request: ProductRequirement
    winning_bid: Bid
