import enum
from typing import Dict, Optional, Tuple, Union
from pydantic import BaseModel, Field


SpecValue = Union[bool, int, float, str]


class RequestStatus(str, enum.Enum):
    OPEN = "OPEN"
    CLOSED = "CLOSED"


class PaymentMethod(str, enum.Enum):
    COD = "COD"
    ONLINE = "ONLINE"


class PriceRange(BaseModel):
    min: float
    max: float

    class Config:
        frozen = True

    def is_plausible(self) -> bool:
        return 0 < self.min <= self.max


class Bid(BaseModel):
    id: str
    seller_name: str
    amount: int
    delivery_days: int
    notes: str = ""
    timestamp: int

    class Config:
        frozen = True


class ProductRequirement(BaseModel):
    id: str
    user_id: str
    title: str
    category: str
    description: str = ""
    specs: Dict[str, SpecValue] = Field(default_factory=dict)
    estimated_market_price: PriceRange
    bids: Tuple[Bid, ...] = ()
    status: RequestStatus = RequestStatus.OPEN
    created_at: int
    location: str
    winning_bid_id: Optional[str] = None
    payment_method: Optional[PaymentMethod] = None

    class Config:
        frozen = True

    @property
    def is_open(self) -> bool:
        return self.status == RequestStatus.OPEN

    def find_bid(self, bid_id: str) -> Optional[Bid]:
        return next((b for b in self.bids if b.id == bid_id), None)

    def bid_by_vendor(self, seller_name: str) -> Optional[Bid]:
        return next((b for b in self.bids if b.seller_name == seller_name), None)

    @property
    def winning_bid(self) -> Optional[Bid]:
        if self.winning_bid_id is None:
            return None
        return self.find_bid(self.winning_bid_id)


class PendingAcceptance(BaseModel):
    """Покупатель выбрал ставку и ждёт подтверждения оплаты.

    Заявка при этом остаётся OPEN; закрывает её только confirm_payment.
    """
    requirement_id: str
    bid_id: str
    buyer_id: str
    selected_at: int

    class Config:
        frozen = True
