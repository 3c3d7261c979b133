from typing import Iterable, List, Optional
from pydantic import BaseModel

from mydeal.models.requests import Bid, ProductRequirement, RequestStatus
from mydeal.services.visibility import lowest_bid_amount


class VendorBid(BaseModel):
    bid: Bid
    request_id: str
    request_title: str
    is_winning: bool = False
    payment_method: Optional[str] = None


class SellerDashboard(BaseModel):
    vendor_name: str
    active_bids: List[VendorBid]
    won_deals: List[VendorBid]
    total_revenue: int


def build_dashboard(requests: Iterable[ProductRequirement], vendor_name: str) -> SellerDashboard:
    active, won = [], []
    for req in requests:
        bid = req.bid_by_vendor(vendor_name)
        if bid is None:
            continue
        if req.status == RequestStatus.OPEN:
            active.append(VendorBid(
                bid=bid,
                request_id=req.id,
                request_title=req.title,
                is_winning=bid.amount == lowest_bid_amount(req.bids),
            ))
        elif req.winning_bid_id == bid.id:
            won.append(VendorBid(
                bid=bid,
                request_id=req.id,
                request_title=req.title,
                is_winning=True,
                payment_method=req.payment_method.value if req.payment_method else None,
            ))

    return SellerDashboard(
        vendor_name=vendor_name,
        active_bids=active,
        won_deals=won,
        total_revenue=sum(item.bid.amount for item in won),
    )
