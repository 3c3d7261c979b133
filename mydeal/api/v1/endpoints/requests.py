from fastapi import APIRouter, Depends, HTTPException, Query
from typing import List, Optional
from mydeal.api.deps import (
    get_current_user,
    get_manager,
    require_buyer,
    require_seller,
    to_http_exception,
    visible_requirement,
)
from mydeal.core.config import settings
from mydeal.core.logging_config import logger
from mydeal.db.store import MarketplaceStore, get_store
from mydeal.models.errors import MarketplaceError
from mydeal.models.requests import PendingAcceptance, ProductRequirement
from mydeal.models.users import User
from mydeal.schemas.requests import (
    BidCreate,
    BidResponse,
    DealResponse,
    PaymentConfirm,
    RequirementCreate,
    RequirementDetail,
    RequirementListResponse,
)
from mydeal.services.bid_lifecycle import BidLifecycleManager
from mydeal.services.visibility import ALL_CATEGORIES, lowest_bid_amount, ranked_bids, visible_requests

router = APIRouter()

CATEGORIES = [ALL_CATEGORIES, "Fridge", "AC", "TV", "Tyres", "Mobile"]


@router.get("/", response_model=RequirementListResponse)
async def list_requests(
        category: str = Query(ALL_CATEGORIES, description="Фильтр по категории (All, Fridge, AC, ...)"),
        city: Optional[str] = Query(None, description="Выбранный город для анонимного просмотра"),
        viewer: Optional[User] = Depends(get_current_user),
        store: MarketplaceStore = Depends(get_store),
):
    selected_city = city or settings.DEFAULT_CITY
    requests = visible_requests(store.snapshot(), viewer, category, selected_city)
    logger.info(
        f"Listing requests for {viewer.id if viewer else 'anonymous'}: category={category}, "
        f"city={selected_city}, returned={len(requests)}"
    )
    return {"requests": requests, "total": len(requests), "category": category, "city": selected_city}


@router.get("/categories", response_model=List[str])
async def list_categories():
    return CATEGORIES


@router.post("/", response_model=ProductRequirement, status_code=201)
async def create_request(
        data: RequirementCreate,
        buyer: User = Depends(require_buyer),
        manager: BidLifecycleManager = Depends(get_manager),
):
    try:
        return manager.create_requirement(
            buyer,
            title=data.title,
            category=data.category,
            city=data.city,
            estimated_market_price=data.estimated_market_price,
            description=data.description,
            specs=data.specs,
        )
    except MarketplaceError as e:
        raise to_http_exception(e)


@router.get("/{request_id}", response_model=RequirementDetail)
async def get_request_detail(
        request_id: str,
        city: Optional[str] = Query(None, description="Выбранный город для анонимного просмотра"),
        viewer: Optional[User] = Depends(get_current_user),
        store: MarketplaceStore = Depends(get_store),
):
    requirement = visible_requirement(store, request_id, viewer, city or settings.DEFAULT_CITY)
    return RequirementDetail(
        request=requirement,
        ranked_bids=ranked_bids(requirement),
        lowest_bid=lowest_bid_amount(requirement.bids),
    )


@router.post("/{request_id}/bids", response_model=BidResponse, status_code=201)
async def place_bid(
        request_id: str,
        data: BidCreate,
        seller: User = Depends(require_seller),
        manager: BidLifecycleManager = Depends(get_manager),
):
    try:
        updated, notifications = manager.place_bid(
            request_id, seller, data.amount, data.delivery_days, data.notes
        )
    except MarketplaceError as e:
        raise to_http_exception(e)
    return BidResponse(
        request=updated,
        bid=updated.bid_by_vendor(seller.vendor_name),
        notified_competitors=len(notifications),
    )


@router.post("/{request_id}/bids/{bid_id}/select", response_model=PendingAcceptance)
async def select_bid(
        request_id: str,
        bid_id: str,
        buyer: User = Depends(require_buyer),
        manager: BidLifecycleManager = Depends(get_manager),
):
    try:
        return manager.select_bid(request_id, bid_id, buyer)
    except MarketplaceError as e:
        raise to_http_exception(e)


@router.post("/{request_id}/payment", response_model=DealResponse)
async def confirm_payment(
        request_id: str,
        data: PaymentConfirm,
        buyer: User = Depends(require_buyer),
        manager: BidLifecycleManager = Depends(get_manager),
):
    try:
        updated, _ = manager.confirm_payment(request_id, buyer, data.method)
    except MarketplaceError as e:
        raise to_http_exception(e)
    return DealResponse(request=updated, winning_bid=updated.winning_bid)


@router.delete("/{request_id}/payment")
async def cancel_payment(
        request_id: str,
        buyer: User = Depends(require_buyer),
        manager: BidLifecycleManager = Depends(get_manager),
):
    pending = manager.pending_for(buyer)
    if pending is None or pending.requirement_id != request_id:
        raise HTTPException(status_code=404, detail="No pending acceptance for this request")
    manager.cancel_pending(buyer)
    return {"status": "cancelled", "request_id": request_id}
