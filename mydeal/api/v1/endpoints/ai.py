from fastapi import APIRouter, Depends, HTTPException
from mydeal.api.deps import require_seller, visible_requirement
from mydeal.core.config import settings
from mydeal.core.logging_config import logger
from mydeal.db.store import MarketplaceStore, get_store
from mydeal.models.users import User
from mydeal.schemas.ai import AnalyzeRequest, BidSuggestion, SpecificationResult
from mydeal.services.ai_service import analyze_requirement, get_bid_suggestion

router = APIRouter()


@router.post(
    "/analyze",
    response_model=SpecificationResult,
    summary="Разбор описания товара",
    description="Превращает свободное описание в структурированную заявку. Ничего не сохраняет.",
    responses={502: {"description": "AI-сервис не вернул результат"}},
)
async def analyze(data: AnalyzeRequest):
    result = await analyze_requirement(data.text, data.category)
    if result is None:
        logger.warning("Specification lookup returned no result")
        raise HTTPException(status_code=502, detail="Specification lookup returned no result, try again")
    return result


@router.post(
    "/bid-suggestion/{request_id}",
    response_model=BidSuggestion,
    summary="Подсказка цены для продавца",
    responses={502: {"description": "AI-сервис не вернул результат"}},
)
async def bid_suggestion(
        request_id: str,
        seller: User = Depends(require_seller),
        store: MarketplaceStore = Depends(get_store),
):
    requirement = visible_requirement(store, request_id, seller, settings.DEFAULT_CITY)

    suggestion = await get_bid_suggestion(
        requirement.title,
        requirement.estimated_market_price,
        [b.amount for b in requirement.bids],
    )
    if suggestion is None:
        logger.warning(f"Bid suggestion for {request_id} requested by {seller.vendor_name} returned no result")
        raise HTTPException(status_code=502, detail="Pricing advisor returned no result, try again")
    return suggestion
