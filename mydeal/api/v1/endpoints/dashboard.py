from fastapi import APIRouter, Depends
from mydeal.api.deps import require_seller
from mydeal.db.store import MarketplaceStore, get_store
from mydeal.models.users import User
from mydeal.services.seller_dashboard import SellerDashboard, build_dashboard

router = APIRouter()


@router.get("/", response_model=SellerDashboard)
async def seller_dashboard(
        seller: User = Depends(require_seller),
        store: MarketplaceStore = Depends(get_store),
):
    return build_dashboard(store.snapshot(), seller.vendor_name)
