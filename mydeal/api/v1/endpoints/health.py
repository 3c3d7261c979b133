from fastapi import APIRouter, Depends
from mydeal.db.store import MarketplaceStore, get_store

router = APIRouter()

@router.get("/")
async def health(store: MarketplaceStore = Depends(get_store)):
    return {"status": "ok", "requests": len(store.requests)}
