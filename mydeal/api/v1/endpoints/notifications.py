from fastapi import APIRouter, Depends, HTTPException
from mydeal.api.deps import current_recipient
from mydeal.db.store import MarketplaceStore, get_store
from mydeal.models.notifications import AppNotification, Recipient
from mydeal.schemas.notifications import ClearNotificationsResponse, NotificationListResponse

router = APIRouter()


@router.get("/", response_model=NotificationListResponse)
async def list_notifications(
        recipient: Recipient = Depends(current_recipient),
        store: MarketplaceStore = Depends(get_store),
):
    return {
        "notifications": store.notifications_for(recipient),
        "unread": store.unread_count(recipient),
    }


@router.post("/{notification_id}/read", response_model=AppNotification)
async def mark_read(
        notification_id: str,
        recipient: Recipient = Depends(current_recipient),
        store: MarketplaceStore = Depends(get_store),
):
    owned = {n.id for n in store.notifications_for(recipient)}
    if notification_id not in owned:
        raise HTTPException(status_code=404, detail="Notification not found")
    return store.mark_read(notification_id)


@router.delete("/", response_model=ClearNotificationsResponse)
async def clear_all(
        recipient: Recipient = Depends(current_recipient),
        store: MarketplaceStore = Depends(get_store),
):
    removed = store.clear_notifications(recipient)
    return {"status": "success", "removed": removed}
