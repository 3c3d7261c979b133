from typing import Optional
from fastapi import Depends, HTTPException
from fastapi.security import OAuth2PasswordBearer
from mydeal.db.store import MarketplaceStore, get_store
from mydeal.models.errors import (
    BidNotFoundError,
    DuplicateBidError,
    IdentityError,
    MarketplaceError,
    PendingAcceptanceError,
    RequirementClosedError,
    RequirementNotFoundError,
)
from mydeal.models.notifications import Recipient, recipient_for
from mydeal.models.requests import ProductRequirement
from mydeal.models.users import User, UserRole
from mydeal.services.bid_lifecycle import BidLifecycleManager
from mydeal.services.identity import CITIES, sessions
from mydeal.services.visibility import is_visible_to
from mydeal.core.logging_config import logger

oauth2_scheme = OAuth2PasswordBearer(tokenUrl="v1/users/login", auto_error=False)

_manager: Optional[BidLifecycleManager] = None


def get_manager(store: MarketplaceStore = Depends(get_store)) -> BidLifecycleManager:
    global _manager
    if _manager is None or _manager.store is not store:
        _manager = BidLifecycleManager(store, known_cities=CITIES)
    return _manager


async def get_current_user(token: Optional[str] = Depends(oauth2_scheme)) -> Optional[User]:
    if not token:
        return None
    user = sessions.resolve(token)
    if user is None:
        logger.error("Invalid token provided")
        raise HTTPException(status_code=401, detail="Invalid or missing token")
    return user


async def require_user(user: Optional[User] = Depends(get_current_user)) -> User:
    if user is None:
        raise HTTPException(status_code=401, detail="Login required")
    return user


async def require_buyer(user: User = Depends(require_user)) -> User:
    if user.role != UserRole.BUYER:
        raise HTTPException(status_code=403, detail="Buyer account required")
    return user


async def require_seller(user: User = Depends(require_user)) -> User:
    if user.role != UserRole.SELLER:
        raise HTTPException(status_code=403, detail="Seller account required")
    return user


async def current_recipient(user: User = Depends(require_user)) -> Recipient:
    recipient = recipient_for(user)
    if recipient is None:
        raise HTTPException(status_code=403, detail="Seller has no vendor identity")
    return recipient


def to_http_exception(error: MarketplaceError) -> HTTPException:
    if isinstance(error, (RequirementNotFoundError, BidNotFoundError)):
        status_code = 404
    elif isinstance(error, (DuplicateBidError, RequirementClosedError, PendingAcceptanceError)):
        status_code = 409
    elif isinstance(error, IdentityError):
        status_code = 403
    else:
        status_code = 422
    return HTTPException(
        status_code=status_code,
        detail={"message": error.message, "request_id": error.request_id},
    )


def visible_requirement(
        store: MarketplaceStore,
        request_id: str,
        viewer: Optional[User],
        selected_city: str,
) -> ProductRequirement:
    """Заявка по id, но только если вызывающий её видит в списке; иначе 404."""
    try:
        requirement = store.get_request(request_id)
    except MarketplaceError as e:
        raise to_http_exception(e)
    if not is_visible_to(requirement, viewer, selected_city):
        logger.warning(f"Requirement {request_id} hidden from {viewer.id if viewer else 'anonymous'}")
        raise HTTPException(
            status_code=404,
            detail={"message": f"Requirement '{request_id}' not found", "request_id": request_id},
        )
    return requirement
