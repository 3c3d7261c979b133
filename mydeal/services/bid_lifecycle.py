"""Bid and requirement lifecycle.

The module-level functions are pure: they take the current requirement and
return the next one plus the notifications the change produces, raising a
``MarketplaceError`` subclass when a precondition fails. ``BidLifecycleManager``
runs them against the store, re-reading the requirement under the store lock
so that every check sees the state the commit will replace.
"""
from typing import Dict, List, Optional, Tuple

from mydeal.core.logging_config import logger
from mydeal.core.utils import make_id, now_ms
from mydeal.db.store import MarketplaceStore
from mydeal.models.errors import (
    BidNotFoundError,
    DuplicateBidError,
    IdentityError,
    MarketplaceError,
    PendingAcceptanceError,
    ValidationRejected,
)
from mydeal.models.notifications import AppNotification, NotificationType, Recipient
from mydeal.models.requests import (
    Bid,
    PaymentMethod,
    PendingAcceptance,
    PriceRange,
    ProductRequirement,
    RequestStatus,
    SpecValue,
)
from mydeal.models.users import User, UserRole
from mydeal.services.checklist_validator import validate_bid, validate_requirement
from mydeal.services.requirement_state_machine import RequirementStateMachine

Transition = Tuple[ProductRequirement, List[AppNotification]]


def _format_amount(amount: int) -> str:
    return f"₹{amount:,}"


def create_requirement(
    buyer: User,
    title: str,
    category: str,
    city: str,
    estimated_market_price: PriceRange,
    description: str = "",
    specs: Optional[Dict[str, SpecValue]] = None,
    known_cities: Optional[List[str]] = None,
    now: Optional[int] = None,
) -> ProductRequirement:
    if buyer.role != UserRole.BUYER:
        raise ValidationRejected("Only buyers can post requirements")
    errors = validate_requirement(title, category, city, estimated_market_price, known_cities)
    if errors:
        raise ValidationRejected("; ".join(errors))

    return ProductRequirement(
        id=make_id("req"),
        user_id=buyer.id,
        title=title.strip(),
        category=category.strip(),
        description=description,
        specs=dict(specs or {}),
        estimated_market_price=estimated_market_price,
        bids=(),
        status=RequestStatus.OPEN,
        created_at=now if now is not None else now_ms(),
        location=city,
    )


def place_bid(
    requirement: ProductRequirement,
    seller: User,
    amount: int,
    delivery_days: int,
    notes: str = "",
    now: Optional[int] = None,
) -> Transition:
    if seller.role != UserRole.SELLER or not seller.has_vendor_identity:
        raise IdentityError("Seller must have a vendor identity to bid", requirement.id)

    RequirementStateMachine(requirement).ensure_open()

    # продавец видит только открытые заявки своего города
    if requirement.location != seller.city:
        raise IdentityError(
            f"{seller.vendor_name} ({seller.city}) cannot bid on a requirement in {requirement.location}",
            requirement.id,
        )

    errors = validate_bid(amount, delivery_days)
    if errors:
        raise ValidationRejected("; ".join(errors), requirement.id)

    vendor = seller.vendor_name
    if requirement.bid_by_vendor(vendor) is not None:
        raise DuplicateBidError(f"{vendor} already has a bid on '{requirement.id}'", requirement.id)

    timestamp = now if now is not None else now_ms()
    bid = Bid(
        id=make_id("bid"),
        seller_name=vendor,
        amount=amount,
        delivery_days=delivery_days,
        notes=notes,
        timestamp=timestamp,
    )
    updated = requirement.model_copy(update={"bids": requirement.bids + (bid,)})

    competitors = []
    for existing in requirement.bids:
        if existing.seller_name != vendor and existing.seller_name not in competitors:
            competitors.append(existing.seller_name)

    notifications = [
        AppNotification(
            id=make_id("notif"),
            recipient=Recipient.vendor(name),
            message=f"New competing bid of {_format_amount(amount)} on '{requirement.title}'",
            type=NotificationType.WARNING,
            timestamp=timestamp,
            related_request_id=requirement.id,
        )
        for name in competitors
    ]
    return updated, notifications


def select_bid(
    requirement: ProductRequirement,
    bid_id: str,
    buyer: Optional[User] = None,
    now: Optional[int] = None,
) -> PendingAcceptance:
    RequirementStateMachine(requirement).ensure_open()
    if buyer is not None and buyer.id != requirement.user_id:
        raise IdentityError("Only the requesting buyer can accept a bid", requirement.id)
    if requirement.find_bid(bid_id) is None:
        raise BidNotFoundError(f"Bid '{bid_id}' does not belong to '{requirement.id}'", requirement.id)

    return PendingAcceptance(
        requirement_id=requirement.id,
        bid_id=bid_id,
        buyer_id=buyer.id if buyer is not None else requirement.user_id,
        selected_at=now if now is not None else now_ms(),
    )


def confirm_payment(
    requirement: ProductRequirement,
    pending: PendingAcceptance,
    method: PaymentMethod,
    now: Optional[int] = None,
) -> Transition:
    if pending.requirement_id != requirement.id:
        raise PendingAcceptanceError(
            f"Pending acceptance is for '{pending.requirement_id}', not '{requirement.id}'", requirement.id
        )

    machine = RequirementStateMachine(requirement)
    machine.ensure_open()

    bid = requirement.find_bid(pending.bid_id)
    if bid is None:
        raise BidNotFoundError(f"Bid '{pending.bid_id}' does not belong to '{requirement.id}'", requirement.id)

    machine.close_deal()
    updated = requirement.model_copy(
        update={
            "status": RequestStatus.CLOSED,
            "winning_bid_id": bid.id,
            "payment_method": PaymentMethod(method),
        }
    )
    notification = AppNotification(
        id=make_id("notif"),
        recipient=Recipient.vendor(bid.seller_name),
        message=(
            f"Your bid of {_format_amount(bid.amount)} on '{requirement.title}' was accepted "
            f"({PaymentMethod(method).value})"
        ),
        type=NotificationType.SUCCESS,
        timestamp=now if now is not None else now_ms(),
        related_request_id=requirement.id,
    )
    return updated, [notification]


def accept_bid(
    requirement: ProductRequirement,
    bid_id: str,
    method: PaymentMethod,
    now: Optional[int] = None,
) -> Transition:
    pending = select_bid(requirement, bid_id, now=now)
    return confirm_payment(requirement, pending, method, now=now)


class BidLifecycleManager:

    def __init__(self, store: MarketplaceStore, known_cities: Optional[List[str]] = None):
        self.store = store
        self.known_cities = known_cities
        self._pending: Dict[str, PendingAcceptance] = {}

    def create_requirement(self, buyer: User, **fields) -> ProductRequirement:
        try:
            requirement = create_requirement(buyer, known_cities=self.known_cities, **fields)
        except ValidationRejected as e:
            logger.warning(f"Requirement from {buyer.id} rejected: {e.message}")
            raise
        self.store.add_request(requirement)
        logger.info(f"Buyer {buyer.id} posted requirement {requirement.id} in {requirement.location}")
        return requirement

    def place_bid(
        self,
        request_id: str,
        seller: User,
        amount: int,
        delivery_days: int,
        notes: str = "",
    ) -> Transition:
        with self.store.lock:
            current = self.store.requests.require(request_id)
            try:
                updated, notifications = place_bid(current, seller, amount, delivery_days, notes)
            except MarketplaceError as e:
                logger.warning(f"Bid by {seller.vendor_name} on {request_id} rejected: {e}")
                raise
            self.store.commit(updated, notifications)

        logger.info(
            f"{seller.vendor_name} bid {amount} on {request_id}, "
            f"{len(notifications)} competitors notified"
        )
        return updated, notifications

    def pending_for(self, buyer: User) -> Optional[PendingAcceptance]:
        return self._pending.get(buyer.id)

    def select_bid(self, request_id: str, bid_id: str, buyer: User) -> PendingAcceptance:
        with self.store.lock:
            current = self.store.requests.require(request_id)
            pending = select_bid(current, bid_id, buyer)
            self._pending[buyer.id] = pending
        logger.info(f"Buyer {buyer.id} selected bid {bid_id} on {request_id}, awaiting payment")
        return pending

    def cancel_pending(self, buyer: User) -> Optional[PendingAcceptance]:
        with self.store.lock:
            pending = self._pending.pop(buyer.id, None)
        if pending:
            logger.info(f"Buyer {buyer.id} cancelled pending acceptance on {pending.requirement_id}")
        return pending

    def confirm_payment(self, request_id: str, buyer: User, method: PaymentMethod) -> Transition:
        with self.store.lock:
            pending = self._pending.get(buyer.id)
            if pending is None or pending.requirement_id != request_id:
                logger.warning(f"Buyer {buyer.id} confirmed payment on {request_id} without a selected bid")
                raise PendingAcceptanceError(f"No bid selected for '{request_id}'", request_id)

            current = self.store.requests.require(request_id)
            try:
                updated, notifications = confirm_payment(current, pending, method)
            except MarketplaceError as e:
                logger.warning(f"Payment confirmation on {request_id} rejected: {e}")
                self._pending.pop(buyer.id, None)
                raise
            self.store.commit(updated, notifications)
            self._pending.pop(buyer.id, None)

        logger.info(f"Requirement {request_id} closed: winner={updated.winning_bid_id}, payment={updated.payment_method.value}")
        return updated, notifications

    def accept_bid(self, request_id: str, bid_id: str, buyer: User, method: PaymentMethod) -> Transition:
        with self.store.lock:
            self.select_bid(request_id, bid_id, buyer)
            return self.confirm_payment(request_id, buyer, method)
