"""In-memory marketplace storage.

``RequestStore`` owns the canonical requirement collection, ``NotificationStore``
owns the notification log. Readers only ever get frozen models with their own
copy of ``specs``, so a snapshot cannot be changed behind the store's back.
``MarketplaceStore.commit`` is the single write path for lifecycle changes: the
requirement and the notifications it produced land together under one lock or
not at all.
"""
import threading
from typing import Dict, Iterable, List, Optional, Tuple

from mydeal.core.logging_config import logger
from mydeal.models.errors import RequirementNotFoundError
from mydeal.models.notifications import AppNotification, Recipient
from mydeal.models.requests import ProductRequirement


def _detached(requirement: ProductRequirement) -> ProductRequirement:
    # specs единственное изменяемое поле, копируем его на входе и выходе
    return requirement.model_copy(update={"specs": dict(requirement.specs)})


class RequestStore:

    def __init__(self):
        self._requests: Dict[str, ProductRequirement] = {}

    def snapshot(self) -> Tuple[ProductRequirement, ...]:
        return tuple(_detached(r) for r in self._requests.values())

    def get(self, request_id: str) -> Optional[ProductRequirement]:
        requirement = self._requests.get(request_id)
        return _detached(requirement) if requirement is not None else None

    def require(self, request_id: str) -> ProductRequirement:
        requirement = self._requests.get(request_id)
        if requirement is None:
            logger.warning(f"Requirement {request_id} not found")
            raise RequirementNotFoundError(f"Requirement '{request_id}' not found", request_id)
        return _detached(requirement)

    def insert(self, requirement: ProductRequirement) -> None:
        if requirement.id in self._requests:
            raise ValueError(f"Requirement {requirement.id} already exists")
        self._requests[requirement.id] = _detached(requirement)

    def replace(self, requirement: ProductRequirement) -> None:
        if requirement.id not in self._requests:
            raise RequirementNotFoundError(f"Requirement '{requirement.id}' not found", requirement.id)
        self._requests[requirement.id] = _detached(requirement)

    def __len__(self) -> int:
        return len(self._requests)


class NotificationStore:

    def __init__(self):
        self._items: List[AppNotification] = []

    def add(self, notification: AppNotification) -> None:
        # новые сверху
        self._items.insert(0, notification)

    def all(self) -> Tuple[AppNotification, ...]:
        return tuple(self._items)

    def for_recipient(self, recipient: Recipient) -> List[AppNotification]:
        items = [n for n in self._items if n.recipient == recipient]
        return sorted(items, key=lambda n: n.timestamp, reverse=True)

    def unread_count(self, recipient: Recipient) -> int:
        return sum(1 for n in self._items if n.recipient == recipient and not n.read)

    def mark_read(self, notification_id: str) -> Optional[AppNotification]:
        for idx, item in enumerate(self._items):
            if item.id == notification_id:
                if not item.read:
                    item = item.model_copy(update={"read": True})
                    self._items[idx] = item
                return item
        return None

    def clear_all(self, recipient: Recipient) -> int:
        before = len(self._items)
        self._items = [n for n in self._items if n.recipient != recipient]
        return before - len(self._items)


class MarketplaceStore:

    def __init__(self):
        self.lock = threading.RLock()
        self.requests = RequestStore()
        self.notifications = NotificationStore()

    def snapshot(self) -> Tuple[ProductRequirement, ...]:
        with self.lock:
            return self.requests.snapshot()

    def get_request(self, request_id: str) -> ProductRequirement:
        with self.lock:
            return self.requests.require(request_id)

    def add_request(self, requirement: ProductRequirement) -> ProductRequirement:
        with self.lock:
            self.requests.insert(requirement)
        logger.info(f"Requirement {requirement.id} stored, location={requirement.location}")
        return requirement

    def commit(
        self,
        requirement: ProductRequirement,
        notifications: Iterable[AppNotification] = (),
    ) -> ProductRequirement:
        notifications = list(notifications)
        with self.lock:
            self.requests.replace(requirement)
            for notification in notifications:
                self.notifications.add(notification)
        logger.debug(f"Committed requirement {requirement.id} with {len(notifications)} notifications")
        return requirement

    def notifications_for(self, recipient: Recipient) -> List[AppNotification]:
        with self.lock:
            return self.notifications.for_recipient(recipient)

    def unread_count(self, recipient: Recipient) -> int:
        with self.lock:
            return self.notifications.unread_count(recipient)

    def mark_read(self, notification_id: str) -> Optional[AppNotification]:
        with self.lock:
            return self.notifications.mark_read(notification_id)

    def clear_notifications(self, recipient: Recipient) -> int:
        with self.lock:
            removed = self.notifications.clear_all(recipient)
        logger.info(f"Cleared {removed} notifications for {recipient}")
        return removed


_store: Optional[MarketplaceStore] = None


def get_store() -> MarketplaceStore:
    global _store
    if _store is None:
        _store = MarketplaceStore()
    return _store


def reset_store() -> MarketplaceStore:
    global _store
    _store = MarketplaceStore()
    return _store
