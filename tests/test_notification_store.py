"""Tests for the notification log and recipient identity mapping."""

from conftest import make_buyer, make_seller
from mydeal.db.store import NotificationStore
from mydeal.models.notifications import AppNotification, NotificationType, Recipient, recipient_for
from mydeal.models.users import User, UserRole


def _notification(notification_id: str, recipient: Recipient, timestamp: int) -> AppNotification:
    return AppNotification(
        id=notification_id,
        recipient=recipient,
        message=f"message {notification_id}",
        type=NotificationType.INFO,
        timestamp=timestamp,
    )


class TestRecipient:
    def test_buyer_id_and_vendor_name_never_collide(self) -> None:
        assert Recipient.buyer("E STORE") != Recipient.vendor("E STORE")

    def test_mapping_by_role(self) -> None:
        buyer = make_buyer("buyer-9")
        seller = make_seller("E STORE", city="Satara")
        assert recipient_for(buyer) == Recipient.buyer("buyer-9")
        assert recipient_for(seller) == Recipient.vendor("E STORE")

    def test_seller_without_vendor_has_no_recipient(self) -> None:
        seller = User(id="u-1", name="x", role=UserRole.SELLER, city="Pune")
        assert recipient_for(seller) is None


class TestNotificationStore:
    def test_add_prepends(self) -> None:
        store = NotificationStore()
        vendor = Recipient.vendor("E STORE")
        store.add(_notification("n1", vendor, 1))
        store.add(_notification("n2", vendor, 2))
        assert [n.id for n in store.all()] == ["n2", "n1"]

    def test_for_recipient_sorted_by_timestamp_not_insertion(self) -> None:
        store = NotificationStore()
        vendor = Recipient.vendor("E STORE")
        store.add(_notification("late", vendor, 300))
        store.add(_notification("early", vendor, 100))
        store.add(_notification("other", Recipient.buyer("E STORE"), 500))
        assert [n.id for n in store.for_recipient(vendor)] == ["late", "early"]

    def test_mark_read_is_idempotent(self) -> None:
        store = NotificationStore()
        vendor = Recipient.vendor("E STORE")
        store.add(_notification("n1", vendor, 1))
        assert store.unread_count(vendor) == 1
        assert store.mark_read("n1").read is True
        assert store.mark_read("n1").read is True
        assert store.unread_count(vendor) == 0
        assert len(store.all()) == 1

    def test_mark_read_unknown_id(self) -> None:
        assert NotificationStore().mark_read("missing") is None

    def test_clear_all_only_for_recipient(self) -> None:
        store = NotificationStore()
        vendor = Recipient.vendor("E STORE")
        buyer = Recipient.buyer("E STORE")
        store.add(_notification("n1", vendor, 1))
        store.add(_notification("n2", buyer, 2))
        store.add(_notification("n3", vendor, 3))
        assert store.clear_all(vendor) == 2
        assert [n.id for n in store.all()] == ["n2"]
