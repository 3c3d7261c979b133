import enum
from typing import Optional
from pydantic import BaseModel

from mydeal.models.users import User, UserRole


class RecipientKind(str, enum.Enum):
    BUYER = "buyer"
    VENDOR = "vendor"


class Recipient(BaseModel):
    """Адресат уведомления: id покупателя или имя магазина.

    Пространства имён разделены: buyer("x") != vendor("x").
    """
    kind: RecipientKind
    value: str

    class Config:
        frozen = True

    @classmethod
    def buyer(cls, user_id: str) -> "Recipient":
        return cls(kind=RecipientKind.BUYER, value=user_id)

    @classmethod
    def vendor(cls, vendor_name: str) -> "Recipient":
        return cls(kind=RecipientKind.VENDOR, value=vendor_name)

    def __str__(self) -> str:
        return f"{self.kind.value}:{self.value}"


def recipient_for(user: User) -> Optional[Recipient]:
    if user.role == UserRole.SELLER:
        if not user.vendor_name:
            return None
        return Recipient.vendor(user.vendor_name)
    return Recipient.buyer(user.id)


class NotificationType(str, enum.Enum):
    INFO = "info"
    WARNING = "warning"
    SUCCESS = "success"


class AppNotification(BaseModel):
    id: str
    recipient: Recipient
    message: str
    type: NotificationType = NotificationType.INFO
    timestamp: int
    read: bool = False
    related_request_id: Optional[str] = None

    class Config:
        frozen = True
