import enum
from typing import Optional
from pydantic import BaseModel


class UserRole(str, enum.Enum):
    BUYER = "BUYER"
    SELLER = "SELLER"


class User(BaseModel):
    id: str
    name: str
    email: str = ""
    role: UserRole
    city: Optional[str] = None
    vendor_name: Optional[str] = None

    class Config:
        frozen = True

    @property
    def is_seller(self) -> bool:
        return self.role == UserRole.SELLER

    @property
    def has_vendor_identity(self) -> bool:
        return self.is_seller and bool((self.vendor_name or "").strip())
