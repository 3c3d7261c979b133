from pydantic import BaseModel
from typing import Dict, List, Optional
from mydeal.models.users import User, UserRole


class LoginRequest(BaseModel):
    role: UserRole
    email: str = ""
    name: str = ""
    city: Optional[str] = None
    vendor_name: Optional[str] = None
    is_signup: bool = False


class LoginResponse(BaseModel):
    user: User
    access_token: str
    token_type: str = "bearer"


class VendorRegistryResponse(BaseModel):
    cities: List[str]
    vendors: Dict[str, List[str]]
