import secrets
import threading
from typing import Dict, List, Optional

from mydeal.core.logging_config import logger
from mydeal.core.utils import make_id
from mydeal.models.errors import IdentityError
from mydeal.models.users import User, UserRole

CITY_VENDORS: Dict[str, List[str]] = {
    "Satara": ["RAJDHANI HOME APPLIANCES", "Shisa Appliances", "E STORE"],
    "Pune": ["REAL HOME APPLIANCES", "JYOTI HOME APPLIANCES"],
    "Kolhapur": ["ORANGE HOME APPLIANCES", "NOVE APPLIANCES"],
}

CITIES = list(CITY_VENDORS.keys())


def is_registered_vendor(city: str, vendor_name: str) -> bool:
    return vendor_name in CITY_VENDORS.get(city, [])


def resolve_user(
    role: UserRole,
    email: str = "",
    name: str = "",
    city: Optional[str] = None,
    vendor_name: Optional[str] = None,
    is_signup: bool = False,
) -> User:
    """Собирает пользователя из выбранной роли и полей профиля (без проверки пароля).

    При входе продавец действует от имени первого магазина выбранного города,
    при регистрации магазин указывается явно и должен быть в реестре города.
    """
    role = UserRole(role)
    if is_signup and not name.strip():
        raise IdentityError("Name is required to sign up")
    display_name = name.strip() if is_signup else ("Demo Vendor" if role == UserRole.SELLER else "Demo User")

    if role == UserRole.BUYER:
        return User(id=make_id("u"), name=display_name, email=email, role=role)

    if not city or city not in CITY_VENDORS:
        raise IdentityError(f"Unknown city '{city}'")
    vendors = CITY_VENDORS[city]
    if is_signup:
        if not vendor_name or not is_registered_vendor(city, vendor_name):
            raise IdentityError(f"Vendor '{vendor_name}' is not registered in {city}")
        resolved = vendor_name
    else:
        if not vendors:
            raise IdentityError(f"No vendors registered in {city}")
        resolved = vendors[0]

    return User(
        id=make_id("u"),
        name=display_name,
        email=email,
        role=role,
        city=city,
        vendor_name=resolved,
    )


class SessionRegistry:
    """Mock bearer tokens for issued users."""

    def __init__(self):
        self._lock = threading.Lock()
        self._sessions: Dict[str, User] = {}

    def issue(self, user: User) -> str:
        token = secrets.token_urlsafe(24)
        with self._lock:
            self._sessions[token] = user
        logger.info(f"Issued session for {user.role.value} {user.id}")
        return token

    def resolve(self, token: Optional[str]) -> Optional[User]:
        if not token:
            return None
        with self._lock:
            return self._sessions.get(token)

    def revoke(self, token: str) -> bool:
        with self._lock:
            return self._sessions.pop(token, None) is not None


sessions = SessionRegistry()
