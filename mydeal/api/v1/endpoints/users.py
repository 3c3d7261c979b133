from fastapi import APIRouter, Depends, HTTPException
from mydeal.api.deps import require_user
from mydeal.core.logging_config import logger
from mydeal.models.errors import IdentityError
from mydeal.models.users import User
from mydeal.schemas.users import LoginRequest, LoginResponse, VendorRegistryResponse
from mydeal.services.identity import CITIES, CITY_VENDORS, resolve_user, sessions

router = APIRouter()


@router.post("/login", response_model=LoginResponse)
async def login(data: LoginRequest):
    try:
        user = resolve_user(
            data.role,
            email=data.email,
            name=data.name,
            city=data.city,
            vendor_name=data.vendor_name,
            is_signup=data.is_signup,
        )
    except IdentityError as e:
        logger.warning(f"Login rejected: {e.message}")
        raise HTTPException(status_code=422, detail=e.message)

    token = sessions.issue(user)
    return LoginResponse(user=user, access_token=token)


@router.get("/me", response_model=User)
async def me(user: User = Depends(require_user)):
    return user


@router.get("/vendors", response_model=VendorRegistryResponse)
async def vendors():
    return VendorRegistryResponse(cities=CITIES, vendors=CITY_VENDORS)
