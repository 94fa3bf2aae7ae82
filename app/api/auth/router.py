"""
Account endpoints: register, login, logout and profile
"""

from fastapi import APIRouter, Depends, Request, status
from sqlalchemy.ext.asyncio import AsyncSession
import logging

from app.core.config import settings
from app.core.database import get_db
from app.core.security import (
    SESSION_CART_KEY,
    get_current_user,
    login_user,
    logout_user,
)
from app.middleware.rate_limit import auth_limiter
from app.models import User
from app.schemas.user import (
    RegisterRequest,
    LoginRequest,
    LoginResponse,
    ProfileUpdateRequest,
    UserResponse,
)
from app.api.cart.services import CartService
from .services import AuthService

logger = logging.getLogger(__name__)

router = APIRouter()


async def _start_session(request: Request, db: AsyncSession, user: User) -> None:
    """Log the user in and fold the guest cart into theirs"""
    guest_session_id = request.session.pop(SESSION_CART_KEY, None)
    login_user(request, user)

    if guest_session_id and settings.CART_MERGE_ON_LOGIN:
        await CartService(db).merge_carts(user.id, guest_session_id)


@router.post(
    "/register",
    response_model=UserResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Register",
    description="Creates a customer account and signs it in. isAdmin in the payload is ignored.",
)
@auth_limiter
async def register(
    request: Request,
    data: RegisterRequest,
    db: AsyncSession = Depends(get_db),
):
    user = await AuthService(db).register(data)
    await _start_session(request, db, user)
    return user


@router.post("/login", response_model=LoginResponse, summary="Login")
@auth_limiter
async def login(
    request: Request,
    credentials: LoginRequest,
    db: AsyncSession = Depends(get_db),
):
    user = await AuthService(db).authenticate(credentials.username_or_email, credentials.password)
    await _start_session(request, db, user)
    return {
        "user": user,
        "redirect_to": "/admin/dashboard" if user.is_admin else "/",
    }


@router.post("/logout", summary="Logout")
async def logout(request: Request):
    logout_user(request)
    return {"message": "Logged out successfully"}


@router.get("/user", response_model=UserResponse, summary="Current user")
async def get_me(current_user: User = Depends(get_current_user)):
    return current_user


@router.put("/user/profile", response_model=UserResponse, summary="Update profile")
async def update_profile(
    data: ProfileUpdateRequest,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
):
    return await AuthService(db).update_profile(current_user, data)
