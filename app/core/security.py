"""
Security utilities for authentication and authorization
Handles password hashing, session login state and permission checks
"""

from dataclasses import dataclass
from typing import Optional
from fastapi import Depends, Request
from passlib.context import CryptContext
from sqlalchemy.ext.asyncio import AsyncSession
import logging
import uuid

from .database import get_db
from .exceptions import UnauthorizedException, ForbiddenException
from app.models import User

logger = logging.getLogger(__name__)

# Password hashing context
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")

# Keys stored in the signed session cookie
SESSION_USER_KEY = "user_id"
SESSION_CART_KEY = "cart_session_id"

class SecurityUtils:
    """Security utility functions"""

    @staticmethod
    def verify_password(plain_password: str, hashed_password: str) -> bool:
        """Verify password against hash"""
        try:
            return pwd_context.verify(plain_password, hashed_password)
        except ValueError:
            # Malformed hash in the database
            return False

    @staticmethod
    def hash_password(password: str) -> str:
        """Hash password using bcrypt"""
        return pwd_context.hash(password)

    @staticmethod
    def generate_session_id() -> str:
        return uuid.uuid4().hex

def login_user(request: Request, user: User) -> None:
    """Bind the user to the current session"""
    request.session[SESSION_USER_KEY] = str(user.id)
    request.state.user_id = str(user.id)

def logout_user(request: Request) -> None:
    """Drop all session state, guest cart key included"""
    request.session.clear()
    request.state.user_id = None

def get_cart_session_id(request: Request, create: bool = True) -> Optional[str]:
    """Guest cart key kept in the session cookie"""
    session_id = request.session.get(SESSION_CART_KEY)
    if not session_id and create:
        session_id = SecurityUtils.generate_session_id()
        request.session[SESSION_CART_KEY] = session_id
    return session_id

@dataclass
class RequestContext:
    """Principal and cart owner key for a single request"""

    user: Optional[User]
    session_id: Optional[str]

    @property
    def is_authenticated(self) -> bool:
        return self.user is not None

    @property
    def user_id(self) -> Optional[uuid.UUID]:
        return self.user.id if self.user else None

async def get_current_user_optional(
    request: Request,
    db: AsyncSession = Depends(get_db)
) -> Optional[User]:
    """Get the signed-in user or None for guests"""
    raw_id = request.session.get(SESSION_USER_KEY)
    if not raw_id:
        return None

    try:
        user_id = uuid.UUID(raw_id)
    except (TypeError, ValueError):
        logger.warning("Discarding malformed user id in session")
        request.session.pop(SESSION_USER_KEY, None)
        return None

    user = await db.get(User, user_id)
    if user is None:
        # Account removed since login
        request.session.pop(SESSION_USER_KEY, None)
    return user

async def get_current_user(
    user: Optional[User] = Depends(get_current_user_optional)
) -> User:
    """Get the signed-in user or fail with 401"""
    if user is None:
        raise UnauthorizedException("Not authenticated")
    return user

async def require_admin(user: User = Depends(get_current_user)) -> User:
    """Allow only administrators"""
    if not user.is_admin:
        raise ForbiddenException("Admin access required")
    return user

async def get_request_context(
    request: Request,
    user: Optional[User] = Depends(get_current_user_optional)
) -> RequestContext:
    """Resolve the cart owner: user id when signed in, session id otherwise"""
    session_id = None if user else get_cart_session_id(request)
    return RequestContext(user=user, session_id=session_id)
