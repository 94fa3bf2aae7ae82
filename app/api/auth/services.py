"""
Authentication service layer
Registration, credential checks and profile updates
"""

from typing import List, Optional
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError
from sqlalchemy import select, func, or_
import logging

from app.models import User
from app.core.security import SecurityUtils
from app.core.exceptions import DuplicateResourceException, UnauthorizedException
from app.schemas.user import RegisterRequest, ProfileUpdateRequest

logger = logging.getLogger(__name__)

class AuthService:
    """Authentication service"""

    def __init__(self, db: AsyncSession):
        self.db = db

    async def get_by_username(self, username: str) -> Optional[User]:
        result = await self.db.execute(
            select(User).where(func.lower(User.username) == username.lower())
        )
        return result.scalar_one_or_none()

    async def get_by_email(self, email: str) -> Optional[User]:
        result = await self.db.execute(
            select(User).where(func.lower(User.email) == email.lower())
        )
        return result.scalar_one_or_none()

    async def register(self, request: RegisterRequest) -> User:
        """
        Register new user

        Args:
            request: Registration request data

        Returns:
            The created, non-admin user

        Raises:
            DuplicateResourceException: If username or email already exists
        """
        if request.is_admin is not None:
            logger.warning(
                f"Registration for '{request.username}' tried to set isAdmin={request.is_admin}; ignored"
            )

        if await self.get_by_username(request.username):
            raise DuplicateResourceException("User", "username", request.username)

        if await self.get_by_email(request.email):
            raise DuplicateResourceException("User", "email", request.email)

        user = User(
            username=request.username,
            email=request.email.lower(),
            password_hash=SecurityUtils.hash_password(request.password),
            first_name=request.first_name,
            last_name=request.last_name,
            phone=request.phone,
            is_admin=False,
        )
        self.db.add(user)
        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise DuplicateResourceException("User", "username or email", request.username)

        await self.db.refresh(user)
        logger.info(f"User registered: {user.username}")
        return user

    async def authenticate(self, username_or_email: str, password: str) -> User:
        """
        Check credentials

        Raises:
            UnauthorizedException: Unknown user or wrong password
        """
        identifier = username_or_email.strip()
        result = await self.db.execute(
            select(User).where(
                or_(
                    func.lower(User.username) == identifier.lower(),
                    func.lower(User.email) == identifier.lower(),
                )
            )
        )
        user = result.scalars().first()

        if not user or not SecurityUtils.verify_password(password, user.password_hash):
            logger.warning(f"Failed login for '{identifier}'")
            raise UnauthorizedException("Invalid username/email or password", error_code="INVALID_CREDENTIALS")

        logger.info(f"User logged in: {user.username}")
        return user

    async def update_profile(self, user: User, request: ProfileUpdateRequest) -> User:
        """
        Update profile fields

        Raises:
            DuplicateResourceException: If the new email belongs to someone else
        """
        update_data = request.model_dump(exclude_unset=True)

        email = update_data.pop("email", None)
        if email and email.lower() != user.email.lower():
            existing = await self.get_by_email(email)
            if existing and existing.id != user.id:
                raise DuplicateResourceException("User", "email", email)
            user.email = email.lower()

        for field, value in update_data.items():
            setattr(user, field, value)

        try:
            await self.db.commit()
        except IntegrityError:
            await self.db.rollback()
            raise DuplicateResourceException("User", "email", email)

        await self.db.refresh(user)
        return user

    async def list_users(self) -> List[User]:
        result = await self.db.execute(select(User).order_by(User.created_at.desc()))
        return list(result.scalars().all())
