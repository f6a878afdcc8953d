"""
User repository for database operations.

Provides async data access for users and their roles using SQLAlchemy
async sessions. Works against SQLite (aiosqlite) and SQL Server (aioodbc).
"""

from typing import List, Optional

import structlog
from sqlalchemy import insert, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import async_sessionmaker

from api.src.models.auth import RoleModel, User, UserDB, user_roles

logger = structlog.get_logger(__name__)


def _to_user_db(user: User, roles: Optional[List[str]] = None) -> UserDB:
    """Convert an ORM user to the service-level model."""
    return UserDB(
        id=user.id,
        email=user.email,
        password_hash=user.password_hash,
        first_name=user.first_name,
        last_name=user.last_name,
        age=user.age,
        created_at=user.created_at,
        roles=roles if roles is not None else [role.name for role in user.roles]
    )


class UserRepository:
    """Repository for user and role database operations."""

    def __init__(self, session_factory: async_sessionmaker):
        """
        Initialize user repository.

        Args:
            session_factory: Factory producing async sessions
        """
        self.session_factory = session_factory

    async def create_user(
        self,
        email: str,
        password_hash: str,
        first_name: Optional[str] = None,
        last_name: Optional[str] = None,
        age: Optional[int] = None
    ) -> UserDB:
        """
        Create a new user without roles.

        Args:
            email: Email address
            password_hash: Hashed password
            first_name: First name
            last_name: Last name
            age: Age in years

        Returns:
            Created user

        Raises:
            ValueError: If the email already exists
        """
        async with self.session_factory() as session:
            user = User(
                email=email,
                password_hash=password_hash,
                first_name=first_name,
                last_name=last_name,
                age=age,
                roles=[]
            )
            session.add(user)

            try:
                await session.commit()
            except IntegrityError:
                await session.rollback()
                logger.warning("email_already_exists", email=email)
                raise ValueError(f"Email '{email}' already exists")

            await session.refresh(user, attribute_names=["created_at"])

            logger.info("user_created", user_id=user.id, email=email)
            return _to_user_db(user, roles=[])

    async def get_user_by_id(self, user_id: int) -> Optional[UserDB]:
        """
        Get user by ID.

        Args:
            user_id: User ID

        Returns:
            User or None if not found
        """
        async with self.session_factory() as session:
            user = await session.scalar(select(User).where(User.id == user_id))

            if user is None:
                logger.debug("user_not_found", user_id=user_id)
                return None

            return _to_user_db(user)

    async def get_user_by_email(self, email: str) -> Optional[UserDB]:
        """
        Get user by email.

        Args:
            email: Email address

        Returns:
            User or None if not found
        """
        async with self.session_factory() as session:
            user = await session.scalar(select(User).where(User.email == email))

            if user is None:
                logger.debug("user_not_found", email=email)
                return None

            return _to_user_db(user)

    async def list_users(self) -> List[UserDB]:
        """
        List all users, newest first.

        Returns:
            List of users with their roles
        """
        async with self.session_factory() as session:
            result = await session.scalars(
                select(User).order_by(User.created_at.desc(), User.id.desc())
            )
            return [_to_user_db(user) for user in result.all()]

    async def get_user_roles(self, user_id: int) -> List[str]:
        """
        Get user roles.

        Args:
            user_id: User ID

        Returns:
            List of role names, sorted
        """
        async with self.session_factory() as session:
            result = await session.scalars(
                select(RoleModel.name)
                .join(user_roles, user_roles.c.role_id == RoleModel.id)
                .where(user_roles.c.user_id == user_id)
                .order_by(RoleModel.name)
            )
            return list(result.all())

    async def assign_role(self, user_id: int, role_name: str) -> bool:
        """
        Give a user a role.

        Args:
            user_id: User ID
            role_name: Name of an existing role

        Returns:
            True if a new assignment was stored, False if the role is
            unknown or already assigned
        """
        async with self.session_factory() as session:
            role_id = await session.scalar(
                select(RoleModel.id).where(RoleModel.name == role_name)
            )
            if role_id is None:
                logger.warning("role_not_found", role=role_name)
                return False

            existing = await session.scalar(
                select(user_roles.c.user_id).where(
                    user_roles.c.user_id == user_id,
                    user_roles.c.role_id == role_id
                )
            )
            if existing is not None:
                logger.debug("role_already_assigned", user_id=user_id, role=role_name)
                return False

            await session.execute(
                insert(user_roles).values(user_id=user_id, role_id=role_id)
            )
            await session.commit()

            logger.info("role_assigned", user_id=user_id, role=role_name)
            return True
