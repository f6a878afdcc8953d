"""
User service: profile lookups, user listing and comments.

Comment content is HTML-encoded before it is stored so that it renders as
text wherever it is displayed.
"""

from typing import List, Optional

import structlog
from sqlalchemy.exc import SQLAlchemyError

from api.src.models.auth import CommentResponse, UserDB
from api.src.repositories.comment_repo import CommentRepository
from api.src.repositories.user_repo import UserRepository
from shared.security import html_encode

logger = structlog.get_logger(__name__)


class UserService:
    """Read-mostly operations over users and their comments."""

    def __init__(self, user_repo: UserRepository, comment_repo: CommentRepository):
        self.user_repo = user_repo
        self.comment_repo = comment_repo

    async def get_user_by_id(self, user_id: int) -> Optional[UserDB]:
        return await self.user_repo.get_user_by_id(user_id)

    async def get_user_by_email(self, email: str) -> Optional[UserDB]:
        return await self.user_repo.get_user_by_email(email)

    async def list_users(self) -> List[UserDB]:
        """All users, newest first."""
        return await self.user_repo.list_users()

    async def get_user_roles(self, user_id: int) -> List[str]:
        return await self.user_repo.get_user_roles(user_id)

    async def get_comments(self) -> List[CommentResponse]:
        """All comments with author names, newest first."""
        return await self.comment_repo.list_comments()

    async def add_comment(self, user_id: int, content: str) -> bool:
        """
        Encode and store a comment.

        Args:
            user_id: Author ID
            content: Raw comment text

        Returns:
            True if the comment was stored, False if the insert failed
        """
        encoded = html_encode(content)
        try:
            comment_id = await self.comment_repo.add_comment(user_id, encoded)
        except SQLAlchemyError as e:
            logger.error("comment_store_failed", user_id=user_id, error=str(e))
            return False

        logger.info(
            "comment_stored",
            comment_id=comment_id,
            user_id=user_id,
            encoded=encoded != content
        )
        return True
