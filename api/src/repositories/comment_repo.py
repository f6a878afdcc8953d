"""
Comment repository for database operations.

Comments are read together with their author's name so the listing does
not need a second query per row.
"""

from typing import List

import structlog
from sqlalchemy import select
from sqlalchemy.ext.asyncio import async_sessionmaker

from api.src.models.auth import Comment, CommentResponse, User

logger = structlog.get_logger(__name__)


class CommentRepository:
    """Repository for comment database operations."""

    def __init__(self, session_factory: async_sessionmaker):
        """
        Initialize comment repository.

        Args:
            session_factory: Factory producing async sessions
        """
        self.session_factory = session_factory

    async def add_comment(self, user_id: int, content: str) -> int:
        """
        Store a comment as given.

        Args:
            user_id: Author ID
            content: Comment text (already encoded by the caller)

        Returns:
            ID of the new comment
        """
        async with self.session_factory() as session:
            comment = Comment(user_id=user_id, content=content)
            session.add(comment)
            await session.commit()

            logger.info("comment_added", comment_id=comment.id, user_id=user_id)
            return comment.id

    async def list_comments(self) -> List[CommentResponse]:
        """
        List all comments with author names, newest first.

        Returns:
            List of comments
        """
        async with self.session_factory() as session:
            result = await session.execute(
                select(
                    Comment.id,
                    Comment.user_id,
                    Comment.content,
                    Comment.created_at,
                    User.first_name,
                    User.last_name,
                )
                .join(User, User.id == Comment.user_id)
                .order_by(Comment.created_at.desc(), Comment.id.desc())
            )

            return [
                CommentResponse(
                    id=row.id,
                    user_id=row.user_id,
                    content=row.content,
                    created_at=row.created_at,
                    user_name=" ".join(part for part in (row.first_name, row.last_name) if part)
                )
                for row in result.all()
            ]
