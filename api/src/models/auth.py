"""
Authentication and user management models.

Provides both SQLAlchemy ORM models and Pydantic schemas for:
- User, role and comment entities (database and API)
- Authentication requests and results
- JWT token claims and the authenticated principal
- External (OAuth) login profiles

Uses SQLAlchemy 2.0 declarative syntax with async compatibility. Integer
primary keys keep the schema portable between SQLite and SQL Server.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field, model_validator
from sqlalchemy import Column, DateTime, ForeignKey, Integer, String, Table, Text, text
from sqlalchemy.orm import DeclarativeBase, Mapped, mapped_column, relationship


# ============================================================================
# SQLAlchemy Base
# ============================================================================


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass


# ============================================================================
# Role and Policy Enums
# ============================================================================


class Role(str, Enum):
    """
    Roles seeded into the database at startup.

    - ADMIN: Access to the user list and admin panel
    - MANAGER: Access to the manager area
    - USER: Default role given at registration
    """
    ADMIN = "Admin"
    MANAGER = "Manager"
    USER = "User"


class Policy(str, Enum):
    """Named authorization policies evaluated against token claims."""
    ADMIN_ONLY = "AdminOnly"
    MANAGER_OR_ADMIN = "ManagerOrAdmin"
    MINIMUM_AGE_18 = "MinimumAge18"


# ============================================================================
# SQLAlchemy Models
# ============================================================================


# Association table for many-to-many relationship between users and roles
user_roles = Table(
    "user_roles",
    Base.metadata,
    Column(
        "user_id",
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        primary_key=True,
        nullable=False
    ),
    Column(
        "role_id",
        Integer,
        ForeignKey("roles.id", ondelete="CASCADE"),
        primary_key=True,
        nullable=False
    ),
)


class User(Base):
    """User account with a bcrypt password hash and profile claims."""
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    email: Mapped[str] = mapped_column(
        String(255),
        unique=True,
        nullable=False,
        index=True
    )
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    first_name: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    last_name: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    age: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        server_default=text("CURRENT_TIMESTAMP")
    )

    # Relationships
    roles: Mapped[List["RoleModel"]] = relationship(
        "RoleModel",
        secondary=user_roles,
        back_populates="users",
        lazy="selectin"
    )
    comments: Mapped[List["Comment"]] = relationship(
        "Comment",
        back_populates="author",
        cascade="all, delete-orphan"
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<User(id={self.id}, email='{self.email}')>"


class RoleModel(Base):
    """Role row; users reach it through the user_roles association table."""
    __tablename__ = "roles"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    name: Mapped[str] = mapped_column(
        String(50),
        unique=True,
        nullable=False,
        index=True
    )

    users: Mapped[List[User]] = relationship(
        "User",
        secondary=user_roles,
        back_populates="roles"
    )

    def __repr__(self) -> str:
        """String representation."""
        return f"<RoleModel(id={self.id}, name='{self.name}')>"


class Comment(Base):
    """User comment. Content is stored HTML-encoded."""
    __tablename__ = "comments"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, autoincrement=True)
    user_id: Mapped[int] = mapped_column(
        Integer,
        ForeignKey("users.id", ondelete="CASCADE"),
        nullable=False,
        index=True
    )
    content: Mapped[str] = mapped_column(Text, nullable=False)
    created_at: Mapped[datetime] = mapped_column(
        DateTime,
        nullable=False,
        server_default=text("CURRENT_TIMESTAMP")
    )

    author: Mapped[User] = relationship("User", back_populates="comments")

    def __repr__(self) -> str:
        """String representation."""
        return f"<Comment(id={self.id}, user_id={self.user_id})>"


# ============================================================================
# Pydantic Request Models
# ============================================================================


class LoginRequest(BaseModel):
    """Login request schema."""
    email: EmailStr = Field(..., description="Email address")
    password: str = Field(..., min_length=6, description="Password")
    remember_me: bool = Field(
        default=False,
        description="Persist the auth cookie instead of using a session cookie"
    )

    model_config = {
        "json_schema_extra": {
            "example": {
                "email": "user@example.com",
                "password": "Password123!",
                "remember_me": False
            }
        }
    }


class RegisterRequest(BaseModel):
    """Registration request schema."""
    email: EmailStr = Field(..., description="Email address")
    password: str = Field(..., min_length=6, max_length=100, description="Password")
    confirm_password: Optional[str] = Field(
        default=None,
        description="Must match password when supplied"
    )
    first_name: str = Field(..., min_length=1, max_length=50, description="First name")
    last_name: str = Field(..., min_length=1, max_length=50, description="Last name")
    age: int = Field(..., ge=13, le=120, description="Age in years (13-120)")

    @model_validator(mode="after")
    def validate_passwords_match(self) -> "RegisterRequest":
        """Reject a confirmation that does not match the password."""
        if self.confirm_password is not None and self.confirm_password != self.password:
            raise ValueError("The password and confirmation password do not match")
        return self

    model_config = {
        "json_schema_extra": {
            "example": {
                "email": "new.user@example.com",
                "password": "Password123!",
                "confirm_password": "Password123!",
                "first_name": "Ada",
                "last_name": "Lovelace",
                "age": 36
            }
        }
    }


class CommentRequest(BaseModel):
    """New comment schema."""
    content: str = Field(..., min_length=1, max_length=1000, description="Comment text")


class XssDemoRequest(BaseModel):
    """Arbitrary user input echoed back encoded."""
    user_input: str = Field(default="", max_length=1000, description="Untrusted input")


# ============================================================================
# Pydantic Response Models
# ============================================================================


class UserDB(BaseModel):
    """User as loaded from the database, with role names resolved."""
    id: int
    email: str
    password_hash: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    age: Optional[int] = None
    created_at: Optional[datetime] = None
    roles: List[str] = Field(default_factory=list)

    model_config = ConfigDict(from_attributes=True)

    @property
    def full_name(self) -> str:
        """First and last name joined by a space."""
        return " ".join(part for part in (self.first_name, self.last_name) if part)


class UserSummary(BaseModel):
    """Public user fields returned after login or registration."""
    id: int
    email: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    age: Optional[int] = None
    roles: List[str] = Field(default_factory=list)

    @classmethod
    def from_user(cls, user: UserDB) -> "UserSummary":
        """Build a summary from a database user."""
        return cls(
            id=user.id,
            email=user.email,
            first_name=user.first_name,
            last_name=user.last_name,
            age=user.age,
            roles=list(user.roles)
        )


class UserResponse(UserSummary):
    """User listing entry for administrators. The hash is never exposed."""
    password_hash: str = "[HIDDEN]"
    created_at: Optional[datetime] = None


class AuthResult(BaseModel):
    """Outcome of a login or registration attempt."""
    success: bool
    message: str = ""
    token: Optional[str] = None
    user: Optional[UserDB] = None


class CommentResponse(BaseModel):
    """Comment with its author's display name."""
    id: int
    user_id: int
    content: str
    created_at: Optional[datetime] = None
    user_name: str = ""


# ============================================================================
# Token and Principal Models
# ============================================================================


class TokenPayload(BaseModel):
    """Validated JWT claims."""
    sub: str
    email: str
    name: str = ""
    given_name: str = ""
    family_name: str = ""
    age: Optional[int] = None
    user_id: int
    roles: List[str] = Field(default_factory=list)
    iss: Optional[str] = None
    aud: Optional[str] = None
    exp: int
    iat: Optional[int] = None


class CurrentUser(BaseModel):
    """Authenticated principal built from token claims."""
    id: int
    email: str
    name: str = ""
    given_name: str = ""
    family_name: str = ""
    age: Optional[int] = None
    roles: List[str] = Field(default_factory=list)
    authentication_type: str = "Bearer"
    claims: Dict[str, Any] = Field(default_factory=dict)

    def has_role(self, role: Role) -> bool:
        """Whether the user carries the given role claim."""
        return role.value in self.roles

    def has_any_role(self, *roles: Role) -> bool:
        """Whether the user carries at least one of the given roles."""
        return any(self.has_role(role) for role in roles)

    def claim_list(self) -> List[Dict[str, str]]:
        """Claims as (type, value) pairs, one entry per role."""
        pairs: List[Dict[str, str]] = []
        for claim_type, value in self.claims.items():
            values = value if isinstance(value, list) else [value]
            pairs.extend({"type": claim_type, "value": str(v)} for v in values)
        return pairs


# ============================================================================
# External Login Models
# ============================================================================


class OAuthProviderInfo(BaseModel):
    """Display data for an external login provider."""
    name: str
    display_name: str
    icon: str
    enabled: bool = False


class ExternalProfile(BaseModel):
    """User profile mapped from a provider's userinfo response."""
    provider: str
    id: str
    email: Optional[str] = None
    name: Optional[str] = None
    given_name: Optional[str] = None
    family_name: Optional[str] = None
    picture: Optional[str] = None
    locale: Optional[str] = None
    email_verified: Optional[bool] = None
    raw_claims: Dict[str, Any] = Field(default_factory=dict)


class ErrorResponse(BaseModel):
    """Error body produced by the exception handlers."""
    detail: Any
