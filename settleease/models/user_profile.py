"""User profile model"""
import enum
from datetime import datetime, timezone

from sqlalchemy import Column, DateTime, Enum, String
from sqlalchemy.dialects.postgresql import UUID

from settleease.database import Base


class UserRole(str, enum.Enum):
    """Role of an authenticated user"""
    ADMIN = "admin"
    USER = "user"


class UserProfile(Base):
    """Role record for an auth-provider user"""

    __tablename__ = "user_profiles"

    user_id = Column(UUID(as_uuid=True), primary_key=True)
    role = Column(
        Enum(UserRole, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=UserRole.USER,
    )
    display_name = Column(String(255), nullable=True)
    created_at = Column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), nullable=False
    )

    @property
    def is_admin(self) -> bool:
        return self.role == UserRole.ADMIN

    def __repr__(self) -> str:
        return f"<UserProfile(user_id={self.user_id}, role={self.role})>"
