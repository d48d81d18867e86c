"""ORM model for internal (dashboard) user accounts."""

from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, Integer, String, func

from portal.models.base import Base

ROLE_ADMIN = "admin"
ROLE_MEMBER = "member"
VALID_ROLES = (ROLE_ADMIN, ROLE_MEMBER)


class InternalUser(Base):
    """
    Administrator/member account for the dashboard.

    role: 'admin' or 'member'. Inactive accounts keep their row but cannot log in.
    """

    __tablename__ = "internal_users"
    __table_args__ = (CheckConstraint("role IN ('admin', 'member')", name="role"),)

    id = Column(Integer, primary_key=True, autoincrement=True)
    email = Column(String(320), nullable=False, unique=True, index=True)
    password_hash = Column(String(255), nullable=False)
    name = Column(String(255), nullable=True)
    role = Column(String(32), nullable=False, default=ROLE_MEMBER)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
    )
    updated_at = Column(
        DateTime(timezone=True),
        nullable=False,
        server_default=func.now(),
        onupdate=func.now(),
    )
