"""ORM model for the shared per-panel access passwords."""

from sqlalchemy import CheckConstraint, Column, DateTime, Integer, String, func

from portal.models.base import Base

PANEL_TYPES = ("visitors", "prayers", "raffles")


class AccessPassword(Base):
    """
    Shared secret gating one public panel (not tied to any user).

    password is stored in plain text and compared verbatim.
    """

    __tablename__ = "access_passwords"
    __table_args__ = (
        CheckConstraint("panel_type IN ('visitors', 'prayers', 'raffles')", name="panel_type"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    panel_type = Column(String(32), nullable=False, unique=True, index=True)
    password = Column(String(255), nullable=False)
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
