"""SQLAlchemy ORM models."""

from portal.models.access_password import AccessPassword
from portal.models.base import Base
from portal.models.user import InternalUser

__all__ = ["AccessPassword", "Base", "InternalUser"]
