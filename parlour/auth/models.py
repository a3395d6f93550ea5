import uuid

from sqlalchemy import Column, DateTime, String, Text, Uuid

from parlour.core.clock import utcnow
from parlour.db.session import Base


class User(Base):
    """Dashboard user. Role is admin or super_admin."""

    __tablename__ = "users"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    email = Column(String(255), nullable=False, unique=True)  # Stored lowercased
    name = Column(String(255), nullable=False)
    password_hash = Column(Text, nullable=False)
    role = Column(String(20), nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
