import uuid

from sqlalchemy import Boolean, Column, Date, DateTime, String, Uuid

from parlour.core.clock import utcnow
from parlour.db.session import Base


class Employee(Base):
    """Employee record. Soft delete only (is_active)."""

    __tablename__ = "employees"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    name = Column(String(255), nullable=False)
    email = Column(String(255), nullable=False, unique=True)  # Stored lowercased
    phone = Column(String(50), nullable=False)
    position = Column(String(100), nullable=False)
    department = Column(String(100), nullable=False)
    join_date = Column(Date, nullable=False)
    is_active = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)
