import uuid

from sqlalchemy import Column, DateTime, ForeignKey, String, Text, Uuid
from sqlalchemy.orm import relationship

from parlour.auth.models import User  # noqa: F401  registers the assigner target
from parlour.core.clock import utcnow
from parlour.db.session import Base


class Task(Base):
    """Task assigned to an employee by a dashboard user."""

    __tablename__ = "tasks"

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=False)
    assigned_to = Column(Uuid(as_uuid=True), ForeignKey("employees.id", ondelete="CASCADE"), nullable=False)
    assigned_by = Column(Uuid(as_uuid=True), ForeignKey("users.id", ondelete="RESTRICT"), nullable=False)
    status = Column(String(20), nullable=False, default="pending")  # pending, in_progress, completed, cancelled
    priority = Column(String(10), nullable=False, default="medium")  # low, medium, high
    due_date = Column(DateTime, nullable=False)
    created_at = Column(DateTime, default=utcnow, nullable=False)
    updated_at = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    assignee = relationship("Employee", foreign_keys=[assigned_to])
    assigner = relationship("User", foreign_keys=[assigned_by])
