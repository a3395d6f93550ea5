import uuid

from sqlalchemy import Column, DateTime, ForeignKey, Index, Integer, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import relationship

from parlour.core.clock import utcnow
from parlour.db.session import Base


class AttendanceEvent(Base):
    """One punch in the append-only attendance ledger. Never updated or deleted."""

    __tablename__ = "attendance_events"
    __table_args__ = (
        # Conditional append: a second writer for the same slot fails on commit
        UniqueConstraint("employee_id", "sequence", name="uq_attendance_employee_sequence"),
    )

    id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)
    employee_id = Column(Uuid(as_uuid=True), ForeignKey("employees.id", ondelete="RESTRICT"), nullable=False)
    action = Column(String(20), nullable=False)  # punch_in | punch_out
    timestamp = Column(DateTime, nullable=False, default=utcnow)
    # 1-based position in the employee's ledger; breaks timestamp ties by creation order
    sequence = Column(Integer, nullable=False)
    location = Column(Text, nullable=True)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=utcnow, nullable=False)

    employee = relationship("Employee", foreign_keys=[employee_id])


Index(
    "ix_attendance_events_employee_timestamp",
    AttendanceEvent.employee_id,
    AttendanceEvent.timestamp.desc(),
)
