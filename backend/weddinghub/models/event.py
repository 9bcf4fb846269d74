"""
Event model: the occasion a customer is planning.

Key design decisions:
- `booking_ids` is a back-reference list owned by the event, not a
  relationship. Bookings and events are separate collections joined by id and
  the list is maintained by explicit writes from the booking service.
- Index on `start_date` for the owner's listing sorted by date
"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, Index, CheckConstraint, JSON, Numeric

from weddinghub.db.base import Base, TimestampMixin

EVENT_TYPES = ("Wedding", "Social Gathering")
EVENT_STATUSES = ("Planning", "Confirmed", "In Progress", "Completed", "Cancelled")


class Event(Base, TimestampMixin):
    __tablename__ = "events"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    event_type = Column(String(32), nullable=False)
    event_name = Column(String(255), nullable=False)
    description = Column(String(2000), nullable=True)
    start_date = Column(DateTime(timezone=True), nullable=False)
    end_date = Column(DateTime(timezone=True), nullable=False)
    venue_name = Column(String(255), nullable=True)
    city = Column(String(120), nullable=True)
    guest_count = Column(Integer, nullable=False)
    budget_amount = Column(Numeric(14, 2, asdecimal=False), nullable=True)
    budget_currency = Column(String(3), nullable=False, default="INR")
    status = Column(String(20), nullable=False, default="Planning")
    booking_ids = Column(JSON, nullable=False, default=list)

    __table_args__ = (
        CheckConstraint("guest_count >= 1", name="check_event_guest_count_positive"),
        CheckConstraint("event_type IN ('Wedding', 'Social Gathering')", name="check_event_type"),
        Index("ix_events_start_date", "start_date"),
    )

    def __repr__(self) -> str:
        return f"<Event(id={self.id}, name={self.event_name}, owner={self.user_id})>"
