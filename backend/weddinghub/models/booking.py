"""
Booking model: one vendor engaged for one event.

Key design decisions:
- event_id, vendor_id and user_id are immutable after creation
- status and payment_status are independent columns; the state machine in
  services.state_machine governs status only
- Gateway references are stored only once a payment signature verifies
"""

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, CheckConstraint, Index, JSON, Numeric, Text

from weddinghub.db.base import Base, TimestampMixin

STATUS_PENDING = "Pending"
STATUS_CONFIRMED = "Confirmed"
STATUS_IN_PROGRESS = "In Progress"
STATUS_COMPLETED = "Completed"
STATUS_CANCELLED = "Cancelled"
BOOKING_STATUSES = (STATUS_PENDING, STATUS_CONFIRMED, STATUS_IN_PROGRESS, STATUS_COMPLETED, STATUS_CANCELLED)

PAYMENT_PENDING = "Pending"
PAYMENT_PARTIAL = "Partial"
PAYMENT_PAID = "Paid"
PAYMENT_REFUNDED = "Refunded"
PAYMENT_STATUSES = (PAYMENT_PENDING, PAYMENT_PARTIAL, PAYMENT_PAID, PAYMENT_REFUNDED)

IMMUTABLE_FIELDS = ("event_id", "vendor_id", "user_id")


class Booking(Base, TimestampMixin):
    __tablename__ = "bookings"

    id = Column(Integer, primary_key=True, index=True)
    # Plain integer references: bookings and events are joined by id only
    event_id = Column(Integer, nullable=False)
    vendor_id = Column(Integer, ForeignKey("vendors.id"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    service_details = Column(JSON, nullable=True)
    booking_date = Column(DateTime(timezone=True), nullable=False)
    event_date = Column(DateTime(timezone=True), nullable=False)
    amount = Column(Numeric(14, 2, asdecimal=False), nullable=False)
    advance_paid = Column(Numeric(14, 2, asdecimal=False), nullable=False, default=0)
    status = Column(String(20), nullable=False, default=STATUS_PENDING)
    payment_status = Column(String(20), nullable=False, default=PAYMENT_PENDING)
    gateway_order_id = Column(String(64), nullable=True)
    gateway_payment_id = Column(String(64), nullable=True)
    gateway_signature = Column(String(128), nullable=True)
    notes = Column(Text, nullable=True)
    rating = Column(Integer, nullable=True)
    review = Column(Text, nullable=True)

    __table_args__ = (
        CheckConstraint("amount >= 0", name="check_booking_amount_non_negative"),
        CheckConstraint("advance_paid >= 0", name="check_booking_advance_non_negative"),
        CheckConstraint("rating IS NULL OR (rating >= 1 AND rating <= 5)", name="check_booking_rating_range"),
        CheckConstraint(
            "status IN ('Pending', 'Confirmed', 'In Progress', 'Completed', 'Cancelled')",
            name="check_booking_status",
        ),
        CheckConstraint(
            "payment_status IN ('Pending', 'Partial', 'Paid', 'Refunded')",
            name="check_booking_payment_status",
        ),
        Index("ix_bookings_event_id", "event_id"),
        Index("ix_bookings_vendor_id", "vendor_id"),
        Index("ix_bookings_user_id", "user_id"),
        Index("ix_bookings_status", "status"),
    )

    @property
    def payment(self) -> dict | None:
        if self.gateway_order_id is None:
            return None
        return {
            "order_id": self.gateway_order_id,
            "payment_id": self.gateway_payment_id,
            "signature": self.gateway_signature,
        }

    def __repr__(self) -> str:
        return f"<Booking(id={self.id}, event={self.event_id}, vendor={self.vendor_id}, status={self.status})>"
