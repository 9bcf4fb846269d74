"""
Booking state machine.

TRANSITION TABLE
================

  Pending      -> Confirmed, Cancelled
  Confirmed    -> In Progress, Cancelled
  In Progress  -> Completed, Cancelled
  Completed    -> (terminal)
  Cancelled    -> (terminal)

A patch is validated as a whole before any field is written, so a rejected
patch leaves the booking exactly as it was.

payment_status is not governed by the table. Ordinary patches may set it
directly; the gateway-driven path uses ``confirm_payment``, which moves the
booking to Confirmed/Paid regardless of the current status.
"""

from typing import Any

from weddinghub.core.clock import Clock
from weddinghub.core.exceptions import InvalidMutation, InvalidTransition, ValidationError
from weddinghub.core.logging import get_logger
from weddinghub.core.metrics import record_transition, rejected_transitions
from weddinghub.models.booking import (
    Booking,
    IMMUTABLE_FIELDS,
    PAYMENT_PAID,
    STATUS_CANCELLED,
    STATUS_COMPLETED,
    STATUS_CONFIRMED,
    STATUS_IN_PROGRESS,
    STATUS_PENDING,
)

logger = get_logger(__name__)

TRANSITIONS: dict[str, frozenset[str]] = {
    STATUS_PENDING: frozenset({STATUS_CONFIRMED, STATUS_CANCELLED}),
    STATUS_CONFIRMED: frozenset({STATUS_IN_PROGRESS, STATUS_CANCELLED}),
    STATUS_IN_PROGRESS: frozenset({STATUS_COMPLETED, STATUS_CANCELLED}),
    STATUS_COMPLETED: frozenset(),
    STATUS_CANCELLED: frozenset(),
}

MUTABLE_FIELDS = (
    "service_details",
    "event_date",
    "amount",
    "advance_paid",
    "status",
    "payment_status",
    "notes",
    "rating",
    "review",
)

NON_NULLABLE_FIELDS = frozenset({"event_date", "amount", "advance_paid", "status", "payment_status"})


def can_transition(current: str, target: str) -> bool:
    return target in TRANSITIONS.get(current, frozenset())


def validate_transition(current: str, target: str) -> None:
    # Re-asserting the current status is not a transition
    if current == target:
        return
    if not can_transition(current, target):
        rejected_transitions.inc()
        raise InvalidTransition(f"Invalid booking transition: {current} -> {target}")


def validate_patch(booking: Booking, patch: dict[str, Any]) -> None:
    """Reject the whole patch if any single field is not allowed."""
    for field in IMMUTABLE_FIELDS:
        if field in patch and patch[field] != getattr(booking, field):
            raise InvalidMutation(f"Field '{field}' cannot be changed after creation")

    unknown = set(patch) - set(MUTABLE_FIELDS) - set(IMMUTABLE_FIELDS)
    if unknown:
        raise ValidationError(
            "Unknown booking fields",
            errors=[{"field": name, "message": "Unknown field"} for name in sorted(unknown)],
        )

    nulled = sorted(name for name in NON_NULLABLE_FIELDS if name in patch and patch[name] is None)
    if nulled:
        raise ValidationError(
            "Required booking fields cannot be cleared",
            errors=[{"field": name, "message": "Field cannot be null"} for name in nulled],
        )

    if "status" in patch:
        validate_transition(booking.status, patch["status"])


def apply_patch(booking: Booking, patch: dict[str, Any], clock: Clock) -> list[str]:
    """
    Validate then apply ``patch`` to ``booking``.
    Returns the names of fields whose value changed.
    """
    validate_patch(booking, patch)

    previous_status = booking.status
    changed = []
    for field in MUTABLE_FIELDS:
        if field not in patch:
            continue
        if getattr(booking, field) != patch[field]:
            setattr(booking, field, patch[field])
            changed.append(field)

    booking.updated_at = clock()

    if "status" in changed:
        record_transition(previous_status, booking.status)
        logger.info(
            "booking_status_changed",
            booking_id=booking.id,
            source=previous_status,
            target=booking.status,
        )
    return changed


def confirm_payment(
    booking: Booking,
    order_id: str,
    payment_id: str,
    signature: str,
    clock: Clock,
) -> None:
    """
    Privileged transition issued after a verified gateway callback.
    Bypasses the transition table.
    """
    previous_status = booking.status
    booking.payment_status = PAYMENT_PAID
    booking.status = STATUS_CONFIRMED
    booking.gateway_order_id = order_id
    booking.gateway_payment_id = payment_id
    booking.gateway_signature = signature
    booking.updated_at = clock()

    if previous_status != STATUS_CONFIRMED:
        record_transition(previous_status, STATUS_CONFIRMED)
    logger.info(
        "booking_payment_confirmed",
        booking_id=booking.id,
        source=previous_status,
        order_id=order_id,
    )
