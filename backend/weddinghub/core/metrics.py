"""
Metrics instrumentation for observability.
Exposes Prometheus-compatible metrics at /metrics endpoint.
"""

from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from fastapi import Response

# Booking metrics
booking_operations = Counter(
    'booking_operations_total',
    'Booking repository operations',
    ['operation']  # create, update, delete
)

status_transitions = Counter(
    'booking_status_transitions_total',
    'Applied booking status transitions',
    ['source', 'target']
)

rejected_transitions = Counter(
    'booking_rejected_transitions_total',
    'Status transitions rejected by the state machine'
)

authorization_denials = Counter(
    'booking_authorization_denials_total',
    'Requests denied by the authorization resolver',
    ['role', 'action']  # read, write, delete
)

# Payment metrics
payment_orders = Counter(
    'payment_orders_total',
    'Gateway order creation attempts',
    ['result']  # created, unsupported_currency, gateway_unavailable
)

payment_verifications = Counter(
    'payment_verifications_total',
    'Payment signature verifications',
    ['result']  # verified, invalid_signature
)

gateway_latency = Histogram(
    'payment_gateway_latency_seconds',
    'Payment gateway request latency',
    buckets=[0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0]
)

# Rating metrics
rating_recomputes = Counter(
    'vendor_rating_recomputes_total',
    'Vendor rating aggregations'
)

# Cache metrics
cache_operations = Counter(
    'cache_operations_total',
    'Cache operations',
    ['operation', 'result']  # get/set, hit/miss
)


def metrics_endpoint() -> Response:
    """
    Prometheus metrics endpoint.

    Usage:
        @app.get("/metrics")
        def metrics():
            return metrics_endpoint()
    """
    return Response(
        content=generate_latest(),
        media_type=CONTENT_TYPE_LATEST
    )


# Convenience functions for instrumentation
def record_booking_operation(operation: str):
    """Record booking operation. Operation: create, update, delete"""
    booking_operations.labels(operation=operation).inc()


def record_transition(source: str, target: str):
    status_transitions.labels(source=source, target=target).inc()


def record_authorization_denial(role: str, action: str):
    authorization_denials.labels(role=role, action=action).inc()


def record_payment_order(result: str):
    payment_orders.labels(result=result).inc()


def record_payment_verification(verified: bool):
    result = "verified" if verified else "invalid_signature"
    payment_verifications.labels(result=result).inc()


def record_cache_operation(operation: str, hit: bool):
    """Record cache operation."""
    result = "hit" if hit else "miss"
    cache_operations.labels(operation=operation, result=result).inc()
