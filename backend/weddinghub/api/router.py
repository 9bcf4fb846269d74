"""
Central API router that aggregates all route modules.
"""

from fastapi import APIRouter
from weddinghub.api.routes import bookings, events, payments, vendors

api_router = APIRouter(prefix="/api/v1")
api_router.include_router(events.router)
api_router.include_router(vendors.router)
api_router.include_router(bookings.router)
api_router.include_router(payments.router)
