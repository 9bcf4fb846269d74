"""
Request-scoped dependencies: the authenticated principal.
"""

from fastapi import Depends, HTTPException, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
import structlog

from weddinghub.core.security import get_current_user_id
from weddinghub.db.session import get_db
from weddinghub.models.user import ROLE_VENDOR, User
from weddinghub.services.authorization import Principal
from weddinghub.services.vendor_service import find_vendor_id_for_user


async def get_current_principal(
    user_id: int = Depends(get_current_user_id),
    db: AsyncSession = Depends(get_db),
) -> Principal:
    """
    Resolve the token's user into a Principal.
    Vendor principals carry their vendor profile id, or None if they have none.
    """
    result = await db.execute(select(User).where(User.id == user_id))
    user = result.scalar_one_or_none()
    if user is None or not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    vendor_id = None
    if user.role == ROLE_VENDOR:
        vendor_id = await find_vendor_id_for_user(db, user.id)

    structlog.contextvars.bind_contextvars(user_id=user.id, role=user.role)
    return Principal(user_id=user.id, role=user.role, vendor_id=vendor_id)
