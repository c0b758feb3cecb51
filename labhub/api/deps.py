"""API dependencies for authentication and service wiring."""

from functools import lru_cache
from typing import Annotated, Any, Callable

from fastapi import Depends
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from labhub.config import settings
from labhub.core.exceptions import AuthenticationError, AuthorizationError
from labhub.core.permissions import Permission, has_permission
from labhub.core.security import requester_from_claims, verify_token
from labhub.database import get_db
from labhub.schemas.user import Requester
from labhub.services.booking_service import BookingLifecycleManager
from labhub.services.booking_store import SqlAlchemyBookingStore, SqlAlchemyResourceCatalog
from labhub.services.notification_service import NotificationSink, build_notification_sink

# Security scheme
security = HTTPBearer(auto_error=False)


async def get_current_requester(
    credentials: Annotated[HTTPAuthorizationCredentials | None, Depends(security)],
) -> Requester:
    """Resolve the caller's identity from the bearer token."""
    if credentials is None:
        raise AuthenticationError("Not authenticated")
    payload = verify_token(credentials.credentials)
    return requester_from_claims(payload)


def require_permission(permission: Permission) -> Callable[..., Any]:
    """Dependency to require a specific permission."""

    async def permission_checker(
        requester: Annotated[Requester, Depends(get_current_requester)],
    ) -> Requester:
        if not has_permission(requester.role, permission):
            raise AuthorizationError(
                f"Permission '{permission.value}' is required for this action"
            )
        return requester

    return permission_checker


@lru_cache
def get_notification_sink() -> NotificationSink:
    """Process-wide notification sink."""
    return build_notification_sink(settings)


def get_resource_catalog(
    db: Annotated[AsyncSession, Depends(get_db)],
) -> SqlAlchemyResourceCatalog:
    return SqlAlchemyResourceCatalog(db)


def get_booking_manager(
    db: Annotated[AsyncSession, Depends(get_db)],
    notifier: Annotated[NotificationSink, Depends(get_notification_sink)],
) -> BookingLifecycleManager:
    return BookingLifecycleManager(
        store=SqlAlchemyBookingStore(db),
        catalog=SqlAlchemyResourceCatalog(db),
        notifier=notifier,
    )


# Convenience dependencies
require_booking_manager = require_permission(Permission.MANAGE_BOOKINGS)
require_resource_manager = require_permission(Permission.MANAGE_RESOURCES)
require_booking_creator = require_permission(Permission.CREATE_BOOKING)
require_resource_viewer = require_permission(Permission.VIEW_RESOURCES)
require_booking_viewer = require_permission(Permission.VIEW_OWN_BOOKINGS)
