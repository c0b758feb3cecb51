"""Role-based access control and permissions."""

from enum import Enum


class UserRole(str, Enum):
    """User roles in the system."""

    ORG_ADMIN = "org_admin"
    LAB_SUPERVISOR = "lab_supervisor"
    FACILITY_MEMBER = "facility_member"
    STUDENT = "student"
    VISITOR = "visitor"


class Permission(str, Enum):
    """System permissions."""

    # Catalog
    VIEW_RESOURCES = "view_resources"
    MANAGE_RESOURCES = "manage_resources"

    # Bookings
    CREATE_BOOKING = "create_booking"
    VIEW_OWN_BOOKINGS = "view_own_bookings"
    VIEW_ALL_BOOKINGS = "view_all_bookings"
    CANCEL_OWN_BOOKING = "cancel_own_booking"
    MANAGE_BOOKINGS = "manage_bookings"  # approve, reject, complete, cancel any


_MEMBER = {
    Permission.VIEW_RESOURCES,
    Permission.CREATE_BOOKING,
    Permission.VIEW_OWN_BOOKINGS,
    Permission.CANCEL_OWN_BOOKING,
}

# Role to permissions mapping
ROLE_PERMISSIONS: dict[UserRole, set[Permission]] = {
    UserRole.VISITOR: set(_MEMBER),
    UserRole.STUDENT: set(_MEMBER),
    UserRole.FACILITY_MEMBER: _MEMBER | {Permission.VIEW_ALL_BOOKINGS},
    UserRole.LAB_SUPERVISOR: _MEMBER
    | {
        Permission.VIEW_ALL_BOOKINGS,
        Permission.MANAGE_BOOKINGS,
        Permission.MANAGE_RESOURCES,
    },
    UserRole.ORG_ADMIN: {
        # Admins have all permissions
        perm for perm in Permission
    },
}


def has_permission(role: str | UserRole, permission: Permission) -> bool:
    """Check if a role has a specific permission. Unknown roles have none."""
    try:
        user_role = UserRole(role)
    except ValueError:
        return False
    return permission in ROLE_PERMISSIONS.get(user_role, set())
