from enum import Enum

from utils.errors import AuthorizationError, ValidationError


class Permission(str, Enum):
    ALL = "all"

    BLOG_CREATE = "blog:create"
    BLOG_EDIT = "blog:edit"
    BLOG_DELETE = "blog:delete"
    BLOG_PUBLISH = "blog:publish"

    CONSULTATION_VIEW = "consultation:view"
    CONSULTATION_APPROVE = "consultation:approve"
    CONSULTATION_MANAGE = "consultation:manage"
    FOLLOWUP_CREATE = "followup:create"
    FOLLOWUP_MANAGE = "followup:manage"


SUPER_ADMIN = "super_admin"
BLOG_USER = "blog_user"
CONSULTATION_MANAGER = "consultation_manager"
ROLES = (SUPER_ADMIN, BLOG_USER, CONSULTATION_MANAGER)
DEFAULT_ROLE = BLOG_USER

ROLE_PERMISSIONS = {
    SUPER_ADMIN: frozenset({Permission.ALL}),
    BLOG_USER: frozenset({
        Permission.BLOG_CREATE,
        Permission.BLOG_EDIT,
        Permission.BLOG_DELETE,
        Permission.BLOG_PUBLISH,
    }),
    CONSULTATION_MANAGER: frozenset({
        Permission.CONSULTATION_VIEW,
        Permission.CONSULTATION_APPROVE,
        Permission.CONSULTATION_MANAGE,
        Permission.FOLLOWUP_CREATE,
        Permission.FOLLOWUP_MANAGE,
    }),
}


def permissions_for_role(role):
    return ROLE_PERMISSIONS.get(role, frozenset())


def validate_role(role):
    if role not in ROLES:
        raise ValidationError(f"Invalid role. Choose one of: {', '.join(ROLES)}", fields=["role"])
    return role


def has_permission(permission_set, required):
    """True iff ``required`` is in the set or the set holds the ``all`` wildcard."""
    if not permission_set:
        return False
    granted = {_tag(permission) for permission in permission_set}
    return _tag(required) in granted or Permission.ALL.value in granted


def _tag(permission):
    return permission.value if isinstance(permission, Permission) else permission


def require_permission(user, *required):
    """Raise ``AuthorizationError`` unless ``user`` holds one of ``required``."""
    granted = user.permissions if user is not None else frozenset()
    if not any(has_permission(granted, permission) for permission in required):
        raise AuthorizationError()
