# server/linkku/utils/permissions.py
#
# Single source of truth for role checks. Handlers never compare roles
# directly; they ask can(role, resource, action).

from typing import Dict, FrozenSet, Tuple, Union

from linkku.errors import PermissionDenied
from linkku.models.user import User, UserRole

Capability = Tuple[str, str]

_USER_CAPABILITIES: FrozenSet[Capability] = frozenset({
    ("profile", "read"),
    ("profile", "update"),
    ("linktree", "read"),
    ("linktree", "create"),
    ("linktree", "update"),
    ("link", "read"),
    ("link", "create"),
    ("link", "update"),
    ("link", "delete"),
    ("link", "reorder"),
    ("category", "read"),
    ("analytics", "read_own"),
    ("upload", "linktree_photo"),
})

_ADMIN_CAPABILITIES: FrozenSet[Capability] = _USER_CAPABILITIES | frozenset({
    ("category", "manage"),
    ("category", "create"),
    ("category", "update"),
    ("category", "delete"),
    ("article_category", "read"),
    ("article_category", "create"),
    ("article_category", "update"),
    ("article_category", "delete"),
    ("article", "read"),
    ("article", "create"),
    ("article", "update"),
    ("article", "delete"),
    ("user", "read"),
    ("user", "create"),
    ("user", "update"),
    ("user", "delete"),
    ("setting", "read"),
    ("setting", "update"),
    ("dashboard", "read"),
    ("analytics", "read"),
    ("upload", "article_image"),
    ("upload", "category_icon"),
})

# SUPERADMIN is unrestricted; listed here for the few superadmin-only actions
# so the table documents them.
_SUPERADMIN_ONLY: FrozenSet[Capability] = frozenset({
    ("user", "read_all_roles"),
    ("user", "assign_role"),
    ("user", "manage_admins"),
    ("analytics", "cross_role"),
    ("storage", "read"),
    ("storage", "cleanup"),
})

POLICY: Dict[UserRole, FrozenSet[Capability]] = {
    UserRole.USER: _USER_CAPABILITIES,
    UserRole.ADMIN: _ADMIN_CAPABILITIES,
    UserRole.SUPERADMIN: _ADMIN_CAPABILITIES | _SUPERADMIN_ONLY,
}


def _as_role(role: Union[UserRole, str, None]):
    if isinstance(role, UserRole):
        return role
    try:
        return UserRole(role)
    except ValueError:
        return None


def can(role: Union[UserRole, str, None], resource: str, action: str) -> bool:
    role = _as_role(role)
    if role is None:
        return False

    if role == UserRole.SUPERADMIN:
        return True

    return (resource, action) in POLICY.get(role, frozenset())


def ensure_can(user: User, resource: str, action: str) -> None:
    if not can(user.role, resource, action):
        raise PermissionDenied()


def ensure_can_manage_user(actor: User, target: User, action: str) -> None:
    """Target-level checks for the admin user endpoints."""
    ensure_can(actor, "user", action)

    if action in ("update", "delete") and actor.id == target.id:
        raise PermissionDenied(f"You cannot {action} your own account")

    if target.role != UserRole.USER and not can(actor.role, "user", "manage_admins"):
        raise PermissionDenied("Admins can only manage USER accounts")


def ensure_can_assign_role(actor: User, role: UserRole) -> None:
    if role != UserRole.USER and not can(actor.role, "user", "assign_role"):
        raise PermissionDenied("Only a superadmin can assign this role")
