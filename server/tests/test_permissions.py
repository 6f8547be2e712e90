"""Tests for the role capability table."""

import pytest

from linkku.errors import PermissionDenied
from linkku.models import UserRole
from linkku.utils.permissions import (
    can,
    ensure_can_assign_role,
    ensure_can_manage_user,
)


# =============================================================================
# can()
# =============================================================================


@pytest.mark.parametrize(
    "role, resource, action, expected",
    [
        (UserRole.USER, "link", "create", True),
        (UserRole.USER, "link", "reorder", True),
        (UserRole.USER, "linktree", "update", True),
        (UserRole.USER, "analytics", "read_own", True),
        (UserRole.USER, "category", "read", True),
        (UserRole.USER, "category", "delete", False),
        (UserRole.USER, "article", "create", False),
        (UserRole.USER, "user", "read", False),
        (UserRole.ADMIN, "category", "delete", True),
        (UserRole.ADMIN, "article", "update", True),
        (UserRole.ADMIN, "setting", "update", True),
        (UserRole.ADMIN, "link", "create", True),
        (UserRole.ADMIN, "user", "assign_role", False),
        (UserRole.ADMIN, "analytics", "cross_role", False),
        (UserRole.ADMIN, "storage", "cleanup", False),
        (UserRole.SUPERADMIN, "storage", "cleanup", True),
        (UserRole.SUPERADMIN, "user", "manage_admins", True),
        (UserRole.SUPERADMIN, "anything", "at_all", True),
    ],
)
def test_can(role, resource, action, expected):
    """Each role gets exactly its listed capabilities."""
    assert can(role, resource, action) is expected


def test_can_accepts_role_strings():
    """Role values work as well as enum members."""
    assert can("ADMIN", "article", "read") is True
    assert can("USER", "article", "read") is False


def test_unknown_role_has_no_capabilities():
    """Unknown or missing roles are denied."""
    assert can("GUEST", "link", "read") is False
    assert can(None, "link", "read") is False


# =============================================================================
# Target-level checks
# =============================================================================


def test_admin_cannot_manage_other_admins(admin, superadmin):
    """Admins manage USER accounts only."""
    with pytest.raises(PermissionDenied):
        ensure_can_manage_user(admin, superadmin, "update")


def test_actor_cannot_delete_self(superadmin):
    """Nobody deletes their own account through admin endpoints."""
    with pytest.raises(PermissionDenied):
        ensure_can_manage_user(superadmin, superadmin, "delete")


def test_admin_can_manage_user(admin, user):
    """Admins may update plain users."""
    ensure_can_manage_user(admin, user, "update")


def test_role_assignment(admin, superadmin):
    """Only a superadmin assigns elevated roles."""
    ensure_can_assign_role(admin, UserRole.USER)
    ensure_can_assign_role(superadmin, UserRole.ADMIN)

    with pytest.raises(PermissionDenied):
        ensure_can_assign_role(admin, UserRole.ADMIN)
