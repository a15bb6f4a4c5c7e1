import pytest

from utils.permissions import (
    Permission, Role, ROLE_PERMISSIONS, get_role_display_name, get_role_permissions, has_permission, has_role_level,
    parse_role, role_level,
)


def test_role_levels_are_ordered():
    assert role_level(Role.ADMIN) > role_level(Role.CONTENT_MANAGER) > role_level(Role.CONTENT_REVIEWER)
    assert role_level("unknown") == 0


@pytest.mark.parametrize("role", list(Role))
def test_admin_satisfies_every_level(role):
    assert has_role_level(Role.ADMIN, role_level(role))


def test_lower_roles_do_not_reach_admin_level():
    assert not has_role_level(Role.CONTENT_MANAGER, role_level(Role.ADMIN))
    assert not has_role_level("content_reviewer", role_level(Role.CONTENT_MANAGER))
    assert not has_role_level(None, 1)


def test_reviewer_cannot_delete_messages():
    assert has_permission("content_reviewer", Permission.VIEW_MESSAGES)
    assert not has_permission("content_reviewer", Permission.DELETE_MESSAGE)
    assert has_permission("admin", Permission.DELETE_MESSAGE)


def test_manager_authors_but_does_not_approve():
    assert has_permission(Role.CONTENT_MANAGER, "create:content")
    assert not has_permission(Role.CONTENT_MANAGER, Permission.APPROVE_CONTENT)
    assert not has_permission(Role.CONTENT_MANAGER, Permission.MANAGE_SETTINGS)


def test_unknown_role_or_permission_is_denied():
    assert not has_permission("guest", Permission.VIEW_DASHBOARD)
    assert not has_permission("admin", "launch:rockets")
    assert get_role_permissions("guest") == frozenset()
    assert parse_role("guest") is None


def test_permission_tables_are_read_only():
    with pytest.raises(TypeError):
        ROLE_PERMISSIONS[Role.CONTENT_REVIEWER] = frozenset(Permission)
    with pytest.raises(AttributeError):
        get_role_permissions(Role.ADMIN).add(Permission.CREATE_CONTENT)


def test_display_names():
    assert get_role_display_name("admin") == "Administrator"
    assert get_role_display_name(Role.CONTENT_REVIEWER) == "Content Reviewer"
    assert get_role_display_name("guest") == "guest"
