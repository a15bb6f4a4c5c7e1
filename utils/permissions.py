"""
Static role and permission tables for the admin back office.

Roles are ordered by level (admin > content_manager > content_reviewer) and
each carries a fixed set of permissions. Nothing here is stored per user
beyond the user's own role, and the tables never change at runtime.
"""
from enum import Enum
from types import MappingProxyType
from typing import FrozenSet, Optional, Union


class Role(str, Enum):
    ADMIN = "admin"
    CONTENT_MANAGER = "content_manager"
    CONTENT_REVIEWER = "content_reviewer"


class Permission(str, Enum):
    VIEW_DASHBOARD = "view:dashboard"
    VIEW_USERS = "view:users"
    VIEW_CONTENT = "view:content"
    CREATE_CONTENT = "create:content"
    EDIT_OWN_CONTENT = "edit:own_content"
    DELETE_OWN_CONTENT = "delete:own_content"
    SUBMIT_CONTENT = "submit:content"
    REVIEW_CONTENT = "review:content"
    APPROVE_CONTENT = "approve:content"
    REJECT_CONTENT = "reject:content"
    PUBLISH_CONTENT = "publish:content"
    VIEW_EVENTS = "view:events"
    CREATE_EVENT = "create:event"
    EDIT_OWN_EVENT = "edit:own_event"
    DELETE_OWN_EVENT = "delete:own_event"
    VIEW_RESOURCES = "view:resources"
    CREATE_RESOURCE = "create:resource"
    EDIT_OWN_RESOURCE = "edit:own_resource"
    DELETE_OWN_RESOURCE = "delete:own_resource"
    VIEW_MESSAGES = "view:messages"
    DELETE_MESSAGE = "delete:message"
    VIEW_SUBSCRIBERS = "view:subscribers"
    DELETE_SUBSCRIBER = "delete:subscriber"
    VIEW_TEACHER_APPLICATIONS = "view:teacher_applications"
    EDIT_TEACHER_APPLICATION = "edit:teacher_application"
    DELETE_TEACHER_APPLICATION = "delete:teacher_application"
    VIEW_VOLUNTEER_APPLICATIONS = "view:volunteer_applications"
    EDIT_VOLUNTEER_APPLICATION = "edit:volunteer_application"
    DELETE_VOLUNTEER_APPLICATION = "delete:volunteer_application"
    VIEW_STATS = "view:stats"
    MANAGE_SETTINGS = "manage:settings"


P = Permission

ROLE_LEVELS = MappingProxyType({
    Role.ADMIN: 3,
    Role.CONTENT_MANAGER: 2,
    Role.CONTENT_REVIEWER: 1,
})

ROLE_PERMISSIONS = MappingProxyType({
    Role.ADMIN: frozenset({
        P.VIEW_DASHBOARD, P.VIEW_USERS, P.VIEW_CONTENT, P.REVIEW_CONTENT,
        P.PUBLISH_CONTENT, P.VIEW_EVENTS, P.VIEW_RESOURCES, P.VIEW_MESSAGES,
        P.DELETE_MESSAGE, P.VIEW_SUBSCRIBERS, P.DELETE_SUBSCRIBER,
        P.VIEW_TEACHER_APPLICATIONS, P.EDIT_TEACHER_APPLICATION,
        P.DELETE_TEACHER_APPLICATION, P.VIEW_VOLUNTEER_APPLICATIONS,
        P.EDIT_VOLUNTEER_APPLICATION, P.DELETE_VOLUNTEER_APPLICATION,
        P.VIEW_STATS, P.MANAGE_SETTINGS,
    }),
    Role.CONTENT_MANAGER: frozenset({
        P.VIEW_DASHBOARD, P.VIEW_CONTENT, P.CREATE_CONTENT, P.EDIT_OWN_CONTENT,
        P.DELETE_OWN_CONTENT, P.SUBMIT_CONTENT, P.VIEW_EVENTS, P.CREATE_EVENT,
        P.EDIT_OWN_EVENT, P.DELETE_OWN_EVENT, P.VIEW_RESOURCES,
        P.CREATE_RESOURCE, P.EDIT_OWN_RESOURCE, P.DELETE_OWN_RESOURCE,
        P.VIEW_MESSAGES, P.VIEW_SUBSCRIBERS, P.VIEW_TEACHER_APPLICATIONS,
        P.VIEW_VOLUNTEER_APPLICATIONS, P.VIEW_STATS,
    }),
    Role.CONTENT_REVIEWER: frozenset({
        P.VIEW_DASHBOARD, P.VIEW_CONTENT, P.REVIEW_CONTENT, P.APPROVE_CONTENT,
        P.REJECT_CONTENT, P.VIEW_EVENTS, P.VIEW_RESOURCES, P.VIEW_MESSAGES,
        P.VIEW_SUBSCRIBERS, P.VIEW_TEACHER_APPLICATIONS,
        P.VIEW_VOLUNTEER_APPLICATIONS, P.VIEW_STATS,
    }),
})

ROLE_DISPLAY_NAMES = MappingProxyType({
    Role.ADMIN: "Administrator",
    Role.CONTENT_MANAGER: "Content Manager",
    Role.CONTENT_REVIEWER: "Content Reviewer",
})


def parse_role(role: Union[str, Role, None]) -> Optional[Role]:
    """Return the Role for ``role`` or None when it is not a back-office role."""
    if isinstance(role, Role):
        return role
    try:
        return Role(role)
    except ValueError:
        return None


def role_level(role: Union[str, Role, None]) -> int:
    parsed = parse_role(role)
    return ROLE_LEVELS[parsed] if parsed else 0


def has_permission(role: Union[str, Role, None], permission: Union[str, Permission]) -> bool:
    parsed = parse_role(role)
    if parsed is None:
        return False
    try:
        permission = Permission(permission)
    except ValueError:
        return False
    return permission in ROLE_PERMISSIONS[parsed]


def has_role_level(role: Union[str, Role, None], required_level: int) -> bool:
    """True when ``role`` sits at ``required_level`` or above."""
    parsed = parse_role(role)
    if parsed is None:
        return False
    return ROLE_LEVELS[parsed] >= required_level


def get_role_permissions(role: Union[str, Role, None]) -> FrozenSet[Permission]:
    parsed = parse_role(role)
    return ROLE_PERMISSIONS[parsed] if parsed else frozenset()


def get_role_display_name(role: Union[str, Role, None]) -> str:
    parsed = parse_role(role)
    return ROLE_DISPLAY_NAMES[parsed] if parsed else str(role)
