"""
Authorization capability checks.

Every role or ownership rule of the application lives here. Services call
the ``require_*`` helpers before any write; routers and tests can call the
boolean predicates directly.

A principal is anything exposing ``id`` and ``role`` (``AuthSession`` or a
``Profile`` row).
"""

from typing import Protocol

from models.exceptions import InsufficientPermissionsException
from repositories.db_models import ProfileRole, Report

ADMIN_ROLES = frozenset({ProfileRole.MUNICIPAL_ADMIN, ProfileRole.SUPER_ADMIN})


class Principal(Protocol):
    @property
    def id(self) -> int: ...

    @property
    def role(self) -> ProfileRole: ...


def is_admin(principal: Principal | None) -> bool:
    return principal is not None and principal.role in ADMIN_ROLES


def can_manage_reports(principal: Principal | None) -> bool:
    """Admins may change status, assign reports and see the dashboard."""
    return is_admin(principal)


def is_owner(principal: Principal | None, report: Report) -> bool:
    return principal is not None and report.user_id == principal.id


def can_comment_on(principal: Principal | None, report: Report) -> bool:
    return is_owner(principal, report) or can_manage_reports(principal)


def can_change_roles(principal: Principal | None) -> bool:
    return principal is not None and principal.role == ProfileRole.SUPER_ADMIN


def require_admin(principal: Principal | None) -> None:
    if not can_manage_reports(principal):
        raise InsufficientPermissionsException("Administrator role required")


def require_can_comment(principal: Principal | None, report: Report) -> None:
    if not can_comment_on(principal, report):
        raise InsufficientPermissionsException(
            "Only the report owner or an administrator can post updates"
        )


def require_role_manager(principal: Principal | None) -> None:
    if not can_change_roles(principal):
        raise InsufficientPermissionsException("Super administrator role required")
