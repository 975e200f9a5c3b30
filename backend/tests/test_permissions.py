"""Tests for the authorization capability checks."""

import pytest

from authentication.permissions import (
    can_change_roles,
    can_comment_on,
    can_manage_reports,
    is_admin,
    require_admin,
    require_can_comment,
    require_role_manager,
)
from models.exceptions import InsufficientPermissionsException


class TestPredicates:
    def test_roles(self, citizen_session, admin_session, super_admin_session):
        assert is_admin(citizen_session) is False
        assert is_admin(admin_session) is True
        assert is_admin(super_admin_session) is True
        assert is_admin(None) is False

        assert can_manage_reports(admin_session) is True
        assert can_change_roles(admin_session) is False
        assert can_change_roles(super_admin_session) is True

    def test_profiles_are_principals(self, municipal_admin, citizen):
        assert is_admin(municipal_admin) is True
        assert is_admin(citizen) is False

    def test_commenting(
        self, test_report, citizen_session, other_session, admin_session
    ):
        assert can_comment_on(citizen_session, test_report) is True
        assert can_comment_on(other_session, test_report) is False
        assert can_comment_on(admin_session, test_report) is True
        assert can_comment_on(None, test_report) is False


class TestEnforcers:
    def test_require_admin(self, citizen_session, admin_session):
        require_admin(admin_session)
        with pytest.raises(InsufficientPermissionsException):
            require_admin(citizen_session)

    def test_require_can_comment(self, test_report, other_session):
        with pytest.raises(InsufficientPermissionsException):
            require_can_comment(other_session, test_report)

    def test_require_role_manager(self, admin_session, super_admin_session):
        require_role_manager(super_admin_session)
        with pytest.raises(InsufficientPermissionsException):
            require_role_manager(admin_session)
