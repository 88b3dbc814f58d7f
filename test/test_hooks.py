"""
Tests for the before-write interceptors on tenant fields.
"""

import pytest

from tenantcms.access import Operation, Principal
from tenantcms.exceptions import AuthorizationDenied, ConstraintViolation
from tenantcms.hooks import auto_populate_website, check_role_assignment, resolve_default_website
from tenantcms.hooks.user_fields import DEFAULT_WEBSITE_NOT_ASSIGNED, check_membership_assignment

SUPER_ADMIN = {"id": 1, "role": "super-admin", "websites": []}
EDITOR = {"id": 2, "role": "editor", "websites": [{"id": 10}], "default_website": {"id": 10}}
EDITOR_WITHOUT_DEFAULT = {"id": 3, "role": "editor", "websites": [10]}


class TestAutoPopulateWebsite:
    def test_no_user_keeps_supplied_value(self):
        assert auto_populate_website(None, Operation.CREATE, {"id": 5}) == 5
        assert auto_populate_website(None, Operation.UPDATE, 5, original=7) == 5

    def test_create_uses_callers_default(self):
        assert auto_populate_website(EDITOR, Operation.CREATE, None) == 10
        assert auto_populate_website(EDITOR, Operation.CREATE, 99) == 10

    def test_create_falls_back_to_supplied_without_default(self):
        assert auto_populate_website(EDITOR_WITHOUT_DEFAULT, Operation.CREATE, 99) == 99
        assert auto_populate_website(EDITOR_WITHOUT_DEFAULT, Operation.CREATE, None) is None

    def test_super_admin_picks_website_on_create(self):
        assert auto_populate_website(SUPER_ADMIN, Operation.CREATE, {"id": 4}) == 4

    def test_update_keeps_stored_website(self):
        assert auto_populate_website(EDITOR, Operation.UPDATE, 99, original=10) == 10
        assert auto_populate_website(EDITOR, Operation.UPDATE, None, original=10) == 10

    def test_update_without_stored_value_takes_supplied(self):
        assert auto_populate_website(EDITOR, Operation.UPDATE, 12, original=None) == 12

    def test_super_admin_can_reassign(self):
        assert auto_populate_website(SUPER_ADMIN, Operation.UPDATE, 4, original=10) == 4
        assert auto_populate_website(SUPER_ADMIN, Operation.UPDATE, None, original=10) == 10


class TestResolveDefaultWebsite:
    def test_default_must_be_assigned(self):
        with pytest.raises(ConstraintViolation) as exc_info:
            resolve_default_website([1, 2], 3, Operation.UPDATE)
        assert exc_info.value.message == DEFAULT_WEBSITE_NOT_ASSIGNED
        assert exc_info.value.details["field"] == "default_website"

    def test_single_website_becomes_default_on_create(self):
        assert resolve_default_website([7], None, Operation.CREATE) == 7

    def test_single_website_not_auto_defaulted_on_update(self):
        assert resolve_default_website([7], None, Operation.UPDATE) is None

    def test_several_websites_leave_default_unset(self):
        assert resolve_default_website([7, 8], None, Operation.CREATE) is None

    def test_default_without_websites_is_allowed(self):
        assert resolve_default_website([], 3, Operation.CREATE) == 3


class TestRoleAssignment:
    def test_super_admin_may_grant_anything(self):
        principal = Principal.from_user(SUPER_ADMIN)
        check_role_assignment(principal, "super-admin", "viewer", Operation.UPDATE)

    def test_only_super_admin_grants_super_admin(self):
        admin = Principal.from_user({"id": 5, "role": "website-admin", "websites": [10]})
        with pytest.raises(AuthorizationDenied):
            check_role_assignment(admin, "super-admin", None, Operation.CREATE)

    def test_role_change_requires_super_admin(self):
        admin = Principal.from_user({"id": 5, "role": "website-admin", "websites": [10]})
        with pytest.raises(AuthorizationDenied):
            check_role_assignment(admin, "editor", "viewer", Operation.UPDATE)
        check_role_assignment(admin, "viewer", "viewer", Operation.UPDATE)

    def test_website_admin_may_create_lower_roles(self):
        admin = Principal.from_user({"id": 5, "role": "website-admin", "websites": [10]})
        check_role_assignment(admin, "editor", None, Operation.CREATE)

    def test_cannot_grant_role_above_own(self):
        editor = Principal.from_user(EDITOR)
        with pytest.raises(AuthorizationDenied):
            check_role_assignment(editor, "website-admin", None, Operation.CREATE)
        check_role_assignment(editor, "viewer", None, Operation.CREATE)

    def test_memberships_limited_to_callers_websites(self):
        admin = Principal.from_user({"id": 5, "role": "website-admin", "websites": [10]})
        check_membership_assignment(admin, [10])
        with pytest.raises(AuthorizationDenied):
            check_membership_assignment(admin, [10, 11])
