# navigation/tests/test_permissions.py
from django.test import SimpleTestCase

from core.exceptions import ConfigError

from navigation.permissions import (
    PermissionContext,
    can_access_item,
    can_access_path,
    can_access_role_navigation,
    check_item_access,
    create_permission_context,
    create_security_audit_entry,
    filter_by_permissions,
    get_required_permissions,
    has_permission,
    validate_multiple_items,
    validate_user_permissions,
)
from navigation.types import NavigationItem, UserRole


TREE = [
    NavigationItem(id='public', label='Public', href='/public'),
    NavigationItem(id='admin', label='Admin', href='/admin', permission='manage_users', children=(
        NavigationItem(id='admin-list', label='List', href='/admin/list', permission='manage_users'),
        NavigationItem(id='admin-audit', label='Audit', href='/admin/audit', permission='view_audit'),
    )),
    NavigationItem(id='reports', label='Reports', href='/reports', permission='view_reports'),
]


def ids(items):
    return [item.id for item in items]


class HasPermissionTest(SimpleTestCase):

    def test_exact_permission(self):
        self.assertTrue(has_permission('manage_users', ['manage_users']))
        self.assertFalse(has_permission('manage_users', ['view_reports']))

    def test_wildcard_grants_everything(self):
        self.assertTrue(has_permission('anything_at_all', ['*']))

    def test_no_permissions(self):
        self.assertFalse(has_permission('manage_users', []))
        self.assertFalse(has_permission('manage_users', None))

    def test_item_without_permission_is_always_visible(self):
        self.assertTrue(can_access_item(TREE[0], []))


class FilterByPermissionsTest(SimpleTestCase):

    def test_wildcard_keeps_everything(self):
        self.assertEqual(filter_by_permissions(TREE, ['*']), TREE)

    def test_inaccessible_children_are_pruned(self):
        result = filter_by_permissions(TREE, ['manage_users'])

        self.assertEqual(ids(result), ['public', 'admin'])
        self.assertEqual(ids(result[1].children), ['admin-list'])

    def test_parent_survives_when_every_child_is_pruned(self):
        tree = [NavigationItem(id='p', label='P', href='/p', children=(
            NavigationItem(id='c', label='C', href='/p/c', permission='secret'),
        ))]
        result = filter_by_permissions(tree, [])

        self.assertEqual(ids(result), ['p'])
        self.assertEqual(result[0].children, ())

    def test_inaccessible_parent_hides_its_children(self):
        result = filter_by_permissions(TREE, ['view_audit'])
        self.assertEqual(ids(result), ['public'])

    def test_filtering_twice_changes_nothing(self):
        for permissions in ([], ['manage_users'], ['view_audit', 'view_reports'], ['*']):
            once = filter_by_permissions(TREE, permissions)
            self.assertEqual(filter_by_permissions(once, permissions), once)

    def test_input_is_not_mutated(self):
        filter_by_permissions(TREE, [])
        self.assertEqual(len(TREE[1].children), 2)


class PermissionReportTest(SimpleTestCase):

    def test_required_permissions_are_unique_and_ordered(self):
        self.assertEqual(get_required_permissions(TREE), ['manage_users', 'view_audit', 'view_reports'])

    def test_validate_user_permissions_reports_missing(self):
        report = validate_user_permissions(TREE, ['manage_users'])

        self.assertFalse(report['valid'])
        self.assertEqual(report['missing_permissions'], ['view_audit', 'view_reports'])
        self.assertEqual(ids(report['accessible_items']), ['public', 'admin'])

    def test_wildcard_is_never_missing_anything(self):
        report = validate_user_permissions(TREE, ['*'])
        self.assertTrue(report['valid'])
        self.assertEqual(report['missing_permissions'], [])


class CheckItemAccessTest(SimpleTestCase):

    def setUp(self):
        self.context = PermissionContext(role=UserRole.ADMIN_HEAD, permissions=('view_reports',))

    def test_reasons(self):
        self.assertEqual(check_item_access(TREE[0], self.context).reason, 'No permission required')

        granted = check_item_access(TREE[2], self.context)
        self.assertTrue(granted.allowed)
        self.assertEqual(granted.required_permission, 'view_reports')

        denied = check_item_access(TREE[1], self.context)
        self.assertFalse(denied.allowed)
        self.assertEqual(denied.reason, 'Insufficient permissions')
        self.assertEqual(denied.required_permission, 'manage_users')

    def test_wildcard_reason(self):
        context = PermissionContext(role=UserRole.SUPERADMIN, permissions=('*',))
        self.assertEqual(check_item_access(TREE[1], context).reason, 'Superadmin access')

    def test_multiple_items(self):
        results = validate_multiple_items(TREE, self.context)
        self.assertEqual([r['result'].allowed for r in results], [True, False, True])

    def test_audit_entry(self):
        result = check_item_access(TREE[1], self.context)
        entry = create_security_audit_entry(result, self.context, resource='admin')

        self.assertEqual(entry.action, 'access_denied')
        self.assertEqual(entry.metadata['required_permission'], 'manage_users')
        self.assertEqual(entry.metadata['user_permissions'], ['view_reports'])


class RoleAwareAccessTest(SimpleTestCase):

    def test_context_defaults_to_role_permissions(self):
        context = create_permission_context('household_head', user_id=7)

        self.assertEqual(context.role, UserRole.HOUSEHOLD_HEAD)
        self.assertIn('manage_household', context.permissions)
        self.assertEqual(context.user_id, '7')

    def test_context_rejects_unknown_role(self):
        with self.assertRaises(ConfigError):
            create_permission_context('mayor')

    def test_path_owned_by_role_item(self):
        context = create_permission_context(UserRole.ADMIN_HEAD)
        result = can_access_path('/household-approvals/42', context)

        self.assertTrue(result.allowed)
        self.assertEqual(result.required_permission, 'manage_households')

    def test_restricted_route_is_denied(self):
        context = create_permission_context(UserRole.ADMIN_HEAD)
        result = can_access_path('/villages', context)

        self.assertFalse(result.allowed)
        self.assertIn('restricted', result.reason)

    def test_path_outside_role_navigation(self):
        context = create_permission_context(UserRole.SECURITY_OFFICER)
        result = can_access_path('/fees-management', context)

        self.assertFalse(result.allowed)
        self.assertEqual(result.reason, 'Route not found in navigation configuration')

    def test_missing_item_permission_is_denied(self):
        context = create_permission_context(UserRole.ADMIN_HEAD, permissions=['manage_households'])
        result = can_access_path('/fees-management', context)

        self.assertFalse(result.allowed)
        self.assertEqual(result.required_permission, 'manage_fees')

    def test_invalid_role_in_context(self):
        result = can_access_path('/dashboard', PermissionContext(role='mayor'))
        self.assertFalse(result.allowed)
        self.assertEqual(result.reason, 'Invalid user role')

    def test_cross_role_navigation(self):
        self.assertTrue(can_access_role_navigation('admin_head', 'admin_head', []).allowed)
        self.assertTrue(can_access_role_navigation('superadmin', 'admin_head', ['*']).allowed)
        self.assertFalse(can_access_role_navigation('household_head', 'admin_head', ['view_fees']).allowed)
