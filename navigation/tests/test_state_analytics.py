# navigation/tests/test_state_analytics.py
from django.test import SimpleTestCase

from core.exceptions import AuthenticationError, ConfigError, LookupFetchError, RolePermissionError
from navigation.analytics import EventType, NavigationAnalytics, PerformanceMetrics
from navigation.catalog import get_navigation_item
from navigation.errors import (
    ErrorType,
    NavigationErrorHandler,
    create_error_notification,
    format_error_message,
    from_exception,
    is_error_user_actionable,
    network_error,
    permission_denied_error,
    route_not_found_error,
)
from navigation.permissions import PermissionResult
from navigation.state import NavigationState


class NavigationStateTest(SimpleTestCase):

    def setUp(self):
        self.state = NavigationState(expanded_groups=['overview'])
        self.snapshots = []
        self.unsubscribe = self.state.subscribe(self.snapshots.append)

    def test_toggle_group(self):
        self.assertTrue(self.state.toggle_group('finance'))
        self.assertTrue(self.state.is_group_expanded('finance'))
        self.assertFalse(self.state.toggle_group('finance'))

        self.assertEqual(len(self.snapshots), 2)
        self.assertEqual(self.snapshots[0]['expanded_groups'], ['finance', 'overview'])

    def test_setting_same_active_item_does_not_notify(self):
        self.state.set_active_item('rules')
        self.state.set_active_item('rules')

        self.assertEqual(len(self.snapshots), 1)
        self.assertEqual(self.state.get_current_state()['active_item'], 'rules')

    def test_reset_restores_initial_state(self):
        self.state.set_active_item('rules')
        self.state.toggle_sidebar()
        self.state.toggle_group('overview')
        self.state.reset_state()

        self.assertEqual(self.state.get_current_state(), {
            'active_item': None,
            'expanded_groups': ['overview'],
            'collapsed_sidebar': False,
        })

    def test_unsubscribe(self):
        self.unsubscribe()
        self.state.toggle_sidebar()
        self.assertEqual(self.snapshots, [])

    def test_failing_listener_does_not_stop_others(self):
        def broken(snapshot):
            raise RuntimeError("listener bug")

        state = NavigationState()
        received = []
        state.subscribe(broken)
        state.subscribe(received.append)

        with self.assertLogs('navigation.state', 'ERROR'):
            state.toggle_sidebar()

        self.assertEqual(received[0]['collapsed_sidebar'], True)


class FakeClock:

    def __init__(self):
        self.now = 0.0

    def __call__(self):
        return self.now


class NavigationAnalyticsTest(SimpleTestCase):

    def setUp(self):
        self.clock = FakeClock()
        self.analytics = NavigationAnalytics(session_id='s1', clock=self.clock)

    def test_usage_stats(self):
        item = get_navigation_item('rules')
        self.analytics.track_item_click(item, user_id='u1')
        self.analytics.track_item_click(item, user_id='u2')
        self.analytics.track_item_click(get_navigation_item('dashboard'), user_id='u1')
        self.analytics.track_render_performance(PerformanceMetrics(render_time=12.0))
        self.analytics.track_error('route_not_found', 'Route "/x" not found')
        self.clock.now = 30.0

        stats = self.analytics.get_usage_stats()

        self.assertEqual(stats['total_events'], 5)
        self.assertEqual(stats['unique_users'], 2)
        self.assertEqual(list(stats['popular_items']), ['rules', 'dashboard'])
        self.assertEqual(stats['error_rate'], 0.2)
        self.assertEqual(stats['average_render_time'], 12.0)
        self.assertEqual(stats['session_duration'], 30.0)

    def test_events_carry_session(self):
        self.analytics.track_group_toggle('finance', True)

        event = self.analytics.events[0]
        self.assertEqual(event.type, EventType.GROUP_TOGGLE)
        self.assertEqual(event.session_id, 's1')
        self.assertEqual(event.data['action'], 'expand')

    def test_buffer_is_bounded(self):
        analytics = NavigationAnalytics(max_events=2)
        for group in ('a', 'b', 'c'):
            analytics.track_group_toggle(group, False)

        self.assertEqual([e.data['group_id'] for e in analytics.events], ['b', 'c'])

    def test_disabled_tracking_records_nothing(self):
        analytics = NavigationAnalytics(enabled=False)
        analytics.track_permission_check('/rules', True)
        self.assertEqual(analytics.events, [])

    def test_failing_sink_is_swallowed(self):
        def sink(event):
            raise ConnectionError("collector unreachable")

        analytics = NavigationAnalytics(sink=sink)
        with self.assertLogs('navigation.analytics', 'WARNING'):
            analytics.track_permission_check('/rules', False, required_permission='manage_rules')

        self.assertEqual(len(analytics.events), 1)

    def test_clear(self):
        self.analytics.track_group_toggle('finance', True)
        self.analytics.clear()
        self.assertEqual(self.analytics.get_usage_stats()['total_events'], 0)


class NavigationErrorTest(SimpleTestCase):

    def test_permission_denied_message(self):
        item = get_navigation_item('fees-management')
        result = PermissionResult(False, 'Insufficient permissions', 'manage_fees', 'household_head')
        error = permission_denied_error(item, result)

        self.assertEqual(format_error_message(error), 'You don\'t have permission to access "Fees Management"')
        self.assertEqual(error.required_permission, 'manage_fees')
        self.assertFalse(is_error_user_actionable(error))
        self.assertEqual(create_error_notification(error)['title'], 'Access Denied')

    def test_recoverable_errors_are_actionable(self):
        error = route_not_found_error('/nowhere')

        self.assertTrue(is_error_user_actionable(error))
        notification = create_error_notification(error)
        self.assertEqual(notification['level'], 'warning')
        self.assertTrue(notification['retry'])

    def test_from_exception(self):
        cases = [
            (ConfigError("Unknown role: 'mayor'", details={'role': 'mayor'}), ErrorType.INVALID_ROLE),
            (ConfigError("Broken table"), ErrorType.CONFIGURATION_ERROR),
            (AuthenticationError("Login required"), ErrorType.AUTHENTICATION_REQUIRED),
            (LookupFetchError("timeout"), ErrorType.NETWORK_ERROR),
            (RolePermissionError("No profile"), ErrorType.PERMISSION_DENIED),
        ]
        for exc, expected in cases:
            self.assertEqual(from_exception(exc).type, expected)

    def test_to_dict(self):
        data = network_error('timeout').to_dict()

        self.assertEqual(data['code'], 'NAV_NETWORK_ERROR')
        self.assertEqual(data['details'], 'timeout')
        self.assertEqual(data['user_message'], 'Unable to load navigation. Please check your connection.')


class NavigationErrorHandlerTest(SimpleTestCase):

    def test_collects_and_filters(self):
        seen = []
        handler = NavigationErrorHandler(on_error=seen.append)

        with self.assertLogs('navigation.errors', 'ERROR'):
            handler.handle_error(route_not_found_error('/a'))
            handler.handle_error(network_error())

        self.assertEqual(len(seen), 2)
        self.assertTrue(handler.has_recoverable_errors())
        self.assertEqual(handler.get_latest_error().type, ErrorType.NETWORK_ERROR)
        self.assertEqual(len(handler.get_errors_by_type(ErrorType.ROUTE_NOT_FOUND)), 1)

        handler.clear_errors_by_type(ErrorType.NETWORK_ERROR)
        self.assertEqual(len(handler.get_errors()), 1)
        handler.clear_errors()
        self.assertFalse(handler.has_errors())
        self.assertIsNone(handler.get_latest_error())

    def test_failing_callback_is_logged(self):
        def callback(error):
            raise RuntimeError("toast failed")

        handler = NavigationErrorHandler(on_error=callback)
        with self.assertLogs('navigation.errors', 'WARNING') as logs:
            handler.handle_error(network_error())

        self.assertTrue(any('callback failed' in line for line in logs.output))
        self.assertTrue(handler.has_errors())
