# navigation/analytics.py
"""
Fire-and-forget navigation analytics.

Events are kept in a bounded in-memory buffer and handed to an optional
``sink`` callable (e.g. a function that forwards to an external service).
Tracking never raises: a failing sink is logged and ignored.
"""
import logging
import time
import uuid
from collections import Counter, deque
from dataclasses import dataclass, field
from typing import Callable, Optional

from django.utils import timezone

logger = logging.getLogger(__name__)


class EventType:
    NAVIGATION_RENDER = 'navigation_render'
    ITEM_CLICK = 'item_click'
    GROUP_TOGGLE = 'group_toggle'
    PERMISSION_CHECK = 'permission_check'
    ROUTE_ACCESS = 'route_access'
    ERROR_OCCURRED = 'error_occurred'
    PERFORMANCE_METRIC = 'performance_metric'


@dataclass
class AnalyticsEvent:
    type: str
    data: dict = field(default_factory=dict)
    user_id: Optional[str] = None
    user_role: Optional[str] = None
    tenant_id: Optional[str] = None
    session_id: Optional[str] = None
    render_time: Optional[float] = None
    timestamp: object = field(default_factory=timezone.now)


@dataclass
class PerformanceMetrics:
    render_time: float
    filter_time: float = 0.0
    permission_check_time: float = 0.0
    total_items: int = 0
    filtered_items: int = 0


class NavigationAnalytics:

    def __init__(self, enabled: bool = True, max_events: int = 1000, session_id: str = None,
                 sink: Callable[[AnalyticsEvent], None] = None, clock: Callable[[], float] = None):
        self.enabled = enabled
        self.session_id = session_id or uuid.uuid4().hex
        self.sink = sink
        self.clock = clock or time.monotonic
        self.started_at = self.clock()
        self._events = deque(maxlen=max_events)

    @property
    def events(self):
        return list(self._events)

    def track(self, event: AnalyticsEvent):
        if not self.enabled:
            return
        event.session_id = self.session_id
        self._events.append(event)

        if self.sink is None:
            return
        try:
            self.sink(event)
        except Exception as e:
            logger.warning(f"Analytics sink failed for {event.type} event: {e}")

    def track_render_performance(self, metrics: PerformanceMetrics, user_role=None,
                                 user_id=None, tenant_id=None):
        self.track(AnalyticsEvent(
            type=EventType.PERFORMANCE_METRIC,
            user_role=user_role,
            user_id=user_id,
            tenant_id=tenant_id,
            render_time=metrics.render_time,
            data={
                'category': EventType.NAVIGATION_RENDER,
                'render_time': metrics.render_time,
                'load_time': metrics.filter_time + metrics.permission_check_time,
                'total_items': metrics.total_items,
                'filtered_items': metrics.filtered_items,
            },
        ))

    def track_item_click(self, item, user_role=None, user_id=None, tenant_id=None,
                         source_location=None):
        self.track(AnalyticsEvent(
            type=EventType.ITEM_CLICK,
            user_role=user_role,
            user_id=user_id,
            tenant_id=tenant_id,
            data={
                'item_id': item.id,
                'item_label': item.label,
                'item_href': item.href,
                'item_group': item.group,
                'source_location': source_location,
            },
        ))

    def track_group_toggle(self, group_id: str, is_expanded: bool, user_role=None,
                           user_id=None, tenant_id=None):
        self.track(AnalyticsEvent(
            type=EventType.GROUP_TOGGLE,
            user_role=user_role,
            user_id=user_id,
            tenant_id=tenant_id,
            data={
                'group_id': group_id,
                'is_expanded': is_expanded,
                'action': 'expand' if is_expanded else 'collapse',
            },
        ))

    def track_permission_check(self, item_id: str, allowed: bool, user_role=None,
                               user_id=None, tenant_id=None, required_permission=None):
        self.track(AnalyticsEvent(
            type=EventType.PERMISSION_CHECK,
            user_role=user_role,
            user_id=user_id,
            tenant_id=tenant_id,
            data={
                'item_id': item_id,
                'allowed': allowed,
                'required_permission': required_permission,
            },
        ))

    def track_error(self, error_type: str, message: str, item_id=None, code=None,
                    user_role=None, user_id=None, tenant_id=None):
        self.track(AnalyticsEvent(
            type=EventType.ERROR_OCCURRED,
            user_role=user_role,
            user_id=user_id,
            tenant_id=tenant_id,
            data={
                'error_type': error_type,
                'message': message,
                'item_id': item_id,
                'code': code,
            },
        ))

    def get_usage_stats(self) -> dict:
        events = list(self._events)
        total = len(events)
        clicks = Counter(e.data.get('item_id') for e in events if e.type == EventType.ITEM_CLICK)
        errors = sum(1 for e in events if e.type == EventType.ERROR_OCCURRED)
        render_times = [
            e.render_time or 0.0 for e in events if e.type == EventType.PERFORMANCE_METRIC
        ]

        return {
            'total_events': total,
            'unique_users': len({e.user_id for e in events if e.user_id}),
            'popular_items': dict(clicks.most_common()),
            'error_rate': errors / total if total else 0.0,
            'average_render_time': sum(render_times) / len(render_times) if render_times else 0.0,
            'session_duration': self.clock() - self.started_at,
        }

    def clear(self):
        self._events.clear()
