# navigation/state.py
"""
Per-session navigation UI state with change notification.

Listeners receive a snapshot dict after every change, synchronously and in
subscription order. A failing listener is logged and does not stop the
others.
"""
import logging
import threading
from typing import Callable, Optional

logger = logging.getLogger(__name__)


class NavigationState:

    def __init__(self, active_item: Optional[str] = None, expanded_groups=(), collapsed_sidebar: bool = False):
        self._initial = (active_item, frozenset(expanded_groups), collapsed_sidebar)
        self._active_item = active_item
        self._expanded_groups = set(expanded_groups)
        self._collapsed_sidebar = collapsed_sidebar
        self._listeners = []
        self._lock = threading.RLock()

    def get_current_state(self) -> dict:
        with self._lock:
            return {
                'active_item': self._active_item,
                'expanded_groups': sorted(self._expanded_groups),
                'collapsed_sidebar': self._collapsed_sidebar,
            }

    def set_active_item(self, item_id: Optional[str]):
        with self._lock:
            if item_id == self._active_item:
                return
            self._active_item = item_id
        self._notify()

    def toggle_group(self, group_id: str) -> bool:
        """Flip a group's expanded flag; returns the new value."""
        with self._lock:
            if group_id in self._expanded_groups:
                self._expanded_groups.discard(group_id)
                expanded = False
            else:
                self._expanded_groups.add(group_id)
                expanded = True
        self._notify()
        return expanded

    def is_group_expanded(self, group_id: str) -> bool:
        with self._lock:
            return group_id in self._expanded_groups

    def toggle_sidebar(self) -> bool:
        with self._lock:
            self._collapsed_sidebar = not self._collapsed_sidebar
            collapsed = self._collapsed_sidebar
        self._notify()
        return collapsed

    def reset_state(self):
        with self._lock:
            active_item, expanded_groups, collapsed_sidebar = self._initial
            self._active_item = active_item
            self._expanded_groups = set(expanded_groups)
            self._collapsed_sidebar = collapsed_sidebar
        self._notify()

    def subscribe(self, listener: Callable[[dict], None]) -> Callable[[], None]:
        """Register ``listener``; call the returned function to unsubscribe."""
        with self._lock:
            self._listeners.append(listener)

        def unsubscribe():
            with self._lock:
                if listener in self._listeners:
                    self._listeners.remove(listener)

        return unsubscribe

    def _notify(self):
        snapshot = self.get_current_state()
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener(snapshot)
            except Exception:
                logger.exception("Navigation state listener failed")
