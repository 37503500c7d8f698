# navigation/errors.py
"""
User-facing navigation error records.

These are data, not exceptions: views and the context processor build
them from failed checks and hand them to the UI. Internal failures use the
``core.exceptions`` hierarchy; ``from_exception`` bridges the two.
"""
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

from django.utils import timezone

from core.exceptions import (
    AuthenticationError,
    ConfigError,
    LookupFetchError,
    RolePermissionError,
    VillageManagementException,
)

logger = logging.getLogger(__name__)


class ErrorType:
    PERMISSION_DENIED = 'permission_denied'
    ROUTE_NOT_FOUND = 'route_not_found'
    INVALID_ROLE = 'invalid_role'
    CONFIGURATION_ERROR = 'configuration_error'
    AUTHENTICATION_REQUIRED = 'authentication_required'
    NETWORK_ERROR = 'network_error'


@dataclass
class NavigationError:
    type: str
    message: str
    details: Optional[str] = None
    code: Optional[str] = None
    recoverable: bool = False
    suggestions: List[str] = field(default_factory=list)
    item_id: Optional[str] = None
    user_role: Optional[str] = None
    required_permission: Optional[str] = None
    timestamp: object = field(default_factory=timezone.now)

    def to_dict(self) -> dict:
        return {
            'type': self.type,
            'message': self.message,
            'user_message': format_error_message(self),
            'details': self.details,
            'code': self.code,
            'recoverable': self.recoverable,
            'suggestions': list(self.suggestions),
            'item_id': self.item_id,
            'user_role': self.user_role,
            'required_permission': self.required_permission,
            'timestamp': self.timestamp.isoformat() if self.timestamp else None,
        }


# ============================================================================
# FACTORIES
# ============================================================================

def permission_denied_error(item, result) -> NavigationError:
    return NavigationError(
        type=ErrorType.PERMISSION_DENIED,
        message=f'Access denied to "{item.label}"',
        details=result.reason,
        code='NAV_PERMISSION_DENIED',
        recoverable=False,
        item_id=item.id,
        user_role=result.user_role,
        required_permission=result.required_permission,
        suggestions=[
            'Contact your administrator to request access',
            'Verify you are logged in with the correct role',
            'Check if your permissions have been updated',
        ],
    )


def route_not_found_error(path: str, user_role=None) -> NavigationError:
    return NavigationError(
        type=ErrorType.ROUTE_NOT_FOUND,
        message=f'Route "{path}" not found',
        details='The requested route is not available in the navigation configuration',
        code='NAV_ROUTE_NOT_FOUND',
        recoverable=True,
        user_role=user_role,
        suggestions=[
            'Check the URL for typos',
            'Navigate using the menu instead',
            'Contact support if you believe this is an error',
        ],
    )


def invalid_role_error(role) -> NavigationError:
    return NavigationError(
        type=ErrorType.INVALID_ROLE,
        message=f'Invalid user role: "{role}"',
        details='The user role is not recognized by the navigation system',
        code='NAV_INVALID_ROLE',
        recoverable=False,
        suggestions=[
            'Contact your administrator',
            'Log out and log back in',
            'Verify your account status',
        ],
    )


def configuration_error(message: str, details: str = None) -> NavigationError:
    return NavigationError(
        type=ErrorType.CONFIGURATION_ERROR,
        message=f'Navigation configuration error: {message}',
        details=details,
        code='NAV_CONFIG_ERROR',
        recoverable=False,
        suggestions=[
            'Report this issue to the development team',
            'Try refreshing the page',
            'Contact technical support',
        ],
    )


def authentication_required_error() -> NavigationError:
    return NavigationError(
        type=ErrorType.AUTHENTICATION_REQUIRED,
        message='Authentication required',
        details='You must be logged in to access navigation',
        code='NAV_AUTH_REQUIRED',
        recoverable=True,
        suggestions=[
            'Please log in to continue',
            'Check if your session has expired',
            'Clear your browser cache and try again',
        ],
    )


def network_error(details: str = None) -> NavigationError:
    return NavigationError(
        type=ErrorType.NETWORK_ERROR,
        message='Network error loading navigation',
        details=details or 'Unable to load navigation configuration',
        code='NAV_NETWORK_ERROR',
        recoverable=True,
        suggestions=[
            'Check your internet connection',
            'Try refreshing the page',
            'Contact support if the problem persists',
        ],
    )


def from_exception(exc: VillageManagementException) -> NavigationError:
    """Map an internal exception onto the matching user-facing record."""
    if isinstance(exc, ConfigError):
        role = exc.details.get('role')
        if role is not None:
            return invalid_role_error(role)
        return configuration_error(exc.message)
    if isinstance(exc, AuthenticationError):
        return authentication_required_error()
    if isinstance(exc, LookupFetchError):
        return network_error(exc.message)
    if isinstance(exc, RolePermissionError):
        return NavigationError(
            type=ErrorType.PERMISSION_DENIED,
            message=exc.message,
            code='NAV_PERMISSION_DENIED',
        )
    return configuration_error(exc.message)


# ============================================================================
# PRESENTATION
# ============================================================================

_USER_MESSAGES = {
    ErrorType.ROUTE_NOT_FOUND: 'The requested page could not be found',
    ErrorType.INVALID_ROLE: 'Your account role is not recognized. Please contact support.',
    ErrorType.AUTHENTICATION_REQUIRED: 'Please log in to continue',
    ErrorType.CONFIGURATION_ERROR: 'A system configuration error occurred. Please try again later.',
    ErrorType.NETWORK_ERROR: 'Unable to load navigation. Please check your connection.',
}


def format_error_message(error: NavigationError) -> str:
    if error.type == ErrorType.PERMISSION_DENIED:
        label = error.message.split('"')[1] if error.message.count('"') >= 2 else 'this item'
        return f"You don't have permission to access \"{label}\""
    return _USER_MESSAGES.get(error.type, 'An unexpected error occurred')


def get_error_suggestions(error: NavigationError) -> List[str]:
    return list(error.suggestions or [])


def is_error_user_actionable(error: NavigationError) -> bool:
    return bool(error.recoverable and error.suggestions)


def create_error_notification(error: NavigationError) -> dict:
    return {
        'title': 'Access Denied' if error.type == ErrorType.PERMISSION_DENIED else 'Navigation Error',
        'message': format_error_message(error),
        'level': 'warning' if error.recoverable else 'error',
        'retry': error.recoverable,
    }


# ============================================================================
# COLLECTOR
# ============================================================================

class NavigationErrorHandler:
    """Collects navigation errors for one request/session."""

    def __init__(self, on_error: Callable[[NavigationError], None] = None):
        self.on_error = on_error
        self._errors: List[NavigationError] = []

    def handle_error(self, error: NavigationError):
        self._errors.append(error)
        logger.error(f"Navigation error [{error.code}] {error.type}: {error.message}"
                     + (f" ({error.details})" if error.details else ""))

        if self.on_error:
            try:
                self.on_error(error)
            except Exception as e:
                logger.warning(f"Navigation error callback failed: {e}")

    def get_errors(self) -> List[NavigationError]:
        return list(self._errors)

    def get_errors_by_type(self, error_type: str) -> List[NavigationError]:
        return [error for error in self._errors if error.type == error_type]

    def clear_errors(self):
        self._errors = []

    def clear_errors_by_type(self, error_type: str):
        self._errors = [error for error in self._errors if error.type != error_type]

    def has_errors(self) -> bool:
        return bool(self._errors)

    def has_recoverable_errors(self) -> bool:
        return any(error.recoverable for error in self._errors)

    def get_latest_error(self) -> Optional[NavigationError]:
        return self._errors[-1] if self._errors else None
