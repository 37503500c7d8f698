# core/exceptions.py
class VillageManagementException(Exception):
    """Base exception for all village management system errors."""

    def __init__(self, message=None, user_friendly=False, details=None, error_code=None):
        self.message = message or "An error occurred"
        self.user_friendly = user_friendly
        self.details = details or {}
        self.error_code = error_code
        super().__init__(self.message)

class AuthenticationError(VillageManagementException):
    """Authentication and authorization errors."""
    def __init__(self, message=None, user_friendly=False, details=None):
        super().__init__(message or "Authentication failed", user_friendly, details, "AUTH_ERROR")

class ValidationError(VillageManagementException):
    """Data validation errors."""
    def __init__(self, message=None, user_friendly=False, details=None):
        super().__init__(message or "Validation failed", user_friendly, details, "VALIDATION_ERROR")

class RolePermissionError(VillageManagementException):
    """Authorization and permission-related errors."""
    def __init__(self, message=None, user_friendly=False, details=None):
        super().__init__(message or "Insufficient permissions", user_friendly, details, "PERMISSION_ERROR")

class ConfigError(VillageManagementException):
    """A role or navigation item cannot be resolved against the static tables."""
    def __init__(self, message=None, user_friendly=False, details=None):
        super().__init__(message or "Navigation configuration error", user_friendly, details, "CONFIG_ERROR")

class LookupFetchError(VillageManagementException):
    """Lookup categories/values could not be loaded from the backing store."""
    def __init__(self, message=None, user_friendly=False, details=None):
        super().__init__(message or "Lookup data could not be loaded", user_friendly, details, "LOOKUP_FETCH_ERROR")
