"""
Stats Errors

Failure taxonomy for one stats request. Every error here is fatal for
the request and is rendered as a JSON body without resource data.
Malformed telemetry rows are not errors: parsers drop them locally.
"""

from typing import Optional


class StatsError(Exception):
    """Base exception for stats request failures"""

    status_code = 500

    def __init__(self, message: str, details: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.details = details


class AuthorizationError(StatsError):
    """Raised when there is no valid session or the identity is not allowed"""

    status_code = 401


class ConfigurationError(StatsError):
    """Raised when a setting required by the selected backend is missing"""
    pass


class UpstreamFetchError(StatsError):
    """Raised when a metrics endpoint or remote command fails"""

    def __init__(self, details: str):
        super().__init__("Failed to fetch stats", details=details)
