"""Error taxonomy shared by the gateway, session gate and controller."""


class DashboardError(Exception):
    """Base class for everything the dashboard raises on purpose."""


class GatewayError(DashboardError):
    """A read or write against the backend store, image host or identity API failed."""

    def __init__(self, operation, message):
        super().__init__(f"{operation}: {message}")
        self.operation = operation
        self.message = message


class AuthError(DashboardError):
    """Sign-in was cancelled, rejected by the provider, or the session is not authorized."""


class ValidationError(DashboardError):
    """Operator input was rejected before reaching the gateway."""

    def __init__(self, message, errors=None):
        super().__init__(message)
        self.errors = errors or {}


class InvalidTransition(ValidationError):
    def __init__(self, current, target):
        super().__init__(f"Cannot move order from '{current}' to '{target}'")
        self.current = current
        self.target = target
