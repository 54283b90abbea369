"""
Exceptions raised by the campus_blog core.

Every error carries a human-readable ``detail``, a machine ``code`` and the
HTTP status the views answer with.
"""


class BlogError(Exception):
    """Base exception for campus_blog errors."""

    status_code = 500
    default_code = "blog_error"

    def __init__(self, detail, code=None):
        self.detail = detail
        self.code = code or self.default_code
        super().__init__(detail)


class ValidationError(BlogError):
    """Raised for malformed or missing input, e.g. an empty title."""

    status_code = 400
    default_code = "invalid"


class AuthenticationRequired(BlogError):
    """Raised when an operation needs an actor and none is present."""

    status_code = 401
    default_code = "authentication_required"

    def __init__(self, detail="Authentication required.", code=None):
        super().__init__(detail, code)


class AuthorizationDenied(BlogError):
    """Raised when the actor lacks permission for the requested action."""

    status_code = 403
    default_code = "permission_denied"

    def __init__(self, detail="Permission denied.", code=None):
        super().__init__(detail, code)


class NotFound(BlogError):
    """Raised when a referenced post, user or comment does not exist."""

    status_code = 404
    default_code = "not_found"


class ConflictError(BlogError):
    """Raised when the request conflicts with the current state of a record."""

    status_code = 409
    default_code = "conflict"


class InvalidTransition(ConflictError):
    """Raised when a post cannot move to the requested status from its current one."""

    default_code = "invalid_transition"

    def __init__(self, action, status):
        self.action = action
        self.status = status
        super().__init__(f"Cannot {action.replace('_', ' ')} a post that is {status}.")


class SlugConflict(ConflictError):
    """Raised when no free slug could be saved after the allowed attempts."""

    default_code = "slug_conflict"


class UpstreamUnavailable(BlogError):
    """Raised when the store or the notification sink cannot be reached."""

    status_code = 503
    default_code = "upstream_unavailable"
