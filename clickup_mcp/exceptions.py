"""
clickup-mcp exception hierarchy.

All custom exceptions live here to avoid circular imports.
"""


class ToolError(Exception):
    """Base for every failure a tool can report back to the agent."""

    error_type = "error"


class NotFoundError(ToolError):
    """Referenced entity does not exist after resolution (or the API said 404)."""

    error_type = "not_found"


class AmbiguousReferenceError(ToolError):
    """A name/email/fragment matched more than one candidate."""

    error_type = "ambiguous"

    def __init__(self, message, candidates=None):
        super().__init__(message)
        self.candidates = list(candidates or [])


class RemoteFailure(ToolError):
    """The ClickUp API returned an error or could not be reached.

    ``retryable`` is a hint for the caller only; nothing here retries.
    """

    error_type = "remote"

    def __init__(self, message, status=None, retryable=False):
        super().__init__(message)
        self.status = status
        self.retryable = retryable


class ValidationFailure(ToolError):
    """Semantically invalid combination of arguments."""

    error_type = "validation"


class SetupError(ToolError):
    """Token missing or rejected, or no workspace configured."""

    error_type = "setup"


class HTTPError(Exception):
    """Raised by _http_request for HTTP errors that callers want to handle."""

    def __init__(self, code, reason, body, headers=None):
        self.code = code
        self.reason = reason
        self.body = body
        self.headers = headers or {}
