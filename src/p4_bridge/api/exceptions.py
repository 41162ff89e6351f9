"""Custom exceptions for the p4-bridge API.

Each exception carries the HTTP status the server layer answers with.
"""


class BridgeError(Exception):
    """Base exception for all p4-bridge errors."""

    http_status = 500


class MissingAuthError(BridgeError):
    """Raised when no server/user/ticket/password can be resolved for a request."""

    http_status = 400

    def __init__(self, message: str = None):
        """Initialize exception.

        Args:
            message: Optional custom message
        """
        if message is None:
            message = "Missing auth. Provide a password/ticket once, or save creds first."
        super().__init__(message)


class MissingFieldError(BridgeError):
    """Raised when a required business field is absent from a request."""

    http_status = 400

    def __init__(self, field_name: str, message: str = None):
        """Initialize exception.

        Args:
            field_name: Name of the missing request field
            message: Optional custom message
        """
        self.field_name = field_name
        if message is None:
            message = f"Missing {field_name}."
        super().__init__(message)


class InvalidFieldError(BridgeError):
    """Raised when a request field is present but cannot be used."""

    http_status = 400

    def __init__(self, field_name: str, value, message: str = None):
        self.field_name = field_name
        self.value = value
        if message is None:
            message = f"Invalid {field_name}: {value!r}"
        super().__init__(message)


class ProtocolError(BridgeError):
    """Raised when the p4 executable fails.

    The message is p4's own error text (trimmed stderr) when it printed one.
    `returncode` is None when the process could not be started at all.
    """

    http_status = 500

    def __init__(self, message: str = "p4 failed", stderr: str = "", returncode: int = None):
        self.stderr = stderr
        self.returncode = returncode
        super().__init__(message)


class LoginError(ProtocolError):
    """Raised when `p4 login` refuses the supplied password."""

    def __init__(self, message: str = "login failed"):
        super().__init__(message or "login failed")


class PartialResultError(BridgeError):
    """Raised when a secondary enrichment query fails.

    Never surfaced to clients: callers fall back to the primary records.
    """
