"""Public API for p4-bridge.

Operations live in `p4_bridge.api.operations` and take a
`p4_bridge.api.context.BridgeContext`; this package root only exports the
exception hierarchy so lower layers can import it without pulling in the
operations.

Example:
    ```python
    from p4_bridge.api import MissingAuthError
    from p4_bridge.api.context import BridgeContext
    from p4_bridge.api.operations import list_changes

    ctx = BridgeContext()
    try:
        changes = list_changes(ctx, {"client": "alice-main", "limit": 20})
    except MissingAuthError as e:
        print(f"Error: {e}")
    ```
"""

from .exceptions import (
    BridgeError,
    InvalidFieldError,
    LoginError,
    MissingAuthError,
    MissingFieldError,
    PartialResultError,
    ProtocolError,
)

__all__ = [
    'BridgeError',
    'InvalidFieldError',
    'LoginError',
    'MissingAuthError',
    'MissingFieldError',
    'PartialResultError',
    'ProtocolError',
]
