"""Request-scoped connection and authentication context."""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Optional


@dataclass
class AuthContext:
    """Everything needed to run p4 on behalf of one request.

    Built by `merge_auth` from the request body and the persisted credential;
    never persisted itself.

    Attributes:
        server: P4PORT (`-p`)
        user: Perforce user (`-u`)
        ticket: Authentication ticket (`-P`)
        client: Workspace name (`-c`)
        password: Password to exchange for a ticket, if no ticket is known
        extra: Every other request field, passed through untouched
    """
    server: Optional[str] = None
    user: Optional[str] = None
    ticket: Optional[str] = field(default=None, repr=False)
    client: Optional[str] = None
    password: Optional[str] = field(default=None, repr=False)
    extra: Dict[str, Any] = field(default_factory=dict)

    def get(self, key: str, default: Any = None) -> Any:
        """Look up a pass-through request field."""
        return self.extra.get(key, default)

    def with_ticket(self, ticket: str) -> "AuthContext":
        return replace(self, ticket=ticket, password=None)

    def without_client(self) -> "AuthContext":
        """Same connection, but without the `-c` flag."""
        return replace(self, client=None)
