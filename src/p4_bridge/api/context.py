"""Request context: credential merging and shared dependencies."""

from dataclasses import dataclass, field
from typing import Any, Mapping, Optional

from p4_bridge.config.settings import Settings
from p4_bridge.models.auth import AuthContext
from p4_bridge.models.records import Credential
from p4_bridge.p4.login import TrustLoginFlow
from p4_bridge.p4.runner import Command, P4CommandRunner
from p4_bridge.store.base import CredentialStore
from p4_bridge.store.json_file import JsonCredentialStore

AUTH_FIELDS = ("server", "user", "ticket", "client", "password")


def request_value(value: Any) -> Optional[str]:
    """Normalize a request field to a string, or None when it was not given.

    Empty strings count as absent; numbers (e.g. a numeric user name) are
    converted. Booleans, lists and objects are not usable values.
    """
    if isinstance(value, str):
        return value or None
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


def merge_auth(fields: Optional[Mapping[str, Any]], credential: Optional[Credential]) -> AuthContext:
    """Combine request fields with the saved default credential.

    Request values always win. The saved server and user fill gaps, but the
    saved ticket is reused only when the resolved server *and* user are the
    ones it was issued for. Fields other than the auth fields are passed
    through untouched in `AuthContext.extra`.

    Args:
        fields: Request body
        credential: Saved default credential, if any

    Returns:
        Merged auth context
    """
    extra = dict(fields or {})
    server, user, ticket, client, password = (request_value(extra.pop(name, None)) for name in AUTH_FIELDS)

    if credential is not None:
        server = server or credential.server
        user = user or credential.user
        if (
            not ticket
            and credential.ticket
            and server == credential.server
            and user == credential.user
        ):
            ticket = credential.ticket

    return AuthContext(
        server=server,
        user=user,
        ticket=ticket,
        client=client,
        password=password,
        extra=extra,
    )


@dataclass
class BridgeContext:
    """Dependencies shared by every request.

    Anything not passed in is built from `settings`: the real p4 runner and
    the JSON credential file under the data directory.

    Example:
        ```python
        ctx = BridgeContext(
            runner=FakeRunner(),
            credential_store=MemoryCredentialStore(),
        )
        workspaces = list_workspaces(ctx, {"server": "ssl:p4:1666", "user": "alice", "ticket": "T"})
        ```

    Attributes:
        settings: Application settings
        runner: p4 command runner
        credential_store: Store holding the default credential
    """

    settings: Settings = field(default_factory=Settings)
    runner: Optional[Command] = None
    credential_store: Optional[CredentialStore] = None

    def __post_init__(self):
        if self.runner is None:
            self.runner = P4CommandRunner(
                executable=self.settings.p4_executable,
                timeout=self.settings.p4_timeout,
            )
        if self.credential_store is None:
            self.credential_store = JsonCredentialStore(self.settings.credentials_path)

    def login_flow(self) -> TrustLoginFlow:
        """A fresh trust-then-login flow bound to this context's runner."""
        return TrustLoginFlow(self.runner)

    def merge_auth(self, fields: Optional[Mapping[str, Any]]) -> AuthContext:
        return merge_auth(fields, self.credential_store.get())
