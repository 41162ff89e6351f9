"""Core operations behind the p4-bridge HTTP API.

Each operation takes the shared `BridgeContext` and the request body:
- save_credentials / get_credentials_status / clear_credentials: default credential
- list_workspaces: workspaces owned by the user
- list_changes: submitted changes in a workspace view, with full descriptions
- list_pending: opened files (own, per workspace, per user, or team view)
- list_users: every user on the server
"""

import logging
from typing import Any, Dict, List, Mapping, Optional

from p4_bridge.models.auth import AuthContext
from p4_bridge.models.records import Change, Credential, OpenedFile, UserRecord, Workspace
from p4_bridge.p4 import queries
from p4_bridge.p4.describe import merge_descriptions
from p4_bridge.p4.view import list_team_pending

from .context import BridgeContext, request_value
from .exceptions import InvalidFieldError, MissingAuthError, MissingFieldError

logger = logging.getLogger(__name__)


def authenticate(ctx: BridgeContext, auth: AuthContext) -> AuthContext:
    """Make sure `auth` carries a ticket, logging in with its password if needed.

    Args:
        ctx: Shared dependencies
        auth: Merged auth context

    Returns:
        Auth context with a ticket

    Raises:
        MissingAuthError: If server or user is unknown, or there is neither
            a ticket nor a password
        LoginError: If the password is rejected
    """
    if not auth.server or not auth.user:
        raise MissingAuthError("Missing server or user.")
    if auth.ticket:
        return auth
    if auth.password:
        ticket = ctx.login_flow().run(auth.server, auth.user, auth.password)
        return auth.with_ticket(ticket)
    raise MissingAuthError()


def get_credentials_status(ctx: BridgeContext) -> Dict[str, Any]:
    """Describe the saved credential without revealing its ticket."""
    credential = ctx.credential_store.get()
    if credential is None:
        return {"saved": False}
    return credential.status()


def save_credentials(ctx: BridgeContext, fields: Optional[Mapping[str, Any]]) -> Credential:
    """Save a default credential, logging in first when given a password.

    The request must name the server and user itself; nothing is merged from
    a previously saved credential.

    Raises:
        MissingAuthError: If server, user, or both password and ticket are missing
        LoginError: If the password is rejected
    """
    fields = fields or {}
    server = request_value(fields.get("server"))
    user = request_value(fields.get("user"))
    password = request_value(fields.get("password"))
    ticket = request_value(fields.get("ticket"))

    if not server or not user or not (password or ticket):
        raise MissingAuthError("server, user, and password OR ticket required")

    if not ticket:
        ticket = ctx.login_flow().run(server, user, password)

    credential = Credential.issue(server, user, ticket)
    ctx.credential_store.put(credential)
    logger.info("Saved credentials for %s on %s", user, server)
    return credential


def clear_credentials(ctx: BridgeContext) -> None:
    ctx.credential_store.clear()
    logger.info("Cleared saved credentials")


def list_workspaces(ctx: BridgeContext, fields: Optional[Mapping[str, Any]]) -> List[Workspace]:
    auth = authenticate(ctx, ctx.merge_auth(fields))
    return queries.list_workspaces(ctx.runner, auth)


def parse_limit(value: Any, default: int) -> int:
    """Validate the `limit` request field (missing or null means `default`)."""
    if value is None or value == "":
        return default
    if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
        raise InvalidFieldError("limit", value)
    try:
        limit = int(value)
    except (TypeError, ValueError):
        raise InvalidFieldError("limit", value) from None
    if limit < 1:
        raise InvalidFieldError("limit", value)
    return limit


def list_changes(ctx: BridgeContext, fields: Optional[Mapping[str, Any]]) -> List[Change]:
    """Submitted changes from every user touching the workspace's view.

    Descriptions are fetched with one extra describe call; if that call
    fails the changes come back without descriptions.

    Raises:
        MissingFieldError: If no workspace (`client`) is given
        InvalidFieldError: If `limit` is not a positive integer
        MissingAuthError: If no credentials can be resolved
        ProtocolError: If p4 fails to list changes
    """
    auth = ctx.merge_auth(fields)
    if not auth.client:
        raise MissingFieldError("client", "Missing client (workspace).")
    limit = parse_limit(auth.get("limit"), ctx.settings.default_change_limit)

    auth = authenticate(ctx, auth)
    changes = queries.list_submitted_changes(ctx.runner, auth, auth.client, limit)
    return merge_descriptions(ctx.runner, auth, changes)


def list_pending(ctx: BridgeContext, fields: Optional[Mapping[str, Any]]) -> List[OpenedFile]:
    """Opened files, scoped by the optional `client` and `targetUser` fields.

    - client and targetUser: files opened by targetUser in any workspace,
      limited to the client's view (team view)
    - client only: files opened in that workspace
    - targetUser only: files opened by targetUser in any workspace
    - neither: files opened by the authenticated user
    """
    auth = authenticate(ctx, ctx.merge_auth(fields))
    client = auth.client
    target_user = request_value(auth.get("targetUser"))

    if client and target_user:
        return list_team_pending(ctx.runner, auth, client, target_user)
    if client:
        options = ["-C", client]
    elif target_user:
        options = ["-u", target_user, "-a"]
    else:
        options = ["-u", auth.user]
    return queries.list_opened(ctx.runner, auth, options)


def list_users(ctx: BridgeContext, fields: Optional[Mapping[str, Any]]) -> List[UserRecord]:
    auth = authenticate(ctx, ctx.merge_auth(fields))
    return queries.list_users(ctx.runner, auth)
