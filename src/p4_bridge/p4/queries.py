"""p4 queries used by the dashboard and the typing of their tagged output."""

from datetime import datetime, timezone
from typing import List, Optional, Sequence

from p4_bridge.models.auth import AuthContext
from p4_bridge.models.records import Change, OpenedFile, UserRecord, Workspace
from p4_bridge.p4.runner import Command
from p4_bridge.p4.tagged import parse_tagged_records

CHANGE_FIELDS = ("user", "client", "status")


def change_date(raw: Optional[str]) -> str:
    """Convert a p4 `time` field (Unix seconds) to a UTC ISO date.

    Returns an empty string for values that are not timestamps.
    """
    try:
        return datetime.fromtimestamp(int(raw), tz=timezone.utc).date().isoformat()
    except (TypeError, ValueError, OverflowError, OSError):
        return ""


def parse_workspaces(output: str) -> List[Workspace]:
    return [
        Workspace(name=record["client"])
        for record in parse_tagged_records(output, "client")
    ]


def parse_changes(output: str) -> List[Change]:
    """Parse `p4 -ztag changes` output.

    The short description `changes` reports is ignored; full descriptions
    come from a describe query.
    """
    changes = []
    for record in parse_tagged_records(output, "change", boundary_type=int):
        fields = {"change": record["change"]}
        if "time" in record:
            fields["date"] = change_date(record["time"])
        for key in CHANGE_FIELDS:
            if key in record:
                fields[key] = record[key]
        changes.append(Change(**fields))
    return changes


def parse_opened(output: str) -> List[OpenedFile]:
    return [
        OpenedFile.model_validate(record)
        for record in parse_tagged_records(output, "depotFile")
    ]


def parse_users(output: str) -> List[UserRecord]:
    return [
        UserRecord.model_validate(record)
        for record in parse_tagged_records(output, "User")
    ]


def list_workspaces(runner: Command, auth: AuthContext) -> List[Workspace]:
    """List the workspaces owned by the authenticated user."""
    out = runner.execute(["-ztag", "clients", "-u", auth.user], auth.without_client())
    return parse_workspaces(out)


def list_submitted_changes(
    runner: Command,
    auth: AuthContext,
    client: str,
    limit: int,
) -> List[Change]:
    """List the newest submitted changes, by any user, touching a workspace's view.

    Args:
        runner: p4 command runner
        auth: Connection context; `client` is passed along as `-c`
        client: Workspace whose view (`//<client>/...`) filters the changes
        limit: Maximum number of changes

    Returns:
        Changes newest first, without descriptions
    """
    args = ["-ztag", "changes", "-m", str(limit), "-s", "submitted", f"//{client}/..."]
    out = runner.execute(args, auth)
    return parse_changes(out)


def list_opened(
    runner: Command,
    auth: AuthContext,
    options: Sequence[str] = (),
) -> List[OpenedFile]:
    """Run `p4 -ztag opened` with the given options and file arguments."""
    out = runner.execute(["-ztag", "opened", *options], auth)
    return parse_opened(out)


def list_users(runner: Command, auth: AuthContext) -> List[UserRecord]:
    out = runner.execute(["-ztag", "users"], auth.without_client())
    return parse_users(out)
