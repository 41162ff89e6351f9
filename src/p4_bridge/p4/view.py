"""Team view: files opened by one user within another workspace's view.

`p4 opened` cannot filter by "opened by user U" and "inside workspace W's
view" at the same time. Instead the workspace view is read from the client
spec, every user's opened files under those depot paths are listed, and the
result is filtered by user here.
"""

import logging
import re
import shlex
from typing import List, Optional

from p4_bridge.models.auth import AuthContext
from p4_bridge.models.records import OpenedFile
from p4_bridge.p4.queries import list_opened
from p4_bridge.p4.runner import Command
from p4_bridge.p4.tagged import iter_tagged_fields

logger = logging.getLogger(__name__)

VIEW_KEY = re.compile(r"^View\d+$")
EXCLUSION_MARKER = "-"
OVERLAY_MARKER = "+"


def depot_side(mapping: str) -> Optional[str]:
    """Left-hand (depot) side of a view mapping such as `//depot/a/... //ws/a/...`.

    Paths containing spaces are quoted by p4.
    """
    try:
        parts = shlex.split(mapping)
    except ValueError:
        parts = mapping.split()
    return parts[0] if parts else None


def resolve_view_paths(runner: Command, auth: AuthContext, client: str) -> List[str]:
    """Depot paths included by a workspace's view, in view order.

    Exclusion mappings (`-//depot/...`) narrow the view and are skipped;
    overlay mappings (`+//depot/...`) are queried like plain ones.
    """
    out = runner.execute(["-ztag", "client", "-o", client], auth.without_client())

    paths = []
    for key, value in iter_tagged_fields(out):
        if not VIEW_KEY.match(key):
            continue
        path = depot_side(value)
        if not path or path.startswith(EXCLUSION_MARKER):
            continue
        paths.append(path.lstrip(OVERLAY_MARKER))
    return paths


def list_team_pending(
    runner: Command,
    auth: AuthContext,
    client: str,
    target_user: str,
) -> List[OpenedFile]:
    """Files opened by `target_user`, in any workspace, under `client`'s view.

    Args:
        runner: p4 command runner
        auth: Connection context
        client: Workspace whose view bounds the search
        target_user: User whose opened files are wanted

    Returns:
        Opened files in server order; empty without querying when the view
        includes nothing
    """
    paths = resolve_view_paths(runner, auth, client)
    if not paths:
        return []

    # -a: opened files from every workspace and user
    all_files = list_opened(runner, auth.without_client(), ["-a", *paths])
    files = [f for f in all_files if f.user == target_user]
    logger.debug("Team view: %d opened files, %d for %s", len(all_files), len(files), target_user)
    return files
