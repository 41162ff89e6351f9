"""Enriching change listings with full descriptions from `p4 describe`."""

import logging
from typing import Dict, List, Sequence

from p4_bridge.api.exceptions import PartialResultError, ProtocolError
from p4_bridge.models.auth import AuthContext
from p4_bridge.models.records import Change
from p4_bridge.p4.runner import Command
from p4_bridge.p4.tagged import parse_tagged_records

logger = logging.getLogger(__name__)


def fetch_descriptions(
    runner: Command,
    auth: AuthContext,
    change_ids: Sequence[int],
) -> Dict[int, str]:
    """Fetch full descriptions for several changes with a single describe call.

    `-s` suppresses diffs, so the output is just the change metadata.
    Descriptions can span many lines and are reassembled by the tagged parser.

    Args:
        runner: p4 command runner
        auth: Connection context
        change_ids: Change numbers to describe

    Returns:
        Mapping of change number to trimmed description

    Raises:
        PartialResultError: If the describe query fails
    """
    if not change_ids:
        return {}

    args = ["-ztag", "describe", "-s", *(str(change_id) for change_id in change_ids)]
    try:
        out = runner.execute(args, auth)
    except ProtocolError as e:
        raise PartialResultError(f"describe failed: {e}") from e

    descriptions = {}
    for record in parse_tagged_records(out, "change", multiline_keys=("desc",), boundary_type=int):
        descriptions[record["change"]] = (record.get("desc") or "").strip()
    return descriptions


def merge_descriptions(
    runner: Command,
    auth: AuthContext,
    changes: List[Change],
) -> List[Change]:
    """Fill in `desc` on change records, in place.

    Descriptions reported for changes that are not in `changes` are ignored.
    If describe fails the records are returned without descriptions: a
    change list with blank descriptions beats an error page.
    """
    if not changes:
        return changes

    by_id: Dict[int, List[Change]] = {}
    for change in changes:
        by_id.setdefault(change.change, []).append(change)

    try:
        descriptions = fetch_descriptions(runner, auth, list(by_id))
    except PartialResultError as e:
        logger.warning("Returning changes without descriptions: %s", e)
        return changes

    for change_id, desc in descriptions.items():
        for change in by_id.get(change_id, []):
            change.desc = desc
    return changes
