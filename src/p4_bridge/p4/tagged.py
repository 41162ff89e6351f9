"""Parsing of p4 tagged output (`p4 -ztag ...`).

Tagged output emits one field per line:

```
... change 55
... time 1700000000
... user alice
... desc Fix bug
continued description text
```

A record starts whenever the query's boundary key appears. Lines that do not
carry the `...` marker continue the previous field, but only for fields the
caller declares multi-line (descriptions); anywhere else they are ignored,
since the exact output differs between server versions.
"""

import logging
import re
from typing import Any, Callable, Dict, Iterable, Iterator, List, Optional, Tuple

logger = logging.getLogger(__name__)

TAG_MARKER = "..."
TAG_LINE = re.compile(r"^\.\.\.\s+(\S+)\s*(.*)$")
LINE_BREAK = re.compile(r"\r?\n")


def split_lines(text: str) -> List[str]:
    """Split p4 output on newlines only.

    Form feeds and Unicode line separators are ordinary characters in p4
    field values, so `str.splitlines` is not used.
    """
    lines = LINE_BREAK.split(text)
    if lines and lines[-1] == "":
        lines.pop()
    return lines


def match_tag(line: str) -> Optional[Tuple[str, str]]:
    """Split a tag line into (key, value), or None for any other line."""
    m = TAG_LINE.match(line)
    if m is None:
        return None
    return m.group(1), m.group(2)


def iter_tagged_fields(text: str) -> Iterator[Tuple[str, str]]:
    """Yield every (key, value) pair in tagged output, ignoring other lines.

    Suited to single-record output such as `p4 -ztag client -o`.
    """
    for line in split_lines(text):
        tag = match_tag(line)
        if tag is not None:
            yield tag


def parse_tagged_records(
    text: str,
    boundary_key: str,
    multiline_keys: Iterable[str] = (),
    boundary_type: Callable[[str], Any] = str,
) -> Iterator[Dict[str, Any]]:
    """Parse tagged output into records, in emission order.

    Args:
        text: Raw p4 standard output
        boundary_key: Field whose appearance starts a new record
        multiline_keys: Fields allowed to absorb continuation lines and
            repeated tag lines (joined with newlines)
        boundary_type: Converter for the boundary value, e.g. int for change numbers

    Yields:
        One dict per record, boundary field first. A record whose boundary
        value cannot be converted is dropped along with its fields.
    """
    multiline = frozenset(multiline_keys)
    current: Optional[Dict[str, Any]] = None
    last_key: Optional[str] = None

    for line in split_lines(text):
        tag = match_tag(line)

        if tag is None:
            if current is not None and last_key in multiline and last_key in current:
                current[last_key] += "\n" + line
            continue

        key, value = tag
        last_key = key

        if key == boundary_key:
            if current is not None:
                yield current
            try:
                current = {boundary_key: boundary_type(value)}
            except (TypeError, ValueError):
                logger.debug("Skipping record with unusable %s %r", boundary_key, value)
                current = None
            continue

        if current is None:
            continue

        if key in multiline and key in current:
            current[key] += "\n" + value
        else:
            current[key] = value

    if current is not None:
        yield current


def format_tagged_records(records: Iterable[Dict[str, Any]]) -> str:
    """Serialize records back into tagged output.

    Multi-line values become a tag line followed by continuation lines, which
    `parse_tagged_records` reassembles when the key is declared multi-line.
    """
    lines: List[str] = []
    for record in records:
        for key, value in record.items():
            first, *rest = str(value).split("\n")
            lines.append(f"{TAG_MARKER} {key} {first}")
            lines.extend(rest)
    return "\n".join(lines) + "\n" if lines else ""
