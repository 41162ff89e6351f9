import logging
from pathlib import Path
from typing import Optional

from pydantic import ValidationError

from p4_bridge.models.records import Credential
from p4_bridge.store.base import CredentialStore

logger = logging.getLogger(__name__)


class JsonCredentialStore(CredentialStore):
    """Stores the credential as a small JSON file.

    Concurrent writers are not coordinated; the last write wins.
    """

    def __init__(self, path: Optional[Path] = None):
        # Use Path.home() to properly expand home directory on all platforms
        self.path = Path(path) if path else Path.home() / ".p4-bridge" / "data" / "creds.json"

    def get(self) -> Optional[Credential]:
        try:
            raw = self.path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as e:
            logger.warning("Cannot read saved credentials at %s: %s", self.path, e)
            return None

        try:
            return Credential.model_validate_json(raw)
        except ValidationError as e:
            logger.warning(
                "Ignoring unreadable credentials file %s (%d errors)", self.path, e.error_count()
            )
            return None

    def put(self, credential: Credential) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(
            credential.model_dump_json(by_alias=True, indent=2),
            encoding="utf-8",
        )

    def clear(self) -> None:
        self.path.unlink(missing_ok=True)
