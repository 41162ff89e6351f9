"""Abstract base class for credential storage.

Exactly one default credential is kept at a time: `put` overwrites it and
`clear` removes it. Request handling receives a store explicitly so tests can
substitute `MemoryCredentialStore`.
"""

from abc import ABC, abstractmethod
from typing import Optional

from p4_bridge.models.records import Credential


class CredentialStore(ABC):
    """Abstract base class for the persisted default credential."""

    @abstractmethod
    def get(self) -> Optional[Credential]:
        """Read the saved credential.

        Returns:
            The credential, or None if nothing usable is saved
        """
        pass

    @abstractmethod
    def put(self, credential: Credential) -> None:
        """Save `credential`, replacing any previous one."""
        pass

    @abstractmethod
    def clear(self) -> None:
        """Remove the saved credential. Clearing an empty store is not an error."""
        pass
