from typing import Optional

from p4_bridge.models.records import Credential
from p4_bridge.store.base import CredentialStore


class MemoryCredentialStore(CredentialStore):
    """Keeps the credential in process memory; lost on exit."""

    def __init__(self, credential: Optional[Credential] = None):
        self._credential = credential

    def get(self) -> Optional[Credential]:
        return self._credential

    def put(self, credential: Credential) -> None:
        self._credential = credential

    def clear(self) -> None:
        self._credential = None
