from .base import CredentialStore
from .json_file import JsonCredentialStore
from .memory import MemoryCredentialStore
