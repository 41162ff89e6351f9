from .auth import AuthContext
from .records import Change, Credential, OpenedFile, UserRecord, Workspace
