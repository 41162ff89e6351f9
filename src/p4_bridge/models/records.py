"""Typed records built from p4 tagged output, plus the persisted credential."""

from datetime import datetime, timezone
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class Credential(BaseModel):
    """The single persisted default credential.

    Attributes:
        server: P4PORT the ticket was issued by
        user: Perforce user the ticket belongs to
        ticket: Authentication ticket from `p4 login -p`
        saved_at: When the credential was saved (ISO-8601, UTC)
    """

    model_config = ConfigDict(populate_by_name=True)

    server: str = Field(..., description="Perforce server address (P4PORT)")
    user: str = Field(..., description="Perforce user name")
    ticket: Optional[str] = Field(None, description="Authentication ticket")
    saved_at: Optional[str] = Field(None, alias="savedAt", description="ISO-8601 save time")

    @field_validator("server", "user")
    @classmethod
    def validate_non_empty(cls, v: str, info) -> str:
        """Validate that server and user are non-empty."""
        if not v or not v.strip():
            raise ValueError(f"Field '{info.field_name}' cannot be empty")
        return v.strip()

    @classmethod
    def issue(cls, server: str, user: str, ticket: str) -> "Credential":
        """Create a credential stamped with the current time."""
        return cls(
            server=server,
            user=user,
            ticket=ticket,
            saved_at=datetime.now(timezone.utc).isoformat(),
        )

    def status(self) -> Dict[str, Any]:
        """Public view of the credential; never includes the ticket itself."""
        return {
            "saved": True,
            "server": self.server,
            "user": self.user,
            "hasTicket": bool(self.ticket),
            "savedAt": self.saved_at,
        }


class Workspace(BaseModel):
    """A client workspace name."""

    name: str


class Change(BaseModel):
    """A submitted change from `p4 changes`.

    `desc` stays unset until enriched by a describe query.
    """

    change: int = Field(..., description="Change number")
    date: Optional[str] = Field(None, description="Submission date (YYYY-MM-DD, UTC)")
    user: Optional[str] = None
    client: Optional[str] = None
    status: Optional[str] = None
    desc: Optional[str] = Field(None, description="Full, possibly multi-line description")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "change": 55,
                "date": "2023-11-14",
                "user": "alice",
                "client": "alice-main",
                "status": "submitted",
                "desc": "Fix bug\nline two",
            }
        }
    )

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class OpenedFile(BaseModel):
    """A file opened in a pending change.

    The server may report any number of fields depending on its version and
    configuration; unknown fields are kept as-is.
    """

    model_config = ConfigDict(extra="allow")

    depotFile: str
    user: Optional[str] = None
    client: Optional[str] = None
    action: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(exclude_none=True)


class UserRecord(BaseModel):
    """A Perforce user from `p4 users`."""

    model_config = ConfigDict(populate_by_name=True)

    user: str = Field(..., alias="User")
    full_name: Optional[str] = Field(None, alias="FullName")
    email: Optional[str] = Field(None, alias="Email")

    def to_dict(self) -> Dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
