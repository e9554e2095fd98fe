"""
Pydantic schemas for team invites.
"""
import enum
from datetime import datetime
from typing import Optional
from pydantic import BaseModel, Field


class InviteStatus(str, enum.Enum):
    """Invite status enumeration."""
    PENDING = "Pending"
    ACCEPTED = "Accepted"
    DECLINED = "Declined"


class Invite(BaseModel):
    """A pending request for a player to join a team."""

    id: str
    user_doc_id: str
    player_doc_id: str
    email: str
    team_id: str
    status: InviteStatus = InviteStatus.PENDING
    date_invite_sent: datetime = Field(default_factory=datetime.utcnow)
    date_accepted: Optional[datetime] = None

    class Config:
        from_attributes = True
