"""
Invite database model.
"""
import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime

from gameframe.core.database import Base


class InviteRecord(Base):
    """Invite of a player to a team."""

    __tablename__ = "invites"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_doc_id = Column(String(36), nullable=False)
    player_doc_id = Column(String(36), nullable=False)
    email = Column(String(255), nullable=False)
    team_id = Column(String(36), nullable=False, index=True)
    status = Column(String(20), nullable=False, default="Pending")
    date_invite_sent = Column(DateTime, default=datetime.utcnow, nullable=False)
    date_accepted = Column(DateTime, nullable=True)
