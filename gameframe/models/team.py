"""
Team database model.
"""
import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, JSON

from gameframe.core.database import Base


class TeamRecord(Base):
    """
    Team document.

    Roster, coaches and invites are lists of ids kept on the document itself.
    """

    __tablename__ = "teams"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    team_id = Column(String(36), unique=True, nullable=False, index=True)

    # Team info
    name = Column(String(255), nullable=False)
    team_nickname = Column(String(100), nullable=False)
    sport = Column(String(50), nullable=False)
    gender = Column(String(20), nullable=False)
    age_grp = Column(String(50), nullable=False)
    logo_url = Column(String(500), nullable=True)
    colour = Column(String(7), nullable=True)  # Hex colour like #E85D04
    access_code = Column(String(64), unique=True, nullable=True, index=True)

    # Membership: ["uid1", "uid2", ...]
    coaches = Column(JSON, nullable=False, default=list)
    players = Column(JSON, nullable=False, default=list)
    invites = Column(JSON, nullable=False, default=list)

    # Timestamps
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Team {self.name}>"
