"""
User, player and coach database models.
"""
import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Integer, JSON

from gameframe.core.database import Base


class UserRecord(Base):
    """Authentication-level user."""

    __tablename__ = "users"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    user_id = Column(String(128), unique=True, nullable=False, index=True)
    email = Column(String(255), nullable=False, index=True)
    user_type = Column(String(20), nullable=False)  # "Coach" or "Player"
    first_name = Column(String(100), nullable=False, default="")
    last_name = Column(String(100), nullable=False, default="")
    photo_url = Column(String(500), nullable=True)
    phone = Column(String(50), nullable=True)
    country = Column(String(100), nullable=True)
    date_of_birth = Column(DateTime, nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    def __repr__(self):
        return f"<User {self.email}>"


class PlayerRecord(Base):
    """Player profile."""

    __tablename__ = "players"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    player_id = Column(String(128), unique=True, nullable=True, index=True)
    gender = Column(String(20), nullable=True)
    profile_picture = Column(String(500), nullable=True)

    # Team ids: ["team-1", ...]
    teams_enrolled = Column(JSON, nullable=False, default=list)

    # Guardian information
    guardian_name = Column(String(255), nullable=True)
    guardian_email = Column(String(255), nullable=True)
    guardian_phone = Column(String(50), nullable=True)


class CoachRecord(Base):
    """Coach profile."""

    __tablename__ = "coaches"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    coach_id = Column(String(128), unique=True, nullable=False, index=True)
    teams_coaching = Column(JSON, nullable=False, default=list)


class PlayerTeamInfoRecord(Base):
    """Per-team nickname and jersey of a player."""

    __tablename__ = "player_team_info"

    player_doc_id = Column(String(36), primary_key=True)
    team_id = Column(String(36), primary_key=True)
    jersey_num = Column(Integer, nullable=True)
    nickname = Column(String(100), nullable=True)
    joined_at = Column(DateTime, nullable=True)
