"""
Pydantic schemas for users, players and coaches.
"""
import enum
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator


class UserType(str, enum.Enum):
    """User type enumeration."""
    COACH = "Coach"
    PLAYER = "Player"
    UNKNOWN = "Unknown"


class User(BaseModel):
    """Authentication-level identity of a coach or player."""

    id: str
    user_id: str
    email: str
    user_type: UserType = UserType.UNKNOWN
    first_name: str = ""
    last_name: str = ""
    photo_url: Optional[str] = None
    phone: Optional[str] = None
    country: Optional[str] = None
    date_of_birth: Optional[datetime] = None

    class Config:
        from_attributes = True

    @field_validator("user_type", mode="before")
    @classmethod
    def coerce_user_type(cls, v):
        """Values other than Coach/Player are stored as Unknown."""
        try:
            return UserType(v)
        except ValueError:
            return UserType.UNKNOWN

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


class Player(BaseModel):
    """Player profile linked to a user (``player_id`` is the user id)."""

    id: str
    player_id: Optional[str] = None
    gender: Optional[str] = None
    profile_picture: Optional[str] = None
    teams_enrolled: List[str] = Field(default_factory=list)
    guardian_name: Optional[str] = None
    guardian_email: Optional[str] = None
    guardian_phone: Optional[str] = None

    class Config:
        from_attributes = True


class Coach(BaseModel):
    """Coach profile linked to a user (``coach_id`` is the user id)."""

    id: str
    coach_id: str
    teams_coaching: List[str] = Field(default_factory=list)

    class Config:
        from_attributes = True


class PlayerTeamInfo(BaseModel):
    """Team-specific details of a player (nickname, jersey)."""

    player_doc_id: str
    team_id: str
    jersey_num: Optional[int] = None
    nickname: Optional[str] = None
    joined_at: Optional[datetime] = None

    class Config:
        from_attributes = True
