"""
Pydantic schemas for teams.
"""
from typing import List, Optional
from pydantic import BaseModel, Field, field_validator
import re


class TeamBase(BaseModel):
    """Base team schema with shared fields."""

    name: str = Field(..., min_length=1, max_length=255, description="Team name")
    team_nickname: str = Field(..., min_length=1, max_length=100, description="Short team name")
    sport: str = Field("Soccer", max_length=50)
    gender: str = Field("Mixed", max_length=20)
    age_grp: str = Field("Senior", max_length=50)
    logo_url: Optional[str] = Field(None, max_length=500)
    colour: Optional[str] = Field(None, description="Team colour in hex format (e.g., #E85D04)")

    @field_validator("colour")
    @classmethod
    def validate_colour(cls, v: Optional[str]) -> Optional[str]:
        """Validate hex colour format if provided."""
        if v is None:
            return v
        if not re.match(r"^#[0-9A-Fa-f]{6}$", v):
            raise ValueError("Colour must be a valid hex colour (e.g., #E85D04)")
        return v.upper()


class TeamCreate(TeamBase):
    """Schema for creating a new team."""

    pass


class TeamUpdate(BaseModel):
    """Schema for updating team settings. Only provided fields change."""

    name: Optional[str] = Field(None, min_length=1, max_length=255)
    team_nickname: Optional[str] = Field(None, min_length=1, max_length=100)
    age_grp: Optional[str] = Field(None, max_length=50)
    gender: Optional[str] = Field(None, max_length=20)


class Team(TeamBase):
    """
    A team document.

    ``id`` is the storage document id, ``team_id`` the logical id that games,
    players and coaches refer to.
    """

    id: str
    team_id: str
    access_code: Optional[str] = None
    coaches: List[str] = Field(default_factory=list)
    players: List[str] = Field(default_factory=list)
    invites: List[str] = Field(default_factory=list)

    class Config:
        from_attributes = True

    @property
    def roster_size(self) -> int:
        return len(self.players)


class JoinTeamRequest(BaseModel):
    """Join a team with its access code."""

    access_code: str = Field(..., min_length=1, max_length=64)

    @field_validator("access_code")
    @classmethod
    def strip_code(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Access code cannot be empty")
        return v
