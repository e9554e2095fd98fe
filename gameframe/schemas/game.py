"""
Pydantic schemas for games and their recordings.
"""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field, model_validator


class Game(BaseModel):
    """A game owned by a team."""

    game_id: str
    team_id: str
    title: str = "Unknown Game"
    duration: int = 0  # seconds
    location: Optional[str] = None
    scheduled_time_reminder: int = 0  # minutes
    start_time: Optional[datetime] = None
    time_before_feedback: int = 10  # seconds
    time_after_feedback: int = 10  # seconds
    recording_reminder: bool = False

    class Config:
        from_attributes = True


class KeyMoment(BaseModel):
    """
    A time-bounded excerpt of a game.

    ``feedback_for`` holds the player ids entitled to see the moment. A list
    as long as the team roster means the feedback was meant for everyone.
    """

    key_moment_id: str
    game_id: str
    uploaded_by: str
    frame_start: datetime
    frame_end: datetime
    full_game_id: Optional[str] = None
    audio_url: Optional[str] = None
    feedback_for: List[str] = Field(default_factory=list)

    class Config:
        from_attributes = True

    @model_validator(mode="after")
    def check_frames(self):
        if self.frame_start > self.frame_end:
            raise ValueError("frame_start must not be after frame_end")
        return self


class Transcript(BaseModel):
    """Text transcribed from a key moment's audio."""

    transcript_id: str
    key_moment_id: str
    game_id: str
    uploaded_by: str
    transcript: str
    language: str = "en"
    generated_by: Optional[str] = None
    created_at: Optional[datetime] = None

    class Config:
        from_attributes = True


class FullGameRecording(BaseModel):
    """Video of an entire game, if one was recorded."""

    id: str
    game_id: str
    team_id: str
    uploaded_by: str
    file_url: Optional[str] = None
    start_time: Optional[datetime] = None
    end_time: Optional[datetime] = None

    class Config:
        from_attributes = True
