"""
Schemas for the transcript views returned to clients.

These are built per request from key moments, transcripts and player data
and are never persisted.
"""
from datetime import datetime
from typing import List, Optional
from pydantic import BaseModel, Field


class PlayerTranscriptInfo(BaseModel):
    """A feedback recipient as shown next to a transcript."""

    player_id: str
    first_name: str
    last_name: str
    nickname: Optional[str] = None
    jersey: Optional[int] = None


class PlayerNameAndPhoto(BaseModel):
    """Display name of a feedback recipient."""

    player_id: str
    name: str
    photo_url: Optional[str] = None


class KeyMomentTranscript(BaseModel):
    """
    A transcript joined with its key moment.

    ``local_id`` is the position in the returned list, not a stored id.
    """

    local_id: int
    key_moment_id: str
    transcript_id: str
    transcript: str
    frame_start: datetime
    frame_end: datetime
    feedback_for: List[PlayerTranscriptInfo] = Field(default_factory=list)


class GameTranscriptsResponse(BaseModel):
    """Transcripts of a game, split by whether they sit in a full game video."""

    recordings: Optional[List[KeyMomentTranscript]] = None
    key_moments: Optional[List[KeyMomentTranscript]] = None


class TranscriptUpdate(BaseModel):
    """Edit a transcript's text and/or add feedback recipients."""

    transcript: Optional[str] = Field(None, min_length=1)
    feedback_for: Optional[List[str]] = None


class AudioLink(BaseModel):
    """Where to fetch a key moment's audio."""

    key_moment_id: str
    audio_url: str
