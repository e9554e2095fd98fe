"""
Game, key moment, transcript and full game recording database models.

Key moments and transcripts belong to a game of a team document, so every
row carries both ``team_doc_id`` and ``game_id``.
"""
import uuid
from datetime import datetime
from sqlalchemy import Column, String, DateTime, Integer, Boolean, JSON, Text, Index

from gameframe.core.database import Base


class GameRecord(Base):
    """Game of a team."""

    __tablename__ = "games"

    game_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    team_doc_id = Column(String(36), nullable=False, index=True)
    team_id = Column(String(36), nullable=False, index=True)

    title = Column(String(255), nullable=False, default="Unknown Game")
    duration = Column(Integer, default=0, nullable=False)  # seconds
    location = Column(String(255), nullable=True)
    scheduled_time_reminder = Column(Integer, default=0, nullable=False)  # minutes
    start_time = Column(DateTime, nullable=True)
    time_before_feedback = Column(Integer, default=10, nullable=False)
    time_after_feedback = Column(Integer, default=10, nullable=False)
    recording_reminder = Column(Boolean, default=False, nullable=False)

    def __repr__(self):
        return f"<Game {self.title}>"


class KeyMomentRecord(Base):
    """Key moment of a game."""

    __tablename__ = "key_moments"
    __table_args__ = (Index("ix_key_moments_team_game", "team_doc_id", "game_id"),)

    key_moment_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    team_doc_id = Column(String(36), nullable=False)
    game_id = Column(String(36), nullable=False)
    full_game_id = Column(String(36), nullable=True)
    uploaded_by = Column(String(128), nullable=False)
    audio_url = Column(String(500), nullable=True)
    frame_start = Column(DateTime, nullable=False)
    frame_end = Column(DateTime, nullable=False)

    # Player ids: ["uid1", "uid2", ...]
    feedback_for = Column(JSON, nullable=False, default=list)


class TranscriptRecord(Base):
    """Transcript of a key moment."""

    __tablename__ = "transcripts"
    __table_args__ = (Index("ix_transcripts_team_game", "team_doc_id", "game_id"),)

    transcript_id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    team_doc_id = Column(String(36), nullable=False)
    game_id = Column(String(36), nullable=False)
    key_moment_id = Column(String(36), nullable=False)
    uploaded_by = Column(String(128), nullable=False)
    transcript = Column(Text, nullable=False)
    language = Column(String(10), default="en", nullable=False)
    generated_by = Column(String(100), nullable=True)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class FullGameRecordingRecord(Base):
    """Video of a whole game."""

    __tablename__ = "full_game_recordings"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    team_doc_id = Column(String(36), nullable=False, index=True)
    game_id = Column(String(36), nullable=False, index=True)
    team_id = Column(String(36), nullable=False)
    uploaded_by = Column(String(128), nullable=False)
    file_url = Column(String(500), nullable=True)
    start_time = Column(DateTime, nullable=True)
    end_time = Column(DateTime, nullable=True)
