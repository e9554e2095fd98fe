"""
Domain services built on the stores.
"""
from gameframe.services.transcripts import (
    TranscriptAggregator,
    CoachRole,
    PlayerRole,
    role_for,
)
from gameframe.services.roster import TeamRosterWorkflow

__all__ = [
    "TranscriptAggregator",
    "CoachRole",
    "PlayerRole",
    "role_for",
    "TeamRosterWorkflow",
]
