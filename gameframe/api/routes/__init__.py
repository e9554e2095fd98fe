"""
API routes package.
"""
from gameframe.api.routes import teams, transcripts

__all__ = ["teams", "transcripts"]
