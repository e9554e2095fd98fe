"""
API package.
"""
from fastapi import APIRouter

from gameframe.api.routes import teams, transcripts

# Main API router
api_router = APIRouter()

# Include all route modules
api_router.include_router(teams.router)
api_router.include_router(transcripts.router)
