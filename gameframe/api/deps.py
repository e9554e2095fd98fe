"""
API dependencies: authentication, stores, services, team access and error mapping.
"""
import logging
from datetime import datetime, timedelta
from typing import Generator, Optional

from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from jose import JWTError, jwt

from gameframe.core.config import settings
from gameframe.core.database import SessionLocal
from gameframe.core.exceptions import (
    AlreadyEnrolledError,
    GameFrameError,
    InvalidAccessCodeError,
    NotFoundError,
    UnknownRoleError,
)
from gameframe.core.storage import AudioStorage, get_audio_storage
from gameframe.repositories import MemoryDatabase, Stores, build_memory_stores, build_sql_stores
from gameframe.schemas import Team
from gameframe.services import TeamRosterWorkflow, TranscriptAggregator

logger = logging.getLogger(__name__)

# JWT settings
ALGORITHM = "HS256"
ACCESS_TOKEN_EXPIRE_MINUTES = 60 * 24 * 7  # 7 days

GENERIC_ERROR = "Something went wrong, please try again"

# Security scheme
security = HTTPBearer(auto_error=False)

# Shared by every request when REPOSITORY_BACKEND is "memory"
memory_db = MemoryDatabase()


def create_access_token(user_id: str) -> str:
    """Create a JWT access token."""
    expire = datetime.utcnow() + timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    to_encode = {"sub": user_id, "exp": expire}
    return jwt.encode(to_encode, settings.SECRET_KEY, algorithm=ALGORITHM)


def decode_token(token: str) -> Optional[str]:
    """Decode a JWT token and return the user ID."""
    try:
        payload = jwt.decode(token, settings.SECRET_KEY, algorithms=[ALGORITHM])
        user_id: str = payload.get("sub")
        return user_id
    except JWTError:
        return None


async def get_current_user_id(
    credentials: Optional[HTTPAuthorizationCredentials] = Depends(security),
) -> str:
    """
    Id of the authenticated user.

    Raises HTTPException if not authenticated.
    """
    if not credentials:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user_id = decode_token(credentials.credentials)
    if not user_id:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Invalid or expired token",
            headers={"WWW-Authenticate": "Bearer"},
        )
    return user_id


def get_stores() -> Generator[Stores, None, None]:
    """Stores for the configured backend, one database session per request."""
    if settings.REPOSITORY_BACKEND == "memory":
        yield build_memory_stores(memory_db)
        return

    db = SessionLocal()
    try:
        yield build_sql_stores(db)
    finally:
        db.close()


def get_storage() -> AudioStorage:
    return get_audio_storage()


def get_transcript_aggregator(
    stores: Stores = Depends(get_stores),
    storage: AudioStorage = Depends(get_storage),
) -> TranscriptAggregator:
    return TranscriptAggregator(stores, storage=storage)


def get_roster_workflow(
    stores: Stores = Depends(get_stores),
    storage: AudioStorage = Depends(get_storage),
) -> TeamRosterWorkflow:
    return TeamRosterWorkflow(stores, storage=storage)


def http_error(error: Exception) -> HTTPException:
    """Translate an error raised by a service into an HTTP error response."""
    if isinstance(error, NotFoundError):
        return HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail=error.detail)
    if isinstance(error, InvalidAccessCodeError):
        return HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=error.detail)
    if isinstance(error, AlreadyEnrolledError):
        return HTTPException(status_code=status.HTTP_409_CONFLICT, detail=error.detail)
    if isinstance(error, UnknownRoleError):
        return HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail=error.detail)
    if isinstance(error, GameFrameError):
        logger.error("Request failed: %s", error.detail)
    else:
        logger.exception("Unexpected error: %s", error)
    return HTTPException(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR, detail=GENERIC_ERROR)


async def get_member_team(
    team_doc_id: str,
    user_id: str = Depends(get_current_user_id),
    stores: Stores = Depends(get_stores),
) -> Team:
    """
    The team in the path, if the current user coaches or plays in it.

    Teams the user does not belong to are reported as not found.
    """
    try:
        team = await stores.teams.get_by_doc_id(team_doc_id)
    except Exception as e:
        raise http_error(e)

    if user_id not in team.coaches and user_id not in team.players:
        logger.warning("User %s is not a member of team %s", user_id, team_doc_id)
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Team not found with id: {team_doc_id}",
        )
    return team


async def get_coached_team(
    team: Team = Depends(get_member_team),
    user_id: str = Depends(get_current_user_id),
) -> Team:
    """The team in the path, if the current user coaches it."""
    if user_id not in team.coaches:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only a coach of this team can change it",
        )
    return team
