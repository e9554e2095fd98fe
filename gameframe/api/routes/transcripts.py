"""
Transcript API routes.

Every view is filtered for the requesting user: coaches see all feedback
of the game, players only the feedback addressed to them. Only members of
the team reach these routes, and only its coaches may edit.
"""
from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, status

from gameframe.api.deps import (
    get_coached_team,
    get_current_user_id,
    get_member_team,
    get_stores,
    get_transcript_aggregator,
    http_error,
)
from gameframe.repositories import Stores
from gameframe.schemas import (
    AudioLink,
    GameTranscriptsResponse,
    KeyMomentTranscript,
    Team,
    Transcript,
    TranscriptUpdate,
)
from gameframe.services import TranscriptAggregator

router = APIRouter(prefix="/teams/{team_doc_id}/games/{game_id}/transcripts", tags=["Transcripts"])


@router.get("/", response_model=Optional[List[KeyMomentTranscript]])
async def list_transcripts(
    game_id: str,
    team: Team = Depends(get_member_team),
    user_id: str = Depends(get_current_user_id),
    aggregator: TranscriptAggregator = Depends(get_transcript_aggregator),
):
    """
    Transcripts of a game in chronological order.

    ``null`` means the game has no transcripts yet.
    """
    try:
        return await aggregator.get_all_transcripts(game_id, team.id, user_id)
    except Exception as e:
        raise http_error(e)


@router.get("/key-moments", response_model=GameTranscriptsResponse)
async def list_transcripts_and_key_moments(
    game_id: str,
    team: Team = Depends(get_member_team),
    user_id: str = Depends(get_current_user_id),
    aggregator: TranscriptAggregator = Depends(get_transcript_aggregator),
):
    """
    Transcripts of a game, plus those marked in the full game recording.
    """
    try:
        recordings, key_moments = await aggregator.get_all_transcripts_and_key_moments(
            game_id, team.id, user_id
        )
    except Exception as e:
        raise http_error(e)
    return GameTranscriptsResponse(recordings=recordings, key_moments=key_moments)


@router.get("/preview", response_model=GameTranscriptsResponse)
async def preview_transcripts(
    game_id: str,
    team: Team = Depends(get_member_team),
    user_id: str = Depends(get_current_user_id),
    aggregator: TranscriptAggregator = Depends(get_transcript_aggregator),
):
    """
    The first few transcripts of a game, for summaries.
    """
    try:
        recordings, key_moments = await aggregator.get_preview_transcripts_and_key_moments(
            game_id, team.id, user_id
        )
    except Exception as e:
        raise http_error(e)
    return GameTranscriptsResponse(recordings=recordings, key_moments=key_moments)


@router.get("/key-moments/{key_moment_id}/audio", response_model=AudioLink)
async def get_key_moment_audio(
    game_id: str,
    key_moment_id: str,
    team: Team = Depends(get_member_team),
    user_id: str = Depends(get_current_user_id),
    stores: Stores = Depends(get_stores),
    aggregator: TranscriptAggregator = Depends(get_transcript_aggregator),
):
    """
    A link to the audio of a key moment.

    Players only get audio of key moments addressed to them.
    """
    try:
        if user_id not in team.coaches:
            key_moment = await stores.key_moments.get(team.id, game_id, key_moment_id)
            if key_moment is None or user_id not in key_moment.feedback_for:
                raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Audio not found")
        audio_url = await aggregator.get_audio_url(team.id, game_id, key_moment_id)
    except HTTPException:
        raise
    except Exception as e:
        raise http_error(e)

    if audio_url is None:
        raise HTTPException(status_code=status.HTTP_404_NOT_FOUND, detail="Audio not found")
    return AudioLink(key_moment_id=key_moment_id, audio_url=audio_url)


@router.patch("/{transcript_id}", response_model=Transcript)
async def update_transcript(
    game_id: str,
    transcript_id: str,
    update: TranscriptUpdate,
    team: Team = Depends(get_coached_team),
    aggregator: TranscriptAggregator = Depends(get_transcript_aggregator),
):
    """
    Edit a transcript's text and/or add players to its feedback.

    Only coaches of the team may edit.
    """
    if update.transcript is None and not update.feedback_for:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Nothing to update",
        )
    try:
        return await aggregator.update_transcript_info(
            team.id,
            game_id,
            transcript_id,
            feedback_for=update.feedback_for,
            transcript=update.transcript,
        )
    except Exception as e:
        raise http_error(e)
