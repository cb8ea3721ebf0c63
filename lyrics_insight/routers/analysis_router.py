from typing import List, Optional
from fastapi import APIRouter, Depends, HTTPException, Query, Request
from fastapi.exceptions import RequestValidationError
import logging

from ..application.services.analysis_service import AnalysisService
from ..config import Settings
from ..schemas.analysis.analysis import AnalysisRequest, LyricsAnalysisResponse
from ..schemas.common.common import ErrorResponse

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["Analysis"])


def get_analysis_service(request: Request) -> AnalysisService:
    return request.app.state.analysis_service


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def lyrics_length(lyrics: str) -> int:
    """Length in UTF-16 code units, the unit browsers count in."""
    return len(lyrics.encode("utf-16-le")) // 2


def validate_lyrics_length(lyrics: str, settings: Settings) -> None:
    length = lyrics_length(lyrics)
    if length < settings.MIN_LYRICS_LENGTH:
        message = f"Lyrics must be at least {settings.MIN_LYRICS_LENGTH} characters"
    elif length > settings.MAX_LYRICS_LENGTH:
        message = f"Lyrics too long (max {settings.MAX_LYRICS_LENGTH} characters)"
    else:
        return
    raise RequestValidationError([{"type": "value_error", "loc": ("body", "lyrics"), "msg": message, "input": lyrics}])


@router.post(
    "/analyze",
    response_model=LyricsAnalysisResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
async def analyze_lyrics(
    payload: AnalysisRequest,
    service: AnalysisService = Depends(get_analysis_service),
    settings: Settings = Depends(get_app_settings),
):
    validate_lyrics_length(payload.lyrics, settings)
    record = await service.analyze(payload.lyrics, song_title=payload.song_title, artist=payload.artist)
    return LyricsAnalysisResponse.from_record(record)


@router.get(
    "/analysis/{analysis_id}",
    response_model=LyricsAnalysisResponse,
    responses={404: {"model": ErrorResponse}},
)
def get_analysis(analysis_id: int, service: AnalysisService = Depends(get_analysis_service)):
    record = service.get(analysis_id)
    if not record:
        raise HTTPException(status_code=404, detail="Analysis not found")
    return LyricsAnalysisResponse.from_record(record)


@router.get("/recent", response_model=List[LyricsAnalysisResponse])
def get_recent(
    limit: Optional[int] = Query(None, ge=0),
    service: AnalysisService = Depends(get_analysis_service),
    settings: Settings = Depends(get_app_settings),
):
    if limit is not None:
        limit = min(limit, settings.RECENT_MAX_LIMIT)
    return [LyricsAnalysisResponse.from_record(r) for r in service.recent(limit)]
