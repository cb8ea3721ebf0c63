# lyrics_insight/schemas/analysis.py
from pydantic import BaseModel, ConfigDict, Field
from typing import List, Optional
from datetime import datetime

from ...application.ports.analysis_repo import InsightItem, LyricsAnalysisRecord


class AnalysisRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    lyrics: str = Field(..., description="Song lyrics to analyze")
    song_title: Optional[str] = Field(None, alias="songTitle")
    artist: Optional[str] = None


class Insight(BaseModel):
    title: str
    description: str
    icon: str

    @classmethod
    def from_item(cls, item: InsightItem) -> "Insight":
        return cls(title=item.title, description=item.description, icon=item.icon)


# Reference and Curiosity share a shape
Reference = Insight
Curiosity = Insight


class LyricsAnalysisResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: int
    lyrics: str
    song_title: Optional[str] = Field(None, alias="songTitle")
    artist: Optional[str] = None
    references: List[Reference] = Field(default_factory=list)
    curiosities: List[Curiosity] = Field(default_factory=list)
    author_intention: str = Field(..., alias="authorIntention")
    created_at: datetime = Field(..., alias="createdAt")

    @classmethod
    def from_record(cls, record: LyricsAnalysisRecord) -> "LyricsAnalysisResponse":
        return cls(
            id=record.id,
            lyrics=record.lyrics,
            song_title=record.song_title,
            artist=record.artist,
            references=[Insight.from_item(i) for i in record.references],
            curiosities=[Insight.from_item(i) for i in record.curiosities],
            author_intention=record.author_intention,
            created_at=record.created_at,
        )
