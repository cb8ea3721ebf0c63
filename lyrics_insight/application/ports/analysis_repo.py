from typing import List, Optional, Protocol
from dataclasses import dataclass, field
from datetime import datetime


@dataclass(frozen=True)
class InsightItem:
    title: str
    description: str
    icon: str


@dataclass(frozen=True)
class LyricsAnalysisRecord:
    id: int
    lyrics: str
    song_title: Optional[str]
    artist: Optional[str]
    references: List[InsightItem] = field(default_factory=list)
    curiosities: List[InsightItem] = field(default_factory=list)
    author_intention: str = ""
    created_at: Optional[datetime] = None


class AnalysisRepository(Protocol):
    def create(
        self,
        lyrics: str,
        song_title: Optional[str],
        artist: Optional[str],
        references: List[InsightItem],
        curiosities: List[InsightItem],
        author_intention: str,
    ) -> LyricsAnalysisRecord:
        ...

    def get_by_id(self, analysis_id: int) -> Optional[LyricsAnalysisRecord]:
        ...

    def get_by_hash(self, content_hash: str) -> Optional[LyricsAnalysisRecord]:
        ...

    def index_hash(self, content_hash: str, analysis_id: int) -> None:
        ...

    def get_recent(self, limit: int = 10) -> List[LyricsAnalysisRecord]:
        ...

    def count(self) -> int:
        ...
