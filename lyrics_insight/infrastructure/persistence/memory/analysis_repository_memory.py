import logging
from collections import OrderedDict
from datetime import datetime, timezone
from typing import Dict, List, Optional

from ....application.ports.analysis_repo import AnalysisRepository, InsightItem, LyricsAnalysisRecord

logger = logging.getLogger(__name__)


class InMemoryAnalysisRepository(AnalysisRepository):
    """Process-lifetime analysis store keyed by id, with a content-hash index.

    Records are never updated. When ``max_records`` is set the least recently
    used record is evicted once the store is full; otherwise it grows without
    bound.
    """

    def __init__(self, max_records: Optional[int] = None) -> None:
        if max_records is not None and max_records < 1:
            raise ValueError("max_records must be positive")
        self.max_records = max_records
        self._rows: "OrderedDict[int, LyricsAnalysisRecord]" = OrderedDict()
        self._hash_to_id: Dict[str, int] = {}
        self._next_id = 1

    def create(
        self,
        lyrics: str,
        song_title: Optional[str],
        artist: Optional[str],
        references: List[InsightItem],
        curiosities: List[InsightItem],
        author_intention: str,
    ) -> LyricsAnalysisRecord:
        rec = LyricsAnalysisRecord(
            id=self._next_id,
            lyrics=lyrics,
            song_title=song_title,
            artist=artist,
            references=list(references),
            curiosities=list(curiosities),
            author_intention=author_intention,
            created_at=datetime.now(timezone.utc),
        )
        self._next_id += 1
        self._rows[rec.id] = rec
        self._evict()
        return rec

    def get_by_id(self, analysis_id: int) -> Optional[LyricsAnalysisRecord]:
        rec = self._rows.get(analysis_id)
        if rec is not None:
            self._rows.move_to_end(analysis_id)
        return rec

    def get_by_hash(self, content_hash: str) -> Optional[LyricsAnalysisRecord]:
        analysis_id = self._hash_to_id.get(content_hash)
        if analysis_id is None:
            return None
        return self.get_by_id(analysis_id)

    def index_hash(self, content_hash: str, analysis_id: int) -> None:
        # first mapping wins
        if analysis_id in self._rows:
            self._hash_to_id.setdefault(content_hash, analysis_id)

    def get_recent(self, limit: int = 10) -> List[LyricsAnalysisRecord]:
        if limit <= 0:
            return []
        ordered = sorted(self._rows.values(), key=lambda r: (r.created_at, r.id), reverse=True)
        return ordered[:limit]

    def count(self) -> int:
        return len(self._rows)

    def _evict(self) -> None:
        if self.max_records is None:
            return
        while len(self._rows) > self.max_records:
            evicted_id, _ = self._rows.popitem(last=False)
            stale = [h for h, i in self._hash_to_id.items() if i == evicted_id]
            for h in stale:
                del self._hash_to_id[h]
            logger.info(f"Evicted analysis {evicted_id} from store")
