import asyncio
import logging
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from starlette.concurrency import run_in_threadpool

from ..ports.analysis_repo import AnalysisRepository, LyricsAnalysisRecord
from .analysis_client import LyricsAnalysisClient
from .content_cache import ContentCache, hash_lyrics
from .lyrics_extractor import build_insights, extract_analysis

logger = logging.getLogger(__name__)


@dataclass
class _InFlight:
    lock: asyncio.Lock = field(default_factory=asyncio.Lock)
    waiters: int = 0


@dataclass
class AnalysisService:
    analysis_repo: AnalysisRepository
    client: LyricsAnalysisClient
    cache: Optional[ContentCache] = None
    recent_default_limit: int = 10
    _in_flight: Dict[str, _InFlight] = field(default_factory=dict, init=False, repr=False)

    def __post_init__(self) -> None:
        if self.cache is None:
            self.cache = ContentCache(self.analysis_repo)

    async def analyze(self, lyrics: str, song_title: Optional[str] = None, artist: Optional[str] = None) -> LyricsAnalysisRecord:
        """Analysis for ``lyrics``, computed at most once per distinct text.

        Identical concurrent submissions wait on the first one instead of
        calling the provider again.
        """
        content_hash = hash_lyrics(lyrics)
        cached = self.cache.lookup_hash(content_hash)
        if cached:
            logger.info(f"Cache hit for analysis {cached.id}")
            return cached

        # the entry lives until every waiter is done, so a failed first
        # call hands over to the next waiter instead of a fresh lock
        entry = self._in_flight.get(content_hash)
        if entry is None:
            entry = self._in_flight[content_hash] = _InFlight()
        entry.waiters += 1
        try:
            async with entry.lock:
                cached = self.cache.lookup_hash(content_hash)
                if cached:
                    logger.info(f"Cache hit for analysis {cached.id} after waiting")
                    return cached

                logger.info(f"Cache miss, requesting analysis ({len(lyrics)} chars)")
                completion = await run_in_threadpool(self.client.complete, lyrics)
                references, curiosities, author_intention = build_insights(extract_analysis(completion))

                record = self.analysis_repo.create(
                    lyrics=lyrics,
                    song_title=song_title,
                    artist=artist,
                    references=references,
                    curiosities=curiosities,
                    author_intention=author_intention,
                )
                self.cache.record(content_hash, record.id)
                logger.info(f"Stored analysis {record.id}")
                return record
        finally:
            entry.waiters -= 1
            if entry.waiters == 0:
                del self._in_flight[content_hash]

    def get(self, analysis_id: int) -> Optional[LyricsAnalysisRecord]:
        return self.analysis_repo.get_by_id(analysis_id)

    def recent(self, limit: Optional[int] = None) -> List[LyricsAnalysisRecord]:
        if limit is None:
            limit = self.recent_default_limit
        return self.analysis_repo.get_recent(limit)
