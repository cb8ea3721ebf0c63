import hashlib
from dataclasses import dataclass
from typing import Optional

from ..ports.analysis_repo import AnalysisRepository, LyricsAnalysisRecord


def hash_lyrics(lyrics: str) -> str:
    """SHA-256 hex digest of the exact lyrics string (UTF-8)."""
    return hashlib.sha256(lyrics.encode("utf-8")).hexdigest()


@dataclass
class ContentCache:
    repo: AnalysisRepository

    def lookup(self, lyrics: str) -> Optional[LyricsAnalysisRecord]:
        return self.repo.get_by_hash(hash_lyrics(lyrics))

    def lookup_hash(self, content_hash: str) -> Optional[LyricsAnalysisRecord]:
        return self.repo.get_by_hash(content_hash)

    def record(self, content_hash: str, analysis_id: int) -> None:
        self.repo.index_hash(content_hash, analysis_id)
