import hashlib

from lyrics_insight.application.services.content_cache import ContentCache, hash_lyrics
from lyrics_insight.infrastructure.persistence.memory.analysis_repository_memory import InMemoryAnalysisRepository


def _store(repo, lyrics):
    return repo.create(lyrics=lyrics, song_title=None, artist=None, references=[], curiosities=[], author_intention="x")


def test_hash_is_sha256_of_exact_text():
    assert hash_lyrics("abc") == hashlib.sha256(b"abc").hexdigest()
    assert hash_lyrics("abc") != hash_lyrics("abc ")
    assert hash_lyrics("canção") == hashlib.sha256("canção".encode("utf-8")).hexdigest()


def test_lookup_miss_then_hit():
    repo = InMemoryAnalysisRepository()
    cache = ContentCache(repo)
    lyrics = "We all live in a yellow submarine"
    assert cache.lookup(lyrics) is None

    rec = _store(repo, lyrics)
    cache.record(hash_lyrics(lyrics), rec.id)
    assert cache.lookup(lyrics) == rec
    assert cache.lookup_hash(hash_lyrics(lyrics)) == rec


def test_record_keeps_first_id():
    repo = InMemoryAnalysisRepository()
    cache = ContentCache(repo)
    first = _store(repo, "same")
    second = _store(repo, "same")
    cache.record(hash_lyrics("same"), first.id)
    cache.record(hash_lyrics("same"), second.id)
    assert cache.lookup("same").id == first.id
