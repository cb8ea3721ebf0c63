import asyncio
import threading
import time

import pytest

from lyrics_insight.application.services.analysis_client import LyricsAnalysisClient
from lyrics_insight.application.services.analysis_service import AnalysisService
from lyrics_insight.application.services.content_cache import hash_lyrics
from lyrics_insight.exceptions import ProviderError
from lyrics_insight.infrastructure.persistence.memory.analysis_repository_memory import InMemoryAnalysisRepository

COMPLETION = (
    "References: Echoes of Dylan's protest songs. \U0001F3B8\n"
    "Curiosities: Recorded in a kitchen. \U0001F373\n"
    "Author's intention: A call for unity. \U0001F91D"
)

LYRICS = "How many roads must a man walk down before you call him a man?"


class FakeAI:
    def __init__(self, reply=COMPLETION, delay=0.0, exc=None):
        self.reply = reply
        self.delay = delay
        self.exc = exc
        self.calls = 0
        self._lock = threading.Lock()

    def generate_text(self, prompt: str):
        with self._lock:
            self.calls += 1
        if self.delay:
            time.sleep(self.delay)
        if self.exc:
            raise self.exc
        return self.reply


def _service(ai):
    repo = InMemoryAnalysisRepository()
    svc = AnalysisService(analysis_repo=repo, client=LyricsAnalysisClient(provider=ai))
    return svc, repo


@pytest.mark.asyncio
async def test_analyze_builds_and_stores_record():
    ai = FakeAI()
    svc, repo = _service(ai)
    rec = await svc.analyze(LYRICS, song_title="Blowin' in the Wind", artist="Bob Dylan")

    assert rec.id == 1
    assert rec.song_title == "Blowin' in the Wind"
    assert rec.references[0].description == "Echoes of Dylan's protest songs."
    assert rec.references[0].icon == "\U0001F3B8"
    assert rec.curiosities[0].description == "Recorded in a kitchen."
    assert rec.author_intention == "\U0001F91D A call for unity."
    assert repo.get_by_hash(hash_lyrics(LYRICS)) == rec


@pytest.mark.asyncio
async def test_repeat_submission_is_served_from_cache():
    ai = FakeAI()
    svc, repo = _service(ai)
    first = await svc.analyze(LYRICS)
    second = await svc.analyze(LYRICS)
    assert second.id == first.id
    assert ai.calls == 1
    assert repo.count() == 1


@pytest.mark.asyncio
async def test_concurrent_identical_submissions_call_provider_once():
    ai = FakeAI(delay=0.05)
    svc, repo = _service(ai)
    a, b, c = await asyncio.gather(svc.analyze(LYRICS), svc.analyze(LYRICS), svc.analyze(LYRICS))
    assert a.id == b.id == c.id
    assert ai.calls == 1
    assert repo.count() == 1
    assert svc._in_flight == {}


@pytest.mark.asyncio
async def test_different_lyrics_get_different_records():
    ai = FakeAI()
    svc, repo = _service(ai)
    a = await svc.analyze(LYRICS)
    b = await svc.analyze(LYRICS + " ")
    assert a.id != b.id
    assert ai.calls == 2


@pytest.mark.asyncio
async def test_provider_failure_stores_nothing():
    ai = FakeAI(exc=ProviderError("Error calling Gemini model: 503 unavailable", upstream_status=503))
    svc, repo = _service(ai)
    with pytest.raises(ProviderError):
        await svc.analyze(LYRICS)
    assert repo.count() == 0
    assert svc._in_flight == {}


class FailsFirstAI(FakeAI):
    def generate_text(self, prompt: str):
        with self._lock:
            self.calls += 1
            first = self.calls == 1
        time.sleep(self.delay)
        if first:
            raise ProviderError("Error calling Gemini model: 503 unavailable", upstream_status=503)
        return self.reply


@pytest.mark.asyncio
async def test_waiter_takes_over_after_first_call_fails():
    ai = FailsFirstAI(delay=0.1)
    svc, repo = _service(ai)

    async def late():
        await asyncio.sleep(0.15)
        return await svc.analyze(LYRICS)

    a, b, c = await asyncio.gather(svc.analyze(LYRICS), svc.analyze(LYRICS), late(), return_exceptions=True)
    assert isinstance(a, ProviderError)
    assert b.id == c.id
    assert ai.calls == 2
    assert repo.count() == 1
    assert svc._in_flight == {}


@pytest.mark.asyncio
async def test_unparseable_completion_still_stores_fallbacks():
    ai = FakeAI(reply=None)
    svc, _ = _service(ai)
    rec = await svc.analyze(LYRICS)
    assert rec.references[0].description == "None found."
    assert rec.curiosities[0].description == "None found."
    assert rec.author_intention.endswith("None found.")


@pytest.mark.asyncio
async def test_recent_uses_default_limit():
    ai = FakeAI()
    repo = InMemoryAnalysisRepository()
    svc = AnalysisService(analysis_repo=repo, client=LyricsAnalysisClient(provider=ai), recent_default_limit=2)
    for i in range(3):
        await svc.analyze(f"{LYRICS} {i}")
    assert [r.id for r in svc.recent()] == [3, 2]
    assert svc.get(1).id == 1
    assert svc.get(99) is None
