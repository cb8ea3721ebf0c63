import pytest

from lyrics_insight.application.services.analysis_client import LyricsAnalysisClient, PLACEHOLDER_COMPLETION
from lyrics_insight.exceptions import ConfigurationError, ProviderError


class FakeAI:
    def __init__(self, reply="References: x"):
        self.reply = reply
        self.prompts = []

    def generate_text(self, prompt: str):
        self.prompts.append(prompt)
        return self.reply


class FailingAI:
    def __init__(self, exc):
        self.exc = exc

    def generate_text(self, prompt: str):
        raise self.exc


def test_prompt_truncates_lyrics():
    ai = FakeAI()
    client = LyricsAnalysisClient(provider=ai, prompt_lyrics_limit=1000)
    client.complete("a" * 1500)
    prompt = ai.prompts[0]
    assert "a" * 1000 in prompt
    assert "a" * 1001 not in prompt


def test_prompt_asks_for_three_labelled_lines():
    prompt = LyricsAnalysisClient(provider=FakeAI()).build_prompt("some lyrics")
    assert "References:" in prompt
    assert "Curiosities:" in prompt
    assert "Author's intention:" in prompt
    assert "emoji" in prompt
    assert '"""some lyrics"""' in prompt


def test_complete_returns_provider_text():
    client = LyricsAnalysisClient(provider=FakeAI("References: Homer"))
    assert client.complete("lyrics") == "References: Homer"


@pytest.mark.parametrize("reply", [None, "", "   \n"])
def test_empty_completion_uses_placeholder(reply):
    client = LyricsAnalysisClient(provider=FakeAI(reply))
    assert client.complete("lyrics") == PLACEHOLDER_COMPLETION


@pytest.mark.parametrize(
    "exc",
    [ConfigurationError("GEMINI_API_KEY is not configured"), ProviderError("boom", upstream_status=503)],
)
def test_provider_failures_propagate(exc):
    client = LyricsAnalysisClient(provider=FailingAI(exc))
    with pytest.raises(type(exc)):
        client.complete("lyrics")
