import logging
from dataclasses import dataclass

from ..ports.ai_provider import AIProvider

logger = logging.getLogger(__name__)

PLACEHOLDER_COMPLETION = "Analysis not available."

PROMPT_TEMPLATE = """Analyze the song lyrics below and answer clearly, without asterisks, bullet points or markdown.
Summarize each item in at most 2 short, objective sentences.
If there is nothing relevant for an item, answer "None found."

1. Cultural, historical or literary references (if any)
2. Curiosities about the composition (if any)
3. The author's intention

Lyrics: \"\"\"{lyrics}\"\"\"

Answer in this format, one item per line:
References: ... (end with one emoji related to the content)
Curiosities: ... (end with one emoji related to the content)
Author's intention: ... (end with one emoji related to the content)
"""


@dataclass
class LyricsAnalysisClient:
    """Builds the analysis prompt and makes a single provider call."""

    provider: AIProvider
    prompt_lyrics_limit: int = 1000

    def build_prompt(self, lyrics: str) -> str:
        return PROMPT_TEMPLATE.format(lyrics=lyrics[: self.prompt_lyrics_limit])

    def complete(self, lyrics: str) -> str:
        # ConfigurationError / ProviderError propagate to the caller
        text = self.provider.generate_text(self.build_prompt(lyrics))
        if not text or not text.strip():
            logger.warning("Provider returned no completion text; using placeholder")
            return PLACEHOLDER_COMPLETION
        return text
