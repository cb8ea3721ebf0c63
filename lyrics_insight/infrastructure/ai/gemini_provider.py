import logging
from typing import Optional

import google.generativeai as genai
from google.api_core import exceptions as google_exceptions

from ...application.ports.ai_provider import AIProvider
from ...exceptions import ConfigurationError, ProviderError

logger = logging.getLogger(__name__)


def _completion_text(result) -> Optional[str]:
    """First candidate's text, or None when the payload has none."""
    candidates = getattr(result, "candidates", None) or []
    if not candidates:
        return None
    content = getattr(candidates[0], "content", None)
    parts = getattr(content, "parts", None) or []
    text = "".join(getattr(p, "text", "") or "" for p in parts)
    return text or None


class GeminiProvider(AIProvider):
    """Gemini text completion. The API key is checked per call, not at startup."""

    def __init__(self, api_key: str, model_name: str) -> None:
        self.api_key = (api_key or "").strip()
        self.model_name = model_name
        self._model = None

    def _get_model(self):
        if not self.api_key:
            raise ConfigurationError("GEMINI_API_KEY is not configured")
        if self._model is None:
            genai.configure(api_key=self.api_key)
            self._model = genai.GenerativeModel(self.model_name)
            logger.info(f"Initialized Gemini model: {self.model_name}")
        return self._model

    def generate_text(self, prompt: str) -> Optional[str]:
        model = self._get_model()
        try:
            result = model.generate_content(prompt)
        except google_exceptions.GoogleAPICallError as e:
            status = int(e.code) if e.code is not None else None
            logger.error(f"Gemini returned an error: {status} {e.message}")
            raise ProviderError(f"Error calling Gemini model: {status} {e.message}", upstream_status=status) from e
        except Exception as e:
            logger.error(f"Error reaching Gemini: {e}")
            raise ProviderError(f"Error calling Gemini model: {e}") from e
        return _completion_text(result)
