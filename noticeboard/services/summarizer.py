"""
AI summaries for announcements (Gemini via google-genai).

A summarizer returns the summary text, or None when no summary could be
produced. It may raise on transport errors; the announcement service
downgrades those to "no summary".
"""
from __future__ import annotations

import logging
from typing import Optional, Protocol

from google import genai
from google.genai import types

from noticeboard.core.config import Settings

logger = logging.getLogger(__name__)

SYSTEM_INSTRUCTION = (
    "You are a helpful assistant that summarizes campus announcements into concise key points. "
    "Keep summaries under 150 characters and focus on the most important information."
)


class Summarizer(Protocol):
    def summarize(self, text: str) -> Optional[str]: ...


class NullSummarizer:
    """Used when no model credentials are configured."""

    available = False

    def summarize(self, text: str) -> Optional[str]:
        return None


class GeminiSummarizer:
    available = True

    def __init__(self, settings: Settings):
        self.settings = settings
        self._client = None

    def _get_client(self):
        # Lazy client to avoid credential errors at import time
        if self._client is not None:
            return self._client
        http_options = types.HttpOptions(timeout=max(1, self.settings.summary_timeout_seconds) * 1000)
        if self.settings.gemini_api_key:
            self._client = genai.Client(api_key=self.settings.gemini_api_key, http_options=http_options)
        else:
            self._client = genai.Client(
                vertexai=True,
                project=self.settings.vertex_project_id,
                location=self.settings.vertex_location,
                http_options=http_options,
            )
        return self._client

    def summarize(self, text: str) -> Optional[str]:
        response = self._get_client().models.generate_content(
            model=self.settings.gemini_model,
            contents=f"Summarize this announcement: {text}",
            config=types.GenerateContentConfig(
                system_instruction=SYSTEM_INSTRUCTION,
                temperature=0.3,
                max_output_tokens=256,
            ),
        )
        summary = (getattr(response, "text", None) or "").strip()
        if not summary:
            logger.warning("Summary generation returned an empty response")
            return None
        return summary


def build_summarizer(settings: Settings) -> Summarizer:
    if settings.gemini_api_key or settings.vertex_project_id:
        return GeminiSummarizer(settings)
    return NullSummarizer()
