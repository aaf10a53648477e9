import logging
from typing import Any, Optional

import httpx

from report_summarizer.config import Settings
from report_summarizer.services.errors import UpstreamError
from report_summarizer.services.processors.prompt_builder import SYSTEM_PROMPT

logger = logging.getLogger(__name__)


def extract_completion_content(data: Any) -> str:
    """Return ``choices[0].message.content`` stripped, or "" when the path is missing."""
    try:
        content = data["choices"][0]["message"]["content"]
    except (KeyError, IndexError, TypeError):
        return ""
    if not isinstance(content, str):
        return ""
    return content.strip()


class SummarizerClient:
    """HTTP client for an OpenAI-compatible chat-completions endpoint."""

    def __init__(self, settings: Settings, http_client: Optional[httpx.AsyncClient] = None):
        self.base_url = settings.completion_base_url.rstrip("/")
        self.model = settings.completion_model
        self._api_key = settings.perplexity_api_key
        # No timeout: a slow completion holds only its own request
        self.client = http_client or httpx.AsyncClient(timeout=httpx.Timeout(None))

    async def complete(self, prompt: str) -> str:
        """Send the prompt as one chat completion and return the raw answer text.

        Args:
            prompt: Fully rendered summary prompt (user message)

        Returns:
            The trimmed content of the first choice, "" if the response has none

        Raises:
            UpstreamError: non-2xx response or connection failure. Never retried.
        """
        payload = {
            "model": self.model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt}
            ],
        }
        headers = {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self._api_key}",
        }

        try:
            response = await self.client.post(
                f"{self.base_url}/chat/completions",
                json=payload,
                headers=headers,
            )
        except httpx.RequestError as e:
            logger.error(f"Completion service connection error: {e}")
            raise UpstreamError(f"connection failed: {e}")

        if not response.is_success:
            logger.error(f"Completion service HTTP error: {response.status_code} - {response.text}")
            raise UpstreamError(response.text, upstream_status=response.status_code)

        try:
            data = response.json()
        except ValueError:
            logger.warning("Completion service returned a non-JSON body")
            return ""

        return extract_completion_content(data)

    async def aclose(self):
        await self.client.aclose()
