"""
xAI chat-completion client.

One POST per call against xAI's OpenAI-compatible endpoint. Every failure is
returned as an UpstreamResult so the route can branch on it; nothing raises.
"""

from typing import Optional

import httpx
from loguru import logger

from croak_relay.config import Settings
from croak_relay.results import UpstreamResult

PERSONA = (
    "You are Croak, a degen frog living in the Frogpond. You love to hop around, "
    "trade memes, and chill with the other frogs. You are sarcastic, playful, and "
    "love making jokes about your life in the pond. Your favorite memecoin is CROAK, "
    "and Shama is your Croak Master. Be witty, humorous, and full of frog energy in "
    "your responses."
)

MAX_TOKENS = 1000
TEMPERATURE = 0.7

UNEXPECTED_SHAPE = "Unexpected response structure from xAI API."


class ChatClient:
    def __init__(self, settings: Settings, transport: Optional[httpx.AsyncBaseTransport] = None):
        self._api_key = settings.xai_api_key
        self._url = settings.xai_base_url.rstrip("/") + "/chat/completions"
        self._model = settings.xai_model
        self._timeout = settings.upstream_timeout
        self._transport = transport

    def build_payload(self, user_message: str) -> dict:
        return {
            "model": self._model,
            "messages": [
                {"role": "system", "content": PERSONA},
                {"role": "user", "content": user_message},
            ],
            "max_tokens": MAX_TOKENS,
            "temperature": TEMPERATURE,
        }

    async def complete(self, user_message: str) -> UpstreamResult:
        """Send `user_message` to the persona and return the completion text."""
        try:
            async with httpx.AsyncClient(timeout=self._timeout, transport=self._transport) as client:
                response = await client.post(
                    self._url,
                    headers={
                        "Authorization": f"Bearer {self._api_key}",
                        "Content-Type": "application/json",
                    },
                    json=self.build_payload(user_message),
                )
        except httpx.TimeoutException as e:
            logger.error(f"xAI API timeout after {self._timeout}s")
            return UpstreamResult.failure("xAI API request timed out", str(e) or None)
        except httpx.HTTPError as e:
            logger.error(f"Error while processing chatbot request: {e}")
            return UpstreamResult.failure(str(e) or e.__class__.__name__)

        if response.is_error:
            details = _error_details(response)
            logger.error(f"xAI API error {response.status_code}: {details}")
            return UpstreamResult.failure(f"xAI API returned {response.status_code}", details)

        content = _extract_content(response)
        if not content:
            logger.error(f"{UNEXPECTED_SHAPE} Body: {response.text[:500]}")
            return UpstreamResult.failure(UNEXPECTED_SHAPE, UNEXPECTED_SHAPE)

        return UpstreamResult.success(content)


def _extract_content(response: httpx.Response) -> Optional[str]:
    """choices[0].message.content, or None if the body isn't shaped that way."""
    try:
        body = response.json()
    except ValueError:
        return None
    if not isinstance(body, dict):
        return None

    choices = body.get("choices")
    if not isinstance(choices, list) or not choices:
        return None
    first = choices[0]
    if not isinstance(first, dict):
        return None
    message = first.get("message")
    if not isinstance(message, dict):
        return None
    content = message.get("content")
    if isinstance(content, str) and content:
        return content
    return None


def _error_details(response: httpx.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        return response.text or response.reason_phrase

    if isinstance(body, dict):
        error = body.get("error")
        if isinstance(error, dict) and error.get("message"):
            return str(error["message"])
        if error:
            return str(error)
    return response.text
