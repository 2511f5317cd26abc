"""
Gemini service implementation for VentureVoyage.
Sends prompts to the Google generative language REST endpoint.
"""

from typing import Any, Dict, Optional
import requests

from venturevoyage.services.ai_service import AIService
from venturevoyage.utils.constants import DEFAULT_REQUEST_TIMEOUT, GOOGLE_AI_BASE_URL_TEMPLATE
from venturevoyage.utils.exceptions import DecodeError, TransportError
from venturevoyage.utils.logger import logger


def build_request_body(prompt: str) -> Dict[str, Any]:
    return {"contents": [{"parts": [{"text": prompt}]}]}


def extract_candidate_text(payload: Any) -> str:
    """
    Pull candidates[0].content.parts[0].text out of a response envelope.

    Raises:
        DecodeError: Any step of the path is missing or has the wrong type
    """
    try:
        text = payload["candidates"][0]["content"]["parts"][0]["text"]
    except (KeyError, IndexError, TypeError) as e:
        raise DecodeError(f"Unexpected response envelope: {e!r}") from e
    if not isinstance(text, str):
        raise DecodeError(f"Candidate text is {type(text).__name__}, not str")
    return text


class GeminiService(AIService):
    """Gemini service implementation."""

    def __init__(
        self,
        google_api_key: str,
        model: str,
        base_url: Optional[str] = None,
        timeout: float = DEFAULT_REQUEST_TIMEOUT,
        session: Optional[requests.Session] = None,
    ):
        """
        Initialize the Gemini service.

        Args:
            google_api_key: Google AI API key, sent as the `key` query parameter
            model: Gemini model to use
            base_url: Endpoint override; defaults to the generateContent URL for the model
            timeout: Request timeout in seconds
            session: HTTP session to send requests with
        """
        self.google_api_key = google_api_key
        self.model = model
        self.base_url = base_url or GOOGLE_AI_BASE_URL_TEMPLATE.format(model=model)
        self.timeout = timeout
        self.session = session or requests.Session()

    def generate(self, prompt: str) -> str:
        """
        Generate text for a prompt with a single POST request.

        Malformed or empty responses degrade to an empty string. Only
        transport failures are raised.

        Args:
            prompt: The prompt to send

        Returns:
            The completion text, or "" when the response had none
        """
        logger.info(f"Sending prompt to Gemini model {self.model} ({len(prompt)} chars)")
        try:
            response = self.session.post(
                self.base_url,
                params={"key": self.google_api_key},
                json=build_request_body(prompt),
                headers={"Content-Type": "application/json"},
                timeout=self.timeout,
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"Error calling Gemini API: {e}")
            raise TransportError(e) from e

        if not response.ok:
            logger.warning(f"Gemini API returned HTTP {response.status_code}")

        try:
            text = extract_candidate_text(response.json())
        except (ValueError, DecodeError) as e:
            logger.warning(f"No usable content in Gemini response: {e}")
            return ""

        logger.debug(f"Received {len(text)} chars from Gemini")
        return text
