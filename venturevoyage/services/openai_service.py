"""
OpenAI service implementation for VentureVoyage.
Sends prompts to the OpenAI chat completions API.
"""

import openai
from openai import OpenAI

from venturevoyage.services.ai_service import AIService
from venturevoyage.utils.constants import DEFAULT_REQUEST_TIMEOUT
from venturevoyage.utils.exceptions import TransportError
from venturevoyage.utils.logger import logger


class OpenAIService(AIService):
    """OpenAI service implementation."""

    def __init__(self, api_key: str, model: str, timeout: float = DEFAULT_REQUEST_TIMEOUT):
        """
        Initialize the OpenAI service.

        Args:
            api_key: OpenAI API key
            model: OpenAI model to use
            timeout: Request timeout in seconds
        """
        self.api_key = api_key
        self.model = model
        # Single attempt per request
        self.client = OpenAI(api_key=api_key, timeout=timeout, max_retries=0)

    def generate(self, prompt: str) -> str:
        """
        Generate text for a prompt with one chat completion request.

        Args:
            prompt: The prompt to send

        Returns:
            The completion text, or "" when the response had none
        """
        logger.info(f"Sending prompt to OpenAI model {self.model} ({len(prompt)} chars)")
        try:
            response = self.client.chat.completions.create(
                model=self.model,
                temperature=0.7,
                messages=[{"role": "user", "content": prompt}],
            )
        except openai.APIConnectionError as e:
            logger.error(f"Error calling OpenAI API: {e}")
            raise TransportError(e) from e
        except openai.APIStatusError as e:
            logger.warning(f"OpenAI API returned HTTP {e.status_code}: {e}")
            return ""

        try:
            content = response.choices[0].message.content
        except (AttributeError, IndexError, TypeError) as e:
            logger.warning(f"No usable content in OpenAI response: {e}")
            return ""

        if not isinstance(content, str):
            logger.warning("OpenAI response carried no text content")
            return ""
        return content
