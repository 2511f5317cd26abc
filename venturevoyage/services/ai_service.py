"""
Abstract base class for AI services used in VentureVoyage.
This provides a common interface for different AI models.
"""

import threading
from abc import ABC, abstractmethod
from concurrent.futures import Future, ThreadPoolExecutor
from typing import Optional

from venturevoyage.utils.constants import AI_SERVICE_MAX_WORKERS


class AIService(ABC):
    """Abstract base class for AI services."""

    _executor: Optional[ThreadPoolExecutor] = None
    # Guards lazy creation and shutdown of every instance's worker pool
    _executor_lock = threading.Lock()

    @abstractmethod
    def generate(self, prompt: str) -> str:
        """
        Send a prompt to the model and return the generated text.

        Args:
            prompt: The prompt to send

        Returns:
            The completion text, or an empty string when the response carried
            no usable content

        Raises:
            TransportError: The request could not be completed
        """
        pass

    def generate_async(self, prompt: str) -> "Future[str]":
        """
        Run generate() on a background worker.

        The returned future completes exactly once, with the completion text
        or with the TransportError raised by generate().

        Args:
            prompt: The prompt to send

        Returns:
            Future resolving to the completion text
        """
        with self._executor_lock:
            if self._executor is None:
                self._executor = ThreadPoolExecutor(
                    max_workers=AI_SERVICE_MAX_WORKERS,
                    thread_name_prefix=type(self).__name__,
                )
            return self._executor.submit(self.generate, prompt)

    def close(self):
        """Cancel pending background requests and release the worker pool."""
        with self._executor_lock:
            if self._executor is not None:
                self._executor.shutdown(wait=False, cancel_futures=True)
                self._executor = None
