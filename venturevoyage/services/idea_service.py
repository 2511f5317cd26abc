"""
Idea generation pipeline for VentureVoyage.
"""

from concurrent.futures import CancelledError, Future
from typing import List, Optional

from venturevoyage.models.idea import BusinessIdea, UserAttributes
from venturevoyage.services.ai_service import AIService
from venturevoyage.services.prompt_builder import PromptBuilder
from venturevoyage.services.response_parser import ResponseParser
from venturevoyage.utils.cache_manager import CacheKey, CacheManager
from venturevoyage.utils.exceptions import DiskIOError, IdeaNotFoundError
from venturevoyage.utils.logger import logger
from venturevoyage.utils.settings_store import SettingsStore


class IdeaService:
    """Generates, saves and tracks business ideas."""

    def __init__(
        self,
        prompt_builder: PromptBuilder,
        ai_service: AIService,
        parser: ResponseParser,
        cache: CacheManager,
        settings: SettingsStore,
        user_id: Optional[str] = None,
    ):
        """
        Initialize the idea service.

        Args:
            prompt_builder: Renders prompts from quiz answers
            ai_service: AI service to send prompts to
            parser: Turns completions into ideas
            cache: Cache for completions, keyed by prompt
            settings: Store for saved ideas and the selected idea
            user_id: Owner stamped on generated ideas
        """
        self.prompt_builder = prompt_builder
        self.ai_service = ai_service
        self.parser = parser
        self.cache = cache
        self.settings = settings
        self.user_id = user_id
        self.business_ideas: List[BusinessIdea] = []

    def generate_ideas(self, attributes: UserAttributes, use_cache: bool = True) -> List[BusinessIdea]:
        """
        Generate business ideas for a user's quiz answers.

        Args:
            attributes: Selected skills, personality traits and interests
            use_cache: Whether to reuse a cached completion for the same prompt

        Returns:
            The generated ideas; never empty

        Raises:
            TransportError: The AI service could not be reached
        """
        logger.info(
            f"Generating ideas for {len(attributes.skills)} skills, "
            f"{len(attributes.personality_traits)} traits, {len(attributes.interests)} interests"
        )
        prompt = self.prompt_builder.build_ideas_prompt_for(attributes)
        completion = self._complete(prompt, use_cache)

        ideas = self.parser.parse_business_ideas(completion, user_id=self.user_id or "")
        self.business_ideas = ideas
        logger.info(f"Generated {len(ideas)} ideas")
        return ideas

    def generate_ideas_async(self, attributes: UserAttributes, use_cache: bool = True) -> "Future[List[BusinessIdea]]":
        """Run generate_ideas() on the AI service's worker pool."""
        future: Future = Future()

        def _run(completion_future: Future):
            if not future.set_running_or_notify_cancel():
                return
            if completion_future.cancelled():
                future.set_exception(CancelledError())
                return
            try:
                completion = completion_future.result()
                ideas = self.parser.parse_business_ideas(completion, user_id=self.user_id or "")
                self.business_ideas = ideas
                future.set_result(ideas)
            except Exception as e:
                future.set_exception(e)

        prompt = self.prompt_builder.build_ideas_prompt_for(attributes)
        cached = self.cache.get(CacheKey.ai_response(prompt), str) if use_cache else None
        if cached is not None:
            _run(_completed(cached))
        else:
            completion_future = self.ai_service.generate_async(prompt)
            # A cancelled caller neither waits on the request nor caches its answer
            future.add_done_callback(lambda f: completion_future.cancel() if f.cancelled() else None)
            completion_future.add_done_callback(
                lambda f: None if future.cancelled() else self._store_completion(prompt, f)
            )
            completion_future.add_done_callback(_run)
        return future

    def get_suggestions(self, idea: BusinessIdea, use_cache: bool = True) -> str:
        """
        Ask the AI service for next steps on an idea.

        Raises:
            TransportError: The AI service could not be reached
        """
        prompt = self.prompt_builder.build_advice_prompt(idea.title, idea.description)
        return self.parser.parse_suggestions(self._complete(prompt, use_cache))

    def find_idea(self, idea_id: str) -> BusinessIdea:
        for idea in self.business_ideas:
            if idea.id == idea_id:
                return idea
        raise IdeaNotFoundError(idea_id)

    def save_idea(self, idea_id: str) -> BusinessIdea:
        idea = self.find_idea(idea_id)
        idea.saved = True
        self._persist_saved_ideas()
        logger.info(f"Saved idea '{idea.title}'")
        return idea

    def update_progress(self, idea_id: str, progress: int) -> BusinessIdea:
        """Set an idea's progress, clamped to 0..100. Saved ideas are re-persisted."""
        idea = self.find_idea(idea_id)
        idea.progress = max(0, min(100, int(progress)))
        if idea.saved:
            self._persist_saved_ideas()
        logger.debug(f"Progress for '{idea.title}' is now {idea.progress}%")
        return idea

    def select_idea(self, idea_id: Optional[str]):
        if idea_id is not None:
            self.find_idea(idea_id)
        self.settings.selected_business_idea_id = idea_id

    def selected_idea(self) -> Optional[BusinessIdea]:
        idea_id = self.settings.selected_business_idea_id
        if idea_id is None:
            return None
        try:
            return self.find_idea(idea_id)
        except IdeaNotFoundError:
            return None

    def load_saved_ideas(self) -> List[BusinessIdea]:
        self.business_ideas = self.settings.business_ideas
        logger.info(f"Loaded {len(self.business_ideas)} saved ideas")
        return self.business_ideas

    def _complete(self, prompt: str, use_cache: bool) -> str:
        key = CacheKey.ai_response(prompt)
        if use_cache:
            cached = self.cache.get(key, str)
            if cached is not None:
                logger.info("Using cached completion")
                return cached

        completion = self.ai_service.generate(prompt)
        self._cache_completion(key, completion)
        return completion

    def _store_completion(self, prompt: str, completion_future: Future):
        if completion_future.cancelled() or completion_future.exception() is not None:
            return
        self._cache_completion(CacheKey.ai_response(prompt), completion_future.result())

    def _cache_completion(self, key: str, completion: str):
        # Empty completions are never cached
        if not completion:
            return
        try:
            self.cache.set(key, completion)
        except DiskIOError as e:
            logger.warning(f"Completion cached in memory only: {e}")

    def _persist_saved_ideas(self):
        saved = {idea.id: idea for idea in self.settings.business_ideas}
        for idea in self.business_ideas:
            if idea.saved:
                saved[idea.id] = idea
        self.settings.business_ideas = list(saved.values())


def _completed(value) -> Future:
    future: Future = Future()
    future.set_result(value)
    return future
