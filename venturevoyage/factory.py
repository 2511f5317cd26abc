"""
Factory for creating service instances and the idea service.
"""

from typing import Optional

from venturevoyage.services.ai_service import AIService
from venturevoyage.services.gemini_service import GeminiService
from venturevoyage.services.idea_service import IdeaService
from venturevoyage.services.openai_service import OpenAIService
from venturevoyage.services.prompt_builder import PromptBuilder
from venturevoyage.services.response_parser import ResponseParser
from venturevoyage.utils.cache_manager import CacheManager
from venturevoyage.utils.config import config
from venturevoyage.utils.logger import logger
from venturevoyage.utils.settings_store import SettingsStore


def create_ai_service(model_type: str, settings: Optional[SettingsStore] = None) -> AIService:
    """
    Create the AI service for a model type.

    Args:
        model_type: Type of model to use ("gemini" or "openai")
        settings: Optional store holding runtime key/model overrides

    Returns:
        AIService instance
    """
    if model_type == "gemini":
        if not config.google_ai_api_key(settings):
            logger.warning("No Google AI API key configured; requests will be rejected")
        return GeminiService(
            config.google_ai_api_key(settings),
            config.google_ai_model(settings),
            base_url=config.google_ai_base_url,
            timeout=config.request_timeout,
        )
    elif model_type == "openai":
        return OpenAIService(config.openai_api_key, config.openai_model, timeout=config.request_timeout)
    else:
        raise ValueError(f"Unsupported model type: {model_type}")


def create_cache_manager() -> CacheManager:
    return CacheManager(config.cache_dir)


def create_settings_store() -> SettingsStore:
    return SettingsStore(config.settings_db)


def create_idea_service(
    model_type: str = "gemini",
    settings: Optional[SettingsStore] = None,
    cache: Optional[CacheManager] = None,
    user_id: Optional[str] = None,
) -> IdeaService:
    """
    Factory to create an IdeaService wired from configuration.

    Args:
        model_type: Type of model to use ("gemini" or "openai")
        settings: Settings store; opened from SETTINGS_DB when omitted
        cache: Cache manager; created on CACHE_DIR when omitted
        user_id: Owner stamped on generated ideas

    Returns:
        IdeaService instance
    """
    settings = settings or create_settings_store()
    return IdeaService(
        prompt_builder=PromptBuilder(),
        ai_service=create_ai_service(model_type, settings),
        parser=ResponseParser(),
        cache=cache or create_cache_manager(),
        settings=settings,
        user_id=user_id,
    )
