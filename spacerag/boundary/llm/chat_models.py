"""
Chat model construction.

Dependencies: langchain_google_genai, langchain_aws
System role: Completion capability for answer synthesis
"""

import logging

from langchain_core.language_models import BaseChatModel

from spacerag.configs.llm import LLMSettings

logger = logging.getLogger(__name__)


def create_chat_model(settings: LLMSettings) -> BaseChatModel:
    """
    Build the configured chat model.

    Raises:
        ValueError: Unknown provider
    """
    provider = settings.chat_provider.lower()
    logger.info(f"{__name__}:create_chat_model - provider={provider}, model={settings.chat_model}")
    if provider == "google":
        from langchain_google_genai import ChatGoogleGenerativeAI

        kwargs = {"google_api_key": settings.google_api_key} if settings.google_api_key else {}
        return ChatGoogleGenerativeAI(
            model=settings.chat_model,
            temperature=settings.temperature,
            timeout=settings.chat_timeout_seconds,
            max_retries=0,
            **kwargs,
        )
    if provider == "bedrock":
        from langchain_aws import ChatBedrockConverse

        return ChatBedrockConverse(
            model=settings.chat_model,
            region_name=settings.region,
            temperature=settings.temperature,
        )
    raise ValueError(f"Unknown chat provider: {settings.chat_provider}")
