"""Completion providers."""

from app.domain.ai.providers.openai import OpenAICompatibleProvider

__all__ = ["OpenAICompatibleProvider"]
