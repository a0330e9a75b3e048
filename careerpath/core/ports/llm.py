"""LLM port interface.

Defines the contract for text-generation providers. Core code depends only
on this abstraction, so the retry orchestrator can be driven by a fake in
tests and by the Bedrock adapter in production.
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Optional


@dataclass
class ModelConfig:
    """Configuration for a specific model."""
    name: str           # provider model id
    role: str           # e.g., "career_insights"
    max_tokens: int
    temperature: float
    timeout: float      # per-call budget in seconds
    system_prompt: str


class LLMPort(ABC):
    """Abstract interface for LLM providers.

    Implementations: BedrockAdapter
    """

    @abstractmethod
    def get_model_config(self, model: str) -> ModelConfig:
        """Get configuration for a model.

        Args:
            model: Model key ("haiku" or "sonnet")

        Returns:
            ModelConfig with all settings
        """
        pass

    @abstractmethod
    async def generate(
        self,
        prompt: str,
        model: str,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
        system: Optional[str] = None,
    ) -> str:
        """Generate text completion.

        The returned text is opaque: it may be truncated, wrapped in prose or
        otherwise invalid JSON.

        Args:
            prompt: User prompt
            model: Model key
            max_tokens: Override config max_tokens
            temperature: Override config temperature
            system: Override config system_prompt

        Returns:
            Generated text response

        Raises:
            GenerationFailure: When the provider call fails
        """
        pass
