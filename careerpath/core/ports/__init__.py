"""Abstract interfaces for external dependencies."""
from careerpath.core.ports.llm import LLMPort, ModelConfig

__all__ = [
    "LLMPort",
    "ModelConfig",
]
