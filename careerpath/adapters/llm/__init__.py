"""LLM provider adapters."""
from careerpath.adapters.llm.bedrock import BedrockAdapter
from careerpath.adapters.llm.rate_limiter import RateLimiter

__all__ = ["BedrockAdapter", "RateLimiter"]
