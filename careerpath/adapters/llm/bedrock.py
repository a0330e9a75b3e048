"""Bedrock LLM adapter.

Implements LLMPort interface by directly using boto3.
Includes rate limiting and retries on provider throttling.
"""
import asyncio
import json
import logging
import os
import time
from typing import Optional

import boto3
from botocore.config import Config

from careerpath.adapters.llm.rate_limiter import RateLimiter
from careerpath.core.exceptions import ConfigurationError, GenerationFailure
from careerpath.core.ports.llm import LLMPort, ModelConfig
from careerpath.core.recovery.llm_config import RECOVERY_SETTINGS
from careerpath.core.recovery.retry_utils import RetryConfig, retry_with_backoff

logger = logging.getLogger(__name__)

_SYSTEM_PROMPT = (
    "You are a career guidance analyst. "
    "Respond with a single valid JSON object and no other text."
)


class BedrockAdapter(LLMPort):
    """AWS Bedrock implementation of LLMPort.

    Directly uses boto3 bedrock-runtime client.
    """

    # Model configurations
    _MODEL_CONFIGS = {
        "haiku": ModelConfig(
            name=RECOVERY_SETTINGS.haiku_model_id,
            role="career_insights",
            max_tokens=8192,
            temperature=0.2,
            timeout=60.0,
            system_prompt=_SYSTEM_PROMPT,
        ),
        "sonnet": ModelConfig(
            name=RECOVERY_SETTINGS.sonnet_model_id,
            role="career_insights",
            max_tokens=8192,
            temperature=0.2,
            timeout=90.0,
            system_prompt=_SYSTEM_PROMPT,
        ),
    }

    def __init__(
        self,
        region: Optional[str] = None,
        requests_per_minute: Optional[int] = None,
        retry_config: Optional[RetryConfig] = None,
    ):
        """Initialize adapter with boto3 client.

        Args:
            region: AWS region for Bedrock (AWS_REGION, else us-east-1)
            requests_per_minute: Rate limit for API calls (CAREERPATH_LLM_RPM, else 50)
            retry_config: Backoff for throttling errors
        """
        region = region or os.environ.get("AWS_REGION", "us-east-1")
        if requests_per_minute is None:
            requests_per_minute = int(os.environ.get("CAREERPATH_LLM_RPM", "50"))

        session = boto3.Session()
        # Comparison responses are long; the default 60s read timeout is too short
        boto_config = Config(read_timeout=120, connect_timeout=10, retries={"max_attempts": 1})
        self._client = session.client("bedrock-runtime", region_name=region, config=boto_config)
        self._rate_limiter = RateLimiter(requests_per_minute=requests_per_minute)
        self._retry_config = retry_config or RetryConfig(
            max_retries=RECOVERY_SETTINGS.provider_max_retries,
            base_delay=RECOVERY_SETTINGS.provider_base_delay,
            max_delay=RECOVERY_SETTINGS.provider_max_delay,
        )

    def get_model_config(self, model: str) -> ModelConfig:
        """Get configuration for a model."""
        if model not in self._MODEL_CONFIGS:
            raise ConfigurationError(
                f"Unknown model: {model}. Available: {list(self._MODEL_CONFIGS.keys())}"
            )
        return self._MODEL_CONFIGS[model]

    async def generate(
        self,
        prompt: str,
        model: str,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
        system: Optional[str] = None,
    ) -> str:
        """Generate text completion via Bedrock.

        The returned text is whatever the model produced; it is not
        checked for JSON validity here.
        """
        model_config = self.get_model_config(model)

        request_body = {
            "anthropic_version": "bedrock-2023-05-31",
            "max_tokens": max_tokens or model_config.max_tokens,
            "temperature": model_config.temperature if temperature is None else temperature,
            "messages": [{"role": "user", "content": prompt}],
        }

        if system or model_config.system_prompt:
            request_body["system"] = system or model_config.system_prompt

        try:
            return await retry_with_backoff(
                self._invoke, model_config, request_body, config=self._retry_config
            )
        except Exception as e:
            logger.error(f"Bedrock generate failed: {e}")
            raise GenerationFailure(f"Bedrock generate failed: {e}") from e

    async def _invoke(self, config: ModelConfig, request_body: dict) -> str:
        await self._rate_limiter.acquire()
        start_time = time.time()

        # Bedrock is sync, run in executor for async compatibility
        loop = asyncio.get_running_loop()
        response = await loop.run_in_executor(
            None,
            lambda: self._client.invoke_model(
                modelId=config.name,
                body=json.dumps(request_body)
            ),
        )

        response_body = json.loads(response["body"].read())
        content = "".join(
            block.get("text", "") for block in response_body.get("content", [])
            if block.get("type", "text") == "text"
        )

        usage = response_body.get("usage", {})
        logger.debug(
            f"Bedrock {config.name}: {usage.get('input_tokens', 0)} in / "
            f"{usage.get('output_tokens', 0)} out tokens, "
            f"stop_reason={response_body.get('stop_reason')}, "
            f"{time.time() - start_time:.1f}s"
        )
        if response_body.get("stop_reason") == "max_tokens":
            logger.warning("Bedrock response hit max_tokens; output is likely truncated")

        return content
