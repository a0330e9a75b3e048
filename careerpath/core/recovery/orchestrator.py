"""
RetryOrchestrator - Generate, recover and retry until the object is complete.

AI text generation is non-deterministic: the same prompt may come back
truncated once and complete the next time. The orchestrator trades latency
for completeness, within a bounded number of attempts and an overall
wall-clock budget, and otherwise returns the best partial object it saw.

States:
    IDLE -> REQUESTING -> PARSING -> VALIDATING -> ACCEPTED
                                                -> RETRY_PENDING -> REQUESTING
                                                -> EXHAUSTED
"""
import asyncio
import logging
import time
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional

from careerpath.config.recovery_limits import RAW_PREVIEW_CHARS
from careerpath.core.exceptions import CoreError, GenerationFailure
from careerpath.core.models.recovery import (
    CompletenessReport,
    OrchestratorState,
    RecoveryMeta,
    RecoveryResult,
)
from careerpath.core.models.schema import TargetSchema
from careerpath.core.ports.llm import LLMPort
from careerpath.core.recovery.completeness import check_completeness
from careerpath.core.recovery.llm_config import RECOVERY_SETTINGS, RecoverySettings
from careerpath.core.recovery.pipeline import recover_with_report
from careerpath.core.recovery.response_parser import ResponseParser
from careerpath.core.recovery.schema_validator import SchemaValidator

logger = logging.getLogger(__name__)


@dataclass
class _Attempt:
    data: Dict[str, Any]
    report: CompletenessReport
    strategy: Optional[str]


class _BudgetExceeded(Exception):
    """Overall wall-clock budget ran out."""


class RetryOrchestrator:
    """
    Drive the generate -> parse -> validate cycle for one request.

    Usage:
        orchestrator = RetryOrchestrator(llm=bedrock_adapter)
        result = await orchestrator.generate_and_recover(
            prompt, comparison_schema(...), data_type="comparison"
        )
        if not result.meta.is_complete:
            ...  # render partial data with a notice
    """

    def __init__(
        self,
        llm: LLMPort,
        settings: Optional[RecoverySettings] = None,
        parser: Optional[ResponseParser] = None,
        validator: Optional[SchemaValidator] = None,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
        source: str = "bedrock",
    ):
        """
        Initialize orchestrator.

        Args:
            llm: Generation client
            settings: Retry bounds (RECOVERY_SETTINGS by default)
            parser: Layered parser
            validator: Schema validator
            sleep: Awaitable sleep used for the backoff, injectable for tests
            source: Label stored in result metadata
        """
        if llm is None:
            raise ValueError("LLM port required")
        self._llm = llm
        self._settings = settings or RECOVERY_SETTINGS
        self._parser = parser or ResponseParser()
        self._validator = validator or SchemaValidator()
        self._sleep = sleep
        self._source = source

    async def generate_and_recover(
        self,
        prompt: str,
        target_schema: TargetSchema,
        data_type: str = "general",
        max_attempts: Optional[int] = None,
        model: Optional[str] = None,
        max_tokens: Optional[int] = None,
        temperature: Optional[float] = None,
        system: Optional[str] = None,
    ) -> RecoveryResult:
        """
        Generate content and recover a complete object, retrying if needed.

        Args:
            prompt: Prompt sent to the model on every attempt
            target_schema: Expected shape, defaults and content rules
            data_type: Tag selecting domain patches in the parser
            max_attempts: Generation attempts before giving up on completeness
            model: Model key (settings default when omitted)
            max_tokens: Override model max_tokens
            temperature: Override model temperature
            system: Override model system prompt

        Returns:
            RecoveryResult; meta.is_complete is False when retries or the
            overall budget ran out

        Raises:
            GenerationFailure: The generation call failed or timed out
            JsonRecoveryFailure: A response could not be parsed at all
        """
        if max_attempts is None:
            max_attempts = self._settings.max_attempts
        if max_attempts < 1:
            raise ValueError("max_attempts must be at least 1")
        model = model or self._settings.default_model

        history: List[OrchestratorState] = [OrchestratorState.IDLE]
        attempts: List[_Attempt] = []
        deadline = time.monotonic() + self._settings.overall_timeout

        def transition(state: OrchestratorState) -> None:
            history.append(state)
            logger.debug(f"{target_schema.name}: -> {state.value}")

        try:
            while True:
                transition(OrchestratorState.REQUESTING)
                logger.info(f"Attempt {len(attempts) + 1} of {max_attempts} "
                            f"to get complete {target_schema.name} data")
                text = await self._request(prompt, model, max_tokens, temperature, system, deadline)

                transition(OrchestratorState.PARSING)
                data, validation, parsed = recover_with_report(
                    text, target_schema, data_type,
                    parser=self._parser, validator=self._validator,
                )

                transition(OrchestratorState.VALIDATING)
                report = check_completeness(validation, target_schema)
                attempts.append(_Attempt(data=data, report=report, strategy=parsed.strategy))

                if report.is_complete:
                    transition(OrchestratorState.ACCEPTED)
                    logger.info(f"Received complete {target_schema.name} data "
                                f"on attempt {len(attempts)}")
                    return self._result(attempts[-1], attempts, history, is_complete=True)

                logger.info(f"Incomplete {target_schema.name} data: "
                            f"{', '.join(report.missing_fields)}")
                if len(attempts) >= max_attempts:
                    break

                transition(OrchestratorState.RETRY_PENDING)
                await self._backoff(deadline)

        except CoreError as e:
            # The failing call counts too
            e.generation_calls = len(attempts) + 1
            raise

        except _BudgetExceeded:
            logger.warning(f"{target_schema.name}: overall budget of "
                           f"{self._settings.overall_timeout:.0f}s exceeded "
                           f"after {len(attempts)} completed attempt(s)")

        transition(OrchestratorState.EXHAUSTED)
        return self._exhausted(target_schema, attempts, history)

    async def _request(
        self,
        prompt: str,
        model: str,
        max_tokens: Optional[int],
        temperature: Optional[float],
        system: Optional[str],
        deadline: float,
    ) -> str:
        remaining = deadline - time.monotonic()
        if remaining <= 0:
            raise _BudgetExceeded()

        per_call = self._call_timeout(model)
        budget = min(remaining, per_call) if per_call else remaining
        started = time.monotonic()

        try:
            text = await asyncio.wait_for(
                self._llm.generate(
                    prompt,
                    model=model,
                    max_tokens=max_tokens,
                    temperature=temperature,
                    system=system,
                ),
                timeout=budget,
            )
        except asyncio.TimeoutError as e:
            if not per_call or budget < per_call:
                raise _BudgetExceeded() from e
            raise GenerationFailure(f"Generation timed out after {budget:.0f}s") from e
        except CoreError:
            raise
        except Exception as e:
            logger.error(f"Generation call failed: {e}")
            raise GenerationFailure(f"Generation call failed: {e}") from e

        text = text or ""
        preview = text[:RAW_PREVIEW_CHARS] + ("..." if len(text) > RAW_PREVIEW_CHARS else "")
        logger.debug(f"Raw response ({len(text)} chars in {time.monotonic() - started:.1f}s): {preview}")
        return text

    def _call_timeout(self, model: str) -> Optional[float]:
        try:
            timeout = self._llm.get_model_config(model).timeout
        except CoreError as e:
            logger.debug(f"No model config for {model}, using overall budget only: {e}")
            return None
        return timeout if isinstance(timeout, (int, float)) and timeout > 0 else None

    async def _backoff(self, deadline: float) -> None:
        delay = self._settings.retry_delay
        if time.monotonic() + delay >= deadline:
            raise _BudgetExceeded()
        await self._sleep(delay)

    def _exhausted(
        self,
        schema: TargetSchema,
        attempts: List[_Attempt],
        history: List[OrchestratorState],
    ) -> RecoveryResult:
        if not attempts:
            logger.warning(f"Returning default {schema.name} data, no attempt completed")
            # Validating an empty object yields the defaults and reports the
            # same required fields and rule failures a real attempt would
            validation = self._validator.validate({}, schema)
            defaults = _Attempt(
                data=validation.data,
                report=check_completeness(validation, schema),
                strategy=None,
            )
            return self._result(defaults, attempts, history, is_complete=False)

        # Fewest unmet requirements wins; later attempts win ties
        best = min(reversed(attempts), key=lambda a: len(a.report.missing_fields))
        logger.warning(f"Returning partial {schema.name} data after {len(attempts)} attempt(s)")
        return self._result(best, attempts, history, is_complete=False)

    def _result(
        self,
        chosen: _Attempt,
        attempts: List[_Attempt],
        history: List[OrchestratorState],
        is_complete: bool,
    ) -> RecoveryResult:
        meta = RecoveryMeta(
            attempts=len(attempts),
            is_complete=is_complete,
            state=history[-1],
            missing_fields=list(chosen.report.missing_fields),
            strategies=[a.strategy for a in attempts],
            history=tuple(history),
            source=self._source,
        )
        return RecoveryResult(data=chosen.data, meta=meta)
