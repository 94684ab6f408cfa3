"""Task extraction from transcripts through a language model."""

from __future__ import annotations

import logging
import time
from typing import Protocol

from wonderland.core.errors import ExtractionFailed, TaskParseError
from wonderland.core.http import WonderlandHTTPNetworkError, WonderlandHTTPStatusError
from wonderland.core.transcription.schemas import Transcript

from .parsers import PARSER_STRATEGIES, to_task_list
from .prompts import TASK_EXTRACTION_SYSTEM_PROMPT, build_user_prompt
from .schemas import ExtractionResult, fallback_task

logger = logging.getLogger("wonderland.extraction")

FALLBACK_TIER = "fallback"


class ChatModel(Protocol):
    def chat_completion(
        self,
        system: str,
        user: str,
        temperature: float,
        max_tokens: int,
        response_format: dict | None = None,
    ) -> str: ...


def recover_tasks(raw: str, transcript: str) -> ExtractionResult:
    """Run the parser ladder over ``raw``; the last tier always succeeds."""
    text = raw.strip()
    errors: dict[str, str] = {}
    for tier, strategy in PARSER_STRATEGIES:
        try:
            tasks = to_task_list(strategy(text))
        except TaskParseError as exc:
            errors[tier] = str(exc)
            continue
        logger.info("extraction_tier", extra={"extra_fields": {"tier": tier, "tasks": len(tasks)}})
        return ExtractionResult(tasks=tasks, degraded=False, tier=tier, raw=raw)

    logger.warning(
        "extraction_degraded",
        extra={"extra_fields": {"errors": errors, "raw_len": len(raw)}},
    )
    return ExtractionResult(tasks=[fallback_task(transcript)], degraded=True, tier=FALLBACK_TIER, raw=raw)


class TaskExtractionEngine:
    def __init__(self, llm: ChatModel, temperature: float = 0.1, max_tokens: int = 1000) -> None:
        self.llm = llm
        self.temperature = temperature
        self.max_tokens = max_tokens

    def extract(self, transcript: Transcript | str) -> ExtractionResult:
        text = transcript.text if isinstance(transcript, Transcript) else transcript
        if not text or not text.strip():
            raise ValueError("transcription is required")

        start = time.perf_counter()
        try:
            raw = self.llm.chat_completion(
                system=TASK_EXTRACTION_SYSTEM_PROMPT,
                user=build_user_prompt(text),
                temperature=self.temperature,
                max_tokens=self.max_tokens,
            )
        except WonderlandHTTPStatusError as exc:
            raise ExtractionFailed("vendor_error", status_code=exc.status_code, details=exc.payload) from exc
        except WonderlandHTTPNetworkError as exc:
            raise ExtractionFailed("network_error", details=str(exc)) from exc
        except ValueError as exc:
            raise ExtractionFailed("invalid_response", details=str(exc)) from exc

        logger.info(
            "extraction_completion",
            extra={"extra_fields": {"chars": len(raw), "duration_ms": int((time.perf_counter() - start) * 1000)}},
        )
        return recover_tasks(raw, text)
