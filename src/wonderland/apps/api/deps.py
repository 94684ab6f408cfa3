from __future__ import annotations

from functools import lru_cache

from wonderland.core.calendar.materializer import TaskMaterializer
from wonderland.core.calendar.store import InternalTaskStore
from wonderland.core.config import Settings, load_settings
from wonderland.core.extraction.engine import TaskExtractionEngine
from wonderland.core.history.store import HistoryStore
from wonderland.core.models.llm_openai_compat import OpenAICompatClient
from wonderland.core.session.pipeline import VoiceTaskPipeline
from wonderland.core.transcription.client import TranscriptionClient


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return load_settings()


@lru_cache(maxsize=1)
def get_transcription_client() -> TranscriptionClient:
    settings = get_settings()
    return TranscriptionClient(
        api_key=settings.openai_api_key,
        base_url=settings.openai_base_url,
        model=settings.transcribe_model,
        default_language=settings.default_language,
    )


@lru_cache(maxsize=1)
def get_extraction_engine() -> TaskExtractionEngine:
    settings = get_settings()
    llm = OpenAICompatClient(
        url=f"{settings.openai_base_url}/chat/completions",
        model=settings.llm_model,
        api_key=settings.openai_api_key,
        timeout_s=settings.llm_timeout_s,
    )
    return TaskExtractionEngine(llm, temperature=settings.llm_temperature, max_tokens=settings.llm_max_tokens)


@lru_cache(maxsize=1)
def get_task_store() -> InternalTaskStore:
    return InternalTaskStore(state_dir=get_settings().state_dir)


@lru_cache(maxsize=1)
def get_history_store() -> HistoryStore:
    settings = get_settings()
    return HistoryStore(state_dir=settings.state_dir, max_records=settings.history_max)


@lru_cache(maxsize=1)
def get_materializer() -> TaskMaterializer:
    return TaskMaterializer(store=get_task_store(), timezone=get_settings().timezone)


@lru_cache(maxsize=1)
def get_pipeline() -> VoiceTaskPipeline:
    return VoiceTaskPipeline(
        transcriber=get_transcription_client(),
        engine=get_extraction_engine(),
        materializer=get_materializer(),
        history_store=get_history_store(),
    )
