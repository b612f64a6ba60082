"""Application configuration managed via environment variables."""
from __future__ import annotations

from dataclasses import dataclass, field
from functools import lru_cache

from pydantic_settings import BaseSettings, SettingsConfigDict

from app.core.errors import ConfigurationError


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", env_file_encoding="utf-8", extra="ignore")

    app_name: str = "MicroWin Plan Backend"
    debug: bool = False
    log_level: str = "INFO"
    opik_enabled: bool = False
    opik_api_key: str | None = None
    opik_project: str = "microwin"
    dashscope_base_url: str = "https://dashscope-intl.aliyuncs.com/compatible-mode/v1"
    dashscope_model: str = "qwen3-vl-flash"
    dashscope_api_key: str | None = None
    openai_api_key: str | None = None
    llm_timeout_seconds: float = 30.0
    llm_max_retries: int = 0
    plan_temperature: float = 0.9
    plan_strict_temperature: float = 0.6
    plan_top_p: float = 0.9
    plan_max_attempts: int = 2
    plan_min_keyword_hits: int = 2
    plan_anchor_min_words: int = 2
    plan_anchor_max_words: int = 6
    plan_action_max_minutes: int = 5
    plan_min_affirmation_chars: int = 0
    plan_min_action_chars: int = 0
    plan_max_item_words: int = 0
    plan_fallback_seed: int | None = None


@dataclass(frozen=True)
class PlanPolicy:
    """Thresholds that decide whether a generated plan is acceptable.

    Length and word limits are disabled when set to 0.
    """

    affirmation_count: int = 5
    action_count: int = 2
    min_keyword_hits: int = 2
    min_keyword_length: int = 3
    anchor_min_words: int = 2
    anchor_max_words: int = 6
    fallback_anchor_max_tokens: int = 4
    action_max_minutes: int = 5
    max_attempts: int = 2
    min_affirmation_chars: int = 0
    min_action_chars: int = 0
    max_item_words: int = 0

    @classmethod
    def from_settings(cls, source: Settings) -> "PlanPolicy":
        return cls(
            min_keyword_hits=source.plan_min_keyword_hits,
            anchor_min_words=source.plan_anchor_min_words,
            anchor_max_words=source.plan_anchor_max_words,
            action_max_minutes=source.plan_action_max_minutes,
            max_attempts=max(1, source.plan_max_attempts),
            min_affirmation_chars=source.plan_min_affirmation_chars,
            min_action_chars=source.plan_min_action_chars,
            max_item_words=source.plan_max_item_words,
        )


@dataclass(frozen=True)
class PlannerConfig:
    """Explicit configuration handed to the plan orchestrator."""

    api_key: str
    base_url: str = "https://dashscope-intl.aliyuncs.com/compatible-mode/v1"
    model: str = "qwen3-vl-flash"
    temperature: float = 0.9
    strict_temperature: float = 0.6
    top_p: float = 0.9
    timeout_seconds: float = 30.0
    max_retries: int = 0
    fallback_seed: int | None = None
    policy: PlanPolicy = field(default_factory=PlanPolicy)

    @classmethod
    def from_settings(cls, source: Settings | None = None) -> "PlannerConfig":
        """Build the planner config, failing loudly when credentials are missing."""
        source = source or get_settings()
        api_key = (source.dashscope_api_key or source.openai_api_key or "").strip()
        if not api_key:
            raise ConfigurationError("DASHSCOPE_API_KEY (or OPENAI_API_KEY) is not configured")
        model = (source.dashscope_model or "").strip()
        if not model:
            raise ConfigurationError("DASHSCOPE_MODEL must not be empty")
        return cls(
            api_key=api_key,
            base_url=source.dashscope_base_url.rstrip("/"),
            model=model,
            temperature=source.plan_temperature,
            strict_temperature=source.plan_strict_temperature,
            top_p=source.plan_top_p,
            timeout_seconds=source.llm_timeout_seconds,
            max_retries=source.llm_max_retries,
            fallback_seed=source.plan_fallback_seed,
            policy=PlanPolicy.from_settings(source),
        )


@lru_cache
def get_settings() -> Settings:
    """Return a cached Settings instance."""
    return Settings()


settings = get_settings()
