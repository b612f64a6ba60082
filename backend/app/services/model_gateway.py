"""Chat-completion gateway used by the plan orchestrator."""
from __future__ import annotations

import logging
from typing import Any, Optional

import openai

from app.core.config import PlannerConfig
from app.core.errors import ModelGatewayError

logger = logging.getLogger(__name__)


class ModelGateway:
    """Base interface for chat-completion providers."""

    def complete(self, system_prompt: str, user_prompt: str, temperature: float) -> str:
        """Return raw completion text or raise ModelGatewayError."""
        raise NotImplementedError


class OpenAICompatibleGateway(ModelGateway):
    """Calls any OpenAI-compatible `/chat/completions` endpoint (DashScope by default)."""

    def __init__(self, config: PlannerConfig, client: Optional[Any] = None) -> None:
        self.config = config
        self._client = client or openai.OpenAI(
            api_key=config.api_key,
            base_url=config.base_url,
            timeout=config.timeout_seconds,
            max_retries=config.max_retries,
        )

    def complete(self, system_prompt: str, user_prompt: str, temperature: float) -> str:
        try:
            completion = self._client.chat.completions.create(
                model=self.config.model,
                temperature=temperature,
                top_p=self.config.top_p,
                response_format={"type": "json_object"},
                messages=[
                    {"role": "system", "content": system_prompt},
                    {"role": "user", "content": user_prompt},
                ],
            )
        except openai.APIStatusError as exc:
            raise ModelGatewayError(_error_text(exc), kind="status", status_code=exc.status_code) from exc
        except openai.APIConnectionError as exc:
            raise ModelGatewayError(str(exc) or "connection failed", kind="transport") from exc
        except openai.OpenAIError as exc:
            raise ModelGatewayError(str(exc) or exc.__class__.__name__, kind="transport") from exc

        content = _completion_text(completion)
        if not content.strip():
            raise ModelGatewayError("model returned empty content", kind="empty_content")
        logger.debug("Model returned %d chars (model=%s)", len(content), self.config.model)
        return content


def _completion_text(completion: Any) -> str:
    choices = getattr(completion, "choices", None) or []
    if not choices:
        return ""
    choice = choices[0]
    message = getattr(choice, "message", None)
    content = getattr(message, "content", None) if message is not None else None
    if content is None:
        content = getattr(choice, "text", None)
    return str(content or "")


def _error_text(exc: "openai.APIStatusError") -> str:
    try:
        body = exc.response.text
    except Exception:  # pragma: no cover - response body is best-effort
        body = ""
    return body or str(exc)
