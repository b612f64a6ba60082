"""Error types raised by the plan pipeline."""
from __future__ import annotations


class PlanPipelineError(Exception):
    """Base class for plan pipeline failures."""


class ConfigurationError(PlanPipelineError):
    """Deployment is missing a credential or model setting."""


class ClientInputError(PlanPipelineError):
    """Caller omitted a required field such as the wish or nickname."""


class ModelGatewayError(PlanPipelineError):
    """The chat-completion call failed or returned nothing usable."""

    def __init__(self, message: str, *, kind: str = "transport", status_code: int | None = None) -> None:
        super().__init__(message[:300])
        self.kind = kind
        self.status_code = status_code

    def __str__(self) -> str:
        base = super().__str__()
        if self.status_code is not None:
            return f"Model API error {self.status_code}: {base}"
        return base
