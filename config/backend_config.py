"""
Workflow Backend Configuration.

Provides configuration for:
    - Backend selection (HTTP API or in-memory)
    - API base URL and bearer token
    - Transport timeout

Exports:
    BackendConfig: Pydantic backend configuration model
    BackendType: Allowed backend selectors
"""

import os
from typing import Optional
from pydantic import BaseModel, Field, field_validator

from .defaults import BackendDefaults


class BackendType:
    """Backend selector constants."""
    HTTP = "http"
    MEMORY = "memory"

    ALL = (HTTP, MEMORY)


class BackendConfig(BaseModel):
    """
    Workflow backend configuration.

    Timeouts belong to the transport layer; timeout_seconds is passed to
    every request the HTTP backend makes.
    """

    backend_type: str = Field(
        default=BackendDefaults.BACKEND_TYPE,
        description="Backend implementation: 'http' for the job API, 'memory' for local runs and tests"
    )

    base_url: Optional[str] = Field(
        default=BackendDefaults.BASE_URL,
        description="Base URL of the job API (e.g. https://orders.example.com)"
    )

    api_token: Optional[str] = Field(
        default=None,
        repr=False,
        description="Bearer token sent with every API request"
    )

    timeout_seconds: int = Field(
        default=BackendDefaults.TIMEOUT_SECONDS,
        ge=1,
        le=600,
        description="Per-request timeout in seconds"
    )

    @field_validator("backend_type")
    @classmethod
    def validate_backend_type(cls, v: str) -> str:
        v = v.strip().lower()
        if v not in BackendType.ALL:
            raise ValueError(f"backend_type must be one of {BackendType.ALL}, got '{v}'")
        return v

    @field_validator("base_url")
    @classmethod
    def strip_trailing_slash(cls, v: Optional[str]) -> Optional[str]:
        if v:
            return v.rstrip("/")
        return v

    def debug_dict(self) -> dict:
        """Debug output with masked token."""
        return {
            "backend_type": self.backend_type,
            "base_url": self.base_url,
            "api_token": "***MASKED***" if self.api_token else None,
            "timeout_seconds": self.timeout_seconds,
        }

    @classmethod
    def from_environment(cls):
        """Load from environment variables."""
        return cls(
            backend_type=os.environ.get("WORKFLOW_BACKEND", BackendDefaults.BACKEND_TYPE),
            base_url=os.environ.get("WORKFLOW_API_BASE_URL") or BackendDefaults.BASE_URL,
            api_token=os.environ.get("WORKFLOW_API_TOKEN"),
            timeout_seconds=int(os.environ.get(
                "WORKFLOW_API_TIMEOUT_SECONDS", str(BackendDefaults.TIMEOUT_SECONDS)
            )),
        )
