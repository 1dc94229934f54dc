"""
Config test fixtures - clean environment via monkeypatch.
"""

import pytest


@pytest.fixture
def clean_env(monkeypatch):
    """Remove all env vars that config modules might read, for isolation."""
    env_vars_to_clear = [
        "WORKFLOW_BACKEND", "WORKFLOW_API_BASE_URL", "WORKFLOW_API_TOKEN",
        "WORKFLOW_API_TIMEOUT_SECONDS", "SUPPORTED_EXTENSIONS",
        "BRACKET_WINDOW_SECONDS", "MAX_BATCH_FILES",
        "DEBUG_MODE", "DEBUG_LOGGING", "ENVIRONMENT", "LOG_LEVEL",
    ]
    for var in env_vars_to_clear:
        monkeypatch.delenv(var, raising=False)
    return monkeypatch
