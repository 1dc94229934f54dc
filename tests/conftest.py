"""
Root conftest.py - sys.path, env vars, shared fixtures.

Sets up the test environment so all production code can be imported
without a reachable job API.
"""

import os
import sys

import pytest

# Add project root to sys.path so 'core', 'config', 'infrastructure', etc. are importable
PROJECT_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if PROJECT_ROOT not in sys.path:
    sys.path.insert(0, PROJECT_ROOT)


@pytest.fixture(autouse=True, scope="session")
def set_minimal_env_vars():
    """
    Set minimal environment variables so get_config() never selects the
    HTTP backend by accident.
    """
    defaults = {
        "WORKFLOW_BACKEND": "memory",
        "ENVIRONMENT": "dev",
    }
    for key, value in defaults.items():
        os.environ.setdefault(key, value)


@pytest.fixture(autouse=True)
def fresh_config():
    """Drop the cached config singleton around every test."""
    from config import reset_config
    reset_config()
    yield
    reset_config()


@pytest.fixture
def ingestion_config():
    """IngestionConfig with the built-in defaults."""
    from config import IngestionConfig
    return IngestionConfig()


@pytest.fixture
def app_config():
    """AppConfig on the in-memory backend."""
    from config import AppConfig, BackendConfig, IngestionConfig
    return AppConfig(backend=BackendConfig(backend_type="memory"), ingestion=IngestionConfig())
