# ============================================================================
# BACKEND FACTORY
# ============================================================================
# STATUS: Infrastructure - Central factory for backend instances
# PURPOSE: Build job, storage and stack backends from BackendConfig
# LAST_REVIEWED: 19 OCT 2026
# EXPORTS: BackendFactory
# DEPENDENCIES: config, infrastructure.http_backend, infrastructure.memory_backend
# ============================================================================
"""
Backend Factory - Central Creation Point.

Single place where backend implementations are chosen. Both backends
implement all three interfaces, so one instance serves every role.

Example:
    backends = BackendFactory.create_backends(get_config().backend)
    job_repo = backends['job_repo']
"""

from typing import Any, Dict, Optional

from config import BackendConfig, BackendType, get_config
from exceptions import ConfigurationError
from util_logger import LoggerFactory, ComponentType
from .http_backend import HttpWorkflowBackend
from .memory_backend import InMemoryWorkflowBackend

logger = LoggerFactory.create_logger(ComponentType.FACTORY, "BackendFactory")


class BackendFactory:
    """
    Factory for backend instances selected by configuration.
    """

    @staticmethod
    def create_backends(config: Optional[BackendConfig] = None) -> Dict[str, Any]:
        """
        Create the job repository, asset storage and stack repository.

        Args:
            config: Backend settings (defaults to get_config().backend)

        Returns:
            Dictionary with job_repo, storage and stack_repo

        Raises:
            ConfigurationError: http backend without a base URL
        """
        config = config or get_config().backend
        logger.info(f"🏭 Creating {config.backend_type} backend")

        if config.backend_type == BackendType.HTTP:
            if not config.base_url:
                raise ConfigurationError(
                    "WORKFLOW_API_BASE_URL is required when WORKFLOW_BACKEND=http"
                )
            backend = HttpWorkflowBackend(config)
        elif config.backend_type == BackendType.MEMORY:
            backend = InMemoryWorkflowBackend()
        else:
            raise ConfigurationError(f"Unknown backend type '{config.backend_type}'")

        logger.info("✅ Backend created")
        return {
            'job_repo': backend,
            'storage': backend,
            'stack_repo': backend,
        }
