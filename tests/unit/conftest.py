"""
Unit test fixtures - shared state, collections and backends.
"""

import pytest

from core.collection import StackCollection
from core.models import WorkflowState
from infrastructure.memory_backend import InMemoryWorkflowBackend
from tests.factories.model_factories import make_job_record


@pytest.fixture
def state():
    """Unlocked workflow state on step 1."""
    return WorkflowState(job_id="job-test")


@pytest.fixture
def collection():
    return StackCollection()


@pytest.fixture
def backend():
    """In-memory backend with one empty job 'job-test'."""
    memory = InMemoryWorkflowBackend()
    memory.add_job(make_job_record(job_id="job-test"))
    return memory


@pytest.fixture
def controller(backend, app_config):
    """Loaded WorkflowController on the in-memory backend."""
    from core.workflow_controller import WorkflowController

    ctl = WorkflowController("job-test", backend, backend, backend, config=app_config)
    ctl.load()
    yield ctl
    ctl.close()
