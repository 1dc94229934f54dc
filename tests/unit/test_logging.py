"""
Logger factory tests - context injection, JSON output, timing helper.
"""

import json
import logging

import pytest

from util_logger import (
    ComponentType,
    ContextLogger,
    JSONFormatter,
    LogContext,
    LogLevel,
    LoggerFactory,
    log_exceptions,
    timed_operation,
)


class TestLoggerFactory:

    def test_context_injected(self, caplog):
        logger = LoggerFactory.create_with_context(ComponentType.SERVICE, "Sample", job_id="job-ctx")
        with caplog.at_level(logging.INFO):
            logger.info("hello", extra={'custom_dimensions': {'extra_field': 1}})
        record = caplog.records[-1]
        assert record.custom_dimensions['job_id'] == "job-ctx"
        assert record.custom_dimensions['component_name'] == "Sample"
        assert record.custom_dimensions['extra_field'] == 1

    def test_jobs_share_one_component_logger(self):
        before = set(logging.root.manager.loggerDict)
        a = LoggerFactory.create_with_context(ComponentType.SERVICE, "Shared", job_id="job-a")
        b = LoggerFactory.create_with_context(ComponentType.SERVICE, "Shared", job_id="job-b")
        assert isinstance(a, ContextLogger)
        assert a.logger is b.logger
        assert a.context.job_id == "job-a"
        assert b.context.job_id == "job-b"
        created = set(logging.root.manager.loggerDict) - before
        assert not any("job-" in logger_name for logger_name in created)

    def test_contexts_do_not_leak_between_jobs(self, caplog):
        a = LoggerFactory.create_with_context(ComponentType.SERVICE, "Leak", job_id="job-a")
        b = LoggerFactory.create_with_context(ComponentType.SERVICE, "Leak", job_id="job-b")
        with caplog.at_level(logging.INFO):
            a.info("from a")
            b.info("from b")
        by_message = {r.getMessage(): r.custom_dimensions['job_id'] for r in caplog.records}
        assert by_message["from a"] == "job-a"
        assert by_message["from b"] == "job-b"

    def test_no_duplicate_handlers(self):
        first = LoggerFactory.create_logger(ComponentType.ENGINE, "Repeat")
        second = LoggerFactory.create_logger(ComponentType.ENGINE, "Repeat")
        assert first is second
        assert sum(isinstance(h.formatter, JSONFormatter) for h in second.handlers) == 1

    def test_context_to_dict_drops_none(self):
        assert LogContext(job_id="j").to_dict() == {'job_id': "j"}


class TestJSONFormatter:

    def test_one_json_object(self):
        record = logging.LogRecord("x", logging.WARNING, __file__, 1, "msg %s", ("arg",), None)
        record.custom_dimensions = {'k': 'v'}
        parsed = json.loads(JSONFormatter().format(record))
        assert parsed['message'] == "msg arg"
        assert parsed['level'] == "WARNING"
        assert parsed['customDimensions'] == {'k': 'v'}


class TestHelpers:

    def test_timed_operation_logs_duration(self, caplog):
        logger = LoggerFactory.create_logger(ComponentType.REPOSITORY, "Timed")
        with caplog.at_level(logging.INFO):
            with timed_operation(logger, "list_stacks", job="j"):
                pass
        end = [r for r in caplog.records if r.getMessage() == "END list_stacks"][-1]
        assert 'duration_ms' in end.custom_dimensions
        assert end.custom_dimensions['job'] == "j"

    def test_timed_operation_reraises(self, caplog):
        logger = LoggerFactory.create_logger(ComponentType.REPOSITORY, "Timed")
        with pytest.raises(RuntimeError):
            with timed_operation(logger, "commit_job"):
                raise RuntimeError("boom")
        assert any(r.getMessage() == "END commit_job (ERROR)" for r in caplog.records)

    def test_log_exceptions_reraises(self, caplog):
        @log_exceptions(ComponentType.CONTROLLER, "Decorated")
        def explode():
            raise ValueError("bad")

        with pytest.raises(ValueError):
            explode()
        assert any("Exception in explode" in r.getMessage() for r in caplog.records)


class TestConfigure:

    def test_override_applies_to_existing_loggers(self):
        logger = LoggerFactory.create_logger(ComponentType.ENGINE, "Levels")
        default = LoggerFactory.DEFAULT_CONFIGS[ComponentType.ENGINE].log_level.to_python_level()
        try:
            LoggerFactory.configure("WARNING")
            assert logger.level == logging.WARNING
        finally:
            LoggerFactory.configure(None)
        assert logger.level == default

    def test_override_applies_to_new_loggers(self):
        try:
            LoggerFactory.configure(LogLevel.ERROR)
            logger = LoggerFactory.create_logger(ComponentType.FACTORY, "LateLevels")
            assert logger.level == logging.ERROR
        finally:
            LoggerFactory.configure(None)
