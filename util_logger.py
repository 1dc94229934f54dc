"""
Unified Logger System.

JSON-only structured logging for the workflow engine.

Design Principles:
    - Strong typing with dataclasses (stdlib only)
    - Enum safety for categories
    - Component-specific loggers
    - Clean factory pattern

Exports:
    ComponentType: Enum for component types
    LogLevel: Enum for log levels
    LogContext: Logging context dataclass
    ContextLogger: Adapter carrying a LogContext over a component logger
    ComponentConfig: Per-component logger settings
    JSONFormatter: Structured log formatter
    LoggerFactory: Factory for creating loggers
    log_exceptions: Exception logging decorator
    timed_operation: Context manager logging start/end/duration of an operation

Dependencies:
    Standard library only (logging, enum, dataclasses, json)
"""

from enum import Enum
from typing import Optional, Dict, Any, Union
from datetime import datetime, timezone
from dataclasses import dataclass
from functools import wraps
from contextlib import contextmanager
import logging
import sys
import os
import json
import time
import traceback


# ============================================================================
# COMPONENT TYPES - Aligned with workflow layers
# ============================================================================

class ComponentType(Enum):
    """
    Component types aligned with the workflow engine layers.

    Each layer has specific logging needs and levels.
    """
    CONTROLLER = "controller"  # Workflow step orchestration
    SERVICE = "service"        # Ingestion, annotation, directives
    ENGINE = "engine"          # Pure computation (grouping)
    REPOSITORY = "repository"  # Backend collaborator access
    FACTORY = "factory"        # Object creation layer
    VALIDATOR = "validator"    # Lock gate validation


# ============================================================================
# LOG LEVELS - Standard Python levels with enum safety
# ============================================================================

class LogLevel(Enum):
    """
    Standard Python log levels as enum for type safety.
    """
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"

    def to_python_level(self) -> int:
        """Convert to Python logging level constant."""
        return getattr(logging, self.value)

    @classmethod
    def from_string(cls, level: str) -> 'LogLevel':
        """Create from string, case-insensitive."""
        return cls[level.upper()]


# ============================================================================
# LOG CONTEXT - Correlation and tracking
# ============================================================================

@dataclass
class LogContext:
    """
    Context for log correlation across one workflow session.
    """
    job_id: Optional[str] = None  # Job being edited
    step: Optional[int] = None  # Workflow step at logger creation
    stack_id: Optional[str] = None  # Stack being annotated
    correlation_id: Optional[str] = None  # Request correlation ID

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for JSON serialization."""
        return {
            k: v for k, v in {
                'job_id': self.job_id,
                'step': self.step,
                'stack_id': self.stack_id,
                'correlation_id': self.correlation_id,
            }.items() if v is not None
        }


# ============================================================================
# COMPONENT CONFIGURATION - Per-component settings
# ============================================================================

@dataclass
class ComponentConfig:
    """
    Configuration for component-specific logging.
    """
    component_type: ComponentType
    log_level: LogLevel = LogLevel.INFO
    enable_performance_logging: bool = False
    max_message_length: int = 1000


# ============================================================================
# JSON FORMATTER - Structured logging
# ============================================================================

class JSONFormatter(logging.Formatter):
    """
    JSON formatter for structured logging.
    One JSON object per line, parseable by any log shipper.
    """

    def format(self, record: logging.LogRecord) -> str:
        """
        Format log record as JSON.

        Args:
            record: Python LogRecord to format

        Returns:
            JSON string with structured log data
        """
        log_obj = {
            'timestamp': datetime.now(timezone.utc).isoformat(),
            'level': record.levelname,
            'message': record.getMessage(),
            'logger': record.name,
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno
        }

        if hasattr(record, 'custom_dimensions'):
            log_obj['customDimensions'] = record.custom_dimensions

        if record.exc_info:
            log_obj['exception'] = {
                'type': record.exc_info[0].__name__ if record.exc_info[0] else None,
                'message': str(record.exc_info[1]) if record.exc_info[1] else None,
                'traceback': self.formatException(record.exc_info)
            }

        return json.dumps(log_obj, default=str)


# ============================================================================
# CONTEXT LOGGER - Per-session context over a shared component logger
# ============================================================================

class ContextLogger(logging.LoggerAdapter):
    """
    Adds a LogContext to every record of a shared component logger.

    Each job gets its own adapter, never its own logging.Logger, so the
    logger registry does not grow with the number of jobs handled.
    """

    def __init__(self, logger: logging.Logger, context: LogContext):
        super().__init__(logger, context.to_dict())
        self.context = context

    def process(self, msg, kwargs):
        extra = dict(kwargs.get('extra') or {})
        custom_dims = dict(self.extra)
        custom_dims.update(extra.get('custom_dimensions') or {})
        extra['custom_dimensions'] = custom_dims
        kwargs['extra'] = extra
        return msg, kwargs


# ============================================================================
# LOGGER FACTORY - Creates component-specific loggers
# ============================================================================

class LoggerFactory:
    """
    Factory for creating component-specific loggers.

    Example:
        logger = LoggerFactory.create_logger(
            ComponentType.CONTROLLER,
            "WorkflowController"
        )
        logger.info("Advanced to step 2")
    """

    _default_level = LogLevel.DEBUG if os.getenv('DEBUG_LOGGING', '').lower() == 'true' else LogLevel.INFO

    DEFAULT_CONFIGS = {
        ComponentType.CONTROLLER: ComponentConfig(
            component_type=ComponentType.CONTROLLER,
            log_level=_default_level,
            enable_performance_logging=True
        ),
        ComponentType.SERVICE: ComponentConfig(
            component_type=ComponentType.SERVICE,
            log_level=_default_level,
            enable_performance_logging=True
        ),
        ComponentType.ENGINE: ComponentConfig(
            component_type=ComponentType.ENGINE,
            log_level=_default_level
        ),
        ComponentType.REPOSITORY: ComponentConfig(
            component_type=ComponentType.REPOSITORY,
            log_level=_default_level,
            enable_performance_logging=True
        ),
        ComponentType.FACTORY: ComponentConfig(
            component_type=ComponentType.FACTORY,
            log_level=_default_level
        ),
        ComponentType.VALIDATOR: ComponentConfig(
            component_type=ComponentType.VALIDATOR,
            log_level=_default_level
        ),
    }

    # Logger name -> component default level, for configure()
    _component_levels: Dict[str, LogLevel] = {}
    _level_override: Optional[LogLevel] = None

    @staticmethod
    def _apply_level(logger: logging.Logger, level: LogLevel) -> None:
        python_level = level.to_python_level()
        logger.setLevel(python_level)
        for handler in logger.handlers:
            if isinstance(handler.formatter, JSONFormatter):
                handler.setLevel(python_level)

    @classmethod
    def configure(cls, level: Optional[Union[str, LogLevel]] = None) -> None:
        """
        Apply an application-wide log level to every factory logger.

        Called by config.get_config() with the configured LOG_LEVEL
        (DEBUG when DEBUG_MODE or DEBUG_LOGGING is on). None restores the
        per-component defaults.
        """
        if isinstance(level, str):
            level = LogLevel.from_string(level)
        cls._level_override = level
        for logger_name, component_level in cls._component_levels.items():
            cls._apply_level(logging.getLogger(logger_name), level or component_level)

    @classmethod
    def create_logger(
        cls,
        component_type: ComponentType,
        name: str,
        context: Optional[LogContext] = None,
        config: Optional[ComponentConfig] = None
    ) -> Union[logging.Logger, 'ContextLogger']:
        """
        Create a logger for a specific component.

        Args:
            component_type: Type of component
            name: Component name (e.g., "IngestionStage")
            context: Optional log context for correlation
            config: Optional custom configuration

        Returns:
            Configured Python logger, wrapped in a ContextLogger when a
            context is given
        """
        custom_config = config is not None
        if config is None:
            config = cls.DEFAULT_CONFIGS.get(
                component_type,
                ComponentConfig(component_type=component_type)
            )

        # One logger per component; job context travels in `extra`
        logger_name = f"{component_type.value}.{name}"
        logger = logging.getLogger(logger_name)

        if isinstance(config.log_level, str):
            component_level = LogLevel.from_string(config.log_level)
        else:
            component_level = config.log_level
        cls._component_levels[logger_name] = component_level
        level = component_level if custom_config else (cls._level_override or component_level)

        # Prevent duplicate handlers when create_logger is called repeatedly
        has_json_handler = any(
            isinstance(h.formatter, JSONFormatter) for h in logger.handlers
        )
        if not has_json_handler:
            handler = logging.StreamHandler(sys.stdout)
            handler.setFormatter(JSONFormatter())
            logger.addHandler(handler)
        cls._apply_level(logger, level)

        logger.propagate = True

        if not hasattr(logger, '_context_wrapped'):
            original_log = logger._log

            def log_with_context(level, msg, args, exc_info=None, extra=None, stack_info=False, stacklevel=1):
                """Wrapper to inject component identity as custom dimensions."""
                if extra is None:
                    extra = {}

                custom_dims = {
                    'component_type': component_type.value,
                    'component_name': name
                }
                if 'custom_dimensions' in extra:
                    custom_dims.update(extra['custom_dimensions'])

                extra['custom_dimensions'] = custom_dims

                # +1 to account for this wrapper function
                original_log(level, msg, args, exc_info=exc_info, extra=extra,
                             stack_info=stack_info, stacklevel=stacklevel + 1)

            logger._log = log_with_context
            logger._context_wrapped = True

        if context:
            return ContextLogger(logger, context)
        return logger

    @classmethod
    def create_with_context(
        cls,
        component_type: ComponentType,
        name: str,
        job_id: Optional[str] = None,
        step: Optional[int] = None,
        stack_id: Optional[str] = None
    ) -> Union[logging.Logger, 'ContextLogger']:
        """
        Create logger with job/step context.

        Args:
            component_type: Type of component
            name: Component name
            job_id: Optional job ID
            step: Optional workflow step
            stack_id: Optional stack ID

        Returns:
            ContextLogger carrying the context, or the plain logger when
            no context field is set
        """
        context = LogContext(
            job_id=job_id,
            step=step,
            stack_id=stack_id
        ) if any([job_id, step, stack_id]) else None

        return cls.create_logger(
            component_type=component_type,
            name=name,
            context=context
        )


# ============================================================================
# EXCEPTION DECORATOR - Automatic exception logging with context
# ============================================================================

def log_exceptions(component_type: Optional[ComponentType] = None,
                   component_name: Optional[str] = None,
                   logger: Optional[logging.Logger] = None):
    """
    Decorator to automatically log exceptions with full context.

    Can be used in three ways:
    1. With existing logger: @log_exceptions(logger=my_logger)
    2. With component info: @log_exceptions(ComponentType.ENGINE, "StackGrouping")
    3. Simple: @log_exceptions() - uses function module and name

    The exception is always re-raised.
    """
    def decorator(func):
        @wraps(func)
        def wrapper(*args, **kwargs):
            if logger:
                log = logger
            elif component_type and component_name:
                log = LoggerFactory.create_logger(component_type, component_name)
            else:
                log = LoggerFactory.create_logger(
                    ComponentType.SERVICE,
                    func.__module__ or "unknown"
                )

            try:
                return func(*args, **kwargs)
            except Exception as e:
                log.error(
                    f"Exception in {func.__name__}",
                    exc_info=True,
                    extra={
                        'custom_dimensions': {
                            'function_name': func.__name__,
                            'function_module': func.__module__,
                            'exception_type': type(e).__name__,
                            'exception_message': str(e),
                            'function_args': str(args)[:500],
                            'function_kwargs': str(kwargs)[:500],
                            'traceback': traceback.format_exc()
                        }
                    }
                )
                raise
        return wrapper
    return decorator


# ============================================================================
# OPERATION TIMING - Start/end logging for backend round trips
# ============================================================================

@contextmanager
def timed_operation(logger: logging.Logger, operation_name: str, **extra_fields):
    """
    Log START/END of an operation with its duration.

    Usage:
        with timed_operation(logger, "upload_batch", file_count=12):
            storage.upload_batch(job_id, files)

    On exception the END line is logged at warning level with
    ``failed=True`` and the exception is re-raised.
    """
    start_time = time.time()
    logger.debug(
        f"START {operation_name}",
        extra={'custom_dimensions': {'operation': operation_name, **extra_fields}}
    )
    try:
        yield
    except Exception:
        duration_ms = round((time.time() - start_time) * 1000, 1)
        logger.warning(
            f"END {operation_name} (ERROR)",
            extra={'custom_dimensions': {
                'operation': operation_name, 'duration_ms': duration_ms, 'failed': True, **extra_fields
            }}
        )
        raise
    duration_ms = round((time.time() - start_time) * 1000, 1)
    logger.info(
        f"END {operation_name}",
        extra={'custom_dimensions': {'operation': operation_name, 'duration_ms': duration_ms, **extra_fields}}
    )
