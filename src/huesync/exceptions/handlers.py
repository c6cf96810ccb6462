"""
Centralized error handling utilities.

Each layer translates errors to be more useful at the next level up:

```
┌─────────────────────────────────────────┐
│  CALLER LAYER (CLI / tool adapters) │
│  - Formats error.user_message       │
│  - Shows error.recovery_hint        │
└─────────────────────────────────────────┘
                  ↑
                  │ HueSyncError
                  │
┌─────────────────────────────────────────┐
│  CORE (cache, registry, variation)  │
│  - Catches transport exceptions     │
│  - Converts to HueSyncError         │
│  - Adds bridge/device context       │
└─────────────────────────────────────────┘
                  ↑
                  │ TimeoutError, OSError, etc.
                  │
┌─────────────────────────────────────────┐
│  TRANSPORT (HTTP client, fakes)     │
│  - Raises standard Python exceptions│
└─────────────────────────────────────────┘
```

### Handling Patterns

| Pattern | Code |
|---------|------|
| Convert a transport failure | `raise wrap_transport_error(e, bridge_id, "fetch lights") from e` |
| Convert a config validation failure | `raise wrap_pydantic_error(e, str(path)) from e` |
| Critical section with auto-logging | `with ErrorContext("sync bridge office"): ...` |
| Try many ops, collect errors | `collector = collect_errors("start bridges"); with collector.try_operation(id): ...` |
"""

import logging
from typing import Optional

from .base import HueSyncError
from .bridge import PartialFailureError, UnreachableError
from .config import ConfigFileInvalidError, ConfigValidationError

logger = logging.getLogger(__name__)


def wrap_transport_error(
    error: Exception, bridge_id: Optional[str], operation: str
) -> HueSyncError:
    """
    Convert low-level transport errors to huesync exceptions.

    Timeouts and connection failures become UnreachableError. Errors that
    are already HueSyncError instances pass through unchanged.

    Args:
        error: The original exception from the transport
        bridge_id: The bridge involved in the error
        operation: What was being attempted (e.g. "write light 3")

    Returns:
        A HueSyncError with appropriate type and message
    """
    if isinstance(error, HueSyncError):
        return error

    # TimeoutError covers socket.timeout and concurrent.futures.TimeoutError
    if isinstance(error, (TimeoutError, ConnectionError, OSError)):
        return UnreachableError(bridge_id, operation, original_error=str(error) or type(error).__name__)

    return HueSyncError(
        user_message=f"Bridge {bridge_id!r} failed to {operation}: {error}",
        technical_message=f"{type(error).__name__} during {operation} on {bridge_id}: {error}",
    )


def wrap_pydantic_error(error: Exception, file_path: str) -> HueSyncError:
    """
    Convert Pydantic validation errors to huesync configuration exceptions.

    Args:
        error: The Pydantic ValidationError
        file_path: Path to the file that failed validation

    Returns:
        A ConfigurationError with appropriate type and message
    """
    from pydantic import ValidationError

    error_msg = str(error)

    # Pydantic reports JSON syntax errors as json_invalid validation errors
    if "Invalid JSON" in error_msg or "json_invalid" in error_msg:
        if "Invalid JSON:" in error_msg:
            parse_error = error_msg.split("Invalid JSON:")[1].split("[type=")[0].strip()
        else:
            parse_error = error_msg

        return ConfigFileInvalidError(file_path, parse_error)

    if isinstance(error, ValidationError):
        errors = error.errors()
        if len(errors) == 1:
            first_error = errors[0]
            field = ".".join(str(loc) for loc in first_error.get("loc", ("unknown",))) or "root"
            return ConfigValidationError(
                field=field,
                value=first_error.get("input", None),
                error_msg=first_error.get("msg", "validation failed"),
                file_path=file_path,
            )
        if errors:
            error_lines = []
            for err in errors:
                field = ".".join(str(loc) for loc in err.get("loc", ("unknown",))) or "root"
                error_lines.append(f"  - {field}: {err.get('msg', 'validation failed')}")

            combined_msg = f"{len(errors)} validation errors:\n" + "\n".join(error_lines)
            return ConfigValidationError(
                field="multiple fields",
                value=None,
                error_msg=combined_msg,
                file_path=file_path,
            )

    return ConfigValidationError(
        field="unknown",
        value=None,
        error_msg=error_msg,
        file_path=file_path,
    )


def format_error_for_display(error: Exception) -> tuple[str, Optional[str]]:
    """
    Format an exception for user display.

    Args:
        error: The exception to format

    Returns:
        Tuple of (user_message, recovery_hint or None)
    """
    if isinstance(error, HueSyncError):
        return error.user_message, error.recovery_hint

    error_type = type(error).__name__
    return f"{error_type}: {error}", None


def collect_errors(operation: str) -> "ErrorCollector":
    """
    Create an error collector for best-effort batch operations.

    Example:
        ```python
        collector = collect_errors("close bridges")

        for bridge in bridges:
            with collector.try_operation(bridge.id):
                bridge.close()

        if collector.has_errors:
            raise collector.to_partial_failure()
        ```

    Args:
        operation: Description of the overall operation

    Returns:
        ErrorCollector instance
    """
    return ErrorCollector(operation)


class ErrorCollector:
    """
    Collects multiple errors during batch operations.

    Allows operations to continue even if some fail, then
    report all failures at once.
    """

    def __init__(self, operation: str):
        """
        Initialize error collector.

        Args:
            operation: Description of the overall operation
        """
        self.operation = operation
        self.errors: list[tuple[str, Exception]] = []
        self.success_count = 0

    @property
    def has_errors(self) -> bool:
        """Check if any errors were collected."""
        return len(self.errors) > 0

    @property
    def error_count(self) -> int:
        """Get the number of errors collected."""
        return len(self.errors)

    @property
    def total(self) -> int:
        """Number of sub-operations attempted so far."""
        return self.error_count + self.success_count

    def try_operation(self, sub_operation: str):
        """
        Context manager for a single operation within the batch.

        Args:
            sub_operation: Identifier of this specific operation

        Returns:
            Context manager that catches, logs and stores errors
        """
        return self._OperationContext(self, sub_operation)

    def failures(self) -> dict[str, Exception]:
        """Collected errors keyed by sub-operation."""
        return dict(self.errors)

    def to_partial_failure(self) -> PartialFailureError:
        """Build a PartialFailureError describing every collected error."""
        return PartialFailureError(self.operation, self.failures(), self.total)

    def get_summary(self) -> str:
        """
        Get a summary of collected errors.

        Returns:
            Multi-line summary string
        """
        if not self.has_errors:
            return f"All operations completed successfully ({self.success_count} total)"

        summary = f"Failed {self.error_count} of {self.total} operations:\n"
        for sub_op, error in self.errors:
            if isinstance(error, HueSyncError):
                summary += f"  - {sub_op}: {error.user_message}\n"
            else:
                summary += f"  - {sub_op}: {error}\n"

        return summary.rstrip()

    class _OperationContext:
        """Internal context manager for individual operations."""

        def __init__(self, collector: "ErrorCollector", sub_operation: str):
            self.collector = collector
            self.sub_operation = sub_operation

        def __enter__(self):
            return self

        def __exit__(self, exc_type, exc_val, exc_tb):
            if exc_type is None:
                self.collector.success_count += 1
                return False

            # Only ordinary errors are collected; KeyboardInterrupt and friends propagate
            if not issubclass(exc_type, Exception):
                return False

            if isinstance(exc_val, HueSyncError):
                logger.warning(
                    f"Failed to {self.collector.operation} ({self.sub_operation}): {exc_val.technical_message}"
                )
            else:
                logger.warning(
                    f"Failed to {self.collector.operation} ({self.sub_operation}): {exc_val}",
                    exc_info=True,
                )
            self.collector.errors.append((self.sub_operation, exc_val))
            return True


class ErrorContext:
    """
    Context manager for error handling with automatic logging.

    Example:
        ```python
        with ErrorContext("sync bridge office", re_raise=False) as ctx:
            cache.refresh_all()

        if ctx.error:
            notify_failure(ctx.error)
        ```
    """

    def __init__(
        self,
        operation: str,
        logger_instance: Optional[logging.Logger] = None,
        re_raise: bool = True,
    ):
        """
        Initialize error context.

        Args:
            operation: Description of the operation
            logger_instance: Logger to use (defaults to module logger)
            re_raise: Whether to re-raise exceptions
        """
        self.operation = operation
        self.logger = logger_instance or logger
        self.re_raise = re_raise
        self.error: Optional[Exception] = None

    def __enter__(self):
        self.logger.debug(f"Starting: {self.operation}")
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if exc_type is None:
            self.logger.debug(f"Completed: {self.operation}")
            return False

        if not issubclass(exc_type, Exception):
            return False

        self.error = exc_val

        if isinstance(exc_val, HueSyncError):
            self.logger.error(f"Failed to {self.operation}: {exc_val.technical_message}")
        else:
            self.logger.error(f"Failed to {self.operation}: {exc_val}", exc_info=True)

        return not self.re_raise
