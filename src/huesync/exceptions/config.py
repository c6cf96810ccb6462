"""Configuration-related exceptions.

This module defines exceptions for configuration errors:
- ConfigurationError: Base class for configuration errors
- ConfigFileInvalidError: Config file has invalid syntax
- ConfigValidationError: Config values fail validation
- NoUsableBridgesError: No configured bridge could be brought up
"""

from typing import Any

from .base import HueSyncError


class ConfigurationError(HueSyncError):
    """Configuration is invalid or cannot be loaded."""
    pass


class ConfigFileInvalidError(ConfigurationError):
    """Configuration file has invalid JSON syntax."""

    def __init__(self, file_path: str, parse_error: str):
        """
        Initialize config file invalid error.

        Args:
            file_path: Path to the invalid config file
            parse_error: The parsing error message
        """
        user_msg = "Configuration file has invalid syntax"
        recovery = "Check for common JSON errors:\n"
        recovery += "  - Trailing commas (remove commas after last item)\n"
        recovery += "  - Missing quotes around strings\n"
        recovery += "  - Unclosed braces or brackets\n"
        recovery += f"  - Edit: {file_path}"

        if "trailing comma" in parse_error.lower():
            user_msg = "Configuration file has a trailing comma"
            recovery = (
                f"Remove the trailing comma from {file_path}\n"
                "JSON doesn't allow commas after the last item in an object or array"
            )
        elif "expecting" in parse_error.lower():
            user_msg = "Configuration file has a syntax error"

        super().__init__(
            user_message=user_msg,
            technical_message=f"JSON parse error in {file_path}: {parse_error}",
            recoverable=True,
            recovery_hint=recovery
        )
        self.file_path = file_path
        self.parse_error = parse_error


class ConfigValidationError(ConfigurationError):
    """Configuration values fail validation."""

    def __init__(self, field: str, value: Any, error_msg: str, file_path: str | None = None):
        """
        Initialize config validation error.

        Args:
            field: The configuration field that failed validation
            value: The invalid value
            error_msg: Why the value is invalid
            file_path: Path to the config file (optional)
        """
        user_msg = f"Invalid configuration value for '{field}': {error_msg}"

        recovery = f"Update the '{field}' value in your configuration"
        if file_path:
            recovery += f"\nConfig file: {file_path}"

        if "bridges" in field.lower():
            recovery += "\nEach bridge needs a unique 'id' and an 'address'"
        elif "stale_after" in field.lower() or "interval" in field.lower():
            recovery += "\nIntervals are given in seconds and must be positive"

        super().__init__(
            user_message=user_msg,
            technical_message=f"Config validation failed for {field}={value}: {error_msg}",
            recoverable=True,
            recovery_hint=recovery
        )
        self.field = field
        self.value = value
        self.file_path = file_path


class NoUsableBridgesError(ConfigurationError):
    """Registry initialization finished with zero working bridges."""

    def __init__(self, attempted: int, failures: dict[str, Exception] | None = None):
        """
        Initialize no-usable-bridges error.

        Args:
            attempted: Number of enabled bridges that were tried
            failures: Per-bridge errors keyed by bridge id
        """
        self.attempted = attempted
        self.failures = dict(failures or {})

        if attempted == 0:
            user_msg = "No enabled bridges are configured."
            recovery = "Add a bridge entry with \"enabled\": true to your configuration."
        else:
            user_msg = f"None of the {attempted} configured bridge(s) could be initialized."
            recovery = "Check that the bridges are powered on, reachable, and that their credentials are valid."

        details = "; ".join(f"{bridge_id}: {err}" for bridge_id, err in self.failures.items())
        super().__init__(
            user_message=user_msg,
            technical_message=f"{user_msg} {details}".strip(),
            recoverable=True,
            recovery_hint=recovery
        )
