"""Bridge, cache and device errors.

This module defines exceptions raised while talking to bridges:
- NotFoundError: Unknown bridge, device, group or scene id
- NoBridgeAvailableError: No connected bridge to fall back to
- UnreachableError: Transport timeout or connection failure
- StaleDataError: Refetch failed and stale data was not accepted
- PartialFailureError: Some, but not necessarily all, sub-operations failed
"""

from typing import Optional

from .base import HueSyncError


class NotFoundError(HueSyncError):
    """A referenced id does not exist."""
    pass


class BridgeNotFoundError(NotFoundError):
    """Requested bridge is not registered."""

    def __init__(self, bridge_id: str):
        """
        Initialize bridge-not-found error.

        Args:
            bridge_id: The bridge id that wasn't found
        """
        super().__init__(
            user_message=f"Bridge {bridge_id!r} not found.",
            recoverable=True,
            recovery_hint="List the configured bridges to see valid ids.",
        )
        self.bridge_id = bridge_id


class EntityNotFoundError(NotFoundError):
    """Requested light, group or scene is not in the bridge cache."""

    def __init__(self, kind: str, entity_id: str, bridge_id: Optional[str] = None):
        """
        Initialize entity-not-found error.

        Args:
            kind: Entity kind ("lights", "groups", "scenes")
            entity_id: The id that wasn't found
            bridge_id: Bridge that was searched (if known)
        """
        where = f" on bridge {bridge_id!r}" if bridge_id else ""
        super().__init__(
            user_message=f"No {kind.rstrip('s')} with id {entity_id!r}{where}.",
            recoverable=True,
            recovery_hint=f"List the available {kind} to see valid ids.",
        )
        self.kind = kind
        self.entity_id = entity_id
        self.bridge_id = bridge_id


class NoBridgeAvailableError(HueSyncError):
    """No connected bridge is available as a default."""

    def __init__(self):
        """Initialize no-bridge-available error."""
        super().__init__(
            user_message="No connected bridges available.",
            recoverable=True,
            recovery_hint="Check that at least one bridge is powered on and reachable.",
        )


class UnreachableError(HueSyncError):
    """A bridge did not answer in time or refused the connection."""

    def __init__(
        self,
        bridge_id: Optional[str],
        operation: str,
        original_error: Optional[str] = None,
    ):
        """
        Initialize unreachable error.

        Args:
            bridge_id: Bridge that could not be reached
            operation: What was being attempted (e.g. "fetch lights")
            original_error: The underlying transport error message
        """
        target = f"bridge {bridge_id!r}" if bridge_id else "bridge"
        user_msg = f"Could not {operation}: {target} is unreachable."
        tech_msg = user_msg
        if original_error:
            tech_msg += f"\nOriginal error: {original_error}"

        super().__init__(
            user_message=user_msg,
            technical_message=tech_msg,
            recoverable=True,
            recovery_hint="Check the bridge's network connection and try again.",
        )
        self.bridge_id = bridge_id
        self.operation = operation
        self.original_error = original_error


class StaleDataError(HueSyncError):
    """Cached data is stale and refreshing it failed."""

    def __init__(self, bridge_id: str, kind: str, age_seconds: Optional[float] = None):
        """
        Initialize stale data error.

        Args:
            bridge_id: Bridge whose cache is stale
            kind: Entity kind that could not be refreshed
            age_seconds: Age of the cached data (None if never fetched)
        """
        if age_seconds is None:
            age = "never fetched"
        else:
            age = f"{age_seconds:.0f}s old"
        super().__init__(
            user_message=f"Cached {kind} for bridge {bridge_id!r} are stale ({age}) and could not be refreshed.",
            recoverable=True,
            recovery_hint="Retry once the bridge is reachable, or accept stale data.",
        )
        self.bridge_id = bridge_id
        self.kind = kind
        self.age_seconds = age_seconds


class PartialFailureError(HueSyncError):
    """An aggregate operation had one or more failing sub-operations."""

    def __init__(self, operation: str, failures: dict[str, Exception], total: int):
        """
        Initialize partial failure error.

        Args:
            operation: Description of the aggregate operation
            failures: Errors keyed by the failing bridge/device id
            total: Total number of sub-operations attempted
        """
        self.operation = operation
        self.failures = dict(failures)
        self.total = total

        lines = [f"  - {key}: {err}" for key, err in self.failures.items()]
        user_msg = f"Failed to {operation} for {len(self.failures)} of {total}:\n" + "\n".join(lines)
        super().__init__(user_message=user_msg, recoverable=True)
