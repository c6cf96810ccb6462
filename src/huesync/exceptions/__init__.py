"""
Custom exception hierarchy for huesync.

## Exception Hierarchy

```
HueSyncError (base)
├── NotFoundError
│   ├── BridgeNotFoundError
│   └── EntityNotFoundError
├── NoBridgeAvailableError
├── UnreachableError
├── StaleDataError
├── PartialFailureError
└── ConfigurationError
    ├── ConfigFileInvalidError
    ├── ConfigValidationError
    └── NoUsableBridgesError
```

All custom exceptions inherit from `HueSyncError`, which provides
`user_message`, `technical_message`, `recoverable` and `recovery_hint`.

### Example: Unreachable bridge

```python
from huesync.exceptions import wrap_transport_error

try:
    transport.write(kind, light_id, payload, timeout=5.0)
except Exception as e:
    raise wrap_transport_error(e, bridge.id, f"write light {light_id}") from e
```

See `huesync.exceptions.handlers` for utilities to handle these exceptions systematically.
"""

from .base import HueSyncError
from .bridge import (
    BridgeNotFoundError,
    EntityNotFoundError,
    NoBridgeAvailableError,
    NotFoundError,
    PartialFailureError,
    StaleDataError,
    UnreachableError,
)
from .config import (
    ConfigFileInvalidError,
    ConfigurationError,
    ConfigValidationError,
    NoUsableBridgesError,
)
from .handlers import (
    ErrorCollector,
    ErrorContext,
    collect_errors,
    format_error_for_display,
    wrap_pydantic_error,
    wrap_transport_error,
)

__all__ = [
    # Base
    "HueSyncError",
    # Bridge / cache
    "BridgeNotFoundError",
    "EntityNotFoundError",
    "NoBridgeAvailableError",
    "NotFoundError",
    "PartialFailureError",
    "StaleDataError",
    "UnreachableError",
    # Config
    "ConfigFileInvalidError",
    "ConfigValidationError",
    "ConfigurationError",
    "NoUsableBridgesError",
    # Handlers
    "ErrorCollector",
    "ErrorContext",
    "collect_errors",
    "format_error_for_display",
    "wrap_pydantic_error",
    "wrap_transport_error",
]
