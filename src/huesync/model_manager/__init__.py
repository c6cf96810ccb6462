"""Generic helpers for Pydantic models.

- **PydanticPersistence**: load/save Pydantic models as JSON (atomic, with backups)
- **ObserverManager**: thread-safe observer list

```python
from huesync.model_manager import ObserverManager, PydanticPersistence

config = PydanticPersistence.load_json_or_default(path, AppConfig)
observers = ObserverManager[SyncObserver](observer_type_name="sync")
```
"""

from huesync.model_manager.observer import ObserverManager
from huesync.model_manager.persistence import PydanticPersistence

__all__ = [
    "ObserverManager",
    "PydanticPersistence",
]
