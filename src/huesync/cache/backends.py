"""Cache persistence backends."""

import logging
import threading
from pathlib import Path

from huesync.model_manager import PydanticPersistence
from huesync.models import CacheSnapshot

logger = logging.getLogger(__name__)


class MemoryCacheBackend:
    """Keeps the last saved snapshot in memory. Useful for tests and restarts of a bridge within one process."""

    def __init__(self, snapshot: CacheSnapshot | None = None):
        self._snapshot = snapshot
        self._lock = threading.Lock()
        self.closed = False

    def load(self) -> CacheSnapshot | None:
        with self._lock:
            return self._snapshot

    def save(self, snapshot: CacheSnapshot) -> None:
        with self._lock:
            self._snapshot = snapshot

    def close(self) -> None:
        self.closed = True


class JsonFileCacheBackend:
    """
    Stores one bridge's cache as a JSON file.

    Writes are atomic (temp file + rename). A file that cannot be parsed
    is treated as absent so a corrupted cache never blocks startup; the
    next save replaces it.
    """

    def __init__(self, path: Path):
        """
        Args:
            path: JSON file holding the snapshot
        """
        self.path = path
        self._lock = threading.Lock()

    @classmethod
    def for_bridge(cls, directory: Path, bridge_id: str) -> "JsonFileCacheBackend":
        """Backend storing `<directory>/<bridge_id>.json`."""
        safe_id = "".join(c if c.isalnum() or c in "-_" else "_" for c in bridge_id)
        return cls(directory / f"{safe_id}.json")

    def load(self) -> CacheSnapshot | None:
        with self._lock:
            try:
                snapshot = PydanticPersistence.load_json(self.path, CacheSnapshot)
            except FileNotFoundError:
                logger.debug(f"No cache file at {self.path}")
                return None
            except Exception as e:
                logger.warning(f"Ignoring unreadable cache file {self.path}: {e}")
                return None

        logger.info(f"Loaded cache snapshot for {snapshot.bridge_id} from {self.path}")
        return snapshot

    def save(self, snapshot: CacheSnapshot) -> None:
        with self._lock:
            PydanticPersistence.save_json(snapshot, self.path, indent=None, backup=False)

    def close(self) -> None:
        logger.debug(f"Closed cache backend {self.path}")
