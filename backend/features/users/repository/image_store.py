"""
Key/value stores for profile images and their derived variants.

Keys are flat file names (`{uuid}.png`, `{uuid}-{w}x{h}.png`). Writes are
all-or-nothing: a reader sees no entry or the complete bytes, never a
partial write.
"""
import threading
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Dict, Optional
from backend.common.errors import ImageIOError, NotFoundError
from backend.services.system.logger_service import get_logger, log_error
from backend.utils.file_utils import atomic_write_bytes, is_within

logger = get_logger(__name__)


class ImageStore(ABC):

    @abstractmethod
    def get(self, key: str) -> Optional[bytes]:
        """Stored bytes, or None when absent. Raises ImageIOError on read faults."""

    @abstractmethod
    def exists(self, key: str) -> bool:
        pass

    @abstractmethod
    def put_atomic(self, key: str, data: bytes) -> None:
        """Publish `data` under `key`. Raises ImageIOError; prior state survives a failure."""

    @abstractmethod
    def delete(self, key: str) -> bool:
        pass


class FileImageStore(ImageStore):
    def __init__(self, root: str):
        self.root = Path(root).expanduser().resolve()
        self.root.mkdir(parents=True, exist_ok=True)

    def path_for(self, key: str) -> Path:
        # Keys are single path components; temp files are dot-prefixed and never valid keys.
        if not key or key.startswith('.') or Path(key).name != key:
            raise NotFoundError(f"Invalid image key: {key!r}")
        target = (self.root / key).resolve()
        if not is_within(self.root, target):
            raise NotFoundError(f"Image key escapes store root: {key!r}")
        return target

    def get(self, key: str) -> Optional[bytes]:
        path = self.path_for(key)
        try:
            return path.read_bytes()
        except FileNotFoundError:
            return None
        except OSError as e:
            log_error(logger, e, {"operation": "image_read", "key": key})
            raise ImageIOError(f"Failed to read {key}") from e

    def exists(self, key: str) -> bool:
        return self.path_for(key).is_file()

    def put_atomic(self, key: str, data: bytes) -> None:
        path = self.path_for(key)
        try:
            atomic_write_bytes(path, data)
        except OSError as e:
            log_error(logger, e, {"operation": "image_write", "key": key})
            raise ImageIOError(f"Failed to write {key}") from e
        logger.debug("Image published", extra={"key": key, "size_bytes": len(data)})

    def delete(self, key: str) -> bool:
        try:
            self.path_for(key).unlink()
            return True
        except FileNotFoundError:
            return False
        except OSError as e:
            log_error(logger, e, {"operation": "image_delete", "key": key})
            raise ImageIOError(f"Failed to delete {key}") from e


class InMemoryImageStore(ImageStore):
    def __init__(self):
        self._lock = threading.Lock()
        self._blobs: Dict[str, bytes] = {}
        self.writes = 0

    def get(self, key: str) -> Optional[bytes]:
        with self._lock:
            return self._blobs.get(key)

    def exists(self, key: str) -> bool:
        with self._lock:
            return key in self._blobs

    def put_atomic(self, key: str, data: bytes) -> None:
        with self._lock:
            self._blobs[key] = bytes(data)
            self.writes += 1

    def delete(self, key: str) -> bool:
        with self._lock:
            return self._blobs.pop(key, None) is not None
