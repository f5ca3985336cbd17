# storefront/client/storage.py
import os
from pathlib import Path
from typing import Dict, Protocol

import redis
from redis.exceptions import RedisError

from storefront.domain.errors import StorageError
from storefront.utils.retry import redis_retry
from storefront.utils.settings import CART_STORAGE_DIR, REDIS_URL
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CartStorage(Protocol):
    """Key/value port the cart store persists through."""

    def read(self, key: str) -> str | None: ...

    def write(self, key: str, value: str) -> None: ...


class MemoryCartStorage:
    def __init__(self, initial: Dict[str, str] | None = None):
        self.data: Dict[str, str] = dict(initial or {})

    def read(self, key: str) -> str | None:
        return self.data.get(key)

    def write(self, key: str, value: str) -> None:
        self.data[key] = value


class FileCartStorage:
    """
    One JSON file per key under a directory, the desktop counterpart
    of browser local storage.
    """

    def __init__(self, directory: str | os.PathLike | None = None):
        self.directory = Path(directory or CART_STORAGE_DIR).expanduser()

    def _file(self, key: str) -> Path:
        return self.directory / f"{key}.json"

    def read(self, key: str) -> str | None:
        try:
            return self._file(key).read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except (OSError, UnicodeDecodeError) as e:
            raise StorageError(f"Cannot read {key}: {e}")

    def write(self, key: str, value: str) -> None:
        target = self._file(key)
        tmp = target.with_suffix(".tmp")
        try:
            self.directory.mkdir(parents=True, exist_ok=True)
            tmp.write_text(value, encoding="utf-8")
            os.replace(tmp, target)
        except OSError as e:
            raise StorageError(f"Cannot write {key}: {e}")


class RedisCartStorage:
    """Cart kept in redis, e.g. for a kiosk or a server-side session."""

    def __init__(self, url: str | None = None, namespace: str = "storefront"):
        self.redis = redis.Redis.from_url(
            url or REDIS_URL,
            decode_responses=True,
        )
        self.namespace = namespace

    def _key(self, key: str) -> str:
        return f"{self.namespace}:{key}"

    @redis_retry()
    def _get(self, key: str) -> str | None:
        return self.redis.get(self._key(key))

    @redis_retry()
    def _set(self, key: str, value: str) -> None:
        self.redis.set(self._key(key), value)

    def read(self, key: str) -> str | None:
        try:
            return self._get(key)
        except RedisError as e:
            raise StorageError(f"Cannot read {key} from redis: {e}")

    def write(self, key: str, value: str) -> None:
        try:
            self._set(key, value)
        except RedisError as e:
            raise StorageError(f"Cannot write {key} to redis: {e}")
