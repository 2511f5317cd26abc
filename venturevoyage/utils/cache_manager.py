"""
Two-tier (memory + disk) cache with per-entry expiration.

Values are stored as given in memory and as JSON on disk, one file per key.
Readers may pass the type they expect back; a value that does not validate
against it is reported as a miss. Expired entries are dropped lazily, on the
next read of their key.
"""

import hashlib
import json
import threading
from datetime import datetime, timedelta, timezone
from functools import lru_cache
from pathlib import Path
from typing import Any, Callable, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator
from pydantic_core import PydanticSerializationError, to_jsonable_python

from venturevoyage.utils.constants import DEFAULT_DISK_TTL, DEFAULT_MEMORY_TTL
from venturevoyage.utils.exceptions import DiskIOError
from venturevoyage.utils.logger import logger


class ExpirationPolicy:
    """How long a cache entry lives. An interval of None means it never expires."""

    def __init__(self, interval: Optional[float]):
        self.interval = interval

    @classmethod
    def never(cls) -> "ExpirationPolicy":
        return cls(None)

    @classmethod
    def seconds(cls, seconds: float) -> "ExpirationPolicy":
        return cls(float(seconds))

    @classmethod
    def minutes(cls, minutes: int) -> "ExpirationPolicy":
        return cls(minutes * 60.0)

    @classmethod
    def hours(cls, hours: int) -> "ExpirationPolicy":
        return cls(hours * 3600.0)

    @classmethod
    def days(cls, days: int) -> "ExpirationPolicy":
        return cls(days * 86400.0)

    def expiration_date(self, now: datetime) -> Optional[datetime]:
        if self.interval is None:
            return None
        return now + timedelta(seconds=self.interval)

    def __eq__(self, other):
        return isinstance(other, ExpirationPolicy) and other.interval == self.interval

    def __repr__(self):
        return f"ExpirationPolicy(interval={self.interval})"


DEFAULT_MEMORY_EXPIRATION = ExpirationPolicy.seconds(DEFAULT_MEMORY_TTL)
DEFAULT_DISK_EXPIRATION = ExpirationPolicy.seconds(DEFAULT_DISK_TTL)

# Well under the 255-byte name limit of common filesystems
MAX_CACHE_FILENAME_LENGTH = 200


class CacheEntry(BaseModel):
    """A cached value and its absolute expiration time."""

    model_config = ConfigDict(populate_by_name=True)

    value: Any = None
    expiration_date: Optional[datetime] = Field(default=None, alias="expirationDate")

    @field_validator("expiration_date")
    @classmethod
    def as_utc(cls, value: Optional[datetime]) -> Optional[datetime]:
        # Files written without an offset are read as UTC
        if value is not None and value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value

    def is_expired(self, now: datetime) -> bool:
        return self.expiration_date is not None and now > self.expiration_date

    def to_json(self) -> str:
        envelope = {"value": to_jsonable_python(self.value)}
        if self.expiration_date is not None:
            envelope["expirationDate"] = self.expiration_date.isoformat()
        return json.dumps(envelope)


class CacheStatistics(BaseModel):
    memory_items: int
    disk_items: int

    @property
    def total_items(self) -> int:
        return self.memory_items + self.disk_items


class CacheKey:
    """Cache keys for common data."""

    BUSINESS_IDEAS = "business_ideas"
    USER_PROFILE = "user_profile"
    DAILY_GOALS = "daily_goals"
    MILESTONES = "milestones"
    AI_RESPONSES = "ai_responses"

    @staticmethod
    def ai_response(prompt: str) -> str:
        digest = hashlib.sha256(prompt.encode("utf-8")).hexdigest()
        return f"ai_response_{digest}"

    @staticmethod
    def business_idea(idea_id: str) -> str:
        return f"business_idea_{idea_id}"


def _require_key(key: str):
    if not key:
        raise ValueError("Cache key must not be empty")


def encode_cache_filename(key: str) -> str:
    """
    Map a cache key to its file name.

    Every byte of the key that is not an ASCII letter or digit is
    percent-encoded. Encodings longer than MAX_CACHE_FILENAME_LENGTH are
    replaced by "_" and the SHA-256 of the key; "_" never survives
    percent-encoding, so the two forms cannot collide.
    """
    _require_key(key)
    encoded = "".join(
        chr(byte) if byte < 128 and chr(byte).isalnum() else f"%{byte:02X}"
        for byte in key.encode("utf-8")
    )
    if len(encoded) <= MAX_CACHE_FILENAME_LENGTH:
        return encoded
    return "_" + hashlib.sha256(key.encode("utf-8")).hexdigest()


@lru_cache(maxsize=128)
def _type_adapter(expected_type) -> TypeAdapter:
    return TypeAdapter(expected_type)


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class CacheManager:
    """Thread-safe cache manager with memory and disk tiers."""

    def __init__(self, cache_dir, clock: Optional[Callable[[], datetime]] = None):
        """
        Initialize the cache manager.

        Args:
            cache_dir: Directory owned by this cache for its disk tier
            clock: Returns the current UTC time; injectable for tests
        """
        self.cache_dir = Path(cache_dir)
        self.clock = clock or _utc_now
        self._memory_cache: Dict[str, CacheEntry] = {}
        # File I/O never holds the memory lock
        self._memory_lock = threading.RLock()
        self._disk_lock = threading.RLock()

        try:
            self.cache_dir.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            logger.error(f"Could not create cache directory {self.cache_dir}: {e}")
        logger.info(f"CacheManager initialized with directory: {self.cache_dir}")

    # Memory cache

    def set_memory(self, key: str, value: Any, expiration: ExpirationPolicy = DEFAULT_MEMORY_EXPIRATION):
        _require_key(key)
        entry = CacheEntry(value=value, expiration_date=expiration.expiration_date(self.clock()))
        with self._memory_lock:
            self._memory_cache[key] = entry
        logger.debug(f"Cache: stored '{key}' in memory")

    def get_memory(self, key: str, expected_type=None) -> Any:
        """
        Return the memory value for a key, or None if absent, expired or of the wrong type.

        Args:
            key: Cache key
            expected_type: Optional type the value must validate against
        """
        _require_key(key)
        with self._memory_lock:
            entry = self._memory_cache.get(key)
            if entry is None:
                return None
            if entry.is_expired(self.clock()):
                del self._memory_cache[key]
                logger.debug(f"Cache: '{key}' expired and removed from memory")
                return None
        return self._coerce(key, entry.value, expected_type)

    def remove_memory(self, key: str):
        _require_key(key)
        with self._memory_lock:
            self._memory_cache.pop(key, None)
        logger.debug(f"Cache: removed '{key}' from memory")

    def clear_memory(self):
        with self._memory_lock:
            self._memory_cache.clear()
        logger.info("Cache: cleared all memory cache")

    # Disk cache

    def set_disk(self, key: str, value: Any, expiration: ExpirationPolicy = DEFAULT_DISK_EXPIRATION):
        """
        Write a value to its cache file.

        Raises:
            DiskIOError: The value could not be serialized or written
        """
        file_path = self._cache_file_path(key)
        entry = CacheEntry(value=value, expiration_date=expiration.expiration_date(self.clock()))
        try:
            data = entry.to_json()
            with self._disk_lock:
                file_path.write_text(data, encoding="utf-8")
        except (OSError, TypeError, ValueError, PydanticSerializationError) as e:
            logger.error(f"Cache: failed to write '{key}' to disk - {e}")
            raise DiskIOError(key, e) from e
        logger.debug(f"Cache: stored '{key}' on disk")

    def get_disk(self, key: str, expected_type=None) -> Any:
        """
        Return the disk value for a key, or None on a miss.

        Unreadable or corrupt files count as a miss; expired files are deleted.

        Args:
            key: Cache key
            expected_type: Optional type the value must validate against
        """
        file_path = self._cache_file_path(key)
        with self._disk_lock:
            try:
                if not file_path.exists():
                    return None
                entry = CacheEntry.model_validate_json(file_path.read_text(encoding="utf-8"))
                if entry.is_expired(self.clock()):
                    file_path.unlink(missing_ok=True)
                    logger.debug(f"Cache: '{key}' expired and removed from disk")
                    return None
            except (OSError, ValueError, TypeError) as e:
                logger.error(f"Cache: failed to read '{key}' from disk - {e}")
                return None
        return self._coerce(key, entry.value, expected_type)

    def remove_disk(self, key: str):
        file_path = self._cache_file_path(key)
        try:
            with self._disk_lock:
                file_path.unlink(missing_ok=True)
        except OSError as e:
            raise DiskIOError(key, e) from e
        logger.debug(f"Cache: removed '{key}' from disk")

    def clear_disk(self):
        with self._disk_lock:
            if not self.cache_dir.exists():
                return
            for file_path in self.cache_dir.iterdir():
                try:
                    file_path.unlink(missing_ok=True)
                except OSError as e:
                    raise DiskIOError(file_path.name, e) from e
        logger.info("Cache: cleared all disk cache")

    # Combined cache operations

    def set(
        self,
        key: str,
        value: Any,
        memory_expiration: ExpirationPolicy = DEFAULT_MEMORY_EXPIRATION,
        disk_expiration: ExpirationPolicy = DEFAULT_DISK_EXPIRATION,
    ):
        """
        Store a value in memory, then on disk.

        A disk failure raises DiskIOError but leaves the memory entry in place.
        """
        self.set_memory(key, value, memory_expiration)
        self.set_disk(key, value, disk_expiration)

    def get(self, key: str, expected_type=None) -> Any:
        """
        Return a value from memory, falling back to disk.

        Disk hits are promoted into memory with the default memory expiration.
        Never raises for a missing, expired or mismatched entry.
        """
        value = self.get_memory(key, expected_type)
        if value is not None:
            logger.debug(f"Cache: hit '{key}' in memory")
            return value

        value = self.get_disk(key, expected_type)
        if value is not None:
            logger.debug(f"Cache: hit '{key}' on disk, promoting to memory")
            self.set_memory(key, value)
            return value

        logger.debug(f"Cache: miss '{key}'")
        return None

    def remove(self, key: str):
        self.remove_memory(key)
        self.remove_disk(key)

    def clear_all(self):
        self.clear_memory()
        self.clear_disk()

    def statistics(self) -> CacheStatistics:
        with self._memory_lock:
            memory_items = len(self._memory_cache)
        try:
            disk_items = sum(1 for path in self.cache_dir.iterdir() if path.is_file())
        except OSError:
            disk_items = 0
        return CacheStatistics(memory_items=memory_items, disk_items=disk_items)

    # Helpers

    def _cache_file_path(self, key: str) -> Path:
        return self.cache_dir / encode_cache_filename(key)

    def _coerce(self, key: str, value: Any, expected_type) -> Any:
        if expected_type is None:
            return value
        try:
            return _type_adapter(expected_type).validate_python(value)
        except ValidationError as e:
            logger.debug(f"Cache: '{key}' does not match {expected_type}: {e.error_count()} errors")
            return None
