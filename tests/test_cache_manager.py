"""
Tests for the two-tier cache manager.
"""

import json
import pytest
from datetime import datetime, timedelta, timezone
from pathlib import Path
from typing import List
from unittest.mock import patch

from venturevoyage.models.idea import BusinessIdea
from venturevoyage.utils.cache_manager import (
    CacheKey,
    MAX_CACHE_FILENAME_LENGTH,
    CacheManager,
    ExpirationPolicy,
    encode_cache_filename,
)
from venturevoyage.utils.exceptions import DiskIOError


class FakeClock:
    """Settable clock so expiry can be tested without sleeping."""

    def __init__(self):
        self.now = datetime(2025, 1, 1, 12, 0, tzinfo=timezone.utc)

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


@pytest.fixture
def clock():
    """Fixture providing a controllable clock."""
    return FakeClock()


@pytest.fixture
def cache(tmp_path, clock):
    """Fixture providing a CacheManager on a temporary directory."""
    return CacheManager(tmp_path / "cache", clock=clock)


@pytest.fixture
def sample_idea():
    """Fixture providing a business idea to cache."""
    return BusinessIdea(title="Test Idea", category="Tech", required_skills=["Programming"])


class TestExpirationPolicy:
    """Tests for ExpirationPolicy."""

    def test_units(self):
        """Test each constructor converts to seconds."""
        assert ExpirationPolicy.seconds(30).interval == 30
        assert ExpirationPolicy.minutes(2).interval == 120
        assert ExpirationPolicy.hours(1).interval == 3600
        assert ExpirationPolicy.days(7).interval == 7 * 86400

    def test_never(self, clock):
        """Test a never policy has no expiration date."""
        assert ExpirationPolicy.never().expiration_date(clock()) is None

    def test_expiration_date(self, clock):
        """Test the expiration date is now plus the interval."""
        assert ExpirationPolicy.hours(1).expiration_date(clock()) == clock() + timedelta(hours=1)


class TestMemoryCache:
    """Tests for the memory tier."""

    def test_round_trip(self, cache, sample_idea):
        """Test a stored value is returned unchanged."""
        cache.set_memory("idea", sample_idea)
        assert cache.get_memory("idea") == sample_idea

    def test_zero_ttl_expires(self, cache, clock):
        """Test a zero-second entry is gone after any positive delay."""
        cache.set_memory("key", "value", ExpirationPolicy.seconds(0))
        clock.advance(milliseconds=1)

        assert cache.get_memory("key") is None
        assert cache.statistics().memory_items == 0

    def test_expired_on_boundary_is_still_valid(self, cache, clock):
        """Test an entry is served until its expiration time has passed."""
        cache.set_memory("key", "value", ExpirationPolicy.seconds(10))
        clock.advance(seconds=10)

        assert cache.get_memory("key") == "value"

    def test_never_expires(self, cache, clock):
        """Test a never policy survives any delay."""
        cache.set_memory("key", "value", ExpirationPolicy.never())
        clock.advance(days=3650)

        assert cache.get_memory("key") == "value"

    def test_overwrite(self, cache):
        """Test a second set replaces the value."""
        cache.set_memory("key", "first")
        cache.set_memory("key", "second")

        assert cache.get_memory("key") == "second"

    def test_memory_does_not_touch_disk(self, cache):
        """Test set_memory writes no file."""
        cache.set_memory("key", "value")

        assert cache.get_disk("key") is None
        assert cache.statistics().disk_items == 0

    def test_type_mismatch_is_miss(self, cache):
        """Test a value that does not validate as the expected type reads as absent."""
        cache.set_memory("key", {"not": "an idea"})

        assert cache.get_memory("key", BusinessIdea) is None
        assert cache.get_memory("key", dict) == {"not": "an idea"}

    def test_clear_memory(self, cache):
        """Test clear_memory drops every entry."""
        cache.set_memory("a", 1)
        cache.set_memory("b", 2)
        cache.clear_memory()

        assert cache.get_memory("a") is None
        assert cache.get_memory("b") is None


class TestDiskCache:
    """Tests for the disk tier."""

    def test_round_trip_model(self, cache, sample_idea):
        """Test a pydantic model comes back when its type is supplied."""
        cache.set_disk("idea", sample_idea)

        assert cache.get_disk("idea", BusinessIdea) == sample_idea

    def test_round_trip_list(self, cache, sample_idea):
        """Test a list of models comes back when its type is supplied."""
        cache.set_disk(CacheKey.BUSINESS_IDEAS, [sample_idea])

        assert cache.get_disk(CacheKey.BUSINESS_IDEAS, List[BusinessIdea]) == [sample_idea]

    def test_envelope_format(self, cache, clock):
        """Test the file holds the value and an ISO-8601 expiration date."""
        cache.set_disk("greeting", "hello", ExpirationPolicy.days(7))

        envelope = json.loads((cache.cache_dir / "greeting").read_text(encoding="utf-8"))
        assert envelope["value"] == "hello"
        assert datetime.fromisoformat(envelope["expirationDate"]) == clock() + timedelta(days=7)

    def test_envelope_never(self, cache):
        """Test a never policy writes no expiration date."""
        cache.set_disk("greeting", "hello", ExpirationPolicy.never())

        envelope = json.loads((cache.cache_dir / "greeting").read_text(encoding="utf-8"))
        assert envelope == {"value": "hello"}

    def test_expired_file_is_deleted(self, cache, clock):
        """Test reading an expired file removes it."""
        cache.set_disk("key", "value", ExpirationPolicy.minutes(1))
        clock.advance(minutes=2)

        assert cache.get_disk("key") is None
        assert not (cache.cache_dir / "key").exists()

    def test_corrupt_file_is_miss(self, cache):
        """Test an undecodable file reads as absent."""
        (cache.cache_dir / "key").write_text("{not json", encoding="utf-8")

        assert cache.get_disk("key") is None

    def test_filename_encoding(self, cache):
        """Test keys are stored under their percent-encoded filename."""
        cache.set_disk("ai/response 1", "value")

        assert (cache.cache_dir / "ai%2Fresponse%201").exists()

    def test_unserializable_value_raises(self, cache):
        """Test a value that cannot be encoded raises DiskIOError."""
        with pytest.raises(DiskIOError) as exc_info:
            cache.set_disk("key", object())

        assert exc_info.value.key == "key"

    def test_write_failure_raises(self, cache):
        """Test an OS error during the write raises DiskIOError."""
        with patch.object(Path, 'write_text', side_effect=OSError("disk full")):
            with pytest.raises(DiskIOError):
                cache.set_disk("key", "value")

    def test_clear_disk(self, cache):
        """Test clear_disk removes every cache file."""
        cache.set_disk("a", 1)
        cache.set_disk("b", 2)
        cache.clear_disk()

        assert cache.statistics().disk_items == 0


class TestCombinedCache:
    """Tests for the combined memory and disk operations."""

    @pytest.mark.parametrize("value", ["text", 42, 3.5, True, [1, 2, 3], {"nested": {"list": [1, "a"]}}])
    @pytest.mark.parametrize("expiration", [ExpirationPolicy.never(), ExpirationPolicy.seconds(5)])
    def test_set_then_get(self, cache, value, expiration):
        """Test get immediately after set returns the stored value."""
        cache.set("key", value, memory_expiration=expiration, disk_expiration=expiration)

        assert cache.get("key") == value

    def test_remove_is_idempotent(self, cache):
        """Test removing twice does not fail and leaves nothing behind."""
        cache.set("key", "value")
        cache.remove("key")
        cache.remove("key")

        assert cache.get("key") is None

    def test_promotion(self, cache):
        """Test a disk-only hit is copied into memory."""
        cache.set_disk("key", "value", ExpirationPolicy.days(7))
        assert cache.get_memory("key") is None

        assert cache.get("key") == "value"
        assert cache.get_memory("key") == "value"

    def test_promotion_uses_memory_default(self, cache, clock):
        """Test a promoted entry expires with the default memory lifetime."""
        cache.set_disk("key", "value", ExpirationPolicy.days(7))
        cache.get("key")
        cache.remove_disk("key")
        clock.advance(hours=1, seconds=1)

        assert cache.get_memory("key") is None

    def test_memory_wins_over_disk(self, cache):
        """Test memory is read before disk."""
        cache.set_disk("key", "disk")
        cache.set_memory("key", "memory")

        assert cache.get("key") == "memory"

    def test_disk_failure_keeps_memory(self, cache):
        """Test a failed disk write leaves the memory entry in place."""
        with patch.object(Path, 'write_text', side_effect=OSError("read-only")):
            with pytest.raises(DiskIOError):
                cache.set("key", "value")

        assert cache.get_memory("key") == "value"

    def test_mismatch_is_miss_in_both_tiers(self, cache):
        """Test a stored string does not satisfy a request for a model."""
        cache.set("key", "plain text")

        assert cache.get("key", BusinessIdea) is None

    def test_clear_all(self, cache):
        """Test clear_all empties both tiers."""
        cache.set("a", 1)
        cache.set("b", 2)
        cache.clear_all()

        assert cache.statistics().total_items == 0

    def test_statistics(self, cache):
        """Test counts are reported per tier."""
        cache.set("a", 1)
        cache.set_memory("b", 2)
        cache.set_disk("c", 3)

        stats = cache.statistics()
        assert stats.memory_items == 2
        assert stats.disk_items == 2
        assert stats.total_items == 4

    @pytest.mark.parametrize("operation", [
        lambda cache: cache.get(""),
        lambda cache: cache.set("", 1),
        lambda cache: cache.get_memory(""),
        lambda cache: cache.set_disk("", 1),
        lambda cache: cache.remove(""),
    ])
    def test_empty_key_rejected(self, cache, operation):
        """Test an empty key is refused by every operation."""
        with pytest.raises(ValueError):
            operation(cache)


class TestLongAndForeignKeys:
    """Tests for keys too long for a file name and files written elsewhere."""

    LONG_KEY = "user profile " * 30

    def test_long_key_round_trip(self, cache):
        """Test a key longer than a file name can hold is stored under a bounded name."""
        cache.set(self.LONG_KEY, "value")
        cache.clear_memory()

        assert cache.get(self.LONG_KEY) == "value"
        names = [path.name for path in cache.cache_dir.iterdir()]
        assert len(names) == 1
        assert names[0].startswith("_")
        assert len(names[0]) <= MAX_CACHE_FILENAME_LENGTH

    def test_long_key_miss(self, cache):
        """Test reading a long key that was never stored is a plain miss."""
        assert cache.get(self.LONG_KEY) is None
        assert cache.get_disk(self.LONG_KEY) is None

    def test_long_key_remove_is_idempotent(self, cache):
        """Test removing a long key twice does not fail."""
        cache.remove(self.LONG_KEY)
        cache.set(self.LONG_KEY, "value")
        cache.remove(self.LONG_KEY)
        cache.remove(self.LONG_KEY)

        assert cache.get(self.LONG_KEY) is None

    def test_long_keys_do_not_collide(self, cache):
        """Test two long keys sharing a prefix keep separate values."""
        cache.set_disk(self.LONG_KEY + "a", 1)
        cache.set_disk(self.LONG_KEY + "b", 2)

        assert cache.get_disk(self.LONG_KEY + "a") == 1
        assert cache.get_disk(self.LONG_KEY + "b") == 2

    def test_naive_expiration_is_read_as_utc(self, cache):
        """Test a file whose expiration date has no offset still expires correctly."""
        (cache.cache_dir / "stale").write_text(
            '{"value": "old", "expirationDate": "2024-01-01T00:00:00"}', encoding="utf-8"
        )
        (cache.cache_dir / "fresh").write_text(
            '{"value": "new", "expirationDate": "2030-01-01T00:00:00"}', encoding="utf-8"
        )

        assert cache.get("stale") is None
        assert not (cache.cache_dir / "stale").exists()
        assert cache.get("fresh") == "new"

    def test_unreadable_path_is_miss(self, cache):
        """Test an OS error while probing the file is reported as a miss."""
        with patch.object(Path, 'exists', side_effect=OSError("File name too long")):
            assert cache.get("key") is None


class TestCacheKey:
    """Tests for cache key helpers."""

    def test_ai_response_is_stable(self):
        """Test the same prompt always maps to the same key."""
        assert CacheKey.ai_response("prompt") == CacheKey.ai_response("prompt")
        assert CacheKey.ai_response("prompt") != CacheKey.ai_response("other prompt")

    def test_business_idea(self):
        """Test idea keys embed the id."""
        assert CacheKey.business_idea("abc") == "business_idea_abc"

    def test_encode_cache_filename(self):
        """Test only ASCII letters and digits pass through unescaped."""
        assert encode_cache_filename("abc123") == "abc123"
        assert encode_cache_filename("a_b.c") == "a%5Fb%2Ec"
        assert encode_cache_filename("é") == "%C3%A9"

    def test_encode_cache_filename_long_key(self):
        """Test an over-long encoding is replaced by a fixed-length digest name."""
        name = encode_cache_filename("/" * 100)

        assert name.startswith("_")
        assert len(name) == 65
        assert encode_cache_filename("a" * MAX_CACHE_FILENAME_LENGTH) == "a" * MAX_CACHE_FILENAME_LENGTH


if __name__ == "__main__":
    # This allows running the tests directly with python
    import sys
    sys.exit(pytest.main(["-v", __file__]))
