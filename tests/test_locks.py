import threading
import pytest
from unittest.mock import MagicMock

from vetclinic.core.exceptions import LockTimeoutError
from vetclinic.infrastructure.locks import (
    LocalLockManager, RedisLockManager, admission_lock_key, room_lock_key
)


@pytest.mark.unit
@pytest.mark.concurrency
class TestLocalLocks:

    def test_keys(self):
        assert room_lock_key("ICU-01") == "room:ICU-01"
        assert admission_lock_key("abc") == "admission:abc"

    def test_held_lock_times_out(self):
        locks = LocalLockManager(timeout=0.05)
        acquired = threading.Event()
        release = threading.Event()

        def holder():
            with locks.hold("room:ICU-01"):
                acquired.set()
                release.wait(2)

        thread = threading.Thread(target=holder)
        thread.start()
        acquired.wait(2)
        try:
            with pytest.raises(LockTimeoutError) as exc_info:
                with locks.hold("room:ICU-01"):
                    pass
            assert exc_info.value.error_code == "RESOURCE_LOCKED"
            assert exc_info.value.status_code == 503
        finally:
            release.set()
            thread.join()

    def test_different_keys_do_not_block(self):
        locks = LocalLockManager(timeout=0.05)
        with locks.hold("room:ICU-01"):
            with locks.hold("room:GEN-01"):
                pass

    def test_hold_many_dedupes_keys(self):
        locks = LocalLockManager(timeout=0.05)
        with locks.hold_many(["room:B", "room:A", "room:B"]):
            pass
        with locks.hold("room:A"):
            pass

    def test_entries_dropped_after_release(self):
        locks = LocalLockManager(timeout=0.05)

        with locks.hold("room:ICU-01"):
            assert locks.active_keys() == 1
        with locks.hold_many(["room:A", "room:B"]):
            assert locks.active_keys() == 2
        for i in range(50):
            with locks.hold(f"admission:{i}"):
                pass

        assert locks.active_keys() == 0

    def test_entry_dropped_when_body_fails(self):
        locks = LocalLockManager(timeout=0.05)

        with pytest.raises(RuntimeError):
            with locks.hold("room:ICU-01"):
                raise RuntimeError("boom")

        assert locks.active_keys() == 0

    def test_entry_kept_for_holder_after_waiter_times_out(self):
        locks = LocalLockManager(timeout=0.05)
        acquired = threading.Event()
        release = threading.Event()

        def holder():
            with locks.hold("room:ICU-01"):
                acquired.set()
                release.wait(2)

        thread = threading.Thread(target=holder)
        thread.start()
        acquired.wait(2)
        try:
            with pytest.raises(LockTimeoutError):
                with locks.hold("room:ICU-01"):
                    pass
            assert locks.active_keys() == 1
        finally:
            release.set()
            thread.join()

        assert locks.active_keys() == 0


@pytest.mark.unit
@pytest.mark.concurrency
class TestRedisLocks:

    def test_acquire_and_release(self):
        client = MagicMock()
        client.set.return_value = True
        client.eval.return_value = 1
        locks = RedisLockManager(client, timeout=1.0, lock_ttl=30)

        with locks.hold("room:ICU-01"):
            args, kwargs = client.set.call_args
            assert args[0] == "lock:room:ICU-01"
            assert kwargs == {"ex": 30, "nx": True}

        token = client.set.call_args[0][1]
        client.eval.assert_called_once_with(RedisLockManager.RELEASE_SCRIPT, 1, "lock:room:ICU-01", token)

    def test_retries_until_free(self):
        client = MagicMock()
        client.set.side_effect = [None, None, True]
        client.eval.return_value = 1
        locks = RedisLockManager(client, timeout=1.0, retry_delay=0.001)

        with locks.hold("admission:abc"):
            pass

        assert client.set.call_count == 3

    def test_timeout(self):
        client = MagicMock()
        client.set.return_value = None
        locks = RedisLockManager(client, timeout=0.01, retry_delay=0.001)

        with pytest.raises(LockTimeoutError):
            with locks.hold("room:ICU-01"):
                pass

        client.eval.assert_not_called()

    def test_released_even_when_body_fails(self):
        client = MagicMock()
        client.set.return_value = True
        client.eval.return_value = 1
        locks = RedisLockManager(client, timeout=1.0)

        with pytest.raises(RuntimeError):
            with locks.hold("room:ICU-01"):
                raise RuntimeError("boom")

        client.eval.assert_called_once()
