"""
Resource locks for room capacity and admission mutation.

Room check-and-increment and admission writes must run under a lock scoped
to the room number (or admission id) for the whole transaction. The local
backend covers a single process; the redis backend extends the guarantee
across API workers.
"""

import logging
import threading
import time
import uuid
from contextlib import contextmanager, ExitStack
from functools import lru_cache
from typing import Dict, Iterable, Iterator

import redis

from vetclinic.core.config import settings
from vetclinic.core.exceptions import LockTimeoutError

logger = logging.getLogger(__name__)


def room_lock_key(room_number: str) -> str:
    return f"room:{room_number}"


def admission_lock_key(admission_id: str) -> str:
    return f"admission:{admission_id}"


class LockManager:
    """Common interface of the lock backends"""

    def __init__(self, timeout: float):
        self.timeout = timeout

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        raise NotImplementedError

    @contextmanager
    def hold_many(self, keys: Iterable[str]) -> Iterator[None]:
        """Acquire several locks in sorted order so two callers never deadlock"""
        with ExitStack() as stack:
            for key in sorted(set(keys)):
                stack.enter_context(self.hold(key))
            yield


class LocalLockManager(LockManager):
    """In-process locks keyed by resource name.

    An entry lives only while some thread holds or waits on its key.
    """

    def __init__(self, timeout: float = 10.0):
        super().__init__(timeout)
        self._locks: Dict[str, threading.Lock] = {}
        self._holders: Dict[str, int] = {}
        self._guard = threading.Lock()

    def _checkout(self, key: str) -> threading.Lock:
        with self._guard:
            lock = self._locks.get(key)
            if lock is None:
                lock = self._locks[key] = threading.Lock()
            self._holders[key] = self._holders.get(key, 0) + 1
            return lock

    def _checkin(self, key: str) -> None:
        with self._guard:
            self._holders[key] -= 1
            if self._holders[key] == 0:
                del self._holders[key]
                del self._locks[key]

    def active_keys(self) -> int:
        """Number of keys currently held or waited on"""
        with self._guard:
            return len(self._locks)

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        lock = self._checkout(key)
        try:
            if not lock.acquire(timeout=self.timeout):
                logger.warning(f"Timed out waiting for lock {key}")
                raise LockTimeoutError(key, self.timeout)
            try:
                yield
            finally:
                lock.release()
        finally:
            self._checkin(key)


class RedisLockManager(LockManager):
    """Distributed locks using SET NX EX and an owner-checked release"""

    RELEASE_SCRIPT = """
    if redis.call("get", KEYS[1]) == ARGV[1] then
        return redis.call("del", KEYS[1])
    else
        return 0
    end
    """

    def __init__(
        self,
        redis_client: redis.Redis,
        timeout: float = 10.0,
        lock_ttl: int = 30,
        retry_delay: float = 0.05
    ):
        super().__init__(timeout)
        self.redis = redis_client
        self.lock_ttl = lock_ttl
        self.retry_delay = retry_delay

    @contextmanager
    def hold(self, key: str) -> Iterator[None]:
        lock_key_full = f"lock:{key}"
        lock_value = str(uuid.uuid4())
        deadline = time.monotonic() + self.timeout

        while not self.redis.set(lock_key_full, lock_value, ex=self.lock_ttl, nx=True):
            if time.monotonic() >= deadline:
                logger.warning(f"Timed out waiting for lock {key}")
                raise LockTimeoutError(key, self.timeout)
            time.sleep(self.retry_delay)

        try:
            yield
        finally:
            released = self.redis.eval(self.RELEASE_SCRIPT, 1, lock_key_full, lock_value)
            if not released:
                logger.error(f"Lock {key} expired before release, ttl={self.lock_ttl}s")


@lru_cache
def get_lock_manager() -> LockManager:
    if settings.LOCK_BACKEND == "redis":
        client = redis.Redis.from_url(
            settings.REDIS_URL,
            socket_timeout=5,
            socket_connect_timeout=5,
            health_check_interval=30
        )
        logger.info("Using redis lock backend")
        return RedisLockManager(client, timeout=settings.LOCK_TIMEOUT_SECONDS)
    return LocalLockManager(timeout=settings.LOCK_TIMEOUT_SECONDS)
