# inventory_replenishment/utils/concurrency.py
import threading
from typing import Any, Callable, Dict, Hashable, Tuple


class _Call:
    """One in-flight invocation shared by every caller of the same key."""

    def __init__(self):
        self.done = threading.Event()
        self.result = None
        self.error = None


class SingleFlight:
    """Run at most one call per key at a time.

    Callers arriving while a call for the same key is in flight block until
    it finishes and receive its result (or its exception) instead of
    starting their own.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._calls: Dict[Hashable, _Call] = {}

    def do(self, key: Hashable, fn: Callable[[], Any]) -> Tuple[Any, bool]:
        """Run fn under the key.

        Args:
            key: Deduplication key
            fn: Zero-argument callable

        Returns:
            Tuple of (result, shared) where shared is True when the result
            came from another caller's in-flight call
        """
        with self._lock:
            call = self._calls.get(key)
            if call is not None:
                leader = False
            else:
                call = _Call()
                self._calls[key] = call
                leader = True

        if not leader:
            call.done.wait()
            if call.error is not None:
                raise call.error
            return call.result, True

        try:
            call.result = fn()
        except BaseException as e:
            call.error = e
            raise
        finally:
            with self._lock:
                del self._calls[key]
            call.done.set()

        return call.result, False

    def in_flight(self, key: Hashable) -> bool:
        with self._lock:
            return key in self._calls


class NonOverlappingGuard:
    """Non-blocking re-entrancy guard for periodic passes."""

    def __init__(self):
        self._lock = threading.Lock()

    def try_acquire(self) -> bool:
        return self._lock.acquire(blocking=False)

    def release(self) -> None:
        self._lock.release()

    @property
    def busy(self) -> bool:
        return self._lock.locked()
