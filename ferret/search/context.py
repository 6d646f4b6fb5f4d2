"""Cancellable, deadline-bound handles passed into search backends.

A SearchContext finishes exactly once, either because its deadline passed,
because someone canceled it, or because its parent finished. The first of
these wins and fixes ``err()`` for the lifetime of the context.

Typical use:

    with SearchContext.with_timeout(parent, 5.0) as ctx:
        results = searcher.search(ctx, args)

Leaving the ``with`` block releases the context: its timer is stopped, it is
detached from its parent and it counts as canceled for anything still
holding it.
"""

import threading
import time
from typing import Callable, List, Optional


class ContextError(Exception):
    """Base class for the reasons a context finished."""
    pass


class DeadlineExceeded(ContextError):
    def __init__(self, message: str = "context deadline exceeded"):
        super().__init__(message)


class Cancelled(ContextError):
    def __init__(self, message: str = "context canceled"):
        super().__init__(message)


class SearchContext:
    def __init__(self, parent: Optional["SearchContext"] = None, deadline: Optional[float] = None):
        self._lock = threading.Lock()
        self._done = threading.Event()
        self._err: Optional[ContextError] = None
        self._callbacks: List[Callable[[], None]] = []
        self._timer: Optional[threading.Timer] = None
        self._parent = parent

        # A child never outlives its parent's deadline
        if parent is not None and parent.deadline is not None:
            deadline = parent.deadline if deadline is None else min(deadline, parent.deadline)
        self.deadline = deadline

        if parent is not None:
            parent.add_done_callback(self._on_parent_done)

        if deadline is not None and not self._done.is_set():
            remaining = deadline - time.monotonic()
            if remaining <= 0:
                self._finish(DeadlineExceeded())
            elif remaining > threading.TIMEOUT_MAX:
                # Too far out for a Timer; only cancel or the parent can finish it
                pass
            else:
                self._timer = threading.Timer(remaining, self._finish, args=(DeadlineExceeded(),))
                self._timer.daemon = True
                self._timer.start()

    @classmethod
    def background(cls) -> "SearchContext":
        """Root context that only finishes when canceled."""
        return cls()

    @classmethod
    def with_timeout(cls, parent: Optional["SearchContext"], seconds: float) -> "SearchContext":
        return cls(parent=parent, deadline=time.monotonic() + seconds)

    def _on_parent_done(self) -> None:
        parent_err = self._parent.err() if self._parent is not None else None
        self._finish(parent_err or Cancelled())

    def _finish(self, err: ContextError) -> None:
        with self._lock:
            if self._done.is_set():
                return
            self._err = err
            self._done.set()
            callbacks, self._callbacks = self._callbacks, []
            if self._timer is not None:
                self._timer.cancel()
        for callback in callbacks:
            callback()

    def add_done_callback(self, callback: Callable[[], None]) -> None:
        """Run callback once the context finishes (immediately if it already has)."""
        with self._lock:
            if not self._done.is_set():
                self._callbacks.append(callback)
                return
        callback()

    def remove_done_callback(self, callback: Callable[[], None]) -> None:
        with self._lock:
            if callback in self._callbacks:
                self._callbacks.remove(callback)

    def cancel(self) -> None:
        self._finish(Cancelled())

    def release(self) -> None:
        """Free the timer and the parent link. Safe to call more than once."""
        self.cancel()
        if self._parent is not None:
            self._parent.remove_done_callback(self._on_parent_done)
            self._parent = None

    def done(self) -> bool:
        return self._done.is_set()

    def wait(self, timeout: Optional[float] = None) -> bool:
        """Block until the context finishes or timeout elapses. Returns done()."""
        return self._done.wait(timeout)

    def err(self) -> Optional[ContextError]:
        with self._lock:
            return self._err

    def remaining(self) -> Optional[float]:
        """Seconds left before the deadline, None when there is no deadline."""
        if self.deadline is None:
            return None
        return max(0.0, self.deadline - time.monotonic())

    def raise_if_done(self) -> None:
        err = self.err()
        if err is not None:
            raise err

    def __enter__(self) -> "SearchContext":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.release()
