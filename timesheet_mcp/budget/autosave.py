"""Debounced single-slot writer for notes drafts."""

from __future__ import annotations

import asyncio
import inspect
import logging
from collections.abc import AsyncIterator, Awaitable, Callable, Hashable
from contextlib import asynccontextmanager
from typing import Any

logger = logging.getLogger(__name__)

SaveFn = Callable[[Hashable, Any], "Awaitable[Any] | Any"]

_MISSING = object()


class AutoSaver:
    """
    Hold at most one pending payload per key and write it once edits settle.

    ``schedule`` replaces whatever is pending for the key and restarts the
    delay. A key never has two writes in flight; payloads that arrive while a
    write runs are written once afterwards. ``flush`` and ``flush_all`` write
    pending payloads immediately and raise any save error. An error from an
    earlier background write is raised only while no newer payload has been
    written since; once a newer write succeeds it is only logged.

    Per-key bookkeeping is dropped as soon as a key has nothing pending, no
    worker, no unreported failure and no caller waiting on its lock.
    """

    def __init__(self, save: SaveFn, delay: float = 1.0):
        if delay <= 0:
            raise ValueError("delay must be positive")
        self._save = save
        self.delay = delay
        self._pending: dict[Hashable, Any] = {}
        self._generation: dict[Hashable, int] = {}
        self._workers: dict[Hashable, asyncio.Task] = {}
        self._locks: dict[Hashable, asyncio.Lock] = {}
        self._lock_users: dict[Hashable, int] = {}
        self._failures: dict[Hashable, BaseException] = {}

    @property
    def pending_keys(self) -> list[Hashable]:
        return list(self._pending)

    @property
    def tracked_keys(self) -> list[Hashable]:
        """Keys that still hold any per-key state."""
        return list({*self._pending, *self._generation, *self._workers, *self._locks, *self._failures})

    def has_pending(self, key: Hashable) -> bool:
        return key in self._pending

    def schedule(self, key: Hashable, payload: Any) -> None:
        """Queue payload for key, replacing any payload not yet written."""
        self._pending[key] = payload
        self._generation[key] = self._generation.get(key, 0) + 1
        worker = self._workers.get(key)
        if worker is None or worker.done():
            self._workers[key] = asyncio.get_running_loop().create_task(self._run(key))

    async def flush(self, key: Hashable) -> None:
        """Write the pending payload for key now, if there is one."""
        async with self._hold(key):
            worker = self._workers.pop(key, None)
            if worker is not None and worker is not asyncio.current_task():
                worker.cancel()
            payload = self._pending.pop(key, _MISSING)
            failure = self._failures.pop(key, None)
            if payload is not _MISSING:
                await self._write(key, payload)
                if failure is not None:
                    logger.warning("Earlier autosave failure for %s superseded by a newer write: %s", key, failure)
                    failure = None
            if failure is not None:
                raise failure

    async def flush_all(self) -> None:
        errors: list[BaseException] = []
        for key in list({*self._pending, *self._workers, *self._failures}):
            try:
                await self.flush(key)
            except Exception as e:
                errors.append(e)
        if errors:
            raise errors[0]

    @asynccontextmanager
    async def _hold(self, key: Hashable) -> AsyncIterator[None]:
        lock = self._locks.get(key)
        if lock is None:
            lock = self._locks[key] = asyncio.Lock()
        self._lock_users[key] = self._lock_users.get(key, 0) + 1
        try:
            async with lock:
                yield
        finally:
            self._lock_users[key] -= 1
            if not self._lock_users[key]:
                del self._lock_users[key]
            self._prune(key)

    def _prune(self, key: Hashable) -> None:
        if key in self._pending or key in self._workers or key in self._failures or key in self._lock_users:
            return
        self._locks.pop(key, None)
        self._generation.pop(key, None)

    async def _write(self, key: Hashable, payload: Any) -> None:
        try:
            result = self._save(key, payload)
            if inspect.isawaitable(result):
                await result
        except Exception:
            logger.exception("Autosave failed for %s", key)
            raise
        logger.info("Autosaved %s", key)

    async def _run(self, key: Hashable) -> None:
        try:
            while key in self._pending:
                # wait until no newer edit arrived during a full delay
                while True:
                    seen = self._generation.get(key)
                    await asyncio.sleep(self.delay)
                    if self._generation.get(key) == seen:
                        break
                async with self._hold(key):
                    payload = self._pending.pop(key, _MISSING)
                    if payload is _MISSING:
                        break
                    try:
                        await self._write(key, payload)
                    except Exception as e:
                        self._failures[key] = e
                    else:
                        stale = self._failures.pop(key, None)
                        if stale is not None:
                            logger.warning(
                                "Earlier autosave failure for %s superseded by a newer write: %s", key, stale
                            )
        finally:
            if self._workers.get(key) is asyncio.current_task():
                del self._workers[key]
            self._prune(key)
