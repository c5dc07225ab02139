# File: /practice/projects_page/query_cache.py | Version: 1.0 | Title: Keyed Read Cache (dedup + stale-while-revalidate)
"""
Keyed cache in front of the read contract.

Entries are keyed by `(resource, params)`. Concurrent reads of one key share a
single in-flight task. `read()` never blocks: it returns whatever is cached (or
the caller's placeholder) and schedules a background refresh when the entry is
missing, stale or invalidated. Values are replaced on refresh, never mutated.
"""
from __future__ import annotations

import asyncio
import logging
import math
import time
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Hashable, Mapping, Optional, Set, Tuple

log = logging.getLogger(__name__)

QueryKey = Tuple[str, Tuple[Tuple[str, Hashable], ...]]
Fetcher = Callable[[str, Mapping[str, Any]], Awaitable[Any]]

FOREVER = math.inf


def _freeze(value: Any) -> Hashable:
    if isinstance(value, (list, tuple)):
        return tuple(_freeze(v) for v in value)
    if isinstance(value, dict):
        return tuple(sorted((k, _freeze(v)) for k, v in value.items()))
    return value


def query_key(resource: str, params: Optional[Mapping[str, Any]] = None) -> QueryKey:
    """Distinct parameter combinations get distinct keys; `None` params are dropped."""
    items = tuple(sorted((k, _freeze(v)) for k, v in (params or {}).items() if v is not None))
    return (resource, items)


@dataclass
class CacheEntry:
    value: Any = None
    has_value: bool = False
    fetched_at: Optional[float] = None
    stale_time: float = 0.0
    error: Optional[BaseException] = None
    invalidated: bool = False
    task: Optional["asyncio.Task[Any]"] = None

    def is_stale(self, now: float) -> bool:
        if not self.has_value or self.invalidated or self.fetched_at is None:
            return True
        return now - self.fetched_at >= self.stale_time

    @property
    def in_flight(self) -> bool:
        return self.task is not None and not self.task.done()


@dataclass(frozen=True)
class QueryResult:
    data: Any = None
    is_loading: bool = False
    is_fetching: bool = False
    is_placeholder: bool = False
    is_stale: bool = False
    error: Optional[BaseException] = None
    enabled: bool = True

    @property
    def is_error(self) -> bool:
        return self.error is not None


DISABLED = QueryResult(enabled=False)


class QueryCache:
    def __init__(
        self,
        fetcher: Fetcher,
        clock: Callable[[], float] = time.monotonic,
        *,
        retry_delay: float = 1.0,
        sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
    ):
        self._fetcher = fetcher
        self._clock = clock
        self._retry_delay = retry_delay
        self._sleep = sleep
        self._entries: Dict[QueryKey, CacheEntry] = {}
        self._background: Set["asyncio.Task[Any]"] = set()

    # ---------- internals ----------

    def _entry(self, resource: str, params: Optional[Mapping[str, Any]]) -> Tuple[QueryKey, CacheEntry]:
        key = query_key(resource, params)
        entry = self._entries.get(key)
        if entry is None:
            entry = self._entries[key] = CacheEntry()
        return key, entry

    async def _run(self, entry: CacheEntry, resource: str, params: Mapping[str, Any], retry: int) -> Any:
        attempt = 0
        while True:
            try:
                value = await self._fetcher(resource, params)
            except Exception as exc:
                if attempt < retry:
                    attempt += 1
                    log.debug("retrying %s (%s/%s): %s", resource, attempt, retry, exc)
                    # linear backoff: delay, 2x delay, ...
                    await self._sleep(self._retry_delay * attempt)
                    continue
                entry.error = exc
                raise
            entry.value = value
            entry.has_value = True
            entry.fetched_at = self._clock()
            entry.error = None
            return value

    def _start(self, entry: CacheEntry, resource: str, params: Optional[Mapping[str, Any]], retry: int) -> "asyncio.Task[Any]":
        if entry.in_flight:
            return entry.task  # type: ignore[return-value]
        entry.invalidated = False
        entry.task = asyncio.get_running_loop().create_task(self._run(entry, resource, dict(params or {}), retry))
        return entry.task

    def _on_background_done(self, task: "asyncio.Task[Any]") -> None:
        self._background.discard(task)
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            log.warning("background refresh failed: %s", exc)

    # ---------- public API ----------

    async def fetch(
        self,
        resource: str,
        params: Optional[Mapping[str, Any]] = None,
        *,
        stale_time: float = 0.0,
        retry: int = 0,
    ) -> Any:
        """Fetch now (joining any in-flight request for the same key)."""
        _, entry = self._entry(resource, params)
        entry.stale_time = stale_time
        return await self._start(entry, resource, params, retry)

    def read(
        self,
        resource: str,
        params: Optional[Mapping[str, Any]] = None,
        *,
        stale_time: float = 0.0,
        placeholder: Any = None,
        retry: int = 0,
        enabled: bool = True,
    ) -> QueryResult:
        """Return cached data immediately; refresh in the background when stale."""
        if not enabled:
            return DISABLED
        _, entry = self._entry(resource, params)
        entry.stale_time = stale_time
        stale = entry.is_stale(self._clock())
        # A failed first load stays failed until invalidated
        failed = entry.error is not None and not entry.has_value and not entry.invalidated

        if stale and not failed and not entry.in_flight:
            task = self._start(entry, resource, params, retry)
            if task not in self._background:
                self._background.add(task)
                task.add_done_callback(self._on_background_done)

        if entry.has_value:
            data, is_placeholder = entry.value, False
        else:
            data, is_placeholder = placeholder, placeholder is not None
        return QueryResult(
            data=data,
            is_loading=not entry.has_value and entry.error is None,
            is_fetching=entry.in_flight,
            is_placeholder=is_placeholder,
            is_stale=stale,
            error=entry.error,
        )

    async def ensure(
        self,
        resource: str,
        params: Optional[Mapping[str, Any]] = None,
        *,
        stale_time: float = 0.0,
        retry: int = 0,
    ) -> Any:
        """Cached value if present, otherwise fetch; errors propagate."""
        _, entry = self._entry(resource, params)
        if entry.has_value:
            return entry.value
        return await self.fetch(resource, params, stale_time=stale_time, retry=retry)

    def peek(self, resource: str, params: Optional[Mapping[str, Any]] = None) -> QueryResult:
        """Entry state without scheduling any fetch."""
        entry = self._entries.get(query_key(resource, params))
        if entry is None:
            return QueryResult(is_loading=True, is_stale=True)
        return QueryResult(
            data=entry.value,
            is_loading=not entry.has_value and entry.error is None,
            is_fetching=entry.in_flight,
            is_stale=entry.is_stale(self._clock()),
            error=entry.error,
        )

    def get_data(self, resource: str, params: Optional[Mapping[str, Any]] = None) -> Any:
        entry = self._entries.get(query_key(resource, params))
        return entry.value if entry is not None and entry.has_value else None

    def set_data(self, resource: str, params: Optional[Mapping[str, Any]], value: Any) -> None:
        _, entry = self._entry(resource, params)
        entry.value = value
        entry.has_value = True
        entry.fetched_at = self._clock()
        entry.error = None

    def invalidate(self, resource: str) -> int:
        """Mark every entry of `resource` stale; the next read refetches it."""
        count = 0
        for (name, _), entry in self._entries.items():
            if name == resource:
                entry.invalidated = True
                count += 1
        return count

    async def settle(self) -> None:
        """Wait for every background refresh, including ones started meanwhile."""
        while True:
            pending = [e.task for e in self._entries.values() if e.in_flight]
            if not pending:
                return
            await asyncio.gather(*pending, return_exceptions=True)
