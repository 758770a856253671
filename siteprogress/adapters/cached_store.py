"""Per-pass caching store wrappers

A site list renders one row per site and every row reads the same
collections (progress, latest sections, last activity). Wrapping the
stores for the duration of one pass makes each distinct query hit the
backend once. Errors are never cached.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from typing import TypeVar

from siteprogress.domain.models import BoqDocument, TaskRecord
from siteprogress.domain.ports import BoqStore, TaskStore

logger = logging.getLogger(__name__)

T = TypeVar("T")


class _Memo:
    """Thread-safe memo keyed by (query name, argument)"""

    def __init__(self) -> None:
        self._values: dict[tuple[str, str], object] = {}
        self._lock = threading.Lock()

    def get_or_load(self, key: tuple[str, str], load: Callable[[], T]) -> T:
        with self._lock:
            if key in self._values:
                logger.debug("Cache hit: %s=%s", *key)
                return self._values[key]  # type: ignore[return-value]
        value = load()
        with self._lock:
            self._values.setdefault(key, value)
        return value

    def clear(self) -> None:
        with self._lock:
            self._values.clear()


class CachingTaskStore(TaskStore):
    def __init__(self, inner: TaskStore) -> None:
        self._inner = inner
        self._memo = _Memo()

    def find_by_site_id(self, site_id: str) -> list[TaskRecord]:
        return list(
            self._memo.get_or_load(
                ("siteId", site_id), lambda: self._inner.find_by_site_id(site_id)
            )
        )

    def find_by_site_name(self, site_name: str) -> list[TaskRecord]:
        return list(
            self._memo.get_or_load(
                ("siteName", site_name),
                lambda: self._inner.find_by_site_name(site_name),
            )
        )

    def list_all(self) -> list[TaskRecord]:
        return list(self._memo.get_or_load(("*", ""), self._inner.list_all))

    def clear(self) -> None:
        self._memo.clear()


class CachingBoqStore(BoqStore):
    def __init__(self, inner: BoqStore) -> None:
        self._inner = inner
        self._memo = _Memo()

    def find_by_site_id(self, site_id: str) -> list[BoqDocument]:
        return list(
            self._memo.get_or_load(
                ("siteId", site_id), lambda: self._inner.find_by_site_id(site_id)
            )
        )

    def find_by_site_name(self, site_name: str) -> list[BoqDocument]:
        return list(
            self._memo.get_or_load(
                ("siteName", site_name),
                lambda: self._inner.find_by_site_name(site_name),
            )
        )

    def clear(self) -> None:
        self._memo.clear()
