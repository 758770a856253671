"""SiteDataReader - concurrent snapshot read of one site's tasks and BOQ

The task query and the two BOQ queries (by siteId, by siteName) do not
depend on each other, so they run in parallel on a thread pool. Each read
is bounded by `read_timeout` seconds.

Failure policy:
- task read failed / timed out -> TaskFetchError / ReadTimeoutError raised
- any BOQ read failed / timed out -> logged, BOQ treated as absent
"""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass

from siteprogress.domain.errors import ReadTimeoutError, TaskFetchError
from siteprogress.domain.models import BoqDocument, MergedBoq, TaskRecord
from siteprogress.domain.ports import BoqStore, TaskStore
from siteprogress.services.boq import pick_boq

logger = logging.getLogger(__name__)

DEFAULT_READ_TIMEOUT = 10.0


@dataclass(frozen=True)
class SiteSnapshot:
    """Everything read for one site"""

    records: list[TaskRecord]
    boq: MergedBoq | None


class SiteDataReader:
    def __init__(
        self,
        task_store: TaskStore,
        boq_store: BoqStore,
        read_timeout: float = DEFAULT_READ_TIMEOUT,
    ) -> None:
        """
        Args:
            task_store: task record source
            boq_store: BOQ document source
            read_timeout: seconds allowed for each read
        """
        self._tasks = task_store
        self._boq = boq_store
        self._read_timeout = read_timeout

    def read(self, site_id: str, site_name: str) -> SiteSnapshot:
        """
        Read task records (by site_id when given, else by site_name) and the
        merged BOQ row of a site.

        Raises:
            TaskFetchError: task read failed
            ReadTimeoutError: task read did not finish in time
        """
        executor = ThreadPoolExecutor(max_workers=3, thread_name_prefix="site-read")
        try:
            if site_id:
                task_future = executor.submit(self._tasks.find_by_site_id, site_id)
            else:
                task_future = executor.submit(self._tasks.find_by_site_name, site_name)

            boq_futures: list[tuple[str, Future]] = []
            if site_id:
                boq_futures.append(
                    ("siteId", executor.submit(self._boq.find_by_site_id, site_id))
                )
            if site_name:
                boq_futures.append(
                    (
                        "siteName",
                        executor.submit(self._boq.find_by_site_name, site_name),
                    )
                )

            records = self._wait_tasks(task_future, site_id, site_name)
            boq = self._wait_boq(boq_futures, site_id, site_name)
            return SiteSnapshot(records=records, boq=boq)
        finally:
            # a hung read must not block the caller
            executor.shutdown(wait=False, cancel_futures=True)

    def _wait_tasks(
        self, future: Future, site_id: str, site_name: str
    ) -> list[TaskRecord]:
        try:
            return future.result(timeout=self._read_timeout)
        except FutureTimeoutError as e:
            raise ReadTimeoutError(
                f"task query timed out after {self._read_timeout}s: "
                f"site_id={site_id!r}, site_name={site_name!r}"
            ) from e
        except TaskFetchError:
            raise
        except Exception as e:
            raise TaskFetchError(
                f"task query failed: site_id={site_id!r}, site_name={site_name!r}"
            ) from e

    def _wait_boq(
        self, futures: list[tuple[str, Future]], site_id: str, site_name: str
    ) -> MergedBoq | None:
        docs: list[BoqDocument] = []
        for key, future in futures:
            try:
                docs.extend(future.result(timeout=self._read_timeout))
            except FutureTimeoutError:
                logger.warning(
                    "BOQ query by %s timed out, using default targets: "
                    "site_id=%s, site_name=%s",
                    key,
                    site_id,
                    site_name,
                )
                return None
            except Exception as e:
                logger.warning(
                    "BOQ query by %s failed, using default targets: "
                    "site_id=%s, site_name=%s, error=%s",
                    key,
                    site_id,
                    site_name,
                    e,
                )
                return None
        return pick_boq(docs)
