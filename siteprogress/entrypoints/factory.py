"""Factory - dependency wiring

Builds the Firestore stores and the services on top of them.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass

from google.cloud import firestore

from siteprogress.adapters.cached_store import CachingBoqStore, CachingTaskStore
from siteprogress.adapters.firestore_repository import (
    FirestoreBoqStore,
    FirestoreTaskStore,
)
from siteprogress.config import AppConfig
from siteprogress.domain.ports import BoqStore, TaskStore
from siteprogress.services.last_activity import LastActivityResolver
from siteprogress.services.progress_aggregator import ProgressAggregator
from siteprogress.services.section_checklist import SectionChecklist
from siteprogress.services.site_summary import SiteSummaryService

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SiteServices:
    """Everything the entrypoints need, sharing one pair of stores"""

    aggregator: ProgressAggregator
    last_activity: LastActivityResolver
    sections: SectionChecklist
    summary: SiteSummaryService


def create_firestore_client(config: AppConfig) -> firestore.Client:
    logger.info(
        "Initializing Firestore client: project=%s, database=%s",
        config.project_id,
        config.firestore_database,
    )
    return firestore.Client(
        project=config.project_id, database=config.firestore_database
    )


def create_services(
    config: AppConfig | None = None,
    db: firestore.Client | None = None,
    cached: bool = True,
) -> SiteServices:
    """
    Build the services.

    Args:
        config: settings (read from the environment when None)
        db: Firestore client (created from config when None)
        cached: wrap the stores in per-pass caches. The returned services
            then never repeat an identical read, so build a new set per
            request / batch.

    Raises:
        ValueError: required settings are missing
    """
    if config is None:
        config = AppConfig.from_env()
    if db is None:
        db = create_firestore_client(config)

    task_store: TaskStore = FirestoreTaskStore(db, config.tasks_collection)
    boq_store: BoqStore = FirestoreBoqStore(db, config.boq_collection)
    if cached:
        task_store = CachingTaskStore(task_store)
        boq_store = CachingBoqStore(boq_store)

    return build_services(
        task_store,
        boq_store,
        display_timezone=config.display_timezone,
        read_timeout=config.read_timeout_seconds,
    )


def build_services(
    task_store: TaskStore,
    boq_store: BoqStore,
    display_timezone: str = "UTC",
    read_timeout: float = 10.0,
) -> SiteServices:
    """Wire the services over any pair of stores"""
    aggregator = ProgressAggregator(task_store, boq_store, read_timeout=read_timeout)
    last_activity = LastActivityResolver(task_store, display_timezone)
    return SiteServices(
        aggregator=aggregator,
        last_activity=last_activity,
        sections=SectionChecklist(task_store, boq_store, read_timeout=read_timeout),
        summary=SiteSummaryService(
            aggregator, last_activity, task_store, display_timezone
        ),
    )
