"""FastAPI dependencies

Owns the process-wide settings and Firestore client, and builds a fresh
set of services (with per-request store caches) for every request.
Routes receive the services through Depends(); tests replace them with
app.dependency_overrides.
"""

from __future__ import annotations

import logging

from fastapi import Depends
from google.cloud import firestore

from siteprogress.config import AppConfig
from siteprogress.entrypoints.factory import (
    SiteServices,
    create_firestore_client,
    create_services,
)
from siteprogress.services.last_activity import LastActivityResolver
from siteprogress.services.progress_aggregator import ProgressAggregator
from siteprogress.services.section_checklist import SectionChecklist
from siteprogress.services.site_summary import SiteSummaryService

logger = logging.getLogger(__name__)

# ── settings / Firestore client (singletons) ─────────────────────────────────

_config: AppConfig | None = None
_firestore_client: firestore.Client | None = None


def _get_config() -> AppConfig:
    global _config
    if _config is None:
        _config = AppConfig.from_env()
    return _config


def _get_firestore_client() -> firestore.Client:
    global _firestore_client
    if _firestore_client is None:
        _firestore_client = create_firestore_client(_get_config())
        logger.info("Firestore client initialized")
    return _firestore_client


# ── service dependencies ─────────────────────────────────────────────────────


def get_services() -> SiteServices:
    """Services for one request; identical reads within it hit Firestore once"""
    return create_services(_get_config(), _get_firestore_client(), cached=True)


def get_aggregator(
    services: SiteServices = Depends(get_services),
) -> ProgressAggregator:
    return services.aggregator


def get_last_activity_resolver(
    services: SiteServices = Depends(get_services),
) -> LastActivityResolver:
    return services.last_activity


def get_section_checklist(
    services: SiteServices = Depends(get_services),
) -> SectionChecklist:
    return services.sections


def get_site_summary_service(
    services: SiteServices = Depends(get_services),
) -> SiteSummaryService:
    return services.summary
