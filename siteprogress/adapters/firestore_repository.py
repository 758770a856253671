"""Firestore Repository Adapter

TaskStore and BoqStore implementations on Firestore. Read-only.

Firestore collection layout:
  tasks/{taskId}        ← one division's task of a site
      siteId, siteName, division, sections[]
      sections[]: section, division, status_task, reject_reason,
                  uploadedAt, fileName, uploadBy
  boq_files/{boqId}     ← one milestone BOQ spreadsheet of a site
      siteId, siteName, city, boqType, items[]
      items[]: materialCode, materialName, <milestone quantity field>
"""

from __future__ import annotations

import logging
from typing import Any

from google.cloud import firestore

from siteprogress.domain.checklist import BOQ_MILESTONES
from siteprogress.domain.errors import BoqFetchError, TaskFetchError
from siteprogress.domain.models import (
    BoqDocument,
    BoqLineItem,
    TaskRecord,
    UploadEvent,
)
from siteprogress.domain.ports import BoqStore, TaskStore

logger = logging.getLogger(__name__)

_TASKS = "tasks"
_BOQ_FILES = "boq_files"


def _str(value: Any) -> str:
    """None -> "", anything else -> str"""
    return "" if value is None else str(value)


class FirestoreTaskStore(TaskStore):
    """
    TaskStore on the `tasks` collection.

    A site usually has one document per division; callers merge them.
    """

    def __init__(self, db: firestore.Client, collection: str = _TASKS) -> None:
        """
        Args:
            db: initialised Firestore client
            collection: collection name
        """
        self._db = db
        self._collection = collection

    def find_by_site_id(self, site_id: str) -> list[TaskRecord]:
        return self._query("siteId", site_id)

    def find_by_site_name(self, site_name: str) -> list[TaskRecord]:
        return self._query("siteName", site_name)

    def list_all(self) -> list[TaskRecord]:
        try:
            snaps = self._db.collection(self._collection).stream()
            records = [self._snap_to_record(snap) for snap in snaps]
        except Exception as e:
            raise TaskFetchError(f"Failed to list {self._collection}") from e
        logger.debug("Listed %d task records", len(records))
        return records

    def _query(self, field: str, value: str) -> list[TaskRecord]:
        try:
            snaps = (
                self._db.collection(self._collection)
                .where(field, "==", value)
                .stream()
            )
            records = [self._snap_to_record(snap) for snap in snaps]
        except Exception as e:
            raise TaskFetchError(
                f"Failed to query {self._collection}: {field}={value!r}"
            ) from e
        logger.debug("Found %d task records: %s=%s", len(records), field, value)
        return records

    # ── conversion helpers ──────────────────────────────────────────────────

    @classmethod
    def _snap_to_record(cls, snap) -> TaskRecord:
        data = snap.to_dict() or {}
        sections = data.get("sections")
        return TaskRecord(
            id=snap.id,
            site_id=_str(data.get("siteId")),
            site_name=_str(data.get("siteName")),
            division=_str(data.get("division")),
            sections=[
                cls._dict_to_event(s)
                for s in (sections if isinstance(sections, list) else [])
                if isinstance(s, dict)
            ],
        )

    @staticmethod
    def _dict_to_event(data: dict) -> UploadEvent:
        return UploadEvent(
            section=_str(data.get("section")),
            division=_str(data.get("division")),
            status_task=data.get("status_task"),
            reject_reason=_str(data.get("reject_reason")) or None,
            uploaded_at=data.get("uploadedAt"),
            file_name=_str(data.get("fileName")),
            upload_by=_str(data.get("uploadBy")),
        )


class FirestoreBoqStore(BoqStore):
    """BoqStore on the `boq_files` collection"""

    def __init__(self, db: firestore.Client, collection: str = _BOQ_FILES) -> None:
        self._db = db
        self._collection = collection

    def find_by_site_id(self, site_id: str) -> list[BoqDocument]:
        return self._query("siteId", site_id)

    def find_by_site_name(self, site_name: str) -> list[BoqDocument]:
        return self._query("siteName", site_name)

    def _query(self, field: str, value: str) -> list[BoqDocument]:
        try:
            snaps = (
                self._db.collection(self._collection)
                .where(field, "==", value)
                .stream()
            )
            docs = [self._snap_to_document(snap) for snap in snaps]
        except Exception as e:
            raise BoqFetchError(
                f"Failed to query {self._collection}: {field}={value!r}"
            ) from e
        logger.debug("Found %d BOQ documents: %s=%s", len(docs), field, value)
        return docs

    @staticmethod
    def _snap_to_document(snap) -> BoqDocument:
        data = snap.to_dict() or {}
        boq_type = _str(data.get("boqType"))
        # quantity lives under a field named after the milestone
        quantity_field = BOQ_MILESTONES.get(boq_type)
        items = data.get("items")
        return BoqDocument(
            id=snap.id,
            site_id=_str(data.get("siteId")),
            site_name=_str(data.get("siteName")),
            city=_str(data.get("city")),
            boq_type=boq_type,
            items=[
                BoqLineItem(
                    material_code=item.get("materialCode"),
                    material_name=_str(item.get("materialName")),
                    quantity=item.get(quantity_field) if quantity_field else None,
                )
                for item in (items if isinstance(items, list) else [])
                if isinstance(item, dict)
            ],
        )
