"""Ports - read-only interfaces to the document stores (ABC)

Adapters inherit these ABCs and implement every abstract method, so a
missing implementation fails at instantiation time rather than at the
first call.
"""

from __future__ import annotations

from abc import ABC, abstractmethod

from siteprogress.domain.models import BoqDocument, TaskRecord


class TaskStore(ABC):
    """Task records, one per site x division (Firestore `tasks` etc.)"""

    @abstractmethod
    def find_by_site_id(self, site_id: str) -> list[TaskRecord]:
        """Task records whose siteId equals site_id"""
        pass

    @abstractmethod
    def find_by_site_name(self, site_name: str) -> list[TaskRecord]:
        """Task records whose siteName equals site_name (exact match)"""
        pass

    @abstractmethod
    def list_all(self) -> list[TaskRecord]:
        """Every task record"""
        pass


class BoqStore(ABC):
    """BOQ milestone documents (Firestore `boq_files` etc.)"""

    @abstractmethod
    def find_by_site_id(self, site_id: str) -> list[BoqDocument]:
        """BOQ documents whose siteId equals site_id"""
        pass

    @abstractmethod
    def find_by_site_name(self, site_name: str) -> list[BoqDocument]:
        """BOQ documents whose siteName equals site_name"""
        pass
