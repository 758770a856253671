"""Shared test fixtures

Mock stores and sample task / BOQ data available to every test.

Mocks:
- MagicMock(spec=ABC) keeps the port's method signatures
"""

from datetime import datetime, timezone
from unittest.mock import MagicMock

import pytest
from siteprogress.domain.models import BoqDocument, BoqLineItem, TaskRecord
from siteprogress.domain.ports import BoqStore, TaskStore

from tests.factories import make_boq_doc, make_event, make_record

# ========== Sample data ==========


@pytest.fixture
def sample_permit_record() -> TaskRecord:
    """PERMIT task with one Visit upload"""
    return make_record(
        "permit",
        [
            make_event(
                "Visit",
                "permit",
                uploaded_at=datetime(2025, 3, 4, 9, 15, tzinfo=timezone.utc),
            )
        ],
    )


@pytest.fixture
def sample_cw_record() -> TaskRecord:
    """CW task with two Digging Hole uploads, one of them rejected"""
    return make_record(
        "cw",
        [
            make_event(
                "Digging Hole",
                "cw",
                uploaded_at=datetime(2025, 3, 5, 10, 0, tzinfo=timezone.utc),
            ),
            make_event(
                "Digging Hole",
                "cw",
                status_task="Rejected",
                reject_reason="blurry photo",
                uploaded_at=datetime(2025, 3, 6, 14, 30, tzinfo=timezone.utc),
            ),
        ],
    )


@pytest.fixture
def sample_boq_doc() -> BoqDocument:
    """After DRM BOQ with 25 units of material 200000690"""
    return make_boq_doc(
        items=[BoqLineItem(material_code="200000690", quantity="25")],
    )


# ========== Mock fixtures ==========


@pytest.fixture
def mock_task_store(sample_permit_record, sample_cw_record) -> MagicMock:
    """TaskStore mock"""
    mock = MagicMock(spec=TaskStore)
    records = [sample_permit_record, sample_cw_record]
    mock.find_by_site_id.return_value = records
    mock.find_by_site_name.return_value = records
    mock.list_all.return_value = records
    return mock


@pytest.fixture
def mock_boq_store() -> MagicMock:
    """BoqStore mock without any BOQ"""
    mock = MagicMock(spec=BoqStore)
    mock.find_by_site_id.return_value = []
    mock.find_by_site_name.return_value = []
    return mock
