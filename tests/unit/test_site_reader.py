"""Unit tests for SiteDataReader (concurrent task / BOQ reads)"""

import threading

import pytest
from siteprogress.domain.errors import BoqFetchError, ReadTimeoutError, TaskFetchError
from siteprogress.domain.models import BoqLineItem
from siteprogress.services.site_reader import SiteDataReader

from tests.factories import SITE_ID, SITE_NAME, make_boq_doc


@pytest.fixture
def release():
    """Event that unblocks hanging store calls at teardown"""
    event = threading.Event()
    yield event
    event.set()


class TestRead:
    def test_reads_tasks_and_merged_boq(self, mock_task_store, mock_boq_store):
        mock_boq_store.find_by_site_id.return_value = [
            make_boq_doc("Before DRM BOQ", [BoqLineItem("200000690", quantity="20")])
        ]
        mock_boq_store.find_by_site_name.return_value = [
            make_boq_doc("After DRM BOQ", [BoqLineItem("200000690", quantity="25")])
        ]
        reader = SiteDataReader(mock_task_store, mock_boq_store)

        snapshot = reader.read(SITE_ID, SITE_NAME)

        assert len(snapshot.records) == 2
        # documents found by id and by name merge into one row
        assert snapshot.boq.before_drm_boq[0].quantity == "20"
        assert snapshot.boq.after_drm_boq[0].quantity == "25"

    def test_name_only_lookup(self, mock_task_store, mock_boq_store):
        reader = SiteDataReader(mock_task_store, mock_boq_store)

        snapshot = reader.read("", SITE_NAME)

        assert snapshot.boq is None
        mock_task_store.find_by_site_name.assert_called_once_with(SITE_NAME)
        mock_boq_store.find_by_site_name.assert_called_once_with(SITE_NAME)
        mock_boq_store.find_by_site_id.assert_not_called()

    def test_id_only_lookup_skips_boq_by_name(self, mock_task_store, mock_boq_store):
        SiteDataReader(mock_task_store, mock_boq_store).read(SITE_ID, "")

        mock_boq_store.find_by_site_id.assert_called_once_with(SITE_ID)
        mock_boq_store.find_by_site_name.assert_not_called()


class TestFailures:
    def test_task_fetch_error_propagates(self, mock_task_store, mock_boq_store):
        mock_task_store.find_by_site_id.side_effect = TaskFetchError("down")
        reader = SiteDataReader(mock_task_store, mock_boq_store)

        with pytest.raises(TaskFetchError, match="down"):
            reader.read(SITE_ID, "")

    def test_unexpected_task_error_is_wrapped(self, mock_task_store, mock_boq_store):
        mock_task_store.find_by_site_id.side_effect = RuntimeError("socket closed")
        reader = SiteDataReader(mock_task_store, mock_boq_store)

        with pytest.raises(TaskFetchError) as exc_info:
            reader.read(SITE_ID, "")
        assert isinstance(exc_info.value.__cause__, RuntimeError)

    def test_task_timeout(self, mock_task_store, mock_boq_store, release):
        mock_task_store.find_by_site_id.side_effect = lambda _: release.wait(5)
        reader = SiteDataReader(mock_task_store, mock_boq_store, read_timeout=0.05)

        with pytest.raises(ReadTimeoutError):
            reader.read(SITE_ID, "")

    def test_boq_error_means_no_boq(self, mock_task_store, mock_boq_store):
        """A failure of either BOQ query drops the BOQ entirely"""
        mock_boq_store.find_by_site_id.return_value = [
            make_boq_doc(items=[BoqLineItem("200000690", quantity="25")])
        ]
        mock_boq_store.find_by_site_name.side_effect = BoqFetchError("down")
        reader = SiteDataReader(mock_task_store, mock_boq_store)

        snapshot = reader.read(SITE_ID, SITE_NAME)

        assert snapshot.boq is None
        assert len(snapshot.records) == 2

    def test_boq_timeout_means_no_boq(self, mock_task_store, mock_boq_store, release):
        mock_boq_store.find_by_site_id.side_effect = lambda _: release.wait(5)
        reader = SiteDataReader(mock_task_store, mock_boq_store, read_timeout=0.05)

        snapshot = reader.read(SITE_ID, "")

        assert snapshot.boq is None
        assert len(snapshot.records) == 2
