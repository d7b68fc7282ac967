"""
Tests for the resume request state machine
"""
import pytest

from core.exceptions import InvalidStateTransitionException
from domain.value_objects import ALLOWED_TRANSITIONS, ResumeRequestStatus
from conftest import make_request


class TestResumeRequestStatus:

    def test_terminal_states(self):
        assert ResumeRequestStatus.COMPLETED.is_terminal
        assert ResumeRequestStatus.FAILED.is_terminal
        assert not ResumeRequestStatus.PENDING.is_terminal
        assert not ResumeRequestStatus.UPLOADED.is_terminal
        assert not ResumeRequestStatus.PROCESSING.is_terminal

    def test_terminal_states_have_no_exits(self):
        for status in (ResumeRequestStatus.COMPLETED, ResumeRequestStatus.FAILED):
            assert ALLOWED_TRANSITIONS[status] == frozenset()

    def test_every_non_terminal_state_can_fail(self):
        for status in ResumeRequestStatus:
            if not status.is_terminal:
                assert status.can_transition_to(ResumeRequestStatus.FAILED)

    def test_pending_cannot_complete_directly(self):
        assert not ResumeRequestStatus.PENDING.can_transition_to(ResumeRequestStatus.COMPLETED)


class TestResumeRequestEntity:

    def test_new_request_is_pending(self):
        request = make_request()
        assert request.status == ResumeRequestStatus.PENDING
        assert request.request_id is not None
        assert request.uploaded_at is None
        assert request.completed_at is None

    def test_happy_path(self):
        request = make_request()

        request.mark_uploaded("https://bucket.test/uploads/cv.pdf")
        assert request.status == ResumeRequestStatus.UPLOADED
        assert request.s3_input_url == "https://bucket.test/uploads/cv.pdf"
        assert request.uploaded_at is not None

        request.mark_processing()
        assert request.status == ResumeRequestStatus.PROCESSING

        request.mark_completed("s3://bucket/output/cv.json", 1532)
        assert request.status == ResumeRequestStatus.COMPLETED
        assert request.processing_time_ms == 1532
        assert request.completed_at is not None
        assert request.is_terminal

    def test_complete_straight_from_uploaded(self):
        request = make_request()
        request.mark_uploaded("https://bucket.test/uploads/cv.pdf")
        request.mark_completed(None, None)
        assert request.status == ResumeRequestStatus.COMPLETED

    def test_mark_failed_records_message(self):
        request = make_request()
        request.mark_failed("Failed to convert file to PDF")
        assert request.status == ResumeRequestStatus.FAILED
        assert request.error_message == "Failed to convert file to PDF"
        assert request.completed_at is not None

    def test_mark_uploaded_twice_is_rejected(self):
        request = make_request()
        request.mark_uploaded("https://bucket.test/a.pdf")

        with pytest.raises(InvalidStateTransitionException) as exc_info:
            request.mark_uploaded("https://bucket.test/b.pdf")

        assert exc_info.value.current_status == "uploaded"
        assert exc_info.value.target_status == "uploaded"
        assert request.s3_input_url == "https://bucket.test/a.pdf"

    def test_failed_request_cannot_complete(self):
        request = make_request()
        request.mark_failed("boom")

        with pytest.raises(InvalidStateTransitionException):
            request.mark_completed("s3://out", 10)
        assert request.status == ResumeRequestStatus.FAILED

    def test_completed_request_cannot_fail(self):
        request = make_request()
        request.mark_uploaded("https://bucket.test/a.pdf")
        request.mark_completed(None, None)

        with pytest.raises(InvalidStateTransitionException):
            request.mark_failed("late failure")
        assert request.error_message is None

    def test_processing_requires_upload(self):
        request = make_request()
        with pytest.raises(InvalidStateTransitionException):
            request.mark_processing()
