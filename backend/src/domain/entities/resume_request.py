"""
ResumeRequest Domain Entity
One submitted resume file and its processing lifecycle.
"""
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Optional
from uuid import UUID, uuid4

from core.exceptions import InvalidStateTransitionException
from ..value_objects import ResumeRequestStatus


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class ResumeRequest:
    """Resume processing request domain entity

    Status moves pending -> uploaded -> (processing) -> completed, or to
    failed from any non-terminal state. completed and failed are terminal.
    """

    user_id: str
    original_filename: str
    original_file_type: str
    file_size_bytes: int
    language: str
    instructions: str = ""

    request_id: UUID = field(default_factory=uuid4)
    status: ResumeRequestStatus = ResumeRequestStatus.PENDING

    # External storage locators
    s3_input_url: Optional[str] = None
    s3_output_url: Optional[str] = None

    # Outcome
    processing_time_ms: Optional[int] = None
    error_message: Optional[str] = None

    # Timestamps
    created_at: datetime = field(default_factory=_utcnow)
    uploaded_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None

    @classmethod
    def new(
        cls,
        user_id: str,
        filename: str,
        file_type: str,
        file_size_bytes: int,
        language: str,
        instructions: str = "",
    ) -> "ResumeRequest":
        return cls(
            user_id=user_id,
            original_filename=filename,
            original_file_type=file_type,
            file_size_bytes=file_size_bytes,
            language=language,
            instructions=instructions,
        )

    @property
    def is_terminal(self) -> bool:
        return self.status.is_terminal

    def _transition(self, target: ResumeRequestStatus) -> None:
        if not self.status.can_transition_to(target):
            raise InvalidStateTransitionException(
                str(self.request_id), self.status.value, target.value
            )
        self.status = target

    def mark_uploaded(self, s3_input_url: str) -> None:
        self._transition(ResumeRequestStatus.UPLOADED)
        self.s3_input_url = s3_input_url
        self.uploaded_at = _utcnow()

    def mark_processing(self) -> None:
        self._transition(ResumeRequestStatus.PROCESSING)

    def mark_completed(self, s3_output_url: Optional[str], processing_time_ms: Optional[int]) -> None:
        self._transition(ResumeRequestStatus.COMPLETED)
        self.s3_output_url = s3_output_url
        self.processing_time_ms = processing_time_ms
        self.completed_at = _utcnow()

    def mark_failed(self, error_message: str) -> None:
        self._transition(ResumeRequestStatus.FAILED)
        self.error_message = error_message
        self.completed_at = _utcnow()

    def __str__(self) -> str:
        return f"ResumeRequest({self.request_id}, {self.original_filename}, {self.status.value})"
