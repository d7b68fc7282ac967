"""
Resume Status Enums
Lifecycle states for resume requests and their structured-data versions
"""
from enum import Enum
from typing import Dict, FrozenSet


class ResumeRequestStatus(str, Enum):
    """Processing status of a submitted resume"""
    PENDING = "pending"
    UPLOADED = "uploaded"
    PROCESSING = "processing"
    COMPLETED = "completed"
    FAILED = "failed"

    @property
    def is_terminal(self) -> bool:
        return self in (ResumeRequestStatus.COMPLETED, ResumeRequestStatus.FAILED)

    def can_transition_to(self, target: "ResumeRequestStatus") -> bool:
        return target in ALLOWED_TRANSITIONS[self]


ALLOWED_TRANSITIONS: Dict[ResumeRequestStatus, FrozenSet[ResumeRequestStatus]] = {
    ResumeRequestStatus.PENDING: frozenset({
        ResumeRequestStatus.UPLOADED,
        ResumeRequestStatus.FAILED,
    }),
    ResumeRequestStatus.UPLOADED: frozenset({
        ResumeRequestStatus.PROCESSING,
        ResumeRequestStatus.COMPLETED,
        ResumeRequestStatus.FAILED,
    }),
    ResumeRequestStatus.PROCESSING: frozenset({
        ResumeRequestStatus.COMPLETED,
        ResumeRequestStatus.FAILED,
    }),
    ResumeRequestStatus.COMPLETED: frozenset(),
    ResumeRequestStatus.FAILED: frozenset(),
}


class VersionStatus(str, Enum):
    """Visibility of a resume version (deleted never reverts)"""
    ACTIVE = "active"
    DELETED = "deleted"


class VersionCreator(str, Enum):
    """Who produced a resume version"""
    SYSTEM = "system"
    USER = "user"
