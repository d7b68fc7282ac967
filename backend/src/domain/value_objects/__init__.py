"""Value Objects - Immutable objects defined by their attributes"""

from .resume_status import (
    ALLOWED_TRANSITIONS,
    ResumeRequestStatus,
    VersionStatus,
    VersionCreator,
)
from .cv_data import CVProcessedData, ExtractionResult
__all__ = [
    "ALLOWED_TRANSITIONS",
    "ResumeRequestStatus",
    "VersionStatus",
    "VersionCreator",
    "CVProcessedData",
    "ExtractionResult",
]
