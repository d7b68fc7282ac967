"""
ResumeVersion / ProcessedResume Domain Entities
Append-only structured-data snapshots and the per-request active pointer.
"""
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional
from uuid import UUID

from ..value_objects import VersionCreator, VersionStatus


@dataclass
class ResumeVersion:
    """One immutable snapshot of structured CV data"""

    id: int
    request_id: UUID
    user_id: str
    version_number: int
    structured_data: Dict[str, Any]
    version_name: Optional[str] = None
    created_by: VersionCreator = VersionCreator.SYSTEM
    status: VersionStatus = VersionStatus.ACTIVE
    created_at: Optional[datetime] = None

    def __str__(self) -> str:
        return f"ResumeVersion(#{self.id} v{self.version_number} of {self.request_id})"


@dataclass
class ProcessedResume:
    """Processed resume record; points at the active version of a request"""

    id: int
    request_id: UUID
    user_id: str
    active_version_id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
