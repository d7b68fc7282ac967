"""
Repository Interfaces (Abstract Base Classes)
Define contracts for data access without implementation details
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from datetime import datetime
from typing import Any, Dict, Optional, List
from uuid import UUID

from domain.entities import ResumeRequest, ResumeVersion, ProcessedResume
from domain.value_objects import VersionCreator


@dataclass
class ResumeListItem:
    """Summary row for a user's resume listing"""
    request_id: UUID
    original_filename: str
    status: str
    created_at: datetime
    completed_at: Optional[datetime] = None
    full_name: Optional[str] = None
    email: Optional[str] = None


class IResumeRequestRepository(ABC):
    """Resume request lifecycle repository interface"""

    @abstractmethod
    async def create(self, request: ResumeRequest) -> ResumeRequest:
        """Persist a new request in pending status"""
        pass

    @abstractmethod
    async def get_by_request_id(self, request_id: UUID) -> Optional[ResumeRequest]:
        """Get request by identifier"""
        pass

    @abstractmethod
    async def mark_uploaded(self, request_id: UUID, s3_input_url: str) -> ResumeRequest:
        """pending -> uploaded, records the input location"""
        pass

    @abstractmethod
    async def mark_processing(self, request_id: UUID) -> ResumeRequest:
        """uploaded -> processing"""
        pass

    @abstractmethod
    async def mark_completed(
        self,
        request_id: UUID,
        s3_output_url: Optional[str],
        processing_time_ms: Optional[int]
    ) -> ResumeRequest:
        """uploaded|processing -> completed"""
        pass

    @abstractmethod
    async def mark_failed(self, request_id: UUID, error_message: str) -> ResumeRequest:
        """Any non-terminal status -> failed"""
        pass

    @abstractmethod
    async def list_by_owner(self, user_id: str) -> List[ResumeListItem]:
        """Summaries of a user's requests, most recent first"""
        pass


class IProcessedResumeRepository(ABC):
    """Processed resume (active-version pointer) repository interface"""

    @abstractmethod
    async def get_by_request_id(self, request_id: UUID) -> Optional[ProcessedResume]:
        """Get processed resume by request identifier"""
        pass


class IResumeVersionRepository(ABC):
    """Resume version log repository interface"""

    @abstractmethod
    async def create_version(
        self,
        request_id: UUID,
        user_id: str,
        structured_data: Dict[str, Any],
        version_name: Optional[str],
        created_by: VersionCreator
    ) -> ResumeVersion:
        """
        Append a version and make it the active one.

        Creates the processed resume row when missing; version numbers are
        unique and increasing per request.
        """
        pass

    @abstractmethod
    async def activate_version(self, request_id: UUID, version_id: int) -> bool:
        """Point the processed resume at an active version of the same request"""
        pass

    @abstractmethod
    async def soft_delete_version(self, version_id: int, user_id: str) -> bool:
        """Mark an owned, active, non-current version as deleted"""
        pass

    @abstractmethod
    async def get_versions_by_request(self, request_id: UUID) -> List[ResumeVersion]:
        """Active versions of a request, newest first"""
        pass

    @abstractmethod
    async def get_version_by_id(self, version_id: int) -> Optional[ResumeVersion]:
        """Get an active version by identifier"""
        pass
