"""
Resume Query Service
Read side of the resume workflow, scoped to the authenticated owner
"""
from dataclasses import dataclass
from typing import List, Optional
from uuid import UUID

from core.exceptions import AuthorizationException, ResourceNotFoundException
from application.repositories.interfaces import (
    IProcessedResumeRepository,
    IResumeRequestRepository,
    IResumeVersionRepository,
    ResumeListItem,
)
from domain.entities import ResumeRequest, ResumeVersion


@dataclass
class ResumeDetail:
    request: ResumeRequest
    active_version: Optional[ResumeVersion] = None


class ResumeQueryService:

    def __init__(
        self,
        request_repo: IResumeRequestRepository,
        processed_repo: IProcessedResumeRepository,
        version_repo: IResumeVersionRepository
    ):
        self.request_repo = request_repo
        self.processed_repo = processed_repo
        self.version_repo = version_repo

    async def list_resumes(self, owner_id: str) -> List[ResumeListItem]:
        return await self.request_repo.list_by_owner(owner_id)

    async def get_owned_request(self, owner_id: str, request_id: UUID) -> ResumeRequest:
        request = await self.request_repo.get_by_request_id(request_id)
        if request is None:
            raise ResourceNotFoundException("ResumeRequest", str(request_id))
        if request.user_id != owner_id:
            raise AuthorizationException("You do not have access to this resume")
        return request

    async def get_detail(self, owner_id: str, request_id: UUID) -> ResumeDetail:
        """Request status plus the active version's data once processed"""
        request = await self.get_owned_request(owner_id, request_id)

        active_version = None
        processed = await self.processed_repo.get_by_request_id(request_id)
        if processed is not None and processed.active_version_id is not None:
            active_version = await self.version_repo.get_version_by_id(processed.active_version_id)

        return ResumeDetail(request=request, active_version=active_version)
