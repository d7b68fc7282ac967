"""
Resume Version Service
User-facing management of a processed resume's version log
"""
from typing import Any, List, Optional, Tuple
from uuid import UUID

from loguru import logger
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import (
    AuthorizationException,
    ResourceNotFoundException,
    ValidationException,
)
from application.repositories.interfaces import IProcessedResumeRepository, IResumeVersionRepository
from application.services.resume.sanitizers import StructuredDataError, parse_structured_data
from domain.entities import ProcessedResume, ResumeVersion
from domain.value_objects import VersionCreator


class ResumeVersionService:
    """Owner-checked operations over resume versions"""

    def __init__(
        self,
        session: AsyncSession,
        processed_repo: IProcessedResumeRepository,
        version_repo: IResumeVersionRepository
    ):
        self.session = session
        self.processed_repo = processed_repo
        self.version_repo = version_repo

    async def _owned_processed(self, owner_id: str, request_id: UUID) -> ProcessedResume:
        processed = await self.processed_repo.get_by_request_id(request_id)
        if processed is None:
            raise ResourceNotFoundException("ProcessedResume", str(request_id))
        if processed.user_id != owner_id:
            raise AuthorizationException("You do not have access to this resume")
        return processed

    async def list_versions(
        self,
        owner_id: str,
        request_id: UUID
    ) -> Tuple[List[ResumeVersion], Optional[int]]:
        """
        Active versions newest first.

        Returns:
            (versions, active_version_id)
        """
        processed = await self._owned_processed(owner_id, request_id)
        versions = await self.version_repo.get_versions_by_request(request_id)
        return versions, processed.active_version_id

    async def create_version(
        self,
        owner_id: str,
        request_id: UUID,
        structured_data: Any,
        version_name: Optional[str] = None
    ) -> ResumeVersion:
        """Append a user edit; it becomes the active version"""
        await self._owned_processed(owner_id, request_id)

        try:
            cv_data = parse_structured_data(structured_data)
        except StructuredDataError as e:
            raise ValidationException("structured_data", str(e))

        version = await self.version_repo.create_version(
            request_id=request_id,
            user_id=owner_id,
            structured_data=cv_data.model_dump(),
            version_name=version_name,
            created_by=VersionCreator.USER,
        )
        await self.session.commit()

        logger.info(f"📝 User {owner_id} created {version}")
        return version

    async def activate_version(self, owner_id: str, request_id: UUID, version_id: int) -> None:
        await self._owned_processed(owner_id, request_id)

        activated = await self.version_repo.activate_version(request_id, version_id)
        if not activated:
            raise ResourceNotFoundException("ResumeVersion", str(version_id))
        await self.session.commit()

        logger.info(f"Version {version_id} is now active for request {request_id}")

    async def get_version(self, owner_id: str, version_id: int) -> Tuple[ResumeVersion, bool]:
        """
        Returns:
            (version, is_active_version)
        """
        version = await self.version_repo.get_version_by_id(version_id)
        if version is None:
            raise ResourceNotFoundException("ResumeVersion", str(version_id))
        if version.user_id != owner_id:
            raise AuthorizationException("You do not have access to this version")

        processed = await self.processed_repo.get_by_request_id(version.request_id)
        is_active = processed is not None and processed.active_version_id == version.id
        return version, is_active

    async def delete_version(self, owner_id: str, version_id: int) -> None:
        """Soft-delete a version; the active one cannot be deleted"""
        deleted = await self.version_repo.soft_delete_version(version_id, owner_id)
        if not deleted:
            raise ResourceNotFoundException("ResumeVersion", str(version_id))
        await self.session.commit()

        logger.info(f"🗑️ User {owner_id} deleted version {version_id}")
