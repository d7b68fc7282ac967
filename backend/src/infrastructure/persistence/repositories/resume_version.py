"""
ResumeVersion Repository Implementation
Version log with a single active pointer per request.

Every mutation locks the request's processed_resumes row first, so version
creation, activation and deletion for one request are serialized. The unique
(request_id, version_number) constraint backs this up; a conflicting insert
is retried inside a savepoint.
"""
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy import select, update, func
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from core.exceptions import RepositoryException, VersionConflictException
from core.logging_config import logger
from application.repositories.interfaces import IResumeVersionRepository
from domain.entities import ResumeVersion
from domain.value_objects import VersionCreator, VersionStatus
from infrastructure.persistence.models import ResumeVersionModel, ProcessedResumeModel


class SQLAlchemyResumeVersionRepository(IResumeVersionRepository):
    """Repository for resume version operations"""

    def __init__(self, session: AsyncSession, max_retries: Optional[int] = None):
        self.session = session
        self.max_retries = max_retries or settings.VERSION_CREATE_MAX_RETRIES

    async def create_version(
        self,
        request_id: UUID,
        user_id: str,
        structured_data: Dict[str, Any],
        version_name: Optional[str],
        created_by: VersionCreator
    ) -> ResumeVersion:
        """
        Append a version and make it active.

        Steps (one savepoint):
            1. Lock (or create) the processed resume row of the request
            2. next number = max(version_number) + 1, deleted versions included
            3. Insert the version as active
            4. Point the processed resume at it

        Raises:
            RepositoryException if the version number keeps colliding
        """
        for attempt in range(1, self.max_retries + 1):
            try:
                async with self.session.begin_nested():
                    processed = await self._lock_or_create_processed(request_id, user_id)
                    version_number = await self._next_version_number(request_id)
                    now = datetime.now(timezone.utc)

                    model = ResumeVersionModel(
                        request_id=request_id,
                        user_id=user_id,
                        version_number=version_number,
                        structured_data=structured_data,
                        version_name=version_name or None,
                        created_by=created_by.value,
                        status=VersionStatus.ACTIVE.value,
                        created_at=now,
                    )
                    self.session.add(model)
                    await self.session.flush()

                    await self.session.execute(
                        update(ProcessedResumeModel)
                        .where(ProcessedResumeModel.id == processed.id)
                        .values(active_version_id=model.id, updated_at=now)
                    )

                logger.info(
                    f"Created version {model.id} (v{version_number}, {created_by.value}) "
                    f"for request {request_id}"
                )
                return self._to_entity(model)

            except IntegrityError as e:
                logger.warning(
                    f"Version number conflict for request {request_id} "
                    f"(attempt {attempt}/{self.max_retries}): {e}"
                )

        raise RepositoryException(
            f"Could not allocate a version number for request {request_id} "
            f"after {self.max_retries} attempts"
        )

    async def activate_version(self, request_id: UUID, version_id: int) -> bool:
        processed = await self._lock_processed(request_id)
        if processed is None:
            return False

        result = await self.session.execute(
            select(ResumeVersionModel)
            .where(
                ResumeVersionModel.id == version_id,
                ResumeVersionModel.request_id == request_id,
                ResumeVersionModel.status == VersionStatus.ACTIVE.value
            )
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        if result.scalar_one_or_none() is None:
            return False

        await self.session.execute(
            update(ProcessedResumeModel)
            .where(ProcessedResumeModel.id == processed.id)
            .values(active_version_id=version_id, updated_at=datetime.now(timezone.utc))
        )
        await self.session.flush()

        logger.info(f"Activated version {version_id} for request {request_id}")
        return True

    async def soft_delete_version(self, version_id: int, user_id: str) -> bool:
        """
        Soft delete an owned version.

        Returns False when the version does not exist, belongs to someone
        else or is already deleted.

        Raises:
            VersionConflictException if the version is the active one
        """
        version = await self._get_any_version(version_id)
        if version is None or version.user_id != user_id:
            return False

        processed = await self._lock_processed(version.request_id)
        if processed is not None and processed.active_version_id == version_id:
            raise VersionConflictException(
                f"Version {version_id} is the active version of request "
                f"{version.request_id}; activate another version first"
            )

        result = await self.session.execute(
            update(ResumeVersionModel)
            .where(
                ResumeVersionModel.id == version_id,
                ResumeVersionModel.user_id == user_id,
                ResumeVersionModel.status == VersionStatus.ACTIVE.value
            )
            .values(status=VersionStatus.DELETED.value)
        )
        await self.session.flush()

        if result.rowcount == 0:
            return False

        logger.info(f"Soft deleted version {version_id} of request {version.request_id}")
        return True

    async def get_versions_by_request(self, request_id: UUID) -> List[ResumeVersion]:
        result = await self.session.execute(
            select(ResumeVersionModel)
            .where(
                ResumeVersionModel.request_id == request_id,
                ResumeVersionModel.status == VersionStatus.ACTIVE.value
            )
            .order_by(ResumeVersionModel.version_number.desc())
            .execution_options(populate_existing=True)
        )
        return [self._to_entity(m) for m in result.scalars().all()]

    async def get_version_by_id(self, version_id: int) -> Optional[ResumeVersion]:
        result = await self.session.execute(
            select(ResumeVersionModel)
            .where(
                ResumeVersionModel.id == version_id,
                ResumeVersionModel.status == VersionStatus.ACTIVE.value
            )
            .execution_options(populate_existing=True)
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def _get_any_version(self, version_id: int) -> Optional[ResumeVersionModel]:
        result = await self.session.execute(
            select(ResumeVersionModel)
            .where(ResumeVersionModel.id == version_id)
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def _lock_processed(self, request_id: UUID) -> Optional[ProcessedResumeModel]:
        result = await self.session.execute(
            select(ProcessedResumeModel)
            .where(ProcessedResumeModel.request_id == request_id)
            .with_for_update()
            .execution_options(populate_existing=True)
        )
        return result.scalar_one_or_none()

    async def _lock_or_create_processed(self, request_id: UUID, user_id: str) -> ProcessedResumeModel:
        processed = await self._lock_processed(request_id)
        if processed is not None:
            return processed

        now = datetime.now(timezone.utc)
        try:
            async with self.session.begin_nested():
                processed = ProcessedResumeModel(
                    request_id=request_id,
                    user_id=user_id,
                    created_at=now,
                    updated_at=now,
                )
                self.session.add(processed)
                await self.session.flush()
            logger.info(f"Created processed resume for request {request_id}")
            return processed
        except IntegrityError:
            # Created concurrently; the committed row is visible now
            logger.debug(f"Processed resume for request {request_id} created concurrently")
            processed = await self._lock_processed(request_id)
            if processed is None:
                raise
            return processed

    async def _next_version_number(self, request_id: UUID) -> int:
        result = await self.session.execute(
            select(func.coalesce(func.max(ResumeVersionModel.version_number), 0))
            .where(ResumeVersionModel.request_id == request_id)
        )
        return int(result.scalar_one()) + 1

    def _to_entity(self, model: ResumeVersionModel) -> ResumeVersion:
        return ResumeVersion(
            id=model.id,
            request_id=model.request_id,
            user_id=model.user_id,
            version_number=model.version_number,
            structured_data=model.structured_data,
            version_name=model.version_name,
            created_by=VersionCreator(model.created_by),
            status=VersionStatus(model.status),
            created_at=model.created_at
        )
