"""
ResumeRequest Repository Implementation
Status transitions are compare-and-set updates guarded by the current status
"""
from typing import Callable, List, Optional
from uuid import UUID

from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import InvalidStateTransitionException, ResourceNotFoundException
from core.logging_config import logger
from application.repositories.interfaces import IResumeRequestRepository, ResumeListItem
from domain.entities import ResumeRequest
from domain.value_objects import ResumeRequestStatus
from infrastructure.persistence.models import (
    ResumeRequestModel,
    ResumeVersionModel,
    ProcessedResumeModel,
)


class SQLAlchemyResumeRequestRepository(IResumeRequestRepository):
    """Repository for resume request lifecycle operations"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, request: ResumeRequest) -> ResumeRequest:
        model = self._to_model(request)
        self.session.add(model)
        await self.session.flush()
        return request

    async def get_by_request_id(self, request_id: UUID) -> Optional[ResumeRequest]:
        result = await self.session.execute(
            select(ResumeRequestModel)
            .where(ResumeRequestModel.request_id == request_id)
            .execution_options(populate_existing=True)
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    async def mark_uploaded(self, request_id: UUID, s3_input_url: str) -> ResumeRequest:
        return await self._transition(request_id, lambda r: r.mark_uploaded(s3_input_url))

    async def mark_processing(self, request_id: UUID) -> ResumeRequest:
        return await self._transition(request_id, lambda r: r.mark_processing())

    async def mark_completed(
        self,
        request_id: UUID,
        s3_output_url: Optional[str],
        processing_time_ms: Optional[int]
    ) -> ResumeRequest:
        return await self._transition(
            request_id,
            lambda r: r.mark_completed(s3_output_url, processing_time_ms)
        )

    async def mark_failed(self, request_id: UUID, error_message: str) -> ResumeRequest:
        return await self._transition(request_id, lambda r: r.mark_failed(error_message))

    async def list_by_owner(self, user_id: str) -> List[ResumeListItem]:
        """Requests of a user with display fields from the active version, newest first"""
        result = await self.session.execute(
            select(ResumeRequestModel, ResumeVersionModel.structured_data)
            .outerjoin(
                ProcessedResumeModel,
                ProcessedResumeModel.request_id == ResumeRequestModel.request_id
            )
            .outerjoin(
                ResumeVersionModel,
                ResumeVersionModel.id == ProcessedResumeModel.active_version_id
            )
            .where(ResumeRequestModel.user_id == user_id)
            .order_by(ResumeRequestModel.created_at.desc())
        )

        items = []
        for model, structured_data in result.all():
            header = (structured_data or {}).get("header") or {}
            contact = header.get("contact") or {}
            items.append(ResumeListItem(
                request_id=model.request_id,
                original_filename=model.original_filename,
                status=model.status,
                created_at=model.created_at,
                completed_at=model.completed_at,
                full_name=header.get("name") or None,
                email=contact.get("email") or None,
            ))
        return items

    async def _transition(
        self,
        request_id: UUID,
        apply: Callable[[ResumeRequest], None]
    ) -> ResumeRequest:
        entity = await self.get_by_request_id(request_id)
        if entity is None:
            raise ResourceNotFoundException("ResumeRequest", str(request_id))

        previous_status = entity.status
        apply(entity)

        result = await self.session.execute(
            update(ResumeRequestModel)
            .where(
                ResumeRequestModel.request_id == request_id,
                ResumeRequestModel.status == previous_status.value
            )
            .values(
                status=entity.status.value,
                s3_input_url=entity.s3_input_url,
                s3_output_url=entity.s3_output_url,
                processing_time_ms=entity.processing_time_ms,
                error_message=entity.error_message,
                uploaded_at=entity.uploaded_at,
                completed_at=entity.completed_at,
            )
        )

        if result.rowcount == 0:
            # Another writer moved the request first
            logger.warning(
                f"Concurrent status change on request {request_id} "
                f"(expected '{previous_status.value}')"
            )
            raise InvalidStateTransitionException(
                str(request_id), previous_status.value, entity.status.value
            )

        await self.session.flush()
        logger.debug(f"Request {request_id}: {previous_status.value} -> {entity.status.value}")
        return entity

    def _to_model(self, entity: ResumeRequest) -> ResumeRequestModel:
        return ResumeRequestModel(
            request_id=entity.request_id,
            user_id=entity.user_id,
            original_filename=entity.original_filename,
            original_file_type=entity.original_file_type,
            file_size_bytes=entity.file_size_bytes,
            language=entity.language,
            instructions=entity.instructions,
            s3_input_url=entity.s3_input_url,
            s3_output_url=entity.s3_output_url,
            status=entity.status.value,
            processing_time_ms=entity.processing_time_ms,
            error_message=entity.error_message,
            created_at=entity.created_at,
            uploaded_at=entity.uploaded_at,
            completed_at=entity.completed_at
        )

    def _to_entity(self, model: ResumeRequestModel) -> ResumeRequest:
        return ResumeRequest(
            request_id=model.request_id,
            user_id=model.user_id,
            original_filename=model.original_filename,
            original_file_type=model.original_file_type,
            file_size_bytes=model.file_size_bytes,
            language=model.language,
            instructions=model.instructions or "",
            s3_input_url=model.s3_input_url,
            s3_output_url=model.s3_output_url,
            status=ResumeRequestStatus(model.status),
            processing_time_ms=model.processing_time_ms,
            error_message=model.error_message,
            created_at=model.created_at,
            uploaded_at=model.uploaded_at,
            completed_at=model.completed_at
        )
