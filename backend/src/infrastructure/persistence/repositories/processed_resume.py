"""
ProcessedResume Repository Implementation
"""
from typing import Optional
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from application.repositories.interfaces import IProcessedResumeRepository
from domain.entities import ProcessedResume
from infrastructure.persistence.models import ProcessedResumeModel


class SQLAlchemyProcessedResumeRepository(IProcessedResumeRepository):
    def __init__(self, session: AsyncSession):
        self.session = session

    async def get_by_request_id(self, request_id: UUID) -> Optional[ProcessedResume]:
        result = await self.session.execute(
            select(ProcessedResumeModel)
            .where(ProcessedResumeModel.request_id == request_id)
            .execution_options(populate_existing=True)
        )
        model = result.scalar_one_or_none()
        return self._to_entity(model) if model else None

    def _to_entity(self, model: ProcessedResumeModel) -> ProcessedResume:
        return ProcessedResume(
            id=model.id,
            request_id=model.request_id,
            user_id=model.user_id,
            active_version_id=model.active_version_id,
            created_at=model.created_at,
            updated_at=model.updated_at
        )
