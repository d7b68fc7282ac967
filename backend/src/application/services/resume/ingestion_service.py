"""
Result Ingestion Service
Asynchronous half of the ingestion workflow: consumes extraction pipeline
notifications and turns them into the initial resume version.
"""
from typing import Any
from uuid import UUID

from loguru import logger
from pydantic import ValidationError as PydanticValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.exceptions import (
    DomainException,
    ExtractionFailedException,
    InvalidStateTransitionException,
    RepositoryException,
    ResourceNotFoundException,
    ValidationException,
)
from application.repositories.interfaces import IResumeRequestRepository, IResumeVersionRepository
from application.services.resume.lifecycle import record_failure
from application.services.resume.sanitizers import StructuredDataError, parse_structured_data
from domain.entities import ResumeRequest, ResumeVersion
from domain.value_objects import ExtractionResult, ResumeRequestStatus, VersionCreator


INITIAL_VERSION_NAME = "initial version"


def parse_request_id(value: Any) -> UUID:
    """Parse a request identifier, raising ValidationException when malformed"""
    if isinstance(value, UUID):
        return value
    if not isinstance(value, str) or not value.strip():
        raise ValidationException("request_id", "request_id is required")
    try:
        return UUID(value.strip())
    except ValueError:
        raise ValidationException("request_id", f"Invalid request_id: {value}")


class ResultIngestionService:
    """Applies extraction pipeline notifications to resume requests"""

    def __init__(
        self,
        session: AsyncSession,
        request_repo: IResumeRequestRepository,
        version_repo: IResumeVersionRepository
    ):
        self.session = session
        self.request_repo = request_repo
        self.version_repo = version_repo

    def _parse(self, payload: Any) -> ExtractionResult:
        if not isinstance(payload, dict):
            raise ValidationException("body", "Callback payload must be a JSON object")
        try:
            return ExtractionResult.model_validate(payload)
        except PydanticValidationError as e:
            raise ValidationException("body", f"Invalid callback payload: {e.errors()[0]['msg']}")

    async def _load(self, request_id: UUID) -> ResumeRequest:
        request = await self.request_repo.get_by_request_id(request_id)
        if request is None:
            raise ResourceNotFoundException("ResumeRequest", str(request_id))
        return request

    async def ingest(self, payload: Any) -> ResumeVersion:
        """
        Store the pipeline's structured data as the initial version.

        Raises:
            ValidationException: malformed payload or request_id (no state change)
            ResourceNotFoundException: unknown request
            InvalidStateTransitionException: request still pending, or already
                completed or failed (no state change)
            ExtractionFailedException: pipeline failure or undecodable data
                (request marked failed)
            RepositoryException: version could not be stored (request marked failed)
        """
        result = self._parse(payload)
        request_id = parse_request_id(result.request_id)
        request = await self._load(request_id)

        logger.info(
            f"📥 Extraction result received: request_id={request_id}, "
            f"status={result.status}, processing_time_ms={result.processing_time_ms}"
        )

        if request.is_terminal:
            logger.warning(
                f"⚠️ Ignoring callback for request {request_id} already in {request.status.value}"
            )
            raise InvalidStateTransitionException(
                str(request_id), request.status.value, ResumeRequestStatus.COMPLETED.value
            )

        # The upload has not been recorded yet; the pipeline retries on 409
        if request.status == ResumeRequestStatus.PENDING:
            logger.warning(f"⚠️ Callback for request {request_id} arrived before its upload was recorded")
            raise InvalidStateTransitionException(
                str(request_id), request.status.value, ResumeRequestStatus.COMPLETED.value
            )

        if not result.succeeded:
            message = f"Extraction pipeline reported status: {result.status or 'unknown'}"
            await record_failure(self.session, self.request_repo, request_id, message)
            raise ExtractionFailedException(message)

        if result.structured_data is None:
            message = "Extraction pipeline returned no structured data"
            await record_failure(self.session, self.request_repo, request_id, message)
            raise ExtractionFailedException(message)

        try:
            cv_data = parse_structured_data(result.structured_data)
        except StructuredDataError as e:
            logger.error(f"❌ Structured data for request {request_id} rejected: {e}")
            await record_failure(
                self.session, self.request_repo, request_id,
                "Structured data could not be decoded"
            )
            raise ExtractionFailedException("Structured data could not be decoded") from e

        logger.info(
            f"CV data for {request_id}: name={cv_data.header.name!r}, "
            f"experience={len(cv_data.professionalExperience)}, "
            f"education={len(cv_data.education)}, "
            f"certifications={len(cv_data.certifications)}"
        )

        try:
            version = await self.version_repo.create_version(
                request_id=request_id,
                user_id=request.user_id,
                structured_data=cv_data.model_dump(),
                version_name=INITIAL_VERSION_NAME,
                created_by=VersionCreator.SYSTEM,
            )
            await self.session.commit()
        except (SQLAlchemyError, RepositoryException) as e:
            logger.error(f"❌ Failed to store initial version for request {request_id}: {e}")
            await record_failure(
                self.session, self.request_repo, request_id,
                "Failed to store processed resume"
            )
            raise RepositoryException("Failed to store processed resume") from e

        logger.info(f"✅ Stored {version} for request {request_id}")

        try:
            await self.request_repo.mark_completed(
                request_id, result.output_file or None, result.processing_time_ms
            )
            await self.session.commit()
        except (SQLAlchemyError, DomainException) as e:
            # The version is already durable
            await self.session.rollback()
            logger.error(f"⚠️ Version stored but completion update failed for {request_id}: {e}")

        return version

    async def mark_processing(self, payload: Any) -> ResumeRequest:
        """Record that the pipeline picked up an uploaded request"""
        if not isinstance(payload, dict):
            raise ValidationException("body", "Payload must be a JSON object")
        request_id = parse_request_id(payload.get("request_id"))
        await self._load(request_id)

        request = await self.request_repo.mark_processing(request_id)
        await self.session.commit()
        logger.info(f"⚙️ Request {request_id} is processing")
        return request
