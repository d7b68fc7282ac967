"""
Resume Submission Service
Synchronous half of the ingestion workflow: validate, register, convert,
upload through a presigned URL and mark the request as uploaded.
"""
import asyncio
from pathlib import Path
from typing import Dict, Optional

from loguru import logger
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import settings
from core.exceptions import (
    ConversionException,
    DomainException,
    RepositoryException,
    UploadBrokerException,
    UploadException,
    ValidationException,
)
from application.repositories.interfaces import IResumeRequestRepository
from application.services.resume import ConvertedDocument, IDocumentConverter, IUploadBroker, UploadLocation
from application.services.resume.lifecycle import record_failure
from application.services.resume.sanitizers import sanitize_for_s3_metadata
from domain.entities import ResumeRequest


PDF_CONTENT_TYPE = "application/pdf"
LEGACY_EXTENSIONS = {".doc"}


def validate_resume_file(filename: Optional[str], size_bytes: int) -> str:
    """
    Check a submitted file against the allow-list and size limit.

    Returns:
        Lower-cased extension including the dot

    Raises:
        ValidationException before any state is persisted
    """
    if not filename:
        raise ValidationException("file", "A resume file is required")

    ext = Path(filename).suffix.lower()
    allowed = ", ".join(settings.ALLOWED_RESUME_EXTENSIONS)

    if ext in LEGACY_EXTENSIONS:
        raise ValidationException(
            "file",
            f"Unsupported file format '{ext}': legacy Word documents cannot be converted. "
            f"Allowed formats: {allowed}"
        )
    if ext not in settings.ALLOWED_RESUME_EXTENSIONS:
        raise ValidationException(
            "file",
            f"Unsupported file format '{ext or filename}'. Allowed formats: {allowed}"
        )
    if size_bytes <= 0:
        raise ValidationException("file", "Uploaded file is empty")
    if size_bytes > settings.max_file_size_bytes:
        raise ValidationException(
            "file",
            f"File exceeds the maximum size of {settings.MAX_FILE_SIZE_MB} MB"
        )
    return ext


class ResumeSubmissionService:
    """Submission path of the resume ingestion workflow"""

    def __init__(
        self,
        session: AsyncSession,
        request_repo: IResumeRequestRepository,
        converter: IDocumentConverter,
        upload_broker: IUploadBroker
    ):
        self.session = session
        self.request_repo = request_repo
        self.converter = converter
        self.upload_broker = upload_broker

    async def submit(
        self,
        owner_id: str,
        filename: str,
        content: bytes,
        instructions: str = "",
        language: Optional[str] = None
    ) -> ResumeRequest:
        """
        Register and upload a resume; extraction completes out-of-band.

        Returns:
            The request, in 'uploaded' status on success

        Raises:
            ValidationException: bad file (nothing persisted)
            RepositoryException: request could not be registered
            ConversionException / UploadBrokerException / UploadException:
                the request was marked as failed
        """
        ext = validate_resume_file(filename, len(content))
        language = (language or "").strip() or settings.DEFAULT_LANGUAGE
        instructions = instructions or ""

        request = ResumeRequest.new(
            user_id=owner_id,
            filename=filename,
            file_type=ext,
            file_size_bytes=len(content),
            language=language,
            instructions=instructions,
        )

        try:
            await self.request_repo.create(request)
            await self.session.commit()
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"❌ Failed to register resume request for {owner_id}: {e}")
            raise RepositoryException("Failed to register resume request") from e

        request_id = request.request_id
        logger.info(f"📝 Request created: request_id={request_id}, user_id={owner_id}, filename={filename}")

        converted = await self._convert(request, content)

        metadata = self._upload_metadata(request)
        location = await self._request_location(request, converted, metadata)
        await self._upload(request, location, converted, metadata)

        try:
            request = await self.request_repo.mark_uploaded(request_id, location.base_url)
            await self.session.commit()
            logger.info(f"✅ Request {request_id} uploaded to {location.base_url}")
        except (SQLAlchemyError, DomainException) as e:
            # The object is already in storage; extraction will still run
            await self.session.rollback()
            logger.error(f"⚠️ Upload done but status update failed for request {request_id}: {e}")

        return request

    async def _convert(self, request: ResumeRequest, content: bytes) -> ConvertedDocument:
        try:
            converted = await asyncio.to_thread(
                self.converter.convert, content, request.original_filename
            )
        except Exception as e:
            logger.error(f"❌ PDF conversion failed for request {request.request_id}: {e}")
            await record_failure(
                self.session, self.request_repo, request.request_id,
                f"Failed to convert file to PDF: {e}"
            )
            if isinstance(e, ConversionException):
                raise
            raise ConversionException(f"Failed to convert file to PDF: {e}") from e

        logger.info(f"PDF ready: {converted.filename} ({len(converted.content)} bytes)")
        return converted

    def _upload_metadata(self, request: ResumeRequest) -> Dict[str, str]:
        # Sent at issuance and on the PUT; both must be byte-identical
        return {
            "request_id": str(request.request_id),
            "language": sanitize_for_s3_metadata(request.language, settings.METADATA_MAX_LENGTH),
            "instructions": sanitize_for_s3_metadata(request.instructions, settings.METADATA_MAX_LENGTH),
        }

    async def _request_location(
        self,
        request: ResumeRequest,
        converted: ConvertedDocument,
        metadata: Dict[str, str]
    ) -> UploadLocation:
        logger.info(
            f"🔑 Requesting upload URL - request_id={request.request_id}, "
            f"filename={converted.filename}, language={metadata['language']}"
        )
        try:
            location = await self.upload_broker.request_upload_location(
                converted.filename, PDF_CONTENT_TYPE, metadata
            )
        except Exception as e:
            await record_failure(
                self.session, self.request_repo, request.request_id,
                f"Failed to obtain upload URL: {e}"
            )
            if isinstance(e, UploadBrokerException):
                raise
            raise UploadBrokerException(f"Failed to obtain upload URL: {e}") from e

        logger.info(f"Upload URL issued (expires in: {location.expires_in or 'n/a'})")
        return location

    async def _upload(
        self,
        request: ResumeRequest,
        location: UploadLocation,
        converted: ConvertedDocument,
        metadata: Dict[str, str]
    ) -> None:
        try:
            await self.upload_broker.upload(location, converted.content, PDF_CONTENT_TYPE, metadata)
        except Exception as e:
            await record_failure(
                self.session, self.request_repo, request.request_id,
                f"Failed to upload file to storage: {e}"
            )
            if isinstance(e, UploadException):
                raise
            raise UploadException(f"Failed to upload file to storage: {e}") from e
