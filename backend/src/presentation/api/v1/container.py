"""
Dependency Injection Container
Manages service and repository instances
"""
from sqlalchemy.ext.asyncio import AsyncSession
from fastapi import Depends

from core.database import get_db
from application.repositories.interfaces import (
    IProcessedResumeRepository,
    IResumeRequestRepository,
    IResumeVersionRepository,
)
from application.services.auth.interfaces import ITokenVerifier
from application.services.resume import IDocumentConverter, IUploadBroker
from application.services.resume.ingestion_service import ResultIngestionService
from application.services.resume.query_service import ResumeQueryService
from application.services.resume.submission_service import ResumeSubmissionService
from application.services.resume.version_service import ResumeVersionService
from infrastructure.external.pdf_converter import PdfConverter
from infrastructure.external.presigned_url_client import PresignedUrlClient
from infrastructure.persistence.repositories.processed_resume import SQLAlchemyProcessedResumeRepository
from infrastructure.persistence.repositories.resume_request import SQLAlchemyResumeRequestRepository
from infrastructure.persistence.repositories.resume_version import SQLAlchemyResumeVersionRepository
from infrastructure.security.jwks_service import JwksTokenVerifier


# Singleton instances
_token_verifier: ITokenVerifier | None = None
_document_converter: IDocumentConverter | None = None
_upload_broker: IUploadBroker | None = None


def get_token_verifier() -> ITokenVerifier:
    """Get JWKS token verifier instance (singleton, holds the key cache)"""
    global _token_verifier
    if _token_verifier is None:
        _token_verifier = JwksTokenVerifier()
    return _token_verifier


def get_document_converter() -> IDocumentConverter:
    """Get PDF converter instance (singleton)"""
    global _document_converter
    if _document_converter is None:
        _document_converter = PdfConverter()
    return _document_converter


def get_upload_broker() -> IUploadBroker:
    """Get presigned URL client instance (singleton)"""
    global _upload_broker
    if _upload_broker is None:
        _upload_broker = PresignedUrlClient()
    return _upload_broker


def get_resume_request_repository(
    session: AsyncSession = Depends(get_db)
) -> IResumeRequestRepository:
    """Get resume request repository instance (per-request)"""
    return SQLAlchemyResumeRequestRepository(session)


def get_processed_resume_repository(
    session: AsyncSession = Depends(get_db)
) -> IProcessedResumeRepository:
    """Get processed resume repository instance (per-request)"""
    return SQLAlchemyProcessedResumeRepository(session)


def get_resume_version_repository(
    session: AsyncSession = Depends(get_db)
) -> IResumeVersionRepository:
    """Get resume version repository instance (per-request)"""
    return SQLAlchemyResumeVersionRepository(session)


def get_submission_service(
    session: AsyncSession = Depends(get_db),
    request_repo: IResumeRequestRepository = Depends(get_resume_request_repository),
    converter: IDocumentConverter = Depends(get_document_converter),
    upload_broker: IUploadBroker = Depends(get_upload_broker)
) -> ResumeSubmissionService:
    return ResumeSubmissionService(session, request_repo, converter, upload_broker)


def get_ingestion_service(
    session: AsyncSession = Depends(get_db),
    request_repo: IResumeRequestRepository = Depends(get_resume_request_repository),
    version_repo: IResumeVersionRepository = Depends(get_resume_version_repository)
) -> ResultIngestionService:
    return ResultIngestionService(session, request_repo, version_repo)


def get_query_service(
    request_repo: IResumeRequestRepository = Depends(get_resume_request_repository),
    processed_repo: IProcessedResumeRepository = Depends(get_processed_resume_repository),
    version_repo: IResumeVersionRepository = Depends(get_resume_version_repository)
) -> ResumeQueryService:
    return ResumeQueryService(request_repo, processed_repo, version_repo)


def get_version_service(
    session: AsyncSession = Depends(get_db),
    processed_repo: IProcessedResumeRepository = Depends(get_processed_resume_repository),
    version_repo: IResumeVersionRepository = Depends(get_resume_version_repository)
) -> ResumeVersionService:
    return ResumeVersionService(session, processed_repo, version_repo)
