"""Resume Endpoints

1. POST /resume
	- Accepts a resume file (.pdf, .txt, .docx), instructions and language.
	- Converts it to PDF and uploads it through a presigned URL.
	- Returns 202 with the request id; extraction finishes asynchronously.

2. GET /resume/my-resumes
	- Lists the caller's requests, most recent first.

3. GET /resume/{request_id}
	- Request record plus the active version's structured data.
"""
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile, status
from loguru import logger

from application.services.resume.ingestion_service import parse_request_id
from application.services.resume.query_service import ResumeQueryService
from application.services.resume.submission_service import ResumeSubmissionService
from presentation.api.v1.container import get_query_service, get_submission_service
from presentation.api.v1.dependencies import get_current_owner
from presentation.api.v1.schemas.resume import (
    ResumeDetailResponse,
    ResumeListResponse,
    ResumeSummary,
    SubmitResumeResponse,
)


router = APIRouter()


@router.post(
	"/resume",
	response_model=SubmitResumeResponse,
	status_code=status.HTTP_202_ACCEPTED,
)
async def submit_resume(
	file: UploadFile = File(...),
	instructions: str = Form(""),
	language: Optional[str] = Form(None),
	owner_id: str = Depends(get_current_owner),
	service: ResumeSubmissionService = Depends(get_submission_service),
) -> SubmitResumeResponse:
	"""Submit a resume for structured extraction."""
	content = await file.read()
	logger.info(f"📤 Resume submitted by {owner_id}: {file.filename} ({len(content)} bytes)")

	request = await service.submit(
		owner_id=owner_id,
		filename=file.filename or "",
		content=content,
		instructions=instructions,
		language=language,
	)

	return SubmitResumeResponse(
		request_id=str(request.request_id),
		status=request.status.value,
	)


@router.get("/resume/my-resumes", response_model=ResumeListResponse)
async def list_my_resumes(
	owner_id: str = Depends(get_current_owner),
	service: ResumeQueryService = Depends(get_query_service),
) -> ResumeListResponse:
	items = await service.list_resumes(owner_id)
	resumes = [
		ResumeSummary(
			request_id=str(item.request_id),
			original_filename=item.original_filename,
			status=item.status,
			created_at=item.created_at,
			completed_at=item.completed_at,
			full_name=item.full_name,
			email=item.email,
		)
		for item in items
	]
	return ResumeListResponse(resumes=resumes, total=len(resumes))


@router.get("/resume/{request_id}", response_model=ResumeDetailResponse)
async def get_resume(
	request_id: str,
	owner_id: str = Depends(get_current_owner),
	service: ResumeQueryService = Depends(get_query_service),
) -> ResumeDetailResponse:
	detail = await service.get_detail(owner_id, parse_request_id(request_id))
	request = detail.request
	version = detail.active_version

	return ResumeDetailResponse(
		request_id=str(request.request_id),
		user_id=request.user_id,
		original_filename=request.original_filename,
		original_file_type=request.original_file_type,
		file_size_bytes=request.file_size_bytes,
		language=request.language,
		instructions=request.instructions,
		status=request.status.value,
		s3_input_url=request.s3_input_url,
		s3_output_url=request.s3_output_url,
		processing_time_ms=request.processing_time_ms,
		error_message=request.error_message,
		created_at=request.created_at,
		uploaded_at=request.uploaded_at,
		completed_at=request.completed_at,
		active_version_id=version.id if version else None,
		structured_data=version.structured_data if version else None,
	)
