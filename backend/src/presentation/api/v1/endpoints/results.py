"""Extraction Pipeline Callback Endpoints

Unauthenticated; the embedded request_id is the only correlation.
"""
from typing import Any

from fastapi import APIRouter, Depends, Request

from application.services.resume.ingestion_service import ResultIngestionService
from core.exceptions import ValidationException
from presentation.api.v1.container import get_ingestion_service
from presentation.api.v1.schemas.resume import CallbackResponse


router = APIRouter()


async def _json_body(request: Request) -> Any:
    try:
        return await request.json()
    except ValueError:
        raise ValidationException("body", "Request body is not valid JSON")


@router.post("/resume/results", response_model=CallbackResponse)
async def receive_extraction_result(
    request: Request,
    service: ResultIngestionService = Depends(get_ingestion_service),
) -> CallbackResponse:
    """Store the extracted CV data as the initial version and complete the request"""
    payload = await _json_body(request)
    version = await service.ingest(payload)

    return CallbackResponse(
        message="Processed resume stored",
        request_id=str(version.request_id),
        version_id=version.id,
        version_number=version.version_number,
    )


@router.post("/resume/results/processing", response_model=CallbackResponse)
async def mark_extraction_processing(
    request: Request,
    service: ResultIngestionService = Depends(get_ingestion_service),
) -> CallbackResponse:
    payload = await _json_body(request)
    resume_request = await service.mark_processing(payload)

    return CallbackResponse(
        message="Request marked as processing",
        request_id=str(resume_request.request_id),
    )
