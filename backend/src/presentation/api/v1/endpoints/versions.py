"""Resume Version Endpoints

Owner-scoped management of a processed resume's structured-data versions.
"""
from fastapi import APIRouter, Depends, status

from application.services.resume.ingestion_service import parse_request_id
from application.services.resume.version_service import ResumeVersionService
from domain.entities import ResumeVersion
from presentation.api.v1.container import get_version_service
from presentation.api.v1.dependencies import get_current_owner
from presentation.api.v1.schemas.resume import (
    CreateVersionRequest,
    MessageResponse,
    VersionListResponse,
    VersionResponse,
)


router = APIRouter()


def _to_response(version: ResumeVersion, is_active: bool, include_data: bool = True) -> VersionResponse:
    return VersionResponse(
        id=version.id,
        request_id=str(version.request_id),
        version_number=version.version_number,
        version_name=version.version_name,
        created_by=version.created_by.value,
        created_at=version.created_at,
        is_active=is_active,
        structured_data=version.structured_data if include_data else None,
    )


@router.get("/resume/{request_id}/versions", response_model=VersionListResponse)
async def list_versions(
    request_id: str,
    owner_id: str = Depends(get_current_owner),
    service: ResumeVersionService = Depends(get_version_service),
) -> VersionListResponse:
    """Active versions newest first; the current one is flagged"""
    rid = parse_request_id(request_id)
    versions, active_version_id = await service.list_versions(owner_id, rid)

    return VersionListResponse(
        request_id=str(rid),
        active_version_id=active_version_id,
        versions=[
            _to_response(v, v.id == active_version_id, include_data=False)
            for v in versions
        ],
    )


@router.post(
    "/resume/{request_id}/versions",
    response_model=VersionResponse,
    status_code=status.HTTP_201_CREATED,
)
async def create_version(
    request_id: str,
    body: CreateVersionRequest,
    owner_id: str = Depends(get_current_owner),
    service: ResumeVersionService = Depends(get_version_service),
) -> VersionResponse:
    version = await service.create_version(
        owner_id,
        parse_request_id(request_id),
        body.structured_data,
        body.version_name,
    )
    return _to_response(version, is_active=True)


@router.put(
    "/resume/{request_id}/versions/{version_id}/activate",
    response_model=MessageResponse,
)
async def activate_version(
    request_id: str,
    version_id: int,
    owner_id: str = Depends(get_current_owner),
    service: ResumeVersionService = Depends(get_version_service),
) -> MessageResponse:
    await service.activate_version(owner_id, parse_request_id(request_id), version_id)
    return MessageResponse(message=f"Version {version_id} activated")


@router.get("/resume/versions/{version_id}", response_model=VersionResponse)
async def get_version(
    version_id: int,
    owner_id: str = Depends(get_current_owner),
    service: ResumeVersionService = Depends(get_version_service),
) -> VersionResponse:
    version, is_active = await service.get_version(owner_id, version_id)
    return _to_response(version, is_active)


@router.delete("/resume/versions/{version_id}", response_model=MessageResponse)
async def delete_version(
    version_id: int,
    owner_id: str = Depends(get_current_owner),
    service: ResumeVersionService = Depends(get_version_service),
) -> MessageResponse:
    await service.delete_version(owner_id, version_id)
    return MessageResponse(message=f"Version {version_id} deleted")
