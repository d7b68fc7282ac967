"""
Resume Request/Response Schemas
Pydantic v2 models for the resume and version endpoints
"""
from datetime import datetime
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, Field


class SubmitResumeResponse(BaseModel):
    """Accepted submission; status is the request status"""

    request_id: str
    status: str
    message: str = "Resume accepted for processing"


class ResumeSummary(BaseModel):
    request_id: str
    original_filename: str
    status: str
    created_at: datetime
    completed_at: Optional[datetime] = None
    full_name: Optional[str] = None
    email: Optional[str] = None


class ResumeListResponse(BaseModel):
    status: str = "success"
    resumes: List[ResumeSummary]
    total: int


class ResumeDetailResponse(BaseModel):
    """Full request record plus the active version's data once processed"""

    request_id: str
    user_id: str
    original_filename: str
    original_file_type: str
    file_size_bytes: int
    language: str
    instructions: str
    status: str
    s3_input_url: Optional[str] = None
    s3_output_url: Optional[str] = None
    processing_time_ms: Optional[int] = None
    error_message: Optional[str] = None
    created_at: datetime
    uploaded_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    active_version_id: Optional[int] = None
    structured_data: Optional[Dict[str, Any]] = None


class VersionResponse(BaseModel):
    id: int
    request_id: str
    version_number: int
    version_name: Optional[str] = None
    created_by: str
    created_at: Optional[datetime] = None
    is_active: bool = False
    structured_data: Optional[Dict[str, Any]] = None


class VersionListResponse(BaseModel):
    status: str = "success"
    request_id: str
    active_version_id: Optional[int] = None
    versions: List[VersionResponse]


class CreateVersionRequest(BaseModel):
    """User-edited structured data saved as a new version"""

    structured_data: Dict[str, Any]
    version_name: Optional[str] = Field(None, max_length=255)


class MessageResponse(BaseModel):
    status: str = "success"
    message: str


class CallbackResponse(BaseModel):
    status: str = "success"
    message: str
    request_id: str
    version_id: Optional[int] = None
    version_number: Optional[int] = None
