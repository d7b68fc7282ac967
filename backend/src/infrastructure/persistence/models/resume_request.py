"""
ResumeRequest ORM Model
SQLAlchemy model for submitted resume files and their processing status
"""
import uuid
from sqlalchemy import Column, String, Integer, BigInteger, DateTime, Text, Uuid
from sqlalchemy.sql import func

from core.database import Base
from domain.value_objects import ResumeRequestStatus


class ResumeRequestModel(Base):
    """Resume request table ORM model (append-only audit trail)"""

    __tablename__ = "resume_requests"

    # Primary Key
    request_id = Column(Uuid(as_uuid=True), primary_key=True, default=uuid.uuid4)

    # Owner (token subject)
    user_id = Column(String(255), nullable=False, index=True)

    # Submitted file
    original_filename = Column(String(500), nullable=False)
    original_file_type = Column(String(20), nullable=False)
    file_size_bytes = Column(BigInteger, nullable=False, default=0)
    language = Column(String(20), nullable=False)
    instructions = Column(Text, nullable=False, default="")

    # External storage locators
    s3_input_url = Column(Text, nullable=True)
    s3_output_url = Column(Text, nullable=True)

    # Lifecycle
    status = Column(String(20), nullable=False, default=ResumeRequestStatus.PENDING.value, index=True)
    processing_time_ms = Column(Integer, nullable=True)
    error_message = Column(Text, nullable=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False, index=True)
    uploaded_at = Column(DateTime(timezone=True), nullable=True)
    completed_at = Column(DateTime(timezone=True), nullable=True)

    def __repr__(self):
        return f"<ResumeRequestModel {self.request_id} - {self.status}>"
