"""
ResumeVersion / ProcessedResume ORM Models
Version log per request plus the thin active-version pointer row
"""
from sqlalchemy import (
    Column,
    String,
    Integer,
    BigInteger,
    DateTime,
    ForeignKey,
    JSON,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.sql import func

from core.database import Base
from domain.value_objects import VersionStatus, VersionCreator

# SQLite only auto-increments INTEGER PRIMARY KEY columns
SurrogateKey = BigInteger().with_variant(Integer, "sqlite")


class ResumeVersionModel(Base):
    """Append-only structured CV snapshots"""

    __tablename__ = "resume_versions"
    __table_args__ = (
        UniqueConstraint("request_id", "version_number", name="uq_resume_versions_request_id_version_number"),
    )

    # Primary Key
    id = Column(SurrogateKey, primary_key=True, autoincrement=True)

    # Foreign Keys
    request_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("resume_requests.request_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    user_id = Column(String(255), nullable=False, index=True)

    # Version data
    version_number = Column(Integer, nullable=False)
    structured_data = Column(JSON, nullable=False)
    version_name = Column(String(255), nullable=True)
    created_by = Column(String(20), nullable=False, default=VersionCreator.SYSTEM.value)
    status = Column(String(20), nullable=False, default=VersionStatus.ACTIVE.value, index=True)

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)

    def __repr__(self):
        return f"<ResumeVersionModel {self.id} v{self.version_number} - {self.status}>"


class ProcessedResumeModel(Base):
    """One row per request once extraction succeeded; points at the active version"""

    __tablename__ = "processed_resumes"

    # Primary Key
    id = Column(SurrogateKey, primary_key=True, autoincrement=True)

    # Foreign Keys
    request_id = Column(
        Uuid(as_uuid=True),
        ForeignKey("resume_requests.request_id", ondelete="CASCADE"),
        nullable=False,
        unique=True,
    )
    user_id = Column(String(255), nullable=False, index=True)
    active_version_id = Column(
        SurrogateKey,
        ForeignKey("resume_versions.id", ondelete="SET NULL"),
        nullable=True,
    )

    # Timestamps
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False)

    def __repr__(self):
        return f"<ProcessedResumeModel {self.request_id} -> {self.active_version_id}>"
