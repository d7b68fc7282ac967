"""Domain Entities - Core business objects"""

from .resume_request import ResumeRequest
from .resume_version import ResumeVersion, ProcessedResume
__all__ = ["ResumeRequest", "ResumeVersion", "ProcessedResume"]
