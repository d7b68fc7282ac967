"""ORM Models Package"""

from .resume_request import ResumeRequestModel
from .resume_version import ResumeVersionModel, ProcessedResumeModel

__all__ = [
    "ResumeRequestModel",
    "ResumeVersionModel",
    "ProcessedResumeModel",
]
