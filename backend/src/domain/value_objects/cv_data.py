"""
Structured CV Data
Shape of the resume data returned by the extraction pipeline
"""
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, ValidationInfo, field_validator


class CVSection(BaseModel):
    """Base for CV sections; a JSON null falls back to the field default"""

    @field_validator("*", mode="before")
    @classmethod
    def null_as_default(cls, v: Any, info: ValidationInfo) -> Any:
        if v is None:
            return cls.model_fields[info.field_name].get_default(call_default_factory=True)
        return v


class Contact(CVSection):
    email: str = ""
    phone: str = ""


class Header(CVSection):
    name: str = ""
    contact: Contact = Field(default_factory=Contact)


class Certification(CVSection):
    # issueDate / expiryDate / date may also be present
    model_config = ConfigDict(extra="allow")

    name: str = ""
    dateObtained: str = ""


class Education(CVSection):
    degree: str = ""
    institution: str = ""
    graduationDate: str = ""
    achievements: List[str] = Field(default_factory=list)


class Period(CVSection):
    start: str = ""
    end: str = ""


class Experience(CVSection):
    company: str = ""
    position: str = ""
    period: Period = Field(default_factory=Period)
    responsibilities: List[str] = Field(default_factory=list)


class Project(CVSection):
    name: str = ""
    description: str = ""
    technologies: List[str] = Field(default_factory=list)


class TechnicalSkills(CVSection):
    skills: List[str] = Field(default_factory=list)


class CVProcessedData(CVSection):
    """Structured CV payload stored on every resume version"""

    header: Header = Field(default_factory=Header)
    certifications: List[Certification] = Field(default_factory=list)
    education: List[Education] = Field(default_factory=list)
    professionalExperience: List[Experience] = Field(default_factory=list)
    projects: List[Project] = Field(default_factory=list)
    technicalSkills: TechnicalSkills = Field(default_factory=TechnicalSkills)


class ExtractionResult(BaseModel):
    """Completion notification posted by the extraction pipeline"""

    request_id: Optional[str] = None
    input_file: str = ""
    output_file: str = ""
    processing_time_ms: Optional[int] = None
    status: str = ""
    structured_data: Optional[Any] = None

    @property
    def succeeded(self) -> bool:
        return self.status.strip().lower() == "success"
