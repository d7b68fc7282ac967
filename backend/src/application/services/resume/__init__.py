"""
Resume Collaborator Interfaces
Document conversion and the presigned-upload broker
"""
from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Dict


@dataclass(frozen=True)
class ConvertedDocument:
    """PDF produced from an uploaded resume"""
    content: bytes
    filename: str


@dataclass(frozen=True)
class UploadLocation:
    """Time-limited signed upload URL issued by the broker"""
    url: str
    expires_in: str = ""

    @property
    def base_url(self) -> str:
        """URL without the signature query string"""
        return self.url.split("?", 1)[0]


class IDocumentConverter(ABC):
    """Converts supported documents to PDF bytes"""

    @abstractmethod
    def convert(self, content: bytes, filename: str) -> ConvertedDocument:
        """
        Convert a document to PDF

        Raises:
            ConversionException for unsupported or unreadable files
        """
        pass


class IUploadBroker(ABC):
    """Issues upload locations and receives the raw upload"""

    @abstractmethod
    async def request_upload_location(
        self,
        filename: str,
        content_type: str,
        metadata: Dict[str, str]
    ) -> UploadLocation:
        """
        Obtain a signed upload URL; the metadata is part of the signature

        Raises:
            UploadBrokerException on transport or service errors
        """
        pass

    @abstractmethod
    async def upload(
        self,
        location: UploadLocation,
        content: bytes,
        content_type: str,
        metadata: Dict[str, str]
    ) -> None:
        """
        PUT bytes to the location; metadata headers must match issuance

        Raises:
            UploadException on transport errors or rejected uploads
        """
        pass
