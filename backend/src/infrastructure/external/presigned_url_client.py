"""
Presigned URL Client
Requests signed upload URLs from the upload broker and performs the raw PUT
"""
from typing import Dict, Optional

import httpx
from loguru import logger

from core.config import settings
from core.exceptions import UploadBrokerException, UploadException
from application.services.resume import IUploadBroker, UploadLocation


METADATA_HEADER_PREFIX = "x-amz-meta-"


def metadata_headers(content_type: str, metadata: Dict[str, str]) -> Dict[str, str]:
    """Object-store headers echoing the metadata declared at issuance"""
    headers = {"Content-Type": content_type}
    for key, value in metadata.items():
        headers[f"{METADATA_HEADER_PREFIX}{key.replace('_', '-')}"] = value
    return headers


class PresignedUrlClient(IUploadBroker):
    """HTTP client for the presigned URL service"""

    def __init__(self, endpoint: Optional[str] = None, timeout: Optional[float] = None):
        self.endpoint = endpoint or settings.PRESIGNED_URL_SERVICE_ENDPOINT
        self.timeout = timeout or settings.UPLOAD_TIMEOUT_SECONDS

    async def request_upload_location(
        self,
        filename: str,
        content_type: str,
        metadata: Dict[str, str]
    ) -> UploadLocation:
        payload = {
            "filename": filename,
            "content_type": content_type,
            "metadata": metadata,
        }

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(self.endpoint, json=payload)
        except httpx.HTTPError as e:
            logger.error(f"❌ Presigned URL request failed: {e}")
            raise UploadBrokerException(f"Upload broker unreachable: {e}") from e

        if response.status_code not in (200, 201):
            logger.error(
                f"❌ Presigned URL service returned {response.status_code}: {response.text[:500]}"
            )
            raise UploadBrokerException(
                f"Upload broker returned status {response.status_code}"
            )

        try:
            data = response.json()
            url = data["url"]
        except (ValueError, KeyError, TypeError) as e:
            logger.error(f"❌ Invalid presigned URL response: {e}")
            raise UploadBrokerException("Upload broker returned an invalid response") from e

        if not url:
            raise UploadBrokerException("Upload broker returned an empty URL")

        return UploadLocation(url=url, expires_in=str(data.get("expires_in", "")))

    async def upload(
        self,
        location: UploadLocation,
        content: bytes,
        content_type: str,
        metadata: Dict[str, str]
    ) -> None:
        headers = metadata_headers(content_type, metadata)
        logger.info(f"🔄 Uploading {len(content)} bytes to {location.base_url}")

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.put(location.url, content=content, headers=headers)
        except httpx.HTTPError as e:
            logger.error(f"❌ Upload to object storage failed: {e}")
            raise UploadException(f"Upload failed: {e}") from e

        if response.status_code not in (200, 204):
            logger.error(
                f"❌ Object storage rejected upload ({response.status_code}): {response.text[:500]}"
            )
            raise UploadException(f"Object storage returned status {response.status_code}")

        logger.info(f"✅ Object storage accepted upload ({response.status_code})")
