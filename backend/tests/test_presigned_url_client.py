"""
Tests for the presigned URL upload broker client
"""
import httpx
import pytest
from unittest.mock import Mock, AsyncMock, patch

from application.services.resume import UploadLocation
from core.exceptions import UploadBrokerException, UploadException
from infrastructure.external.presigned_url_client import PresignedUrlClient, metadata_headers


METADATA = {"request_id": "6f1c1a0e-0000-4000-8000-000000000001", "language": "en", "instructions": "highlight leadership"}


def _response(status_code: int, json_data=None, text: str = "") -> Mock:
    response = Mock()
    response.status_code = status_code
    response.text = text
    response.json.return_value = json_data
    return response


class TestMetadataHeaders:

    def test_metadata_becomes_amz_headers(self):
        headers = metadata_headers("application/pdf", METADATA)

        assert headers["Content-Type"] == "application/pdf"
        assert headers["x-amz-meta-request-id"] == METADATA["request_id"]
        assert headers["x-amz-meta-language"] == "en"
        assert headers["x-amz-meta-instructions"] == "highlight leadership"


class TestPresignedUrlClient:

    @pytest.fixture
    def client(self):
        return PresignedUrlClient(endpoint="https://uploads.test/presigned-url", timeout=5)

    @pytest.mark.asyncio
    async def test_request_upload_location(self, client):
        url = "https://bucket.test/uploads/cv.pdf?X-Amz-Signature=abc"

        with patch('httpx.AsyncClient') as mock_client_class:
            mock_client_instance = AsyncMock()
            mock_client_instance.post.return_value = _response(200, {"url": url, "expires_in": 3600})
            mock_client_class.return_value.__aenter__.return_value = mock_client_instance

            location = await client.request_upload_location("cv.pdf", "application/pdf", METADATA)

            mock_client_instance.post.assert_awaited_once_with(
                "https://uploads.test/presigned-url",
                json={"filename": "cv.pdf", "content_type": "application/pdf", "metadata": METADATA},
            )

        assert location.url == url
        assert location.expires_in == "3600"
        assert location.base_url == "https://bucket.test/uploads/cv.pdf"

    @pytest.mark.asyncio
    async def test_broker_error_status(self, client):
        with patch('httpx.AsyncClient') as mock_client_class:
            mock_client_instance = AsyncMock()
            mock_client_instance.post.return_value = _response(500, text="internal error")
            mock_client_class.return_value.__aenter__.return_value = mock_client_instance

            with pytest.raises(UploadBrokerException):
                await client.request_upload_location("cv.pdf", "application/pdf", METADATA)

    @pytest.mark.asyncio
    async def test_broker_response_without_url(self, client):
        with patch('httpx.AsyncClient') as mock_client_class:
            mock_client_instance = AsyncMock()
            mock_client_instance.post.return_value = _response(200, {"expires_in": 3600})
            mock_client_class.return_value.__aenter__.return_value = mock_client_instance

            with pytest.raises(UploadBrokerException):
                await client.request_upload_location("cv.pdf", "application/pdf", METADATA)

    @pytest.mark.asyncio
    async def test_broker_timeout(self, client):
        with patch('httpx.AsyncClient') as mock_client_class:
            mock_client_instance = AsyncMock()
            mock_client_instance.post.side_effect = httpx.ReadTimeout("timed out")
            mock_client_class.return_value.__aenter__.return_value = mock_client_instance

            with pytest.raises(UploadBrokerException):
                await client.request_upload_location("cv.pdf", "application/pdf", METADATA)

    @pytest.mark.asyncio
    async def test_upload_sends_matching_metadata_headers(self, client):
        location = UploadLocation(url="https://bucket.test/uploads/cv.pdf?X-Amz-Signature=abc")

        with patch('httpx.AsyncClient') as mock_client_class:
            mock_client_instance = AsyncMock()
            mock_client_instance.put.return_value = _response(200)
            mock_client_class.return_value.__aenter__.return_value = mock_client_instance

            await client.upload(location, b"%PDF-1.4 test", "application/pdf", METADATA)

            mock_client_instance.put.assert_awaited_once_with(
                location.url,
                content=b"%PDF-1.4 test",
                headers=metadata_headers("application/pdf", METADATA),
            )

    @pytest.mark.asyncio
    async def test_upload_rejected(self, client):
        location = UploadLocation(url="https://bucket.test/uploads/cv.pdf?X-Amz-Signature=abc")

        with patch('httpx.AsyncClient') as mock_client_class:
            mock_client_instance = AsyncMock()
            mock_client_instance.put.return_value = _response(403, text="SignatureDoesNotMatch")
            mock_client_class.return_value.__aenter__.return_value = mock_client_instance

            with pytest.raises(UploadException):
                await client.upload(location, b"%PDF-1.4 test", "application/pdf", METADATA)
