"""
Shared test fixtures
In-memory SQLite (aiosqlite) database, fake collaborators and an ASGI client
"""
import os

# Settings are read on import
os.environ["DATABASE_URL"] = "sqlite+aiosqlite://"
os.environ["DEBUG"] = "true"
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_TO_FILE"] = "false"
os.environ["LOG_JSON_FORMAT"] = "false"
os.environ["AUTH_JWKS_URL"] = "https://auth.test/.well-known/jwks.json"
os.environ["PRESIGNED_URL_SERVICE_ENDPOINT"] = "https://uploads.test/presigned-url"

from typing import Dict, List

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker, create_async_engine
from sqlalchemy.pool import StaticPool

from application.services.auth.interfaces import ITokenVerifier
from application.services.resume import IUploadBroker, UploadLocation
from core.database import Base, get_db
from core.exceptions import AuthenticationException, UploadBrokerException, UploadException
from domain.entities import ResumeRequest
import infrastructure.persistence.models  # noqa: F401  (registers tables)


OWNER_ID = "user-owner-1"
OTHER_OWNER_ID = "user-other-2"

SAMPLE_CV = {
    "header": {
        "name": "Ana Pérez",
        "contact": {"email": "ana@example.com", "phone": "+34 600 000 000"},
    },
    "certifications": [
        {"name": "AWS Solutions Architect", "dateObtained": "01 2024"},
        {"name": "Scrum Master", "dateObtained": "2024-01-15"},
    ],
    "education": [
        {"degree": "BSc Computer Science", "institution": "UPM", "graduationDate": "2018", "achievements": []},
    ],
    "professionalExperience": [
        {
            "company": "Acme",
            "position": "Team Lead",
            "period": {"start": "2019", "end": "2024"},
            "responsibilities": ["Led a team of 6"],
        },
    ],
    "projects": [],
    "technicalSkills": {"skills": ["Python", "PostgreSQL"]},
}


class FakeUploadBroker(IUploadBroker):
    """Records broker calls; failures can be switched on per test"""

    def __init__(self):
        self.issued: List[Dict] = []
        self.uploads: List[Dict] = []
        self.fail_issue = False
        self.fail_upload = False

    async def request_upload_location(self, filename, content_type, metadata):
        if self.fail_issue:
            raise UploadBrokerException("Upload broker returned status 503")
        self.issued.append({"filename": filename, "content_type": content_type, "metadata": metadata})
        return UploadLocation(
            url=f"https://bucket.test/uploads/{filename}?X-Amz-Signature=abc123",
            expires_in="3600",
        )

    async def upload(self, location, content, content_type, metadata):
        if self.fail_upload:
            raise UploadException("Object storage returned status 403")
        self.uploads.append({
            "url": location.url,
            "size": len(content),
            "content_type": content_type,
            "metadata": metadata,
        })


class FakeTokenVerifier(ITokenVerifier):
    """Accepts 'valid-<subject>' tokens"""

    async def verify_token(self, token: str) -> str:
        if not token.startswith("valid-"):
            raise AuthenticationException("Invalid or expired token")
        return token[len("valid-"):]


def auth_headers(owner_id: str = OWNER_ID) -> Dict[str, str]:
    return {"Authorization": f"Bearer valid-{owner_id}"}


def make_request(owner_id: str = OWNER_ID, filename: str = "cv.txt", **kwargs) -> ResumeRequest:
    return ResumeRequest.new(
        user_id=owner_id,
        filename=filename,
        file_type=os.path.splitext(filename)[1],
        file_size_bytes=kwargs.pop("file_size_bytes", 128),
        language=kwargs.pop("language", "en"),
        instructions=kwargs.pop("instructions", ""),
    )


@pytest_asyncio.fixture
async def engine():
    engine = create_async_engine(
        "sqlite+aiosqlite://",
        poolclass=StaticPool,
        connect_args={"check_same_thread": False},
    )

    # pysqlite transaction handling off, so SAVEPOINT works
    @event.listens_for(engine.sync_engine, "connect")
    def do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None

    @event.listens_for(engine.sync_engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN")

    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield engine
    await engine.dispose()


@pytest.fixture
def session_factory(engine):
    return async_sessionmaker(
        engine,
        class_=AsyncSession,
        expire_on_commit=False,
        autoflush=False,
    )


@pytest_asyncio.fixture
async def session(session_factory):
    async with session_factory() as session:
        yield session


@pytest.fixture
def upload_broker():
    return FakeUploadBroker()


@pytest_asyncio.fixture
async def client(session_factory, upload_broker):
    from main import app
    from presentation.api.v1.container import get_token_verifier, get_upload_broker

    async def override_get_db():
        async with session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    verifier = FakeTokenVerifier()
    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_upload_broker] = lambda: upload_broker
    app.dependency_overrides[get_token_verifier] = lambda: verifier

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()
