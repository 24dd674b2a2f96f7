"""
Pytest fixtures for PrepUp API tests.
Uses in-memory SQLite, an in-memory object store in place of S3, and locally signed identity tokens.
"""
import os
from unittest.mock import MagicMock
from datetime import datetime, timezone

import pytest
from botocore.exceptions import ClientError
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool
from fastapi.testclient import TestClient

# Use in-memory SQLite for tests - set before config/session load
# Must override any .env DATABASE_URL
os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["METADATA_BACKEND"] = "orm"
os.environ["IDENTITY_AUDIENCE"] = ""
os.environ["AWS_ACCESS_KEY_ID"] = "test-access-key"
os.environ["AWS_SECRET_ACCESS_KEY"] = "test-secret"
os.environ["AWS_BUCKET_NAME"] = "prepup-test"
os.environ["OPENAI_API_KEY"] = ""

from prepup.app.db.base import Base
from prepup.main import app
from prepup.app.core.dependencies import get_db
from prepup.app.core.security import create_access_token
from prepup.app.services import question_service, resume_analysis, s3_service
from prepup.app.services.voice import session as voice_session

USER_ID = "user_abc"
OTHER_USER_ID = "user_xyz"

# In-memory SQLite for tests - StaticPool ensures all sessions share same DB
engine = create_engine(
    "sqlite:///:memory:",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

# Patch the session module so app uses our test engine
import prepup.app.db.session as session_module
session_module.engine = engine
session_module.SessionLocal = TestingSessionLocal
# main.py imports engine directly; patch so startup uses our engine
import prepup.main as main_module
main_module.engine = engine


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


app.dependency_overrides[get_db] = override_get_db


class FakeS3Client:
    """The subset of the boto3 S3 client s3_service uses, backed by a dict."""

    def __init__(self):
        self.objects: dict[str, dict] = {}
        self.presign_calls: list[dict] = []

    def add(self, key, body=b"%PDF-1.4 test", content_type="application/pdf", metadata=None):
        self.objects[key] = {
            "Body": body,
            "ContentType": content_type,
            # S3 lowercases user metadata keys
            "Metadata": {k.lower(): v for k, v in (metadata or {}).items()},
            "LastModified": datetime.now(timezone.utc),
        }

    def put_object(self, Bucket, Key, Body, ContentType, Metadata):
        self.add(Key, Body, ContentType, Metadata)
        return {"ETag": '"fake"'}

    def head_object(self, Bucket, Key):
        obj = self.objects.get(Key)
        if obj is None:
            raise ClientError({"Error": {"Code": "404", "Message": "Not Found"}}, "HeadObject")
        return {
            "ContentLength": len(obj["Body"]),
            "ContentType": obj["ContentType"],
            "Metadata": dict(obj["Metadata"]),
            "LastModified": obj["LastModified"],
        }

    def list_objects_v2(self, Bucket, Prefix, MaxKeys):
        keys = sorted(k for k in self.objects if k.startswith(Prefix))
        contents = [
            {"Key": k, "Size": len(self.objects[k]["Body"]), "LastModified": self.objects[k]["LastModified"]}
            for k in keys[:MaxKeys]
        ]
        resp = {"IsTruncated": len(keys) > MaxKeys}
        if contents:
            resp["Contents"] = contents
        return resp

    def generate_presigned_url(self, ClientMethod, Params, ExpiresIn):
        self.presign_calls.append({"method": ClientMethod, "params": Params, "expires_in": ExpiresIn})
        return f"https://storage.test/{Params['Bucket']}/{Params['Key']}?X-Amz-Expires={ExpiresIn}"


@pytest.fixture(autouse=True)
def fake_s3(monkeypatch):
    """Replace the boto3 client with an in-memory store for every test."""
    fake = FakeS3Client()
    monkeypatch.setattr(s3_service, "_get_s3_client", lambda: fake)
    return fake


@pytest.fixture(scope="function")
def db_session():
    """Create tables and a fresh DB session per test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture
def auth_headers():
    """Bearer token for the primary test user."""
    token = create_access_token(data={"sub": USER_ID, "email": "abc@example.com"})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def other_headers():
    """Bearer token for a second user, used for ownership checks."""
    token = create_access_token(data={"sub": OTHER_USER_ID, "email": "xyz@example.com"})
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def client(db_session):
    """TestClient with a fresh schema."""
    return TestClient(app)


@pytest.fixture
def upload(client, auth_headers):
    """Upload a resume through the API and return the response JSON."""

    def _upload(filename="Backend Engineer.pdf", body=b"%PDF-1.4" + b"0" * 1016,
                content_type="application/pdf", headers=None, **form):
        r = client.post(
            "/api/resumes/upload",
            files={"file": (filename, body, content_type)},
            data=form,
            headers=headers or auth_headers,
        )
        assert r.status_code == 201, r.text
        return r.json()

    return _upload


@pytest.fixture
def openai_client(monkeypatch):
    """A MagicMock OpenAI client handed out wherever the services ask for one."""
    fake = MagicMock()
    for module in (resume_analysis, question_service, voice_session):
        monkeypatch.setattr(module, "get_openai_client", lambda: fake)
    return fake
