# tests/conftest.py

import json
import uuid
from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from saivd.api.deps import get_optional_user
from saivd.clients.auth_client import AuthUser
from saivd.clients.watermark_client import WatermarkServiceClient, get_watermark_client
from saivd.core.crypto import generate_rsa_keypair
from saivd.core.rate_limit import limiter
from saivd.infra.postgres import Base, get_db, init_db
from saivd.infra.s3 import storage
from saivd.main import app
from saivd.models.profile import Profile
from saivd.models.video import Video

WATERMARK_BASE = "http://watermark.test"


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    init_db(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(engine):
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    yield session
    session.close()


@pytest.fixture
def user():
    return AuthUser(
        id=str(uuid.uuid4()),
        email="creator@example.com",
        user_metadata={"display_name": "Creator"},
    )


@pytest.fixture
def bucket():
    """MagicMock standing in for the boto3 S3 client."""
    fake = MagicMock()
    storage._client = fake
    yield fake
    storage._client = None


@pytest.fixture
def watermark_http():
    """MagicMock standing in for the watermark service's requests.Session."""
    return MagicMock()


@pytest.fixture
def fake_response():
    def build(status_code=200, payload=None, text=None):
        resp = MagicMock()
        resp.status_code = status_code
        resp.ok = 200 <= status_code < 300
        if payload is None:
            resp.json.side_effect = ValueError("No JSON object could be decoded")
            resp.text = text if text is not None else ""
        else:
            resp.json.return_value = payload
            resp.text = text if text is not None else json.dumps(payload)
        return resp

    return build


def _client_for(db, current_user, watermark_http):
    wm = WatermarkServiceClient(base_url=WATERMARK_BASE, session=watermark_http, timeout=5)
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_optional_user] = lambda: current_user
    app.dependency_overrides[get_watermark_client] = lambda: wm
    return TestClient(app)


@pytest.fixture
def client(db, user, bucket, watermark_http):
    limiter.enabled = False
    with _client_for(db, user, watermark_http) as c:
        yield c
    app.dependency_overrides.clear()
    limiter.enabled = True


@pytest.fixture
def anon_client(db, bucket, watermark_http):
    limiter.enabled = False
    with _client_for(db, None, watermark_http) as c:
        yield c
    app.dependency_overrides.clear()
    limiter.enabled = True


@pytest.fixture
def make_profile(db):
    def create(user_id=None, numeric_user_id=None, with_keys=True, **fields):
        public_pem, private_pem = generate_rsa_keypair() if with_keys else (None, None)
        profile = Profile(
            id=uuid.UUID(str(user_id)) if user_id else uuid.uuid4(),
            email=fields.pop("email", "creator@example.com"),
            numeric_user_id=numeric_user_id,
            rsa_public=public_pem,
            rsa_private=private_pem,
            **fields,
        )
        db.add(profile)
        db.commit()
        db.refresh(profile)
        return profile

    return create


@pytest.fixture
def make_video(db):
    def create(user_id, key="videos/u/clip.mp4", **fields):
        video = Video(
            user_id=uuid.UUID(str(user_id)),
            filename=fields.pop("filename", "clip.mp4"),
            filesize=fields.pop("filesize", 1024),
            content_type=fields.pop("content_type", "video/mp4"),
            original_url=key,
            **fields,
        )
        db.add(video)
        db.commit()
        db.refresh(video)
        return video

    return create
