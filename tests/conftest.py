import os

# Must be set before noteshub builds its settings and engine
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret")
os.environ["AWS_ACCESS_KEY_ID"] = "testing"
os.environ["AWS_SECRET_ACCESS_KEY"] = "testing"
os.environ["AWS_DEFAULT_REGION"] = "us-east-1"

import boto3
import pytest
from fastapi.testclient import TestClient
from moto import mock_aws
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from noteshub.core.session import SessionStore
from noteshub.core.storage import FileStorage, get_storage
from noteshub.main import app
from noteshub.models import Account, UploadRecord
from noteshub.models.database import Base, get_db
from tests.helpers import TEST_BUCKET, make_request


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def storage():
    with mock_aws():
        s3 = boto3.client("s3", region_name="us-east-1")
        s3.create_bucket(Bucket=TEST_BUCKET)
        yield FileStorage(s3, TEST_BUCKET)


@pytest.fixture
def client(session_factory, storage):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_storage] = lambda: storage
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def store(db):
    return SessionStore(make_request(), db)


@pytest.fixture
def make_account(db):
    def _make(email="a@x.edu", display_name="Foo", has_contributed=False):
        account = Account(
            email=email,
            display_name=display_name,
            password_hash="not-a-real-hash",
            has_contributed=has_contributed,
        )
        db.add(account)
        db.commit()
        db.refresh(account)
        return account

    return _make


@pytest.fixture
def make_upload(db):
    def _make(owner, course="COMS 3157", professor="Jae Lee", label="Midterm 1 Study Guide", category="Notes"):
        record = UploadRecord(
            owner_id=owner.id,
            owner_name=owner.display_name,
            course=course,
            professor=professor,
            category=category,
            label=label,
            file_name="guide.pdf",
            storage_key=f"{owner.id}/guide.pdf",
            file_url=f"https://{TEST_BUCKET}.s3.us-east-1.amazonaws.com/{owner.id}/guide.pdf",
            size=3,
        )
        db.add(record)
        db.commit()
        db.refresh(record)
        return record

    return _make
