import os
import tempfile
import uuid
from unittest.mock import MagicMock

# Test settings must be in the environment before any app module reads them
_TEST_DIR = tempfile.mkdtemp(prefix="studygeni-tests-")
os.environ.update({
    "DATABASE_URL": f"sqlite:///{_TEST_DIR}/test_studygeni.db",
    "UPLOAD_DIR": os.path.join(_TEST_DIR, "uploads"),
    "LOG_TO_FILE": "false",
    "RATE_LIMIT_ENABLED": "false",
    "ENVIRONMENT": "development",
    "SECRET_KEY": "test-secret-key-for-jwt-signing-0123456789",
    "S3_BUCKET": "test-bucket",
    "S3_PUBLIC_BASE_URL": "https://files.test",
    "ANTHROPIC_API_KEY": "",
})

import pytest
from fastapi.testclient import TestClient

PASSWORD = "Password123"


class StubGenerator:
    """Generation backend stand-in: returns a fixed reply or raises."""

    def __init__(self, reply: str = "", error: Exception | None = None):
        self.reply = reply
        self.error = error
        self.prompts: list[str] = []

    async def generate(self, prompt: str) -> str:
        self.prompts.append(prompt)
        if self.error:
            raise self.error
        return self.reply


def make_quiz_items(n: int = 5) -> list[dict]:
    return [
        {
            "question": f"Question {i}?",
            "options": [f"A) a{i}", f"B) b{i}", f"C) c{i}", f"D) d{i}"],
            "correctAnswer": "ABCD"[i % 4],
            "explanation": f"Because of reason {i}.",
        }
        for i in range(n)
    ]


@pytest.fixture(scope="session")
def app():
    import main as main_module
    return main_module.app


@pytest.fixture()
def db_session(app):
    from app.db.database import SessionLocal
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture()
def client(app):
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture()
def upload_dir():
    from app.core.config import settings
    os.makedirs(settings.upload_dir, exist_ok=True)
    return settings.upload_dir


@pytest.fixture()
def make_user(db_session):
    from app.core.security import get_password_hash
    from app.models.user import User, UserRole

    hashed = get_password_hash(PASSWORD)

    def _make(role=UserRole.STUDENT, full_name="Test User"):
        user = User(
            email=f"{role.value}_{uuid.uuid4().hex[:10]}@test.com",
            full_name=full_name,
            role=role,
            hashed_password=hashed,
        )
        db_session.add(user)
        db_session.commit()
        db_session.refresh(user)
        return user

    return _make


@pytest.fixture()
def teacher(make_user):
    from app.models.user import UserRole
    return make_user(UserRole.TEACHER, full_name="Tina Teacher")


@pytest.fixture()
def student(make_user):
    from app.models.user import UserRole
    return make_user(UserRole.STUDENT, full_name="Sam Student")


@pytest.fixture()
def auth_headers():
    from app.core.security import create_access_token

    def _headers(user) -> dict:
        return {"Authorization": f"Bearer {create_access_token({'sub': str(user.id)})}"}

    return _headers


@pytest.fixture()
def quiz_items():
    return make_quiz_items()


@pytest.fixture()
def storage(app):
    """Real S3Storage over a mocked boto3 client, wired into the app."""
    from app.api.deps import get_storage
    from app.services.storage_service import S3Storage

    store = S3Storage(bucket="test-bucket", client=MagicMock(), public_base_url="https://files.test")
    app.dependency_overrides[get_storage] = lambda: store
    yield store
    app.dependency_overrides.pop(get_storage, None)


@pytest.fixture()
def use_generator(app):
    """Install a StubGenerator for the artifact endpoints."""
    from app.api.deps import get_generator

    def _install(reply: str = "", error: Exception | None = None) -> StubGenerator:
        stub = StubGenerator(reply=reply, error=error)
        app.dependency_overrides[get_generator] = lambda: stub
        return stub

    yield _install
    app.dependency_overrides.pop(get_generator, None)


@pytest.fixture()
def document(db_session, teacher):
    from app.services.document_store import create_document
    return create_document(
        db_session,
        title="Algebra Basics",
        description="",
        subject="Math",
        file_url="https://files.test/studygeni/abc-notes.pdf",
        storage_id="studygeni/abc-notes.pdf",
        file_type="pdf",
        owner_id=teacher.id,
    )


@pytest.fixture()
def make_generator():
    """Build StubGenerators for calling the artifact services directly."""
    return StubGenerator
