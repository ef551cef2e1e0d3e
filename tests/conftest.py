"""
Legislative Assembly Members - Test Configuration and Fixtures
"""
import os
import tempfile

import pytest
from faker import Faker
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Set testing environment
os.environ['ENVIRONMENT'] = 'testing'
os.environ['DATABASE_URL'] = 'sqlite://'
os.environ['SECRET_KEY'] = 'test-secret-key-for-testing-only'
os.environ['UPLOAD_DIR'] = tempfile.mkdtemp(prefix='assembly-uploads-')
os.environ['LOG_LEVEL'] = 'WARNING'

from main import app
from database import Base
from deps import get_db
from Member_module.Member_model import Member  # noqa: F401 - registers the table
from Member_module.Member_upload_service import (
    MemberImageStorageService, get_member_image_storage_service
)
from Login_module.Admin.Admin_model import Admin
from Login_module.Admin.Admin_crud import create_admin, issue_admin_token

fake = Faker()

ADMIN_PASSWORD = 'adminpassword123'

# In-memory database shared by every connection of a test
test_engine = create_engine(
    'sqlite://',
    connect_args={'check_same_thread': False},
    poolclass=StaticPool,
)
TestSessionLocal = sessionmaker(bind=test_engine, autocommit=False, autoflush=False)


@pytest.fixture
def db_session():
    """Create a fresh database for each test"""
    Base.metadata.create_all(bind=test_engine)
    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def storage(tmp_path) -> MemberImageStorageService:
    return MemberImageStorageService(
        upload_dir=str(tmp_path / 'uploads'),
        url_prefix='/uploads',
        max_file_size=1024,
    )


@pytest.fixture
def client(db_session, storage):
    """Test client with database and upload storage overrides"""
    def override_get_db():
        session = TestSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_member_image_storage_service] = lambda: storage

    # No context manager: startup migrations are not run against the test database
    yield TestClient(app)

    app.dependency_overrides.clear()


@pytest.fixture
def admin(db_session) -> Admin:
    return create_admin(db_session, fake.email(), ADMIN_PASSWORD)


@pytest.fixture
def auth_headers(admin: Admin) -> dict:
    return {'Authorization': f'Bearer {issue_admin_token(admin)}'}


@pytest.fixture
def member_payload() -> dict:
    return {
        'name': 'Asha Verma',
        'constituency': 'Chandni Chowk',
        'sessionName': 'Budget Session',
        'sessionDate': '2024-01-15',
        'speechGiven': 'On the state of public schools in the constituency.',
        'timeTaken': 12.5,
        'partyName': 'AAP',
    }


@pytest.fixture
def create_member(client, auth_headers, member_payload):
    """Create a member through the API and return its response body"""
    def _create(**overrides):
        payload = {**member_payload, **overrides}
        response = client.post('/api/members', json=payload, headers=auth_headers)
        assert response.status_code == 201, response.text
        return response.json()
    return _create
