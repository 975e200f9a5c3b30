"""
Pytest configuration and fixtures for backend tests.
"""

import os
import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Add backend directory to path for imports
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

# Set test environment variables before importing config
os.environ["ENVIRONMENT"] = "test"
os.environ["SECRET_KEY"] = "test-secret-key-for-testing-only"
os.environ["CORS_ORIGINS"] = '["http://localhost:3000"]'
os.environ["ADMIN_EMAIL"] = "admin@test.com"
os.environ["ADMIN_PASSWORD"] = "TestAdmin123!"

from authentication.auth import (  # noqa: E402
    AuthSession,
    create_session_token,
    get_password_hash,
)
from repositories.database import Base, get_db  # noqa: E402
import repositories.db_models as db_models  # noqa: E402

# Test database engine (in-memory SQLite)
TEST_DATABASE_URL = "sqlite:///:memory:"

engine = create_engine(
    TEST_DATABASE_URL,
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

TEST_PASSWORD = "reciclo2024"
# bcrypt is slow on purpose; hash once for every fixture profile
TEST_PASSWORD_HASH = get_password_hash(TEST_PASSWORD)


def make_profile(
    db,
    email: str,
    full_name: str,
    role: db_models.ProfileRole = db_models.ProfileRole.CITIZEN,
    points: int = 0,
) -> db_models.Profile:
    profile = db_models.Profile(
        email=email,
        full_name=full_name,
        hashed_password=TEST_PASSWORD_HASH,
        role=role,
        points=points,
        is_active=True,
    )
    db.add(profile)
    db.commit()
    db.refresh(profile)
    return profile


def bearer(profile: db_models.Profile) -> dict:
    return {"Authorization": f"Bearer {create_session_token(profile)}"}


@pytest.fixture(scope="function")
def db_session():
    """Create a fresh in-memory database session for each test."""
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture(scope="function")
def client(db_session):
    """Create a test client with overridden database dependency."""
    from main import app
    from helpers.rate_limiter import limiter

    # Reset rate limiter storage before each test to prevent rate limit errors
    limiter.reset()

    def override_get_db():
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def citizen(db_session) -> db_models.Profile:
    return make_profile(db_session, "ana@example.com", "Ana Citizen")


@pytest.fixture
def other_citizen(db_session) -> db_models.Profile:
    return make_profile(db_session, "luis@example.com", "Luis Vecino")


@pytest.fixture
def municipal_admin(db_session) -> db_models.Profile:
    return make_profile(
        db_session,
        "muni@example.com",
        "Marta Municipal",
        role=db_models.ProfileRole.MUNICIPAL_ADMIN,
    )


@pytest.fixture
def super_admin(db_session) -> db_models.Profile:
    return make_profile(
        db_session,
        "root@example.com",
        "Sofia Super",
        role=db_models.ProfileRole.SUPER_ADMIN,
    )


@pytest.fixture
def citizen_session(citizen) -> AuthSession:
    return AuthSession.from_profile(citizen)


@pytest.fixture
def other_session(other_citizen) -> AuthSession:
    return AuthSession.from_profile(other_citizen)


@pytest.fixture
def admin_session(municipal_admin) -> AuthSession:
    return AuthSession.from_profile(municipal_admin)


@pytest.fixture
def super_admin_session(super_admin) -> AuthSession:
    return AuthSession.from_profile(super_admin)


@pytest.fixture
def auth_headers(citizen) -> dict:
    """Authentication headers for the citizen."""
    return bearer(citizen)


@pytest.fixture
def other_auth_headers(other_citizen) -> dict:
    return bearer(other_citizen)


@pytest.fixture
def admin_auth_headers(municipal_admin) -> dict:
    return bearer(municipal_admin)


@pytest.fixture
def super_admin_auth_headers(super_admin) -> dict:
    return bearer(super_admin)


@pytest.fixture
def test_report(db_session, citizen) -> db_models.Report:
    """A pending report filed by the citizen."""
    report = db_models.Report(
        user_id=citizen.id,
        title="Basura en el parque",
        description="Bolsas acumuladas junto a la fuente",
        category=db_models.ReportCategory.BASURA,
        priority=db_models.ReportPriority.MEDIA,
        status=db_models.ReportStatus.PENDIENTE,
        latitude=19.4326,
        longitude=-99.1332,
        address="Parque Central",
    )
    db_session.add(report)
    db_session.commit()
    db_session.refresh(report)
    return report


@pytest.fixture
def test_reward(db_session) -> db_models.Reward:
    """Active reward with unlimited stock costing 50 points."""
    reward = db_models.Reward(
        title="Descuento vivero",
        description="10% en plantas",
        points_required=50,
        category=db_models.RewardCategory.DESCUENTO,
        available_quantity=None,
        is_active=True,
    )
    db_session.add(reward)
    db_session.commit()
    db_session.refresh(reward)
    return reward


@pytest.fixture
def limited_reward(db_session) -> db_models.Reward:
    """Active reward with a single unit left costing 20 points."""
    reward = db_models.Reward(
        title="Kit de compostaje",
        description="Compostera doméstica",
        points_required=20,
        category=db_models.RewardCategory.BENEFICIO,
        available_quantity=1,
        is_active=True,
    )
    db_session.add(reward)
    db_session.commit()
    db_session.refresh(reward)
    return reward


@pytest.fixture
def inactive_reward(db_session) -> db_models.Reward:
    reward = db_models.Reward(
        title="Pase retirado",
        description="Ya no disponible",
        points_required=10,
        category=db_models.RewardCategory.BENEFICIO,
        is_active=False,
    )
    db_session.add(reward)
    db_session.commit()
    db_session.refresh(reward)
    return reward


@pytest.fixture
def test_content(db_session, municipal_admin) -> db_models.EducationalContent:
    """Published educational tip."""
    content = db_models.EducationalContent(
        title="Separa tus residuos",
        content="Orgánicos, reciclables y el resto.",
        category=db_models.ContentCategory.CONSEJO,
        author_id=municipal_admin.id,
        is_published=True,
    )
    db_session.add(content)
    db_session.commit()
    db_session.refresh(content)
    return content


@pytest.fixture
def draft_content(db_session) -> db_models.EducationalContent:
    """Unpublished campaign, invisible to citizens."""
    content = db_models.EducationalContent(
        title="Campaña en preparación",
        content="Borrador",
        category=db_models.ContentCategory.CAMPANA,
        is_published=False,
    )
    db_session.add(content)
    db_session.commit()
    db_session.refresh(content)
    return content


@pytest.fixture
def test_password() -> str:
    """Plain-text password of every fixture profile."""
    return TEST_PASSWORD
