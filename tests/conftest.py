import os
from datetime import datetime, timedelta, timezone

TEST_DB_FILE = "test_academy.db"
TEST_DB_URL = f"sqlite:///./{TEST_DB_FILE}"

# must be set before academy modules read their config
os.environ.setdefault("ACADEMY_DATABASE_URL", TEST_DB_URL)
os.environ.setdefault("ACADEMY_BCRYPT_ROUNDS", "4")

import pytest  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

from academy.core.deps import get_db  # noqa: E402
from academy.core.security import hash_password  # noqa: E402
from academy.db.base import Base  # noqa: E402
from academy.main import app  # noqa: E402
from academy.models.academy_class import AcademyClass  # noqa: E402
from academy.models.audit_log import AuditLog  # noqa: E402
from academy.models.class_member import ClassMember  # noqa: E402
from academy.models.class_teacher import ClassTeacher  # noqa: E402
from academy.models.program import Program  # noqa: E402
from academy.models.training_session import TrainingSession  # noqa: E402
from academy.models.user import User  # noqa: E402

PASSWORD = "password123"

engine = create_engine(
    TEST_DB_URL,
    connect_args={"check_same_thread": False},
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()


@pytest.fixture(scope="session", autouse=True)
def setup_test_db():
    """Create a fresh schema once for the whole test session."""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)
    engine.dispose()
    if os.path.exists(TEST_DB_FILE):
        os.remove(TEST_DB_FILE)


def _user(email: str, name: str, **flags) -> User:
    return User(
        email=email,
        name=name,
        hashed_password=hash_password(PASSWORD),
        **flags,
    )


@pytest.fixture(autouse=True)
def seed(setup_test_db):
    """
    Seed a clean dataset for each test and return the ids by name.

    class "owned" is taught by teacher1, class "other" by teacher2;
    student1 is a member of "owned".
    """
    db = TestingSessionLocal()
    try:
        # Clear tables (child -> parent)
        db.query(AuditLog).delete()
        db.query(TrainingSession).delete()
        db.query(ClassMember).delete()
        db.query(ClassTeacher).delete()
        db.query(AcademyClass).delete()
        db.query(Program).delete()
        db.query(User).delete()
        db.commit()

        now = datetime.now(timezone.utc)
        users = {
            "admin": _user("admin@example.com", "Admin", is_admin=True),
            "teacher1": _user("teacher1@example.com", "Teacher One", is_teacher=True),
            "teacher2": _user("teacher2@example.com", "Teacher Two", is_teacher=True),
            "student1": _user("student1@example.com", "Student One", is_student=True),
            "student2": _user("student2@example.com", "Student Two", is_student=True),
            "multi": _user(
                "multi@example.com",
                "Multi Role",
                is_student=True,
                is_teacher=True,
                is_admin=True,
            ),
            "inactive": _user(
                "inactive@example.com", "Inactive", is_teacher=True, is_active=False
            ),
            "noroles": _user("noroles@example.com", "No Roles"),
            "expired": _user(
                "expired@example.com",
                "Expired Student",
                is_student=True,
                access_expiry=now - timedelta(days=1),
            ),
        }
        db.add_all(users.values())
        db.commit()

        owned = AcademyClass(
            name="Coaching Foundations",
            start_date=now,
            end_date=now + timedelta(days=90),
        )
        other = AcademyClass(
            name="Advanced Coaching",
            start_date=now,
            end_date=now + timedelta(days=90),
        )
        db.add_all([owned, other])
        db.commit()

        db.add_all(
            [
                ClassTeacher(class_id=owned.id, teacher_id=users["teacher1"].id, is_primary=True),
                ClassTeacher(class_id=other.id, teacher_id=users["teacher2"].id, is_primary=True),
                ClassMember(class_id=owned.id, user_id=users["student1"].id),
            ]
        )
        db.commit()

        ids = {key: user.id for key, user in users.items()}
        ids["owned_class"] = owned.id
        ids["other_class"] = other.id
        yield ids
    finally:
        db.close()


@pytest.fixture()
def db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture()
def client():
    """Test client that uses the test DB session via dependency override."""
    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as c:
        yield c
    app.dependency_overrides.clear()
