import os

# Must be set before the app package is imported: the engine is built at import time
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["ENVIRONMENT"] = "test"
os.environ.pop("AZURE_STORAGE_CONNECTION_STRING", None)

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app import crud
from app.core.security import create_access_token
from app.crud.user import UserCreate
from app.db.database import Base, create_db_engine, get_db
from app.main import create_app
from app.schemas.event import EventCreate
from app.services.image_storage import InMemoryImageStore

engine = create_db_engine("sqlite://", poolclass=StaticPool)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


@pytest.fixture()
def db():
    Base.metadata.create_all(bind=engine)
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()
        Base.metadata.drop_all(bind=engine)


@pytest.fixture()
def image_store():
    return InMemoryImageStore()


@pytest.fixture()
def client(db, image_store):
    app = create_app(image_store=image_store)

    # One session for the whole test; the in-memory database has a single connection
    def override_get_db():
        yield db

    app.dependency_overrides[get_db] = override_get_db
    return TestClient(app)


@pytest.fixture()
def user(db):
    return crud.user.create(db, obj_in=UserCreate(user_name="organizer", password="s3cret-pass"))


@pytest.fixture()
def other_user(db):
    return crud.user.create(db, obj_in=UserCreate(user_name="someone-else", password="other-pass"))


@pytest.fixture()
def auth_headers(user):
    token = create_access_token(subject=user.id, user_name=user.user_name)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def other_auth_headers(other_user):
    token = create_access_token(subject=other_user.id, user_name=other_user.user_name)
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture()
def event(db, user):
    return crud.event.create_with_owner(
        db,
        obj_in=EventCreate(event_name="City Marathon", event_start_date="2026-11-01"),
        owner_id=user.id,
    )


@pytest.fixture()
def other_event(db, other_user):
    return crud.event.create_with_owner(
        db,
        obj_in=EventCreate(event_name="Trail Run", event_start_date="2026-12-05"),
        owner_id=other_user.id,
    )
