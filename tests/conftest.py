import os

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")
os.environ["LOG_FILE"] = ""

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import auth
from database import Base, get_db
from main import app
from models import UserRole
from repositories import PostRepository, TopicRepository
from schemas import UserCreate


@pytest.fixture
def session_factory():
    engine = create_engine("sqlite://",
                           connect_args={"check_same_thread": False},
                           poolclass=StaticPool)
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


def make_user(db, name, email, password="134652", role=UserRole.NORMAL):
    return auth.register_user_no_duplicate(
        db, UserCreate(name=name, email=email, password=password, photo="URLFOTO"), role=role)


def bearer(user):
    return {"Authorization": f"Bearer {auth.create_access_token(user)}"}


@pytest.fixture
def admin(db):
    return make_user(db, "Admin Boaz", "admin@email.com", role=UserRole.ADMINISTRADOR)


@pytest.fixture
def normal_user(db):
    return make_user(db, "Gustavo Boaz", "gustavo@email.com")


@pytest.fixture
def blog(db):
    """Two users, two topics and four posts used by the search tests"""
    ana = make_user(db, "Ana Souza", "ana@email.com")
    bia = make_user(db, "Bia Lima", "bia@email.com")
    topics = TopicRepository(db)
    python = topics.create("Python")
    go = topics.create("Go")
    posts = PostRepository(db)
    posts.create("Intro to FastAPI", "First steps", ana.id, python.id)
    posts.create("Goroutines explained", "Channels and more", ana.id, go.id)
    posts.create("FastAPI with Go clients", "Mixed stack", bia.id, go.id)
    posts.create("Async Python", "Event loops", bia.id, python.id)
    return {"ana": ana, "bia": bia, "python": python, "go": go}
