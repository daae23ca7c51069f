import os

# Base isolée: aucun fichier SQLite n'est créé par les tests
os.environ.setdefault("DATABASE_URL", "sqlite+pysqlite:///:memory:")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import filedispatch.models  # noqa: F401
from filedispatch.core.database import Base, build_engine, get_db
from filedispatch.main import app
from filedispatch.services.engine_service import engine_state
from filedispatch.services.folder_service import FolderService
from filedispatch.services.settings_service import settings_cache
from filedispatch.services.template_service import template_cache


def _reset_shared_state():
    settings_cache.invalidate()
    template_cache.invalidate()
    engine_state.reset()


@pytest.fixture(autouse=True)
def shared_state():
    _reset_shared_state()
    yield
    _reset_shared_state()


@pytest.fixture
def db_session():
    engine = build_engine("sqlite+pysqlite:///:memory:", poolclass=StaticPool)
    Base.metadata.create_all(engine)
    SessionLocal = sessionmaker(bind=engine, autoflush=False, autocommit=False)
    session = SessionLocal()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def folder(db_session, tmp_path):
    watched = tmp_path / "watched"
    watched.mkdir()
    return FolderService(db_session).add(str(watched), "Watched")


@pytest.fixture
def client(db_session):
    def _override_get_db():
        yield db_session

    app.dependency_overrides[get_db] = _override_get_db
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
