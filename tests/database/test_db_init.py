# tests/database/test_db_init.py
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from cloudpool.database import db_init, models


@pytest.fixture
def memory_engine(monkeypatch):
    engine = create_engine("sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool)
    monkeypatch.setattr(db_init, "engine", engine)
    monkeypatch.setattr(db_init, "SessionLocal", sessionmaker(autocommit=False, autoflush=False, bind=engine))
    yield engine
    engine.dispose()


def test_initialize_db_seeds_defaults(memory_engine):
    db_init.initialize_db()

    session = sessionmaker(bind=memory_engine)()
    try:
        assert session.query(models.Role).count() == len(db_init.DEFAULT_ROLES)
        pool = session.query(models.Pool).filter_by(name="default_pool").one()
        assert pool.pool_family.name == "default"
        assert pool.quota.maximum_running_instances is None
    finally:
        session.close()


def test_initialize_db_is_idempotent(memory_engine):
    db_init.initialize_db()
    db_init.initialize_db()

    session = sessionmaker(bind=memory_engine)()
    try:
        assert session.query(models.Pool).count() == 1
        assert session.query(models.Role).count() == len(db_init.DEFAULT_ROLES)
    finally:
        session.close()
