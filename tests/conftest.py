# tests/conftest.py
import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from cloudpool.database.database import Base
from cloudpool.database import models
from cloudpool.database.db_init import build_default_roles
from cloudpool.services.wiring import build_services

# ===================================================================
#  In-memory database fixtures
# ===================================================================

@pytest.fixture
def db_session():
    """A session on a fresh in-memory SQLite database seeded with the default roles."""
    engine = create_engine(
        "sqlite://", connect_args={"check_same_thread": False}, poolclass=StaticPool
    )
    Base.metadata.create_all(bind=engine)
    session = sessionmaker(autoflush=False, bind=engine)()
    session.add_all(build_default_roles())
    session.commit()
    try:
        yield session
    finally:
        session.close()
        engine.dispose()


@pytest.fixture
def services(db_session):
    """Services wired to the in-memory session."""
    return build_services(db_session)


@pytest.fixture
def roles(db_session):
    return {role.name: role for role in db_session.query(models.Role).all()}


class Factory:
    """Persists model rows with sensible defaults."""

    def __init__(self, session):
        self.session = session
        self._counter = 0

    def _save(self, obj):
        self.session.add(obj)
        self.session.commit()
        return obj

    def _next(self, prefix):
        self._counter += 1
        return f"{prefix}-{self._counter}"

    def family(self, name=None):
        return self._save(models.PoolFamily(name=name or self._next("family")))

    def pool(self, name=None, family=None, maximum=None, running=0, enabled=True):
        return self._save(models.Pool(
            name=name or self._next("pool"),
            enabled=enabled,
            pool_family=family or self.family(),
            quota=models.Quota(maximum_running_instances=maximum, running_instances=running),
        ))

    def user(self, username=None):
        return self._save(models.User(username=username or self._next("user")))

    def provider_account(self, label=None, provider_name="ec2-us-east-1"):
        return self._save(models.ProviderAccount(label=label or self._next("account"), provider_name=provider_name))

    def deployment(self, pool, name=None):
        return self._save(models.Deployment(name=name or self._next("deployment"), pool=pool))

    def instance(self, pool, state=models.InstanceState.RUNNING, deployment=None, provider_account=None, name=None):
        return self._save(models.Instance(
            name=name or self._next("instance"),
            state=state,
            pool=pool,
            deployment=deployment,
            provider_account=provider_account,
        ))

    def grant(self, user, role, obj=None):
        if obj is None:
            object_type, object_id = models.PermissionObjectType.GLOBAL, None
        else:
            object_type, object_id = obj.permission_object_type, obj.id
        return self._save(models.Permission(
            user_id=user.id, role_id=role.id,
            permission_object_type=object_type, permission_object_id=object_id,
        ))


@pytest.fixture
def factory(db_session) -> Factory:
    return Factory(db_session)
