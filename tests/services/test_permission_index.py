# tests/services/test_permission_index.py
import pytest
from unittest.mock import MagicMock

from cloudpool.database import models
from cloudpool.database.models import PermissionObjectType, Privilege
from cloudpool.repositories.interfaces import IPermissionRepository
from cloudpool.services.permission_index import PermissionIndex

# ===================================================================
#  Grant recording (mocked repository)
# ===================================================================

@pytest.fixture
def mock_permission_repo() -> MagicMock:
    repo = MagicMock(spec=IPermissionRepository)
    repo.create.side_effect = lambda permission: permission
    return repo


class TestGrant:
    def test_grant_on_pool_family_records_tagged_target(self, mock_permission_repo: MagicMock):
        index = PermissionIndex(mock_permission_repo)
        user = models.User(id=3, username="alice")
        role = models.Role(id=7, name="Pool Family User", scope=PermissionObjectType.POOL_FAMILY)
        family = models.PoolFamily(id=11, name="prod")

        permission = index.grant(user, role, family)

        mock_permission_repo.create.assert_called_once()
        assert permission.user_id == 3
        assert permission.role_id == 7
        assert permission.permission_object_type == "PoolFamily"
        assert permission.permission_object_id == 11

    def test_grant_without_object_is_global(self, mock_permission_repo: MagicMock):
        index = PermissionIndex(mock_permission_repo)
        permission = index.grant(models.User(id=1, username="root"), models.Role(id=1, name="Administrator", scope="x"))

        assert permission.permission_object_type == PermissionObjectType.GLOBAL
        assert permission.permission_object_id is None

    def test_revoke_delegates_to_repository(self, mock_permission_repo: MagicMock):
        mock_permission_repo.delete.return_value = True
        permission = models.Permission(id=5)

        assert PermissionIndex(mock_permission_repo).revoke(permission) is True
        mock_permission_repo.delete.assert_called_once_with(permission)


# ===================================================================
#  Query-time resolution (SQLite)
# ===================================================================

class TestFamilyInheritance:
    def test_family_grant_makes_pool_visible_without_direct_grant(self, services, factory, roles):
        family = factory.family("prod")
        pool = factory.pool("prod-east", family=family)
        factory.pool("other")
        user = factory.user()
        factory.grant(user, roles["Pool Family User"], family)

        visible = services["view"].list_for_user(user, Privilege.VIEW)

        assert [p.id for p in visible] == [pool.id]
        assert pool.permissions == []

    def test_user_without_grants_sees_nothing(self, services, factory):
        factory.pool()
        assert services["view"].list_for_user(factory.user()) == []

    def test_direct_grant_is_honoured(self, services, factory, roles):
        pool = factory.pool("direct")
        factory.pool("hidden")
        user = factory.user()
        factory.grant(user, roles["Pool User"], pool)

        assert [p.name for p in services["view"].list_for_user(user)] == ["direct"]

    def test_direct_and_family_paths_are_unioned(self, services, factory, roles):
        family = factory.family()
        inherited = factory.pool("b-inherited", family=family)
        direct = factory.pool("a-direct")
        user = factory.user()
        factory.grant(user, roles["Pool Family User"], family)
        factory.grant(user, roles["Pool User"], direct)

        assert [p.id for p in services["view"].list_for_user(user)] == [direct.id, inherited.id]

    def test_global_grant_sees_every_pool(self, services, factory, roles):
        factory.pool("one")
        factory.pool("two")
        admin = factory.user()
        factory.grant(admin, roles["Administrator"])

        assert [p.name for p in services["view"].list_for_user(admin)] == ["one", "two"]

    def test_role_must_carry_the_privilege(self, services, factory, roles):
        family = factory.family()
        factory.pool(family=family)
        user = factory.user()
        factory.grant(user, roles["Pool Family User"], family)

        assert services["view"].list_for_user(user, Privilege.MODIFY) == []

    def test_duplicate_grants_do_not_duplicate_results(self, services, factory, roles):
        family = factory.family()
        factory.pool(family=family)
        user = factory.user()
        factory.grant(user, roles["Pool Family User"], family)
        factory.grant(user, roles["Pool Family User"], family)

        assert len(services["view"].list_for_user(user)) == 1

    def test_grants_of_other_users_do_not_leak(self, services, factory, roles):
        family = factory.family()
        factory.pool(family=family)
        factory.grant(factory.user(), roles["Pool Family User"], family)

        assert services["view"].list_for_user(factory.user()) == []

    def test_moving_pool_to_another_family_changes_visibility(self, services, factory, roles, db_session):
        granted = factory.family("granted")
        other = factory.family("other")
        pool = factory.pool(family=other)
        user = factory.user()
        factory.grant(user, roles["Pool Family User"], granted)
        assert services["view"].list_for_user(user) == []

        pool.pool_family = granted
        db_session.commit()

        assert [p.id for p in services["view"].list_for_user(user)] == [pool.id]


class TestHolds:
    def test_holds_checks_direct_grants_only(self, services, factory, roles):
        family = factory.family()
        pool = factory.pool(family=family)
        user = factory.user()
        factory.grant(user, roles["Pool Family User"], family)
        index = services["permissions"]

        assert index.holds(user, Privilege.VIEW, family) is True
        assert index.holds(user, Privilege.VIEW, pool) is False

    def test_holds_requires_privilege_for_the_object_type(self, services, factory, roles):
        pool = factory.pool()
        user = factory.user()
        factory.grant(user, roles["Pool User"], pool)
        index = services["permissions"]

        assert index.holds(user, Privilege.USE, pool) is True
        assert index.holds(user, Privilege.PERM_SET, pool) is False


class TestPermissionsListing:
    def test_permissions_are_ordered_by_grant_id(self, services, factory, roles, db_session):
        family = factory.family()
        first = factory.grant(factory.user(), roles["Pool Family Administrator"], family)
        second = factory.grant(factory.user(), roles["Pool Family User"], family)
        db_session.expire(family)

        assert [p.id for p in family.permissions] == [first.id, second.id]
        assert [p.id for p in services["permissions"].permissions_for(family)] == [first.id, second.id]


class TestListVisible:
    def test_no_base_and_no_links_matches_nothing(self, factory, db_session):
        factory.pool()
        user = factory.user()
        index = PermissionIndex(MagicMock(spec=IPermissionRepository), parent_links={})

        clause = index.list_visible(user, Privilege.VIEW, models.Pool)

        assert db_session.query(models.Pool).filter(clause).count() == 0
