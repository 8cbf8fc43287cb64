# tests/database/test_models.py
import pytest

from cloudpool.database import models
from cloudpool.database.db_init import build_default_roles, DEFAULT_ROLES
from cloudpool.database.models import InstanceState, PermissionObjectType, Privilege


class TestInstance:
    @pytest.mark.parametrize("state", [
        InstanceState.NEW, InstanceState.STOPPED, InstanceState.CREATE_FAILED,
        InstanceState.ERROR, InstanceState.VANISHED,
    ])
    def test_destroyable_states(self, state):
        assert models.Instance(state=state).destroyable() is True

    @pytest.mark.parametrize("state", [
        InstanceState.PENDING, InstanceState.RUNNING, InstanceState.SHUTTING_DOWN,
    ])
    def test_live_states_are_not_destroyable(self, state):
        assert models.Instance(state=state).destroyable() is False

    def test_failed(self):
        assert models.Instance(state=InstanceState.CREATE_FAILED).failed()
        assert models.Instance(state=InstanceState.ERROR).failed()
        assert not models.Instance(state=InstanceState.STOPPED).failed()


class TestQuota:
    def test_percentage_used(self):
        assert models.Quota(maximum_running_instances=4, running_instances=1).percentage_used == 25.0
        assert models.Quota(maximum_running_instances=None, running_instances=9).percentage_used == 0.0


class TestDeployable:
    def test_unique_images_counts_repeated_references(self):
        fedora = models.Image(uuid="img-1", name="Fedora")
        rhel = models.Image(uuid="img-2", name="RHEL")
        deployable = models.Deployable(name="web", image_links=[
            models.DeployableImage(image=fedora),
            models.DeployableImage(image=rhel),
            models.DeployableImage(image=fedora),
        ])

        images = deployable.unique_images()

        assert list(images) == ["img-1", "img-2"]
        assert images["img-1"] == {"image": fedora, "count": 2}
        assert images["img-2"]["count"] == 1


class TestDefaultRoles:
    def test_every_default_role_is_built(self):
        names = {role.name for role in build_default_roles()}
        assert names == set(DEFAULT_ROLES)

    def test_pool_user_can_view_but_not_modify_pools(self):
        role = next(r for r in build_default_roles() if r.name == "Pool User")
        assert role.satisfies(Privilege.VIEW, PermissionObjectType.POOL)
        assert not role.satisfies(Privilege.MODIFY, PermissionObjectType.POOL)

    def test_administrator_holds_everything(self):
        role = next(r for r in build_default_roles() if r.name == "Administrator")
        assert all(
            role.satisfies(action, target)
            for action in Privilege.ALL for target in PermissionObjectType.ALL
        )
