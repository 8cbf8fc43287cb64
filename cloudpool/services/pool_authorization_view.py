from dataclasses import dataclass
from typing import Callable, List, Optional, Set

from sqlalchemy import or_, true

from cloudpool.database import models
from cloudpool.database.models import InstanceState, Privilege
from cloudpool.repositories.interfaces import IPoolRepository, IInstanceRepository
from cloudpool.services.exceptions import ValidationError
from cloudpool.services.permission_index import DefaultAccessPolicy, PermissionIndex


@dataclass(frozen=True)
class PresetFilter:
    """A named, ready-made pool filter offered by listing screens."""
    id: str
    title: str
    build: Callable

    def criteria(self):
        return self.build()


def _with_instances_in(state: str):
    def build():
        return models.Pool.deployments.any(
            models.Deployment.instances.any(models.Instance.state == state)
        )
    return build


def _preset(filter_id: str, build: Callable) -> PresetFilter:
    return PresetFilter(id=filter_id, title=f"pools.preset_filters.{filter_id}", build=build)


PRESET_FILTERS = (
    _preset("enabled_pools", lambda: models.Pool.enabled.is_(True)),
    _preset("with_pending_instances", _with_instances_in(InstanceState.PENDING)),
    _preset("with_running_instances", _with_instances_in(InstanceState.RUNNING)),
    _preset("with_create_failed_instances", _with_instances_in(InstanceState.CREATE_FAILED)),
    _preset("with_stopped_instances", _with_instances_in(InstanceState.STOPPED)),
)


class PoolAuthorizationView:
    """Builds pool listing and search queries that respect authorization."""

    def __init__(self, pool_repo: IPoolRepository, instance_repo: IInstanceRepository,
                 permission_index: PermissionIndex, access_policy=None):
        """
        Args:
            pool_repo: repository used to run the composed queries.
            instance_repo: source of the provider accounts behind a pool.
            permission_index: source of the family-inheritance clause.
            access_policy: base policy exposing ``clause(user, privilege, model)``.
                Defaults to DefaultAccessPolicy (global or direct grants).
        """
        self.pool_repo = pool_repo
        self.instance_repo = instance_repo
        self.permission_index = permission_index
        self.access_policy = access_policy or DefaultAccessPolicy(permission_index)

    def visible_clause(self, user: models.User, privilege: str = Privilege.VIEW, model=models.Pool):
        """Base policy OR inherited grants, as a predicate over ``model`` rows."""
        base = self.access_policy.clause(user, privilege, model)
        return self.permission_index.list_visible(user, privilege, model, base)

    def list_for_user(self, user: models.User, privilege: str = Privilege.VIEW) -> List[models.Pool]:
        """Pools visible to ``user`` directly or through their pool family, by name."""
        return self.pool_repo.list_where([self.visible_clause(user, privilege)])

    def search(self, term: Optional[str]):
        """
        Case-insensitive substring match on the pool name or its family's name.
        Wildcard characters in ``term`` match literally. An empty term matches
        every pool.
        """
        if not term:
            return true()
        return or_(
            models.Pool.name.icontains(term, autoescape=True),
            models.Pool.pool_family.has(models.PoolFamily.name.icontains(term, autoescape=True)),
        )

    def preset_filters(self) -> List[PresetFilter]:
        return list(PRESET_FILTERS)

    def preset_filter(self, filter_id: str) -> PresetFilter:
        for preset in PRESET_FILTERS:
            if preset.id == filter_id:
                return preset
        raise ValidationError({"preset_filter": [f"'{filter_id}' is not a known filter"]})

    def destroyable(self, pool: models.Pool) -> bool:
        """True when every instance of the pool is destroyable (vacuously for none)."""
        return all(instance.destroyable() for instance in pool.instances)

    def cloud_accounts(self, pool: models.Pool) -> Set[models.ProviderAccount]:
        """Distinct provider accounts hosting the pool's instances."""
        return set(self.instance_repo.list_provider_accounts(pool.id))
