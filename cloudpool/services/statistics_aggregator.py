from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from cloudpool.database import models
from cloudpool.database.models import InstanceState, Privilege
from cloudpool.repositories.interfaces import IInstanceRepository, IDeploymentRepository
from cloudpool.services.permission_index import DefaultAccessPolicy, PermissionIndex
from cloudpool.services.quota_tracker import QuotaTracker


@dataclass
class PoolStatistics:
    cloud_providers: int = 0
    deployments: int = 0
    total_instances: int = 0
    instances_deployed: int = 0
    instances_pending: int = 0
    instances_failed: List[models.Instance] = field(default_factory=list)
    instances_failed_visible_count: int = 0
    instances_failed_count: int = 0
    used_quota: int = 0
    quota_percent: str = "0%"
    available_quota: Optional[int] = None

    def as_dict(self) -> Dict[str, Any]:
        return {
            "cloud_providers": self.cloud_providers,
            "deployments": self.deployments,
            "total_instances": self.total_instances,
            "instances_deployed": self.instances_deployed,
            "instances_pending": self.instances_pending,
            "instances_failed": [
                {"id": i.id, "name": i.name, "state": i.state} for i in self.instances_failed
            ],
            "instances_failed_visible_count": self.instances_failed_visible_count,
            "instances_failed_count": self.instances_failed_count,
            "used_quota": self.used_quota,
            "quota_percent": self.quota_percent,
            "available_quota": self.available_quota,
        }


class StatisticsAggregator:
    """
    Computes point-in-time usage figures of a pool from its live instances,
    deployments and quota.

    Nothing is cached. Each figure is a separate query, so instances changing
    state during one snapshot() call can make the figures disagree slightly;
    callers needing a consistent view run snapshot() inside one read
    transaction.
    """

    def __init__(self, instance_repo: IInstanceRepository, deployment_repo: IDeploymentRepository,
                 permission_index: PermissionIndex, access_policy=None):
        """
        Args:
            instance_repo: source of instance counts and lists.
            deployment_repo: source of deployment counts.
            permission_index: narrows failed instances to those a user may view.
            access_policy: base policy combined with the permission index.
                Defaults to DefaultAccessPolicy (global or direct grants).
        """
        self.instance_repo = instance_repo
        self.deployment_repo = deployment_repo
        self.permission_index = permission_index
        self.access_policy = access_policy or DefaultAccessPolicy(permission_index)

    def _visible_instances_clause(self, user: models.User):
        base = self.access_policy.clause(user, Privilege.VIEW, models.Instance)
        return self.permission_index.list_visible(user, Privilege.VIEW, models.Instance, base)

    def snapshot(self, pool: models.Pool, user: Optional[models.User] = None) -> PoolStatistics:
        """
        Builds the statistics of ``pool``.

        Args:
            pool: the pool to describe.
            user: when given, ``instances_failed`` holds only the failed
                instances this user may view. ``instances_failed_count`` is
                always unfiltered.
        """
        pool_id = pool.id
        quota = QuotaTracker(pool.quota)

        if user is None:
            failed = self.instance_repo.list_by_pool_id(pool_id, states=InstanceState.FAILED)
        else:
            failed = self.instance_repo.list_by_pool_id(
                pool_id, states=InstanceState.FAILED, criteria=[self._visible_instances_clause(user)]
            )

        return PoolStatistics(
            cloud_providers=self.instance_repo.count_provider_accounts(pool_id),
            deployments=self.deployment_repo.count_by_pool_id(pool_id),
            total_instances=self.instance_repo.count_by_pool_id(pool_id, exclude_states=[InstanceState.STOPPED]),
            instances_deployed=self.instance_repo.count_by_pool_id(pool_id, states=[InstanceState.RUNNING]),
            instances_pending=self.instance_repo.count_by_pool_id(pool_id, states=[InstanceState.PENDING]),
            instances_failed=failed,
            instances_failed_visible_count=len(failed),
            instances_failed_count=self.instance_repo.count_by_pool_id(pool_id, states=InstanceState.FAILED),
            used_quota=quota.used(),
            quota_percent=quota.formatted_percent(),
            available_quota=quota.available(),
        )
