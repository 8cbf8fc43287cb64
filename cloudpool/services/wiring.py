from typing import Any, Dict
from sqlalchemy.orm import Session

from cloudpool.repositories.sqlalchemy.sqlalchemy_pool_repository import SqlalchemyPoolRepository
from cloudpool.repositories.sqlalchemy.sqlalchemy_pool_family_repository import SqlalchemyPoolFamilyRepository
from cloudpool.repositories.sqlalchemy.sqlalchemy_quota_repository import SqlalchemyQuotaRepository
from cloudpool.repositories.sqlalchemy.sqlalchemy_permission_repository import SqlalchemyPermissionRepository
from cloudpool.repositories.sqlalchemy.sqlalchemy_role_repository import SqlalchemyRoleRepository
from cloudpool.repositories.sqlalchemy.sqlalchemy_user_repository import SqlalchemyUserRepository
from cloudpool.repositories.sqlalchemy.sqlalchemy_instance_repository import SqlalchemyInstanceRepository
from cloudpool.repositories.sqlalchemy.sqlalchemy_deployment_repository import SqlalchemyDeploymentRepository
from cloudpool.services.permission_index import PermissionIndex, DefaultAccessPolicy
from cloudpool.services.pool_authorization_view import PoolAuthorizationView
from cloudpool.services.statistics_aggregator import StatisticsAggregator
from cloudpool.services.pool_service import PoolService


def build_services(db_session: Session) -> Dict[str, Any]:
    """
    Creates the repositories for one session and the services on top of them.

    Returns:
        {'pools': PoolService, 'view': PoolAuthorizationView,
         'statistics': StatisticsAggregator, 'permissions': PermissionIndex}
    """
    # 1. Repositories
    pool_repo = SqlalchemyPoolRepository(db_session)
    pool_family_repo = SqlalchemyPoolFamilyRepository(db_session)
    quota_repo = SqlalchemyQuotaRepository(db_session)
    permission_repo = SqlalchemyPermissionRepository(db_session)
    role_repo = SqlalchemyRoleRepository(db_session)
    user_repo = SqlalchemyUserRepository(db_session)
    instance_repo = SqlalchemyInstanceRepository(db_session)
    deployment_repo = SqlalchemyDeploymentRepository(db_session)

    # 2. Services
    permission_index = PermissionIndex(permission_repo)
    access_policy = DefaultAccessPolicy(permission_index)
    view = PoolAuthorizationView(pool_repo, instance_repo, permission_index, access_policy)
    statistics = StatisticsAggregator(instance_repo, deployment_repo, permission_index, access_policy)
    pool_service = PoolService(
        pool_repo, pool_family_repo, quota_repo, user_repo, role_repo,
        instance_repo, deployment_repo, permission_index, view, statistics,
    )

    return {
        "pools": pool_service,
        "view": view,
        "statistics": statistics,
        "permissions": permission_index,
    }
