import re
from typing import Any, Dict, Iterable, List, Optional

import structlog

from cloudpool.database import models
from cloudpool.database.models import Privilege
from cloudpool.repositories.interfaces import (
    IPoolRepository, IPoolFamilyRepository, IQuotaRepository, IUserRepository,
    IRoleRepository, IInstanceRepository, IDeploymentRepository
)
from cloudpool.services.exceptions import (
    PoolNotFoundError, PoolFamilyNotFoundError, QuotaNotFoundError, UserNotFoundError,
    RoleNotFoundError, ValidationError, DestroyBlockedError
)
from cloudpool.services.permission_index import PermissionIndex
from cloudpool.services.pool_authorization_view import PoolAuthorizationView
from cloudpool.services.quota_tracker import QuotaTracker
from cloudpool.services.statistics_aggregator import StatisticsAggregator

logger = structlog.get_logger(__name__)

NAME_MAX_LENGTH = 255
NAME_PATTERN = re.compile(r"[A-Za-z0-9_ -]*")
SORTABLE_FIELDS = ("id", "name", "exported_as", "enabled", "created_at", "updated_at")
UPDATABLE_FIELDS = ("name", "enabled", "exported_as")


class PoolService:
    """Creates, updates, destroys, lists and serializes pools."""

    def __init__(self, pool_repo: IPoolRepository, pool_family_repo: IPoolFamilyRepository,
                 quota_repo: IQuotaRepository, user_repo: IUserRepository, role_repo: IRoleRepository,
                 instance_repo: IInstanceRepository, deployment_repo: IDeploymentRepository,
                 permission_index: PermissionIndex, view: PoolAuthorizationView,
                 statistics: StatisticsAggregator):
        """
        Wires the service to its repositories and collaborators.

        Args:
            pool_repo: pools storage.
            pool_family_repo: used to resolve the required pool family.
            quota_repo: used to resolve an existing quota and to save limits.
            user_repo, role_repo: resolve grantees and roles for grants.
            instance_repo: locks instance rows while destroying a pool.
            deployment_repo: deployment counts and listings for serialization.
            permission_index: records grants.
            view: authorization-aware predicates and destroyability check.
            statistics: snapshot builder used by as_json().
        """
        self.pool_repo = pool_repo
        self.pool_family_repo = pool_family_repo
        self.quota_repo = quota_repo
        self.user_repo = user_repo
        self.role_repo = role_repo
        self.instance_repo = instance_repo
        self.deployment_repo = deployment_repo
        self.permission_index = permission_index
        self.view = view
        self.statistics = statistics

    # ------------------------------------------------------------------
    # validation
    # ------------------------------------------------------------------

    def _validate(self, name: Any, enabled: Any, exported_as: Optional[str], pool_id: Optional[int] = None):
        errors: Dict[str, List[str]] = {}

        def add(field: str, message: str):
            errors.setdefault(field, []).append(message)

        if not isinstance(name, str) or not name.strip():
            add("name", "can't be blank")
        else:
            if len(name) > NAME_MAX_LENGTH:
                add("name", f"is too long (maximum is {NAME_MAX_LENGTH} characters)")
            if not NAME_PATTERN.fullmatch(name):
                add("name", "is invalid")
            existing = self.pool_repo.find_by_name(name)
            if existing is not None and existing.id != pool_id:
                add("name", "has already been taken")

        if not isinstance(enabled, bool):
            add("enabled", "is not included in the list")

        if exported_as:
            existing = self.pool_repo.find_by_exported_as(exported_as)
            if existing is not None and existing.id != pool_id:
                add("exported_as", "has already been taken")

        if errors:
            raise ValidationError(errors)

    @staticmethod
    def _validate_maximum(maximum_running_instances: Optional[int]):
        if maximum_running_instances is None:
            return
        if isinstance(maximum_running_instances, bool) or not isinstance(maximum_running_instances, int) \
                or maximum_running_instances < 0:
            raise ValidationError({"maximum_running_instances": ["must be a whole number greater than or equal to 0"]})

    # ------------------------------------------------------------------
    # CRUD
    # ------------------------------------------------------------------

    def create_pool(self, name: str, pool_family_id: int, enabled: bool = True,
                    exported_as: Optional[str] = None,
                    maximum_running_instances: Optional[int] = None,
                    quota_id: Optional[int] = None) -> models.Pool:
        """
        Creates a pool in an existing pool family.

        Args:
            name: unique name, letters, digits, '_', '-' and spaces only.
            pool_family_id: the family whose grants the pool inherits.
            enabled: whether the pool accepts new instances.
            exported_as: optional unique export label.
            maximum_running_instances: limit of a freshly created quota; None is unlimited.
            quota_id: adopt this existing, unowned quota instead of creating one.

        Raises:
            PoolFamilyNotFoundError: the pool family does not exist.
            QuotaNotFoundError: ``quota_id`` does not exist.
            ValidationError: attribute constraints are violated.
        """
        pool_family = self.pool_family_repo.find_by_id(pool_family_id)
        if not pool_family:
            raise PoolFamilyNotFoundError(f"Pool family with id '{pool_family_id}' not found.")

        if quota_id is not None:
            quota = self.quota_repo.find_by_id(quota_id)
            if not quota:
                raise QuotaNotFoundError(f"Quota with id '{quota_id}' not found.")
            if quota.pool is not None:
                raise ValidationError({"quota": ["is already owned by another pool"]})
        else:
            self._validate_maximum(maximum_running_instances)
            quota = models.Quota(maximum_running_instances=maximum_running_instances, running_instances=0)

        self._validate(name, enabled, exported_as)

        pool = models.Pool(
            name=name,
            enabled=enabled,
            exported_as=exported_as or None,
            quota=quota,
            pool_family=pool_family,
        )
        created = self.pool_repo.create(pool)
        logger.info("pool_created", pool_id=created.id, name=created.name, pool_family_id=pool_family.id)
        return created

    def get_pool(self, pool_id: int) -> models.Pool:
        """
        Raises:
            PoolNotFoundError: no pool has this id.
        """
        pool = self.pool_repo.find_by_id(pool_id)
        if not pool:
            raise PoolNotFoundError(f"Pool with id '{pool_id}' not found.")
        return pool

    def update_pool(self, pool_id: int, **changes) -> models.Pool:
        """
        Updates any of ``name``, ``enabled`` and ``exported_as``.

        Raises:
            PoolNotFoundError: no pool has this id.
            ValidationError: an unknown attribute was passed or a constraint is violated.
        """
        pool = self.get_pool(pool_id)
        unknown = sorted(set(changes) - set(UPDATABLE_FIELDS))
        if unknown:
            raise ValidationError({field: ["cannot be updated"] for field in unknown})

        name = changes.get("name", pool.name)
        enabled = changes.get("enabled", pool.enabled)
        exported_as = changes.get("exported_as", pool.exported_as) or None
        self._validate(name, enabled, exported_as, pool_id=pool.id)

        pool.name = name
        pool.enabled = enabled
        pool.exported_as = exported_as
        saved = self.pool_repo.save(pool)
        logger.info("pool_updated", pool_id=saved.id, fields=sorted(changes))
        return saved

    def update_quota(self, pool_id: int, maximum_running_instances: Optional[int]) -> QuotaTracker:
        """
        Sets the pool's running-instance limit; None removes the limit. Lowering
        it below current usage is allowed.

        Raises:
            PoolNotFoundError: no pool has this id.
            ValidationError: the limit is negative or not an integer.
        """
        pool = self.get_pool(pool_id)
        self._validate_maximum(maximum_running_instances)
        pool.quota.maximum_running_instances = maximum_running_instances
        quota = self.quota_repo.save(pool.quota)
        logger.info("pool_quota_updated", pool_id=pool.id, maximum_running_instances=maximum_running_instances)
        return QuotaTracker(quota)

    def destroy_pool(self, pool_id: int) -> bool:
        """
        Deletes the pool with its quota, instances, deployments, catalogs and
        permissions.

        Destroyability is checked, then checked again against row-locked
        instances in the same transaction as the delete.

        Raises:
            PoolNotFoundError: no pool has this id.
            DestroyBlockedError: an instance of the pool is not destroyable.
        """
        pool = self.get_pool(pool_id)
        if not self.view.destroyable(pool):
            logger.warning("pool_destroy_blocked", pool_id=pool.id)
            raise DestroyBlockedError(f"Pool '{pool.name}' has instances that cannot be destroyed.")

        locked = self.instance_repo.lock_by_pool_id(pool.id)
        if not all(instance.destroyable() for instance in locked):
            self.pool_repo.rollback()
            logger.warning("pool_destroy_blocked", pool_id=pool_id, recheck=True)
            raise DestroyBlockedError(f"Pool '{pool.name}' has instances that cannot be destroyed.")

        self.pool_repo.delete(pool)
        logger.info("pool_destroyed", pool_id=pool_id)
        return True

    # ------------------------------------------------------------------
    # listing
    # ------------------------------------------------------------------

    @staticmethod
    def _order_by(order_field: Optional[str], order_dir: Optional[str]):
        field = order_field or "name"
        direction = (order_dir or "asc").lower()
        if field not in SORTABLE_FIELDS:
            raise ValidationError({"order_field": [f"'{field}' is not sortable"]})
        if direction not in ("asc", "desc"):
            raise ValidationError({"order_dir": [f"'{order_dir}' must be 'asc' or 'desc'"]})
        column = getattr(models.Pool, field)
        return [column.asc() if direction == "asc" else column.desc()]

    def list_pools(self, order_field: Optional[str] = None, order_dir: Optional[str] = None,
                   preset_filter_id: Optional[str] = None, search: Optional[str] = None,
                   user: Optional[models.User] = None, privilege: str = Privilege.VIEW) -> List[models.Pool]:
        """
        Lists pools, by name ascending unless another field/direction is given.

        Args:
            order_field: one of SORTABLE_FIELDS.
            order_dir: 'asc' or 'desc'.
            preset_filter_id: id of one of the view's preset filters.
            search: substring of the pool or pool family name.
            user: restrict to pools this user holds ``privilege`` on, directly
                or through the pool family.

        Raises:
            ValidationError: unknown sort field, direction or preset filter.
        """
        order_by = self._order_by(order_field, order_dir)
        criteria = []
        if user is not None:
            criteria.append(self.view.visible_clause(user, privilege))
        if preset_filter_id:
            criteria.append(self.view.preset_filter(preset_filter_id).criteria())
        if search:
            criteria.append(self.view.search(search))
        return self.pool_repo.list_where(criteria, order_by)

    # ------------------------------------------------------------------
    # permissions
    # ------------------------------------------------------------------

    def _user_and_role(self, user_id: int, role_name: str):
        user = self.user_repo.find_by_id(user_id)
        if not user:
            raise UserNotFoundError(f"User with id '{user_id}' not found.")
        role = self.role_repo.find_by_name(role_name)
        if not role:
            raise RoleNotFoundError(f"Role '{role_name}' not found.")
        return user, role

    def grant_permission(self, pool_id: int, user_id: int, role_name: str) -> models.Permission:
        """
        Grants a role on one pool.

        Raises:
            PoolNotFoundError, UserNotFoundError, RoleNotFoundError
        """
        pool = self.get_pool(pool_id)
        user, role = self._user_and_role(user_id, role_name)
        return self.permission_index.grant(user, role, pool)

    def grant_family_permission(self, pool_family_id: int, user_id: int, role_name: str) -> models.Permission:
        """
        Grants a role on a pool family, and so on every pool in it.

        Raises:
            PoolFamilyNotFoundError, UserNotFoundError, RoleNotFoundError
        """
        pool_family = self.pool_family_repo.find_by_id(pool_family_id)
        if not pool_family:
            raise PoolFamilyNotFoundError(f"Pool family with id '{pool_family_id}' not found.")
        user, role = self._user_and_role(user_id, role_name)
        return self.permission_index.grant(user, role, pool_family)

    # ------------------------------------------------------------------
    # serialization
    # ------------------------------------------------------------------

    def as_json(self, pool: models.Pool, with_deployments: bool = False,
                current_user: Optional[models.User] = None) -> Dict[str, Any]:
        """
        JSON-ready representation of a pool.

        With ``with_deployments`` the deployments ``current_user`` may view are
        included; without a user every deployment is listed.
        """
        result = {
            "id": pool.id,
            "name": pool.name,
            "exported_as": pool.exported_as,
            "enabled": pool.enabled,
            "quota_id": pool.quota_id,
            "pool_family_id": pool.pool_family_id,
            "created_at": pool.created_at.isoformat() if pool.created_at else None,
            "updated_at": pool.updated_at.isoformat() if pool.updated_at else None,
            "statistics": self.statistics.snapshot(pool).as_dict(),
            "deployments_count": self.deployment_repo.count_by_pool_id(pool.id),
            "pool_family": {
                "name": pool.pool_family.name,
                "id": pool.pool_family.id,
            },
        }

        if with_deployments:
            criteria = []
            if current_user is not None:
                criteria.append(self.view.visible_clause(current_user, Privilege.VIEW, models.Deployment))
            result["deployments"] = [
                {"id": d.id, "name": d.name, "pool_id": d.pool_id}
                for d in self.deployment_repo.list_by_pool_id(pool.id, criteria)
            ]

        return result

    def catalog_images_collection(self, catalogs: Iterable[models.Catalog]) -> List[Dict[str, Any]]:
        """
        One row per image reference across the catalogs' deployables; an image
        referenced twice by a deployable yields two identical rows.
        """
        rows = []
        for catalog in catalogs:
            for deployable in catalog.deployables:
                for entry in deployable.unique_images().values():
                    image = entry["image"]
                    row = {
                        "catalog": catalog.name,
                        "deployable": deployable.name,
                        "image": f"{image.name} {image.uuid}",
                        "provider_images": [
                            f"{provider_image.uuid} pushed to {provider_image.provider_name}"
                            for provider_image in image.provider_images
                        ],
                    }
                    rows.extend(dict(row) for _ in range(entry["count"]))
        return rows
