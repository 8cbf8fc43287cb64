from typing import Any, Dict, List, NamedTuple, Optional, Sequence

import structlog
from sqlalchemy import false, or_, select

from cloudpool.database import models
from cloudpool.database.models import PermissionObjectType
from cloudpool.repositories.interfaces import IPermissionRepository

logger = structlog.get_logger(__name__)


class ParentLink(NamedTuple):
    """
    One step of a relation walk: grants held on ``object_type`` apply to the
    child row whose ``id_expression`` evaluates to that object's id.
    """
    object_type: str
    id_expression: Any


def _family_of(model):
    return (
        select(models.Pool.pool_family_id)
        .where(models.Pool.id == model.pool_id)
        .correlate(model)
        .scalar_subquery()
    )


DEFAULT_PARENT_LINKS: Dict[type, Sequence[ParentLink]] = {
    models.Pool: (
        ParentLink(PermissionObjectType.POOL_FAMILY, models.Pool.pool_family_id),
    ),
    models.Deployment: (
        ParentLink(PermissionObjectType.POOL, models.Deployment.pool_id),
        ParentLink(PermissionObjectType.POOL_FAMILY, _family_of(models.Deployment)),
    ),
    models.Instance: (
        ParentLink(PermissionObjectType.POOL, models.Instance.pool_id),
        ParentLink(PermissionObjectType.POOL_FAMILY, _family_of(models.Instance)),
    ),
}


class PermissionIndex:
    """
    Stores (user, role, object) grants and turns them into SQL predicates.

    Inherited grants are never materialized: ``list_visible`` ORs in an
    EXISTS clause per parent link, so the answer follows family membership and
    grant changes at query time.
    """

    def __init__(self, permission_repo: IPermissionRepository,
                 parent_links: Optional[Dict[type, Sequence[ParentLink]]] = None):
        """
        Args:
            permission_repo: storage for Permission rows.
            parent_links: relation walk per permissioned model. Defaults to
                Pool -> PoolFamily, and Deployment/Instance -> Pool -> PoolFamily.
        """
        self.permission_repo = permission_repo
        self.parent_links = DEFAULT_PARENT_LINKS if parent_links is None else parent_links

    def grant(self, user: models.User, role: models.Role, obj=None) -> models.Permission:
        """
        Grants ``role`` to ``user`` on ``obj``; ``obj=None`` grants it globally.
        Duplicate grants are stored as-is.
        """
        if obj is None:
            object_type, object_id = PermissionObjectType.GLOBAL, None
        else:
            object_type, object_id = obj.permission_object_type, obj.id
        permission = self.permission_repo.create(models.Permission(
            user_id=user.id,
            role_id=role.id,
            permission_object_type=object_type,
            permission_object_id=object_id,
        ))
        logger.info(
            "permission_granted",
            user_id=user.id,
            role=role.name,
            object_type=object_type,
            object_id=object_id,
        )
        return permission

    def revoke(self, permission: models.Permission) -> bool:
        removed = self.permission_repo.delete(permission)
        if removed:
            logger.info("permission_revoked", permission_id=permission.id)
        return removed

    def permissions_for(self, obj) -> List[models.Permission]:
        """Grants made directly on ``obj``, oldest first."""
        return self.permission_repo.list_for_object(obj.permission_object_type, obj.id)

    def role_ids_satisfying(self, privilege: str, target_type: str):
        """Subquery of ids of roles carrying ``privilege`` for ``target_type``."""
        return select(models.RolePrivilege.role_id).where(
            models.RolePrivilege.target_type == target_type,
            models.RolePrivilege.action == privilege,
        )

    def grant_clause(self, user: models.User, privilege: str, target_type: str,
                     object_type: str, object_id_expression=None):
        """
        EXISTS a grant to ``user`` on (``object_type``, ``object_id_expression``)
        whose role carries ``privilege`` for ``target_type``. A None id matches
        global grants.
        """
        P = models.Permission
        if object_id_expression is None:
            target = P.permission_object_id.is_(None)
        else:
            target = P.permission_object_id == object_id_expression
        return select(P.id).where(
            P.user_id == user.id,
            P.permission_object_type == object_type,
            target,
            P.role_id.in_(self.role_ids_satisfying(privilege, target_type)),
        ).exists()

    def holds(self, user: models.User, privilege: str, obj) -> bool:
        """True if a grant directly on ``obj`` gives ``user`` at least ``privilege``."""
        object_type = obj.permission_object_type
        clause = self.grant_clause(user, privilege, object_type, object_type, obj.id)
        return self.permission_repo.exists_where(clause)

    def list_visible(self, user: models.User, privilege: str, model, base_clause=None):
        """
        Predicate over ``model`` rows: ``base_clause`` OR a qualifying grant on
        any parent reached through the relation walk.

        Args:
            user: the user whose grants are consulted.
            privilege: action the role must carry for ``model``'s type.
            model: permissioned model class, e.g. ``models.Pool``.
            base_clause: predicate of the wider access policy (direct grants,
                superuser bypass). None contributes nothing.
        """
        target_type = model.permission_object_type
        clauses = [] if base_clause is None else [base_clause]
        for link in self.parent_links.get(model, ()):
            clauses.append(self.grant_clause(user, privilege, target_type, link.object_type, link.id_expression))
        if not clauses:
            return false()
        return or_(*clauses)


class DefaultAccessPolicy:
    """
    Base visibility rule: a global grant (superuser bypass) or a grant made
    directly on the row.
    """

    def __init__(self, permission_index: PermissionIndex):
        self.permission_index = permission_index

    def clause(self, user: models.User, privilege: str, model):
        target_type = model.permission_object_type
        index = self.permission_index
        return or_(
            index.grant_clause(user, privilege, target_type, PermissionObjectType.GLOBAL),
            index.grant_clause(user, privilege, target_type, target_type, model.id),
        )
