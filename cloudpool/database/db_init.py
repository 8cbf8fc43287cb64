import structlog

from cloudpool.logging import configure_logging
from .database import engine, SessionLocal, Base
from .models import Role, RolePrivilege, PoolFamily, Pool, Quota, PermissionObjectType, Privilege

logger = structlog.get_logger(__name__)

_T = PermissionObjectType
_P = Privilege

# role name -> (scope, {target_type: actions})
DEFAULT_ROLES = {
    "Pool User": (_T.POOL, {
        _T.POOL: (_P.VIEW, _P.USE),
        _T.DEPLOYMENT: (_P.VIEW,),
        _T.INSTANCE: (_P.VIEW,),
    }),
    "Pool Administrator": (_T.POOL, {
        _T.POOL: (_P.VIEW, _P.USE, _P.MODIFY, _P.PERM_VIEW, _P.PERM_SET),
        _T.DEPLOYMENT: (_P.VIEW, _P.USE, _P.MODIFY, _P.CREATE),
        _T.INSTANCE: (_P.VIEW, _P.USE, _P.MODIFY, _P.CREATE),
    }),
    "Pool Family User": (_T.POOL_FAMILY, {
        _T.POOL_FAMILY: (_P.VIEW,),
        _T.POOL: (_P.VIEW, _P.USE),
        _T.DEPLOYMENT: (_P.VIEW,),
        _T.INSTANCE: (_P.VIEW,),
    }),
    "Pool Family Administrator": (_T.POOL_FAMILY, {
        _T.POOL_FAMILY: (_P.VIEW, _P.USE, _P.MODIFY, _P.PERM_VIEW, _P.PERM_SET),
        _T.POOL: (_P.VIEW, _P.USE, _P.MODIFY, _P.CREATE, _P.PERM_VIEW, _P.PERM_SET),
        _T.DEPLOYMENT: (_P.VIEW, _P.USE, _P.MODIFY, _P.CREATE),
        _T.INSTANCE: (_P.VIEW, _P.USE, _P.MODIFY, _P.CREATE),
    }),
    "Administrator": (_T.GLOBAL, {
        target: _P.ALL for target in _T.ALL
    }),
}


def build_default_roles():
    """Role models (with privileges) for every entry of DEFAULT_ROLES."""
    roles = []
    for name, (scope, grants) in DEFAULT_ROLES.items():
        role = Role(name=name, scope=scope)
        for target_type, actions in grants.items():
            for action in actions:
                role.privileges.append(RolePrivilege(target_type=target_type, action=action))
        roles.append(role)
    return roles


def initialize_db():
    """
    Creates all tables and seeds the default roles, the 'default' pool family
    and the 'default_pool' pool. Existing data is left untouched.
    """
    Base.metadata.create_all(bind=engine)
    logger.info("tables_created")

    db = SessionLocal()
    try:
        if db.query(Role).first():
            logger.info("database_already_seeded")
            return

        db.add_all(build_default_roles())

        family = PoolFamily(name="default", description="default pool family")
        db.add(family)
        db.add(Pool(name="default_pool", enabled=True, quota=Quota(running_instances=0), pool_family=family))

        db.commit()
        logger.info("database_initialized", roles=len(DEFAULT_ROLES))

    except Exception:
        logger.exception("database_initialization_failed")
        db.rollback()
        raise
    finally:
        db.close()


if __name__ == "__main__":
    configure_logging()
    initialize_db()
