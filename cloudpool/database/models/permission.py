from sqlalchemy import Column, Integer, String, ForeignKey, DateTime, func
from sqlalchemy.orm import relationship
from ..database import Base


class PermissionObjectType:
    """Tags for the object kinds a Permission can target."""
    GLOBAL = "BasePermissionObject"
    POOL_FAMILY = "PoolFamily"
    POOL = "Pool"
    DEPLOYMENT = "Deployment"
    INSTANCE = "Instance"

    ALL = (GLOBAL, POOL_FAMILY, POOL, DEPLOYMENT, INSTANCE)


class Privilege:
    """Actions a role can carry for a given target type."""
    VIEW = "view"
    USE = "use"
    MODIFY = "modify"
    CREATE = "create"
    PERM_VIEW = "view_perms"
    PERM_SET = "set_perms"

    ALL = (VIEW, USE, MODIFY, CREATE, PERM_VIEW, PERM_SET)


class Permission(Base):
    """
    A single (user, role, object) grant.

    The target is a tagged variant: ``permission_object_type`` names the kind
    of object and ``permission_object_id`` its primary key. Grants on the
    global object (``BasePermissionObject``) carry no id. There is no
    uniqueness constraint; duplicate grants evaluate as a set union.
    """
    __tablename__ = "permissions"
    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    role_id = Column(Integer, ForeignKey("roles.id"), nullable=False)
    permission_object_type = Column(String(64), nullable=False)
    permission_object_id = Column(Integer, nullable=True)
    created_at = Column(DateTime, server_default=func.now())

    user = relationship("User", back_populates="permissions")
    role = relationship("Role")
