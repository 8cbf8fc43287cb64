from sqlalchemy import Column, Integer, String, and_
from sqlalchemy.orm import relationship, foreign
from ..database import Base
from .permission import Permission, PermissionObjectType


class PoolFamily(Base):
    """
    A container of pools. Roles granted on a family apply to every pool in it.
    """
    __tablename__ = "pool_families"
    permission_object_type = PermissionObjectType.POOL_FAMILY

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), unique=True, nullable=False, index=True)
    description = Column(String(255))

    pools = relationship("Pool", back_populates="pool_family")
    permissions = relationship(
        Permission,
        primaryjoin=lambda: and_(
            Permission.permission_object_type == PermissionObjectType.POOL_FAMILY,
            foreign(Permission.permission_object_id) == PoolFamily.id,
        ),
        order_by=Permission.id,
        viewonly=True,
    )
