from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, and_, func
from sqlalchemy.orm import relationship, foreign
from ..database import Base
from .permission import Permission, PermissionObjectType


class Pool(Base):
    """
    A named group of compute instances sharing one quota and inheriting the
    permissions of its pool family.

    Quota, instances, deployments and catalogs are owned by the pool and are
    deleted with it. Grants targeting the pool are exposed read-only through
    ``permissions``; the repository removes them on destroy.
    """
    __tablename__ = "pools"
    permission_object_type = PermissionObjectType.POOL

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), unique=True, nullable=False, index=True)
    exported_as = Column(String(255), unique=True, nullable=True)
    enabled = Column(Boolean, nullable=False)
    quota_id = Column(Integer, ForeignKey("quotas.id"), nullable=False)
    pool_family_id = Column(Integer, ForeignKey("pool_families.id"), nullable=False)
    created_at = Column(DateTime, server_default=func.now())
    updated_at = Column(DateTime, server_default=func.now(), onupdate=func.now())

    pool_family = relationship("PoolFamily", back_populates="pools")
    quota = relationship("Quota", back_populates="pool", cascade="all, delete-orphan", single_parent=True)
    instances = relationship("Instance", back_populates="pool", cascade="all, delete-orphan")
    deployments = relationship("Deployment", back_populates="pool", cascade="all, delete-orphan")
    catalogs = relationship("Catalog", back_populates="pool", cascade="all, delete-orphan")
    permissions = relationship(
        Permission,
        primaryjoin=lambda: and_(
            Permission.permission_object_type == PermissionObjectType.POOL,
            foreign(Permission.permission_object_id) == Pool.id,
        ),
        order_by=Permission.id,
        viewonly=True,
    )
