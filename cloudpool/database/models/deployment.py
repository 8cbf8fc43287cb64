from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from ..database import Base
from .permission import PermissionObjectType


class Deployment(Base):
    """A set of instances launched together inside one pool."""
    __tablename__ = "deployments"
    permission_object_type = PermissionObjectType.DEPLOYMENT

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    created_at = Column(DateTime, server_default=func.now())

    pool_id = Column(Integer, ForeignKey("pools.id"), nullable=False, index=True)
    pool = relationship("Pool", back_populates="deployments")
    instances = relationship("Instance", back_populates="deployment")
