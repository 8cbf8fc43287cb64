from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, func
from sqlalchemy.orm import relationship
from ..database import Base
from .permission import PermissionObjectType


class InstanceState:
    NEW = "new"
    PENDING = "pending"
    RUNNING = "running"
    SHUTTING_DOWN = "shutting_down"
    STOPPED = "stopped"
    CREATE_FAILED = "create_failed"
    ERROR = "error"
    VANISHED = "vanished"

    FAILED = (CREATE_FAILED, ERROR)
    DESTROYABLE = (NEW, STOPPED, CREATE_FAILED, ERROR, VANISHED)


class Instance(Base):
    """
    A virtual machine launched in a pool. The lifecycle state machine lives
    outside this package; only the current state is read here.
    """
    __tablename__ = "instances"
    permission_object_type = PermissionObjectType.INSTANCE

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), nullable=False)
    state = Column(String(32), nullable=False, default=InstanceState.NEW)
    created_at = Column(DateTime, server_default=func.now())

    pool_id = Column(Integer, ForeignKey("pools.id"), nullable=False, index=True)
    deployment_id = Column(Integer, ForeignKey("deployments.id"), nullable=True, index=True)
    provider_account_id = Column(Integer, ForeignKey("provider_accounts.id"), nullable=True)

    pool = relationship("Pool", back_populates="instances")
    deployment = relationship("Deployment", back_populates="instances")
    provider_account = relationship("ProviderAccount", back_populates="instances")

    def destroyable(self) -> bool:
        """True when the instance can be removed without leaving a live VM behind."""
        return self.state in InstanceState.DESTROYABLE

    def failed(self) -> bool:
        return self.state in InstanceState.FAILED
