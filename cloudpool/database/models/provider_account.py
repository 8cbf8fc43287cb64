from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from ..database import Base


class ProviderAccount(Base):
    """
    Credentials for one cloud provider (e.g. an EC2 account) on which
    instances are launched. Only referenced locally; no provider API is called.
    """
    __tablename__ = "provider_accounts"
    id = Column(Integer, primary_key=True, index=True)
    label = Column(String(255), unique=True, nullable=False)
    provider_name = Column(String(255), nullable=False)

    instances = relationship("Instance", back_populates="provider_account")
