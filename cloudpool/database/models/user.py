from sqlalchemy import Column, Integer, String
from sqlalchemy.orm import relationship
from ..database import Base


class User(Base):
    """
    A person who is granted roles on pools, pool families and their resources.
    Authentication is handled elsewhere; only the identity is kept here.
    """
    __tablename__ = "users"
    id = Column(Integer, primary_key=True, index=True)
    username = Column(String(255), unique=True, nullable=False, index=True)

    permissions = relationship("Permission", back_populates="user", cascade="all, delete-orphan")
