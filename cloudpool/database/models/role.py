from sqlalchemy import Column, Integer, String, ForeignKey
from sqlalchemy.orm import relationship
from ..database import Base


class Role(Base):
    """
    A named bundle of privileges (e.g. 'Pool User', 'Pool Administrator').

    A role satisfies privilege P on target type T when it carries a
    RolePrivilege (T, P). Higher roles simply carry more rows, so "role or
    better" is a membership test over the role's privileges.
    """
    __tablename__ = "roles"
    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(255), unique=True, nullable=False)
    scope = Column(String(64), nullable=False)

    privileges = relationship("RolePrivilege", back_populates="role", cascade="all, delete-orphan")

    def satisfies(self, privilege: str, target_type: str) -> bool:
        return any(p.action == privilege and p.target_type == target_type for p in self.privileges)


class RolePrivilege(Base):
    __tablename__ = "role_privileges"
    id = Column(Integer, primary_key=True, index=True)
    role_id = Column(Integer, ForeignKey("roles.id"), nullable=False, index=True)
    target_type = Column(String(64), nullable=False)
    action = Column(String(32), nullable=False)

    role = relationship("Role", back_populates="privileges")
