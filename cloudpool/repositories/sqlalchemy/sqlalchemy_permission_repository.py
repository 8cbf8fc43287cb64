from typing import Any, List, Optional
from sqlalchemy.orm import Session
from cloudpool.database import models
from cloudpool.repositories.interfaces import IPermissionRepository

class SqlalchemyPermissionRepository(IPermissionRepository):
    def __init__(self, db_session: Session):
        self.db = db_session

    def create(self, permission_model: models.Permission) -> models.Permission:
        self.db.add(permission_model)
        self.db.commit()
        self.db.refresh(permission_model)
        return permission_model

    def delete(self, permission: models.Permission) -> bool:
        if permission:
            self.db.delete(permission)
            self.db.commit()
            return True
        return False

    def list_for_object(self, object_type: str, object_id: Optional[int]) -> List[models.Permission]:
        P = models.Permission
        id_filter = P.permission_object_id.is_(None) if object_id is None else P.permission_object_id == object_id
        return self.db.query(P).filter(P.permission_object_type == object_type, id_filter).order_by(P.id.asc()).all()

    def exists_where(self, criterion: Any) -> bool:
        return bool(self.db.query(criterion).scalar())
