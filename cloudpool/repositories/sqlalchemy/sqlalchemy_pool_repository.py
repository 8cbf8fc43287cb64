from typing import Any, List, Optional, Sequence
from sqlalchemy import and_, or_
from sqlalchemy.orm import Session, joinedload
from cloudpool.database import models
from cloudpool.database.models import PermissionObjectType
from cloudpool.repositories.interfaces import IPoolRepository

class SqlalchemyPoolRepository(IPoolRepository):
    def __init__(self, db_session: Session):
        self.db = db_session

    def create(self, pool_model: models.Pool) -> models.Pool:
        self.db.add(pool_model)
        self.db.commit()
        self.db.refresh(pool_model)
        return pool_model

    def find_by_id(self, pool_id: int) -> Optional[models.Pool]:
        return self.db.query(models.Pool).filter(models.Pool.id == pool_id).first()

    def find_by_name(self, name: str) -> Optional[models.Pool]:
        return self.db.query(models.Pool).filter(models.Pool.name == name).first()

    def find_by_exported_as(self, exported_as: str) -> Optional[models.Pool]:
        return self.db.query(models.Pool).filter(models.Pool.exported_as == exported_as).first()

    def list_where(self, criteria: Sequence[Any] = (), order_by: Sequence[Any] = ()) -> List[models.Pool]:
        query = self.db.query(models.Pool).options(
            joinedload(models.Pool.quota), joinedload(models.Pool.pool_family)
        )
        return query.filter(*criteria).order_by(*(order_by or (models.Pool.name.asc(),))).all()

    def save(self, pool: models.Pool) -> models.Pool:
        self.db.add(pool)
        self.db.commit()
        self.db.refresh(pool)
        return pool

    def delete(self, pool: models.Pool) -> bool:
        if not pool:
            return False
        P = models.Permission
        # Reload owned rows so ones added since the collections were first read are cascaded too.
        self.db.expire(pool, ["instances", "deployments", "catalogs"])
        deployment_ids = [d.id for d in pool.deployments]
        instance_ids = [i.id for i in pool.instances]
        try:
            # Grants have no foreign key to their target, so they are removed by tag.
            self.db.query(P).filter(or_(
                and_(P.permission_object_type == PermissionObjectType.POOL, P.permission_object_id == pool.id),
                and_(P.permission_object_type == PermissionObjectType.DEPLOYMENT, P.permission_object_id.in_(deployment_ids)),
                and_(P.permission_object_type == PermissionObjectType.INSTANCE, P.permission_object_id.in_(instance_ids)),
            )).delete(synchronize_session=False)
            self.db.delete(pool)
            self.db.commit()
        except Exception:
            self.db.rollback()
            raise
        return True

    def rollback(self):
        self.db.rollback()
