from typing import Any, List, Sequence
from sqlalchemy.orm import Session
from cloudpool.database import models
from cloudpool.repositories.interfaces import IDeploymentRepository

class SqlalchemyDeploymentRepository(IDeploymentRepository):
    def __init__(self, db_session: Session):
        self.db = db_session

    def count_by_pool_id(self, pool_id: int) -> int:
        return self.db.query(models.Deployment).filter(models.Deployment.pool_id == pool_id).count()

    def list_by_pool_id(self, pool_id: int, criteria: Sequence[Any] = ()) -> List[models.Deployment]:
        return (
            self.db.query(models.Deployment)
            .filter(models.Deployment.pool_id == pool_id, *criteria)
            .order_by(models.Deployment.id.asc())
            .all()
        )
