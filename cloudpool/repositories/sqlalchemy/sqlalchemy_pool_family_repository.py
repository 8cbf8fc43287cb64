from typing import Optional
from sqlalchemy.orm import Session
from cloudpool.database import models
from cloudpool.repositories.interfaces import IPoolFamilyRepository

class SqlalchemyPoolFamilyRepository(IPoolFamilyRepository):
    def __init__(self, db_session: Session):
        self.db = db_session

    def find_by_id(self, pool_family_id: int) -> Optional[models.PoolFamily]:
        return self.db.query(models.PoolFamily).filter(models.PoolFamily.id == pool_family_id).first()
