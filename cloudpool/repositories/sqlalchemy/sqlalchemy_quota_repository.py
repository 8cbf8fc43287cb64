from typing import Optional
from sqlalchemy.orm import Session
from cloudpool.database import models
from cloudpool.repositories.interfaces import IQuotaRepository

class SqlalchemyQuotaRepository(IQuotaRepository):
    def __init__(self, db_session: Session):
        self.db = db_session

    def find_by_id(self, quota_id: int) -> Optional[models.Quota]:
        return self.db.query(models.Quota).filter(models.Quota.id == quota_id).first()

    def save(self, quota: models.Quota) -> models.Quota:
        self.db.add(quota)
        self.db.commit()
        self.db.refresh(quota)
        return quota
