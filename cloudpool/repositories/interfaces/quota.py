from abc import ABC, abstractmethod
from typing import Optional
from cloudpool.database import models

class IQuotaRepository(ABC):
    @abstractmethod
    def find_by_id(self, quota_id: int) -> Optional[models.Quota]:
        pass

    @abstractmethod
    def save(self, quota: models.Quota) -> models.Quota:
        """Commits pending changes to the quota's limit or counter."""
        pass
