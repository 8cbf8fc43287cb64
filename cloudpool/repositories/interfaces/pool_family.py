from abc import ABC, abstractmethod
from typing import Optional
from cloudpool.database import models

class IPoolFamilyRepository(ABC):
    @abstractmethod
    def find_by_id(self, pool_family_id: int) -> Optional[models.PoolFamily]:
        pass
