from abc import ABC, abstractmethod
from typing import Optional
from cloudpool.database import models

class IRoleRepository(ABC):
    @abstractmethod
    def find_by_name(self, name: str) -> Optional[models.Role]:
        pass
