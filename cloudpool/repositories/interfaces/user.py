from abc import ABC, abstractmethod
from typing import Optional
from cloudpool.database import models

class IUserRepository(ABC):
    @abstractmethod
    def find_by_id(self, user_id: int) -> Optional[models.User]:
        pass
