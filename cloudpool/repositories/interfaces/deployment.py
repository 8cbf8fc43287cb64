from abc import ABC, abstractmethod
from typing import Any, List, Sequence
from cloudpool.database import models

class IDeploymentRepository(ABC):
    @abstractmethod
    def count_by_pool_id(self, pool_id: int) -> int:
        pass

    @abstractmethod
    def list_by_pool_id(self, pool_id: int, criteria: Sequence[Any] = ()) -> List[models.Deployment]:
        """A pool's deployments matching every criterion, ordered by id."""
        pass
