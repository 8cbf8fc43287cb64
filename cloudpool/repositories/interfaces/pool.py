from abc import ABC, abstractmethod
from typing import Any, List, Optional, Sequence
from cloudpool.database import models

class IPoolRepository(ABC):
    @abstractmethod
    def create(self, pool_model: models.Pool) -> models.Pool:
        """Persists a new pool together with its quota."""
        pass

    @abstractmethod
    def find_by_id(self, pool_id: int) -> Optional[models.Pool]:
        pass

    @abstractmethod
    def find_by_name(self, name: str) -> Optional[models.Pool]:
        pass

    @abstractmethod
    def find_by_exported_as(self, exported_as: str) -> Optional[models.Pool]:
        pass

    @abstractmethod
    def list_where(self, criteria: Sequence[Any] = (), order_by: Sequence[Any] = ()) -> List[models.Pool]:
        """
        Lists pools matching every criterion, with quota and pool family eagerly loaded.

        Args:
            criteria: SQL expressions combined with AND. Empty means all pools.
            order_by: ORDER BY expressions. Empty means name ascending.
        """
        pass

    @abstractmethod
    def save(self, pool: models.Pool) -> models.Pool:
        """Commits pending changes of an already persisted pool."""
        pass

    @abstractmethod
    def delete(self, pool: models.Pool) -> bool:
        """
        Deletes the pool, its quota, instances, deployments, catalogs and every
        permission granted on it, in one transaction.
        """
        pass

    @abstractmethod
    def rollback(self):
        """Discards the current transaction, releasing any row locks."""
        pass
