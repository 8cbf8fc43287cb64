from abc import ABC, abstractmethod
from typing import Any, List, Optional, Sequence
from cloudpool.database import models

class IInstanceRepository(ABC):
    @abstractmethod
    def count_by_pool_id(self, pool_id: int, states: Optional[Sequence[str]] = None,
                         exclude_states: Optional[Sequence[str]] = None) -> int:
        """
        Counts a pool's instances.

        Args:
            pool_id: the owning pool.
            states: only count instances in one of these states.
            exclude_states: skip instances in any of these states.
        """
        pass

    @abstractmethod
    def list_by_pool_id(self, pool_id: int, states: Optional[Sequence[str]] = None,
                        criteria: Sequence[Any] = ()) -> List[models.Instance]:
        """A pool's instances, optionally narrowed by state and extra SQL criteria, ordered by id."""
        pass

    @abstractmethod
    def count_provider_accounts(self, pool_id: int) -> int:
        """Number of distinct provider accounts referenced by the pool's instances."""
        pass

    @abstractmethod
    def list_provider_accounts(self, pool_id: int) -> List[models.ProviderAccount]:
        """Distinct provider accounts referenced by the pool's instances."""
        pass

    @abstractmethod
    def lock_by_pool_id(self, pool_id: int) -> List[models.Instance]:
        """
        Loads a pool's instances with a row lock (SELECT ... FOR UPDATE) held
        until the current transaction ends. Backends without row locks load
        them unlocked.
        """
        pass
