from typing import Any, List, Optional, Sequence
from sqlalchemy import distinct, func
from sqlalchemy.orm import Session
from cloudpool.database import models
from cloudpool.repositories.interfaces import IInstanceRepository

class SqlalchemyInstanceRepository(IInstanceRepository):
    def __init__(self, db_session: Session):
        self.db = db_session

    def _by_pool(self, pool_id: int, states: Optional[Sequence[str]] = None,
                 exclude_states: Optional[Sequence[str]] = None):
        query = self.db.query(models.Instance).filter(models.Instance.pool_id == pool_id)
        if states is not None:
            query = query.filter(models.Instance.state.in_(list(states)))
        if exclude_states:
            query = query.filter(models.Instance.state.notin_(list(exclude_states)))
        return query

    def count_by_pool_id(self, pool_id: int, states: Optional[Sequence[str]] = None,
                         exclude_states: Optional[Sequence[str]] = None) -> int:
        return self._by_pool(pool_id, states, exclude_states).count()

    def list_by_pool_id(self, pool_id: int, states: Optional[Sequence[str]] = None,
                        criteria: Sequence[Any] = ()) -> List[models.Instance]:
        return self._by_pool(pool_id, states).filter(*criteria).order_by(models.Instance.id.asc()).all()

    def count_provider_accounts(self, pool_id: int) -> int:
        count = self.db.query(func.count(distinct(models.Instance.provider_account_id))).filter(
            models.Instance.pool_id == pool_id
        ).scalar()
        return count or 0

    def list_provider_accounts(self, pool_id: int) -> List[models.ProviderAccount]:
        return (
            self.db.query(models.ProviderAccount)
            .join(models.ProviderAccount.instances)
            .filter(models.Instance.pool_id == pool_id)
            .distinct()
            .order_by(models.ProviderAccount.id.asc())
            .all()
        )

    def lock_by_pool_id(self, pool_id: int) -> List[models.Instance]:
        # populate_existing refreshes instances already held in the identity map
        return (
            self._by_pool(pool_id)
            .order_by(models.Instance.id.asc())
            .with_for_update()
            .populate_existing()
            .all()
        )
