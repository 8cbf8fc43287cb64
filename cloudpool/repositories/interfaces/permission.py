from abc import ABC, abstractmethod
from typing import Any, List, Optional
from cloudpool.database import models

class IPermissionRepository(ABC):
    @abstractmethod
    def create(self, permission_model: models.Permission) -> models.Permission:
        """Stores a grant. Duplicate grants are allowed."""
        pass

    @abstractmethod
    def delete(self, permission: models.Permission) -> bool:
        pass

    @abstractmethod
    def list_for_object(self, object_type: str, object_id: Optional[int]) -> List[models.Permission]:
        """Grants targeting one object, ordered by grant id ascending."""
        pass

    @abstractmethod
    def exists_where(self, criterion: Any) -> bool:
        """True if the SQL expression holds (typically an EXISTS over permissions)."""
        pass
