from sqlalchemy import Column, Integer
from sqlalchemy.orm import relationship
from ..database import Base


class Quota(Base):
    """
    The running-instance ceiling and live usage counter of one pool.
    ``maximum_running_instances`` of NULL means unlimited.
    """
    __tablename__ = "quotas"
    id = Column(Integer, primary_key=True, index=True)
    maximum_running_instances = Column(Integer, nullable=True)
    running_instances = Column(Integer, nullable=False, default=0)

    pool = relationship("Pool", back_populates="quota", uselist=False)

    @property
    def percentage_used(self) -> float:
        """Usage as a percentage of the maximum, in [0, 100]; 0 when unlimited."""
        maximum = self.maximum_running_instances
        used = max(self.running_instances or 0, 0)
        if maximum is None:
            return 0.0
        if maximum <= 0:
            return 100.0 if used > 0 else 0.0
        return min(used * 100.0 / maximum, 100.0)
