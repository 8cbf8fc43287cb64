from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from cloudpool.database import models


class QuotaTracker:
    """
    Current versus maximum running-instance usage of one pool's quota.

    A missing quota reads as unlimited with nothing used.
    """

    def __init__(self, quota: Optional[models.Quota]):
        self.quota = quota

    def maximum(self) -> Optional[int]:
        """The ceiling, or None when unlimited."""
        if self.quota is None:
            return None
        return self.quota.maximum_running_instances

    def used(self) -> int:
        if self.quota is None:
            return 0
        return max(self.quota.running_instances or 0, 0)

    def available(self) -> Optional[int]:
        """Remaining headroom; 0 when usage exceeds a lowered maximum, None when unlimited."""
        maximum = self.maximum()
        if maximum is None:
            return None
        return max(maximum - self.used(), 0)

    def percent_used(self) -> float:
        """Usage in [0, 100]. Unlimited quotas always report 0."""
        if self.quota is None:
            return 0.0
        return self.quota.percentage_used

    def formatted_percent(self) -> str:
        """percent_used() rounded half-up to a whole percent, e.g. '67%'."""
        rounded = Decimal(str(self.percent_used())).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
        return f"{rounded}%"
