# tests/services/test_quota_tracker.py
import pytest

from cloudpool.database import models
from cloudpool.services.quota_tracker import QuotaTracker


def tracker(maximum, used) -> QuotaTracker:
    return QuotaTracker(models.Quota(maximum_running_instances=maximum, running_instances=used))


class TestAvailable:
    def test_available_is_headroom(self):
        assert tracker(10, 4).available() == 6

    def test_available_never_negative_when_quota_lowered(self):
        """Usage above a lowered maximum reports 0 available, not a negative number."""
        assert tracker(10, 15).available() == 0

    def test_available_is_none_when_unlimited(self):
        assert tracker(None, 7).available() is None

    def test_negative_counter_reads_as_zero_used(self):
        assert tracker(5, -2).used() == 0
        assert tracker(5, -2).available() == 5


class TestPercentUsed:
    def test_unlimited_quota_reports_zero_percent(self):
        q = tracker(None, 1000)
        assert q.percent_used() == 0
        assert q.formatted_percent() == "0%"

    def test_percent_used_is_capped_at_hundred(self):
        assert tracker(10, 15).percent_used() == 100.0

    @pytest.mark.parametrize("maximum, used, expected", [
        (3, 2, "67%"),
        (8, 1, "13%"),   # 12.5 rounds half up
        (4, 1, "25%"),
        (10, 0, "0%"),
        (10, 10, "100%"),
    ])
    def test_formatted_percent_rounds_to_whole_percent(self, maximum, used, expected):
        assert tracker(maximum, used).formatted_percent() == expected

    def test_zero_maximum(self):
        assert tracker(0, 0).percent_used() == 0.0
        assert tracker(0, 1).percent_used() == 100.0
        assert tracker(0, 1).available() == 0


class TestMissingQuota:
    def test_missing_quota_degrades_to_unlimited(self):
        q = QuotaTracker(None)
        assert q.maximum() is None
        assert q.used() == 0
        assert q.available() is None
        assert q.formatted_percent() == "0%"
