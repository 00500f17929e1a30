"""Tests for the initial status decision"""

from datetime import date

import pytest

from reservo.booking.decision import DecisionReason, decide_status, is_time_passed_today
from reservo.booking.policy import ReservationPolicy
from reservo.models.reservation import ReservationStatus
from tests.support import civil

TODAY = date(2025, 6, 10)
TOMORROW = date(2025, 6, 11)


@pytest.fixture
def policy():
    return ReservationPolicy(max_auto_confirm_people=6, cutoff_time="11:00")


class TestGroupThreshold:
    @pytest.mark.parametrize("when", [civil(2025, 6, 10, 9, 0), civil(2025, 6, 10, 15, 0)])
    @pytest.mark.parametrize("service_date", [TODAY, TOMORROW, date(2025, 12, 24)])
    def test_large_groups_always_pending(self, policy, when, service_date):
        decision = decide_status(policy, service_date, "20:00", 7, when)

        assert decision.status == ReservationStatus.PENDING
        assert decision.reason == DecisionReason.GROUP_OVER_THRESHOLD

    def test_group_at_ceiling_is_not_held(self, policy):
        decision = decide_status(policy, TOMORROW, "20:00", 6, civil(2025, 6, 10, 9, 0))
        assert decision.status == ReservationStatus.CONFIRMED


class TestFutureDates:
    @pytest.mark.parametrize("hour", [0, 10, 11, 23])
    def test_future_date_auto_confirms_at_any_time_of_day(self, policy, hour):
        decision = decide_status(policy, TOMORROW, "12:00", 2, civil(2025, 6, 10, hour, 0))

        assert decision.status == ReservationStatus.CONFIRMED
        assert decision.reason == DecisionReason.FUTURE_AUTO_CONFIRM


class TestSameDayCutoff:
    def test_one_minute_before_cutoff_confirms(self, policy):
        decision = decide_status(policy, TODAY, "20:00", 2, civil(2025, 6, 10, 10, 59))

        assert decision.status == ReservationStatus.CONFIRMED
        assert decision.reason == DecisionReason.SAME_DAY_BEFORE_CUTOFF

    def test_exactly_at_cutoff_is_pending(self, policy):
        decision = decide_status(policy, TODAY, "20:00", 2, civil(2025, 6, 10, 11, 0))

        assert decision.status == ReservationStatus.PENDING
        assert decision.reason == DecisionReason.SAME_DAY_AFTER_CUTOFF

    def test_after_cutoff_small_party_is_pending(self, policy):
        decision = decide_status(policy, TODAY, "20:00", 2, civil(2025, 6, 10, 11, 5))

        assert decision.status == ReservationStatus.PENDING
        assert decision.reason == DecisionReason.SAME_DAY_AFTER_CUTOFF

    @pytest.mark.parametrize("cutoff", ["9:00", "", "11h00", None])
    def test_malformed_cutoff_fails_safe(self, cutoff):
        policy = ReservationPolicy.model_construct(max_auto_confirm_people=6, cutoff_time=cutoff)
        decision = decide_status(policy, TODAY, "20:00", 2, civil(2025, 6, 10, 8, 0))

        assert decision.status == ReservationStatus.PENDING
        assert decision.reason == DecisionReason.CUTOFF_INVALID_FAILSAFE


class TestTimePassedToday:
    def test_earlier_slot_today_has_passed(self):
        assert is_time_passed_today(TODAY, "09:59", civil(2025, 6, 10, 10, 0))

    def test_current_minute_has_not_passed(self):
        assert not is_time_passed_today(TODAY, "10:00", civil(2025, 6, 10, 10, 0))

    def test_other_days_never_pass(self):
        assert not is_time_passed_today(TOMORROW, "00:00", civil(2025, 6, 10, 23, 0))
