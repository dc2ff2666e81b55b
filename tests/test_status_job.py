"""Tests for the daily status job planner and the billing day simulator"""
from datetime import date, datetime

import pytest

from app.core.exceptions import ValidationError
from app.membership.enums import MembershipStatus
from app.membership.schemas.status import UserBillingSnapshot
from app.membership.services.simulation import billing_period, simulate_billing_day
from app.membership.services.status_job import process_user_statuses
from tests.factories import INSURANCE_FEE, MMA_FEE, make_payment


def snapshot(user_id, status, role="user"):
    return UserBillingSnapshot(id=user_id, status=status, role=role)


class TestProcessUserStatuses:
    def test_reports_only_changes(self):
        now = datetime(2025, 3, 20, 0, 0)
        users = [
            snapshot("paid", "active"),
            snapshot("late", "pending"),
            snapshot("boss", "active", role="admin"),
        ]
        payments = [
            make_payment(MMA_FEE, date(2025, 3, 2), user_id="paid"),
            make_payment(INSURANCE_FEE, date(2025, 1, 10), user_id="paid"),
            make_payment(INSURANCE_FEE, date(2025, 1, 10), user_id="late"),
        ]

        result = process_user_statuses(users, payments, now)

        assert result.processed == 3
        assert result.updated == 1
        change = result.updates[0]
        assert change.user_id == "late"
        assert change.old_status == MembershipStatus.pending
        assert change.new_status == MembershipStatus.suspended
        assert change.has_payment is False
        assert change.has_medical_insurance is True
        assert result.sign_out_user_ids == ["late"]
        assert result.timestamp == now

    def test_payment_reactivates_suspended_user(self):
        users = [snapshot("u1", "suspended")]
        payments = [
            make_payment(MMA_FEE, date(2025, 3, 19), user_id="u1"),
            make_payment(INSURANCE_FEE, date(2024, 9, 1), user_id="u1"),
        ]

        result = process_user_statuses(users, payments, datetime(2025, 3, 20))

        assert result.updates[0].new_status == MembershipStatus.active
        assert result.sign_out_user_ids == []

    def test_last_month_payment_does_not_count(self):
        users = [snapshot("u1", "active")]
        payments = [
            make_payment(MMA_FEE, date(2025, 2, 28), user_id="u1"),
            make_payment(INSURANCE_FEE, date(2025, 1, 1), user_id="u1"),
        ]

        result = process_user_statuses(users, payments, datetime(2025, 3, 2))

        assert result.updates[0].new_status == MembershipStatus.pending

    def test_rerun_on_applied_plan_is_empty(self):
        now = datetime(2025, 3, 16)
        users = [snapshot("u1", "active"), snapshot("u2", "pending")]

        first = process_user_statuses(users, [], now)
        applied = [snapshot(c.user_id, c.new_status) for c in first.updates]
        second = process_user_statuses(applied, [], now)

        assert first.updated == 2
        assert second.updated == 0

    def test_no_users(self):
        result = process_user_statuses([], [], datetime(2025, 3, 16))
        assert result.processed == 0
        assert result.updates == []


class TestBillingSimulation:
    @pytest.mark.parametrize(
        "day,period",
        [
            (1, "grace"),
            (5, "grace"),
            (6, "blocked"),
            (14, "blocked"),
            (15, "suspension"),
            (31, "suspension"),
        ],
    )
    def test_billing_period(self, day, period):
        assert billing_period(day) == period

    def test_grace_period_day(self):
        result = simulate_billing_day(3)
        assert result.period == "grace"
        assert len(result.scenarios) == 6
        # Everyone can enroll: paid users are active, unpaid are pending in grace
        assert result.users_who_can_enroll == 6

    def test_blocked_day(self):
        result = simulate_billing_day(10)
        unpaid = [s for s in result.scenarios if not s.has_payment]
        assert all(s.new_status == MembershipStatus.pending for s in unpaid)
        assert not any(s.can_enroll for s in unpaid)
        assert result.users_who_can_enroll == 3

    def test_suspension_day(self):
        result = simulate_billing_day(15)
        by_description = {s.description: s for s in result.scenarios}
        assert by_description["Active user without payment"].new_status == "suspended"
        assert by_description["Suspended user without payment"].changed is False
        assert by_description["Suspended user with payment"].new_status == "active"
        assert result.changes_expected == 4

    def test_reasons_match_enrollment(self):
        for scenario in simulate_billing_day(8).scenarios:
            assert (scenario.reason == "") is scenario.can_enroll

    def test_day_not_in_month(self):
        with pytest.raises(ValidationError):
            simulate_billing_day(30, on=date(2025, 2, 1))
