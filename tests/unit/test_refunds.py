from datetime import date, datetime, timedelta, timezone
from decimal import Decimal

import pytest

from rental_core.domain.entities.payment import Payment, PaymentStatus, PaymentType
from rental_core.domain.services.refunds import (
    cancellation_refund,
    overdue_days,
    overdue_penalty,
    refund_eligible,
    refund_ineligibility_reason,
    refund_percent_for,
    refundable_remaining,
)
from rental_core.domain.value_objects.date_range import start_of_day

NOW = datetime(2026, 3, 1, 12, 0, tzinfo=timezone.utc)


def completed_payment(created_at: datetime, amount: str = "100.00", **overrides) -> Payment:
    values = dict(
        id=1,
        reservation_id=1,
        amount=Decimal(amount),
        type=PaymentType.RENTAL,
        status=PaymentStatus.COMPLETED,
        created_at=created_at,
    )
    values.update(overrides)
    return Payment(**values)


def refund_of(amount: str, status: PaymentStatus) -> Payment:
    return Payment(
        amount=Decimal(amount),
        type=PaymentType.REFUND,
        status=status,
        refunded_payment_id=1,
    )


class TestCancellationTiers:
    @pytest.mark.parametrize(
        "hours, percent",
        [
            ("49", "100"),
            ("48.01", "100"),
            ("48", "90"),
            ("36", "90"),
            ("24", "70"),
            ("10", "70"),
            ("-5", "70"),
        ],
    )
    def test_refund_percent_by_hours_until_start(self, hours, percent):
        assert refund_percent_for(Decimal(hours)) == Decimal(percent)

    def test_refund_and_fee_add_up_to_total_paid(self):
        result = cancellation_refund(Decimal("630.00"), Decimal("36"))

        assert result.refund_percent == Decimal("90")
        assert result.refund_amount == Decimal("567.00")
        assert result.fee == Decimal("63.00")

    def test_full_refund_has_no_fee(self):
        result = cancellation_refund(Decimal("630.00"), Decimal("49"))

        assert result.refund_amount == Decimal("630.00")
        assert result.fee == Decimal("0.00")

    def test_nothing_paid_nothing_refunded(self):
        result = cancellation_refund(Decimal("0"), Decimal("10"))

        assert result.refund_amount == Decimal("0.00")
        assert result.fee == Decimal("0.00")

    def test_fee_absorbs_rounding(self):
        result = cancellation_refund(Decimal("100.05"), Decimal("10"))

        # 70.035 -> 70.04; la tasa es el complemento exacto
        assert result.refund_amount == Decimal("70.04")
        assert result.fee == Decimal("30.01")


class TestOverdue:
    END = date(2026, 3, 10)

    def test_not_overdue_before_end_date(self):
        assert overdue_days(self.END, start_of_day(self.END) - timedelta(hours=1)) == 0

    def test_not_overdue_at_midnight_of_end_date(self):
        assert overdue_days(self.END, start_of_day(self.END)) == 0

    def test_partial_days_round_up(self):
        now = start_of_day(self.END) + timedelta(days=2, hours=1)

        assert overdue_days(self.END, now) == 3

    def test_one_second_late_is_one_day(self):
        assert overdue_days(self.END, start_of_day(self.END) + timedelta(seconds=1)) == 1

    def test_penalty_is_half_the_daily_rate_per_day(self):
        assert overdue_penalty(Decimal("100.00"), 3) == Decimal("150.00")

    def test_no_days_no_penalty(self):
        assert overdue_penalty(Decimal("100.00"), 0) == Decimal("0.00")


class TestRefundEligibility:
    def test_thirty_days_is_eligible(self):
        assert refund_eligible(completed_payment(NOW - timedelta(days=30)), NOW)

    def test_thirty_days_and_hours_is_eligible(self):
        assert refund_eligible(completed_payment(NOW - timedelta(days=30, hours=23)), NOW)

    def test_thirty_one_days_is_not_eligible(self):
        payment = completed_payment(NOW - timedelta(days=31))

        assert not refund_eligible(payment, NOW)
        assert "30" in refund_ineligibility_reason(payment, NOW)

    def test_pending_payment_is_not_eligible(self):
        payment = completed_payment(NOW, status=PaymentStatus.PENDING)

        assert not refund_eligible(payment, NOW)

    def test_refund_payment_is_not_eligible(self):
        payment = completed_payment(NOW, type=PaymentType.REFUND)

        assert refund_ineligibility_reason(payment, NOW) == "un reembolso no puede ser reembolsado"

    def test_refundable_remaining_ignores_failed_refunds(self):
        payment = completed_payment(NOW)
        refunds = [
            refund_of("30.00", PaymentStatus.COMPLETED),
            refund_of("20.00", PaymentStatus.FAILED),
            refund_of("10.00", PaymentStatus.PENDING),
        ]

        assert refundable_remaining(payment, refunds) == Decimal("60.00")

    def test_refundable_remaining_never_negative(self):
        payment = completed_payment(NOW)

        assert refundable_remaining(payment, [refund_of("150.00", PaymentStatus.COMPLETED)]) == Decimal("0.00")
