from datetime import date, timedelta
from decimal import Decimal

import pytest

from rental_core.domain.entities.reservation import InsuranceTier
from rental_core.domain.errors import InvalidAmountError, InvalidRangeError
from rental_core.domain.services.pricing import calculate_price, discount_percent_for

START = date(2026, 4, 1)


def quote_for(days: int, daily_rate: str = "100.00", insurance_tier=None):
    return calculate_price(
        daily_rate=Decimal(daily_rate),
        start_date=START,
        end_date=START + timedelta(days=days - 1),
        insurance_tier=insurance_tier,
    )


class TestDiscountTiers:
    @pytest.mark.parametrize(
        "days, percent",
        [(2, "0"), (6, "0"), (7, "10"), (29, "10"), (30, "20"), (31, "20")],
    )
    def test_discount_boundaries(self, days, percent):
        assert discount_percent_for(days) == Decimal(percent)

    def test_six_days_without_discount(self):
        quote = quote_for(6)

        assert quote.days == 6
        assert quote.base_cost == Decimal("600.00")
        assert quote.discount == Decimal("0.00")
        assert quote.total_amount == Decimal("600.00")

    def test_seven_days_ten_percent(self):
        quote = quote_for(7)

        assert quote.base_cost == Decimal("700.00")
        assert quote.discount == Decimal("70.00")
        assert quote.total_amount == Decimal("630.00")

    def test_twenty_nine_days_ten_percent(self):
        quote = quote_for(29)

        assert quote.discount == Decimal("290.00")
        assert quote.total_amount == Decimal("2610.00")

    def test_thirty_days_twenty_percent(self):
        quote = quote_for(30)

        assert quote.base_cost == Decimal("3000.00")
        assert quote.discount == Decimal("600.00")
        assert quote.total_amount == Decimal("2400.00")


class TestInsuranceAndDeposit:
    def test_insurance_is_charged_per_day(self):
        quote = quote_for(3, insurance_tier=InsuranceTier.PREMIUM)

        assert quote.insurance_fee == Decimal("75.00")
        assert quote.total_amount == Decimal("375.00")

    def test_insurance_accepts_plain_values(self):
        assert quote_for(2, insurance_tier="full").insurance_fee == Decimal("80.00")

    def test_unknown_insurance_tier_is_rejected(self):
        with pytest.raises(InvalidAmountError):
            quote_for(3, insurance_tier="gold")

    def test_deposit_has_a_floor(self):
        quote = quote_for(5, daily_rate="10.00")

        assert quote.base_cost == Decimal("50.00")
        assert quote.security_deposit == Decimal("200.00")

    def test_deposit_is_twenty_percent_of_base_cost(self):
        assert quote_for(30).security_deposit == Decimal("600.00")

    def test_deposit_is_not_part_of_total(self):
        quote = quote_for(3)

        assert quote.total_amount == quote.base_cost - quote.discount + quote.insurance_fee


class TestPriceValidation:
    def test_end_before_start_is_rejected(self):
        with pytest.raises(InvalidRangeError):
            calculate_price(Decimal("100"), START, START - timedelta(days=1))

    def test_same_day_is_rejected(self):
        with pytest.raises(InvalidRangeError):
            calculate_price(Decimal("100"), START, START)

    def test_negative_rate_is_rejected(self):
        with pytest.raises(InvalidAmountError):
            quote_for(3, daily_rate="-1")

    def test_same_inputs_same_quote(self):
        assert quote_for(12, insurance_tier="basic") == quote_for(12, insurance_tier="basic")

    def test_amounts_are_rounded_half_up(self):
        quote = quote_for(7, daily_rate="33.35")

        # 233.45 * 10 % = 23.345 -> 23.35
        assert quote.base_cost == Decimal("233.45")
        assert quote.discount == Decimal("23.35")
        assert quote.total_amount == Decimal("210.10")
