"""
Unit tests for order pricing

Subtotal, platform fee and gateway amount in minor units, rounded half-up.
"""

from decimal import Decimal

import pytest

from src.service.event_booking.domain.enum.event_status import PlatformFeeType
from src.service.event_booking.domain.pricing import (
    PlatformFeePolicy,
    calculate_price_breakdown,
    quantize_money,
    to_minor_units,
)


@pytest.mark.unit
class TestCalculatePriceBreakdown:
    def test_percentage_fee_on_single_ticket(self) -> None:
        breakdown = calculate_price_breakdown(
            price=Decimal('100.00'),
            quantity=1,
            fee_policy=PlatformFeePolicy(
                fee_type=PlatformFeeType.PERCENTAGE, percentage=Decimal('5')
            ),
        )

        assert breakdown.subtotal == Decimal('100.00')
        assert breakdown.platform_fee == Decimal('5.00')
        assert breakdown.total_amount == Decimal('105.00')
        assert breakdown.amount_in_minor_units == 10500

    def test_subtotal_multiplies_price_by_quantity(self) -> None:
        breakdown = calculate_price_breakdown(
            price=Decimal('199.00'),
            quantity=3,
            fee_policy=PlatformFeePolicy(
                fee_type=PlatformFeeType.PERCENTAGE, percentage=Decimal('5')
            ),
        )

        assert breakdown.subtotal == Decimal('597.00')
        # 29.85 exactly
        assert breakdown.platform_fee == Decimal('29.85')
        assert breakdown.total_amount == Decimal('626.85')
        assert breakdown.amount_in_minor_units == 62685

    def test_fixed_fee_ignores_percentage(self) -> None:
        policy = PlatformFeePolicy(
            fee_type=PlatformFeeType.FIXED, percentage=Decimal('10'), fixed=Decimal('15')
        )

        breakdown = calculate_price_breakdown(
            price=Decimal('50.00'), quantity=2, fee_policy=policy
        )

        assert breakdown.platform_fee == Decimal('15.00')
        assert breakdown.total_amount == Decimal('115.00')

    def test_both_fee_sums_percentage_and_fixed(self) -> None:
        policy = PlatformFeePolicy(
            fee_type=PlatformFeeType.BOTH, percentage=Decimal('2.5'), fixed=Decimal('10')
        )

        breakdown = calculate_price_breakdown(
            price=Decimal('200.00'), quantity=1, fee_policy=policy
        )

        assert breakdown.platform_fee == Decimal('15.00')
        assert breakdown.total_amount == Decimal('215.00')

    def test_both_fee_treats_missing_parts_as_zero(self) -> None:
        policy = PlatformFeePolicy(
            fee_type=PlatformFeeType.BOTH,
            percentage=None,  # type: ignore[arg-type]
            fixed=Decimal('7'),
        )

        assert policy.fee_for(Decimal('100.00')) == Decimal('7.00')

    def test_percentage_fee_rounds_half_up(self) -> None:
        # 33.33 * 1.5% = 0.49995 -> 0.50
        policy = PlatformFeePolicy(
            fee_type=PlatformFeeType.PERCENTAGE, percentage=Decimal('1.5')
        )

        assert policy.fee_for(Decimal('33.33')) == Decimal('0.50')

    def test_free_ticket_has_zero_total(self) -> None:
        breakdown = calculate_price_breakdown(
            price=Decimal('0.00'),
            quantity=2,
            fee_policy=PlatformFeePolicy(
                fee_type=PlatformFeeType.PERCENTAGE, percentage=Decimal('5')
            ),
        )

        assert breakdown.total_amount == Decimal('0.00')
        assert breakdown.amount_in_minor_units == 0


@pytest.mark.unit
class TestMoneyHelpers:
    @pytest.mark.parametrize(
        ('amount', 'expected'),
        [
            (Decimal('1.005'), Decimal('1.01')),
            (Decimal('1.004'), Decimal('1.00')),
            (Decimal('2.675'), Decimal('2.68')),
        ],
    )
    def test_quantize_money(self, amount: Decimal, expected: Decimal) -> None:
        assert quantize_money(amount) == expected

    def test_to_minor_units(self) -> None:
        assert to_minor_units(Decimal('105.00')) == 10500
        assert to_minor_units(Decimal('0.01')) == 1
        assert to_minor_units(Decimal('19.995')) == 2000
