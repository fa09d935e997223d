"""
Order pricing

All amounts are Decimal with two fractional digits. The payment gateway takes
integer minor units (paise / cents); conversion always rounds half-up so the
amount charged matches the stored total to the last minor unit.
"""

from decimal import ROUND_HALF_UP, Decimal

import attrs

from src.service.event_booking.domain.enum.event_status import PlatformFeeType


CENT = Decimal('0.01')
MINOR_UNITS_PER_MAJOR = 100


def quantize_money(amount: Decimal) -> Decimal:
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def to_minor_units(amount: Decimal) -> int:
    return int((amount * MINOR_UNITS_PER_MAJOR).quantize(Decimal('1'), rounding=ROUND_HALF_UP))


@attrs.define(frozen=True)
class PlatformFeePolicy:
    fee_type: PlatformFeeType = PlatformFeeType.PERCENTAGE
    percentage: Decimal = Decimal('0')
    fixed: Decimal = Decimal('0')

    def fee_for(self, subtotal: Decimal) -> Decimal:
        percentage_fee = subtotal * (self.percentage or Decimal('0')) / Decimal('100')
        fixed_fee = self.fixed or Decimal('0')

        if self.fee_type == PlatformFeeType.PERCENTAGE:
            return quantize_money(percentage_fee)
        if self.fee_type == PlatformFeeType.FIXED:
            return quantize_money(fixed_fee)
        return quantize_money(percentage_fee + fixed_fee)


@attrs.define(frozen=True)
class PriceBreakdown:
    subtotal: Decimal
    platform_fee: Decimal
    total_amount: Decimal

    @property
    def amount_in_minor_units(self) -> int:
        return to_minor_units(self.total_amount)


def calculate_price_breakdown(
    *, price: Decimal, quantity: int, fee_policy: PlatformFeePolicy
) -> PriceBreakdown:
    subtotal = quantize_money(price * quantity)
    platform_fee = fee_policy.fee_for(subtotal)
    return PriceBreakdown(
        subtotal=subtotal,
        platform_fee=platform_fee,
        total_amount=subtotal + platform_fee,
    )
