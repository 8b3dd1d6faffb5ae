"""Domain Services - rental quote and settlement price calculation

All arithmetic stays in Decimal; only the final amount is rounded (half-up,
two decimal places). The order of the steps below changes the result and
must be kept.
"""
from datetime import date
from decimal import Decimal

from domain.calendar_rules import is_weekend_or_holiday
from domain.entities import RentalContract, Vehicle
from domain.exceptions import InvalidInputError
from domain.value_objects import Money, RentalPeriod

WEEKEND_HOLIDAY_SURCHARGE = Decimal("0.06")
INSURANCE_FEE = Decimal("0.10")
DISCOUNT_7_TO_15_DAYS = Decimal("0.05")
DISCOUNT_ABOVE_15_DAYS = Decimal("0.10")

SHORT_RENTAL_MIN_DAYS = 7
LONG_RENTAL_MIN_DAYS = 15

EARLY_RETURN_PENALTY_RATE = Decimal("0.30")
LATE_RETURN_PENALTY_RATE = Decimal("0.50")
MAINTENANCE_FEE_RATE = Decimal("0.15")
CLEANING_FEE_AMOUNT = Decimal("100.00")


class PricingEngine:
    """Computes the quoted total price of a prospective rental"""

    def quote(self, vehicle: Vehicle, period: RentalPeriod, with_insurance: bool = False) -> Money:
        if vehicle is None:
            raise InvalidInputError("The vehicle cannot be null.")
        if period is None:
            raise InvalidInputError("The period cannot be null.")

        total_days = period.days()
        daily_rate = vehicle.daily_rate

        base_price = daily_rate * total_days
        price_with_surcharges = base_price + self.surcharges(daily_rate, period)
        price_with_insurance = self._apply_insurance(price_with_surcharges, with_insurance)
        final_price = self._apply_discount(price_with_insurance, total_days)

        return Money.of(final_price)

    def surcharges(self, daily_rate: Decimal, period: RentalPeriod) -> Decimal:
        """6% of the daily rate for each weekend or holiday date in [start, end)"""
        surcharge = Decimal("0")
        for day in period.billable_dates():
            if is_weekend_or_holiday(day):
                surcharge += daily_rate * WEEKEND_HOLIDAY_SURCHARGE
        return surcharge

    @staticmethod
    def discount_rate(total_days: int) -> Decimal:
        if total_days > LONG_RENTAL_MIN_DAYS:
            return DISCOUNT_ABOVE_15_DAYS
        if total_days >= SHORT_RENTAL_MIN_DAYS:
            return DISCOUNT_7_TO_15_DAYS
        return Decimal("0")

    @staticmethod
    def _apply_insurance(price: Decimal, with_insurance: bool) -> Decimal:
        if with_insurance:
            return price + price * INSURANCE_FEE
        return price

    def _apply_discount(self, price: Decimal, total_days: int) -> Decimal:
        return price - price * self.discount_rate(total_days)


class SettlementCalculator:
    """Computes the final price of a contract at return time"""

    def final_price(
        self,
        contract: RentalContract,
        vehicle: Vehicle,
        actual_return_date: date,
        needs_maintenance: bool = False,
        needs_cleaning: bool = False
    ) -> Money:
        """Penalties and fees use the vehicle's current daily rate"""
        if vehicle is None:
            raise InvalidInputError("The vehicle cannot be null.")
        daily_rate = vehicle.daily_rate
        start_date = contract.period.start_date
        expected_return_date = contract.period.end_date
        quoted = contract.quoted_total_price.amount

        if actual_return_date < expected_return_date:
            days_used = (actual_return_date - start_date).days
            days_unused = (expected_return_date - actual_return_date).days
            price = (daily_rate * days_used
                     + daily_rate * days_unused * EARLY_RETURN_PENALTY_RATE)
        elif actual_return_date > expected_return_date:
            late_days = (actual_return_date - expected_return_date).days
            extra_days_cost = daily_rate * late_days
            late_penalty = daily_rate * LATE_RETURN_PENALTY_RATE * late_days
            price = quoted + extra_days_cost + late_penalty
        else:
            price = quoted

        # maintenance is a percentage of the penalty-adjusted price, cleaning is flat
        if needs_maintenance:
            price = price + price * MAINTENANCE_FEE_RATE
        if needs_cleaning:
            price = price + CLEANING_FEE_AMOUNT

        return Money.of(price)
