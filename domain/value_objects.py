"""Domain Value Objects"""
import re
from datetime import date, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterator, Optional

from pydantic import BaseModel, Field, validator

from domain.exceptions import InvalidIdentifierError, InvalidPeriodError

MAX_RENTAL_DAYS = 60
CENTS = Decimal("0.01")
_PLATE_PATTERN = re.compile(r"^[A-Z]{3}[0-9][0-9A-Z][0-9]{2}$")


class RentalPeriod(BaseModel):
    """Value Object for a rental date range (end date exclusive)"""
    start_date: Optional[date] = None
    end_date: Optional[date] = None

    @validator('end_date', always=True)
    def end_after_start(cls, v, values):
        start = values.get('start_date')
        if start is None:
            raise InvalidPeriodError("Start date is required")
        if v is None:
            raise InvalidPeriodError("End date is required")
        if v <= start:
            raise InvalidPeriodError("Invalid rental period: end date must be after start date")
        if (v - start).days > MAX_RENTAL_DAYS:
            raise InvalidPeriodError(
                f"Invalid rental period: the interval cannot exceed {MAX_RENTAL_DAYS} days"
            )
        return v

    def days(self) -> int:
        """Calculate number of billable days"""
        return (self.end_date - self.start_date).days

    def billable_dates(self) -> Iterator[date]:
        """Iterate every billed date in [start_date, end_date)"""
        current = self.start_date
        while current < self.end_date:
            yield current
            current += timedelta(days=1)

    def overlaps(self, start: date, end: date) -> bool:
        """Strict half-open overlap: touching ranges do not overlap"""
        return start < self.end_date and end > self.start_date

    class Config:
        frozen = True


class Money(BaseModel):
    """Value Object for monetary amounts"""
    amount: Decimal = Field(ge=0)

    @classmethod
    def of(cls, value) -> "Money":
        """Build Money rounded half-up to cents"""
        amount = Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP)
        return cls(amount=amount)

    def __str__(self) -> str:
        return f"{self.amount:.2f}"

    class Config:
        frozen = True


class LicensePlate(BaseModel):
    """Value Object for a vehicle license plate (legacy ABC1234 or Mercosul ABC1D23)"""
    value: str

    @validator('value')
    def matches_pattern(cls, v):
        if not _PLATE_PATTERN.match(v):
            raise InvalidIdentifierError(f"Invalid license plate: {v}")
        return v

    @classmethod
    def of(cls, raw: Optional[str]) -> "LicensePlate":
        if raw is None:
            raise InvalidIdentifierError("Invalid license plate: None")
        return cls(value=raw)

    def __str__(self) -> str:
        return self.value

    class Config:
        frozen = True


class CPF(BaseModel):
    """Value Object for the Brazilian individual tax id"""
    digits: str

    @validator('digits')
    def valid_checksum(cls, v):
        if not CPF._is_valid_digits(v):
            raise InvalidIdentifierError(f"Invalid CPF: {v}")
        return v

    @classmethod
    def of(cls, raw: Optional[str]) -> "CPF":
        """Parse a CPF accepting punctuation, e.g. 123.456.789-09"""
        digits = cls._normalize(raw)
        if not cls._is_valid_digits(digits):
            raise InvalidIdentifierError(f"Invalid CPF: {raw}")
        return cls(digits=digits)

    @classmethod
    def try_of(cls, raw: Optional[str]) -> Optional["CPF"]:
        digits = cls._normalize(raw)
        if not cls._is_valid_digits(digits):
            return None
        return cls(digits=digits)

    @classmethod
    def is_valid(cls, raw: Optional[str]) -> bool:
        return cls._is_valid_digits(cls._normalize(raw))

    def unformat(self) -> str:
        return self.digits

    def format(self) -> str:
        d = self.digits
        return f"{d[0:3]}.{d[3:6]}.{d[6:9]}-{d[9:11]}"

    def __str__(self) -> str:
        return self.format()

    @staticmethod
    def _normalize(raw: Optional[str]) -> str:
        if raw is None:
            return ""
        return re.sub(r"[^0-9]", "", raw)

    @staticmethod
    def _check_digit(nums, length: int) -> int:
        total = sum(n * (length + 1 - i) for i, n in enumerate(nums[:length]))
        remainder = total % 11
        return 0 if remainder < 2 else 11 - remainder

    @staticmethod
    def _is_valid_digits(d: str) -> bool:
        if len(d) != 11 or not d.isdigit():
            return False
        # 000.000.000-00, 111.111.111-11, ... pass the checksum but are rejected
        if len(set(d)) == 1:
            return False
        nums = [int(c) for c in d]
        if CPF._check_digit(nums, 9) != nums[9]:
            return False
        return CPF._check_digit(nums, 10) == nums[10]

    class Config:
        frozen = True


class ReturnRequest(BaseModel):
    """Value Object describing a vehicle return"""
    rental_id: int
    actual_return_date: date
    needs_maintenance: bool = False
    needs_cleaning: bool = False

    class Config:
        frozen = True
