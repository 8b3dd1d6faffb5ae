"""Domain Entities - Aggregates"""
from pydantic import BaseModel, Field
from datetime import datetime, date, timezone
from typing import Optional
from decimal import Decimal

from domain.enums import RentalStatus
from domain.exceptions import AlreadySettledError, InvalidInputError
from domain.value_objects import CPF, LicensePlate, Money, RentalPeriod


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class Vehicle(BaseModel):
    """Vehicle Entity, identified by its license plate"""
    license_plate: LicensePlate
    brand: str
    model: str
    daily_rate: Decimal = Field(gt=0)

    class Config:
        from_attributes = True

    @staticmethod
    def create(license_plate: LicensePlate, brand: str, model: str, daily_rate) -> "Vehicle":
        """Create new vehicle with validation"""
        Vehicle._validate_text(brand, "Brand")
        Vehicle._validate_text(model, "Model")
        rate = Vehicle._validate_rate(daily_rate)
        return Vehicle(license_plate=license_plate, brand=brand, model=model, daily_rate=rate)

    def plate(self) -> str:
        return self.license_plate.value

    def __str__(self) -> str:
        return f"{self.brand} {self.model} - {self.license_plate}"

    @staticmethod
    def _validate_text(value: Optional[str], label: str) -> None:
        if value is None or not value.strip():
            raise InvalidInputError(f"{label} cannot be blank")

    @staticmethod
    def _validate_rate(daily_rate) -> Decimal:
        if daily_rate is None:
            raise InvalidInputError("Daily rate is required")
        rate = Decimal(str(daily_rate))
        if rate <= 0:
            raise InvalidInputError("Daily rate must be positive")
        return rate


class Customer(BaseModel):
    """Customer Entity, identified by CPF"""
    name: str
    cpf: CPF

    class Config:
        from_attributes = True

    @staticmethod
    def create(name: str, cpf: CPF) -> "Customer":
        """Create new customer with validation"""
        if name is None or not name.strip():
            raise InvalidInputError("Customer name cannot be blank")
        if cpf is None:
            raise InvalidInputError("Customer CPF cannot be null")
        return Customer(name=name, cpf=cpf)

    def __str__(self) -> str:
        return f"{self.name} - {self.cpf.format()}"


class RentalContract(BaseModel):
    """Rental Contract Aggregate Root Entity"""

    # Identity, assigned by storage on first save
    rental_id: Optional[int] = None

    # References; the customer and vehicle records live in their own repositories
    cpf: CPF
    license_plate: LicensePlate

    # Value Objects
    period: RentalPeriod
    quoted_total_price: Money

    status: RentalStatus = RentalStatus.ACTIVE

    # Settlement
    actual_return_date: Optional[date] = None
    final_price: Optional[Money] = None

    # Metadata
    created_at: datetime = Field(default_factory=_utcnow)
    modified_at: datetime = Field(default_factory=_utcnow)
    version: int = 1

    class Config:
        from_attributes = True

    # ==================== FACTORY METHOD ====================
    @staticmethod
    def create(
        customer: Customer,
        vehicle: Vehicle,
        period: RentalPeriod,
        quoted_total_price: Money
    ) -> "RentalContract":
        """Create new active contract"""
        if customer is None:
            raise InvalidInputError("Customer cannot be null")
        if vehicle is None:
            raise InvalidInputError("Vehicle cannot be null")

        return RentalContract(
            cpf=customer.cpf,
            license_plate=vehicle.license_plate,
            period=period,
            quoted_total_price=quoted_total_price,
            status=RentalStatus.ACTIVE
        )

    # ==================== STATE TRANSITION METHODS ====================
    def finish(self, actual_return_date: date, final_price: Money) -> None:
        """Close the contract with its settled price"""
        if self.is_finished():
            raise AlreadySettledError()

        self.actual_return_date = actual_return_date
        self.final_price = final_price
        self.status = RentalStatus.FINISHED
        self._touch()

    def change_status(self, new_status: RentalStatus) -> None:
        """Administrative status update"""
        self.status = new_status
        self._touch()

    # ==================== QUERY METHODS ====================
    def is_active(self) -> bool:
        return self.status == RentalStatus.ACTIVE

    def is_finished(self) -> bool:
        return self.status == RentalStatus.FINISHED

    def plate(self) -> str:
        return self.license_plate.value

    def _touch(self) -> None:
        self.modified_at = _utcnow()
        self.version += 1
