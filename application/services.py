"""Application Services - Business use cases"""
from datetime import date
from typing import List, Optional

from domain.entities import Customer, Vehicle, RentalContract
from domain.enums import RentalStatus
from domain.exceptions import (
    AlreadySettledError, ContractNotFoundError, CustomerNotFoundError,
    EntityAlreadyExistsError, EntityInUseError, InvalidInputError, InvalidReturnDateError,
    MissingFieldError, MissingRequestError, VehicleNotFoundError,
    VehicleUnavailableError,
)
from domain.pricing import PricingEngine, SettlementCalculator
from domain.repositories import CustomerRepository, VehicleRepository, RentalContractRepository
from domain.value_objects import CPF, LicensePlate, Money, RentalPeriod, ReturnRequest
from infrastructure.logging_config import get_logger

logger = get_logger("application.services")


def _is_absent(value: Optional[str]) -> bool:
    return value is None or not value.strip()


class AvailabilityChecker:
    """Answers whether a vehicle is already booked over a period"""

    def __init__(self, repository: RentalContractRepository):
        self.repository = repository

    async def has_overlap(self, license_plate: str, period: RentalPeriod) -> bool:
        return await self.repository.exists_active_overlap(
            license_plate, period.start_date, period.end_date
        )


class BookingService:
    """Service for creating rental contracts"""

    def __init__(self,
                 customer_repo: CustomerRepository,
                 vehicle_repo: VehicleRepository,
                 rental_repo: RentalContractRepository,
                 pricing_engine: Optional[PricingEngine] = None):
        self.customer_repo = customer_repo
        self.vehicle_repo = vehicle_repo
        self.rental_repo = rental_repo
        self.availability = AvailabilityChecker(rental_repo)
        self.pricing_engine = pricing_engine or PricingEngine()

    async def book(
        self,
        license_plate: Optional[str],
        cpf: Optional[str],
        start_date: Optional[date],
        end_date: Optional[date],
        with_insurance: bool = False
    ) -> RentalContract:
        """Book a vehicle for a customer; aborts without writing on any failure"""
        if _is_absent(license_plate):
            raise MissingFieldError("License plate is mandatory.")
        if _is_absent(cpf):
            raise MissingFieldError("CPF is mandatory.")

        plate = LicensePlate.of(license_plate)
        customer_cpf = CPF.of(cpf)
        period = RentalPeriod(start_date=start_date, end_date=end_date)

        async with self.rental_repo.unit_of_work():
            customer = await self.customer_repo.find_by_cpf(customer_cpf.unformat())
            if customer is None:
                raise CustomerNotFoundError()

            vehicle = await self.vehicle_repo.find_by_license_plate(plate.value)
            if vehicle is None:
                raise VehicleNotFoundError()

            if await self.availability.has_overlap(plate.value, period):
                logger.warning(
                    "booking rejected: vehicle %s unavailable from %s to %s",
                    plate.value, period.start_date, period.end_date,
                )
                raise VehicleUnavailableError()

            quote = self.pricing_engine.quote(vehicle, period, with_insurance)
            contract = RentalContract.create(
                customer=customer,
                vehicle=vehicle,
                period=period,
                quoted_total_price=quote
            )
            saved = await self.rental_repo.save(contract)

        logger.info(
            "rental %s booked: vehicle=%s days=%d insurance=%s quote=%s",
            saved.rental_id, plate.value, period.days(), with_insurance, quote,
        )
        return saved

    async def quote(
        self,
        license_plate: Optional[str],
        start_date: Optional[date],
        end_date: Optional[date],
        with_insurance: bool = False
    ) -> Money:
        """Price a prospective rental without booking it"""
        if _is_absent(license_plate):
            raise MissingFieldError("License plate is mandatory.")
        plate = LicensePlate.of(license_plate)
        period = RentalPeriod(start_date=start_date, end_date=end_date)

        vehicle = await self.vehicle_repo.find_by_license_plate(plate.value)
        if vehicle is None:
            raise VehicleNotFoundError()
        return self.pricing_engine.quote(vehicle, period, with_insurance)


class SettlementService:
    """Service for returning vehicles and closing contracts"""

    def __init__(self,
                 rental_repo: RentalContractRepository,
                 vehicle_repo: VehicleRepository,
                 calculator: Optional[SettlementCalculator] = None):
        self.rental_repo = rental_repo
        self.vehicle_repo = vehicle_repo
        self.calculator = calculator or SettlementCalculator()

    async def settle(self, request: Optional[ReturnRequest]) -> RentalContract:
        """Compute the final price and mark the contract FINISHED"""
        if request is None:
            raise MissingRequestError("Return request cannot be null.")

        async with self.rental_repo.unit_of_work():
            contract = await self.rental_repo.find_by_id(request.rental_id)
            if contract is None:
                raise ContractNotFoundError()
            if contract.is_finished():
                logger.warning("settlement rejected: rental %s already finished", request.rental_id)
                raise AlreadySettledError()
            if request.actual_return_date < contract.period.start_date:
                raise InvalidReturnDateError()

            vehicle = await self.vehicle_repo.find_by_license_plate(contract.plate())
            if vehicle is None:
                raise VehicleNotFoundError()

            final_price = self.calculator.final_price(
                contract,
                vehicle,
                request.actual_return_date,
                needs_maintenance=request.needs_maintenance,
                needs_cleaning=request.needs_cleaning
            )
            contract.finish(request.actual_return_date, final_price)
            saved = await self.rental_repo.update(contract)

        logger.info(
            "rental %s settled: returned=%s expected=%s maintenance=%s cleaning=%s final=%s",
            saved.rental_id, request.actual_return_date, saved.period.end_date,
            request.needs_maintenance, request.needs_cleaning, final_price,
        )
        return saved


class InventoryService:
    """Service for vehicle and customer records"""

    def __init__(self,
                 vehicle_repo: VehicleRepository,
                 customer_repo: CustomerRepository,
                 rental_repo: RentalContractRepository):
        self.vehicle_repo = vehicle_repo
        self.customer_repo = customer_repo
        self.rental_repo = rental_repo

    # ==================== VEHICLES ====================
    async def create_vehicle(self, license_plate: str, brand: str, model: str, daily_rate) -> Vehicle:
        plate = LicensePlate.of(license_plate)
        vehicle = Vehicle.create(plate, brand, model, daily_rate)

        if await self.vehicle_repo.find_by_license_plate(plate.value) is not None:
            raise EntityAlreadyExistsError("A vehicle with this license plate already exists.")

        logger.info("vehicle %s registered", plate.value)
        return await self.vehicle_repo.save(vehicle)

    async def update_vehicle(self, license_plate: str, brand: str, model: str, daily_rate) -> Optional[Vehicle]:
        plate = LicensePlate.of(license_plate)
        existing = await self.vehicle_repo.find_by_license_plate(plate.value)
        if existing is None:
            return None
        return await self.vehicle_repo.update(Vehicle.create(plate, brand, model, daily_rate))

    async def delete_vehicle(self, license_plate: str) -> bool:
        """Delete a vehicle unless an ACTIVE contract still references it"""
        plate = LicensePlate.of(license_plate)
        async with self.rental_repo.unit_of_work():
            if await self.rental_repo.exists_active_for_vehicle(plate.value):
                logger.warning("vehicle %s not deleted: active rental exists", plate.value)
                raise EntityInUseError("Vehicle has an active rental and cannot be deleted.")
            return await self.vehicle_repo.delete(plate.value)

    async def find_vehicle(self, license_plate: str) -> Optional[Vehicle]:
        plate = LicensePlate.of(license_plate)
        return await self.vehicle_repo.find_by_license_plate(plate.value)

    async def list_vehicles(self) -> List[Vehicle]:
        return await self.vehicle_repo.find_all()

    # ==================== CUSTOMERS ====================
    async def create_customer(self, name: str, cpf: str) -> Customer:
        customer_cpf = CPF.of(cpf)
        customer = Customer.create(name, customer_cpf)

        if await self.customer_repo.find_by_cpf(customer_cpf.unformat()) is not None:
            raise EntityAlreadyExistsError("A customer with this CPF already exists.")

        logger.info("customer %s registered", customer_cpf.format())
        return await self.customer_repo.save(customer)

    async def update_customer(self, cpf: str, new_name: str) -> Optional[Customer]:
        customer_cpf = CPF.of(cpf)
        existing = await self.customer_repo.find_by_cpf(customer_cpf.unformat())
        if existing is None:
            return None
        return await self.customer_repo.update(Customer.create(new_name, existing.cpf))

    async def delete_customer(self, cpf: str) -> bool:
        customer_cpf = CPF.of(cpf)
        async with self.rental_repo.unit_of_work():
            if await self.rental_repo.exists_active_for_customer(customer_cpf.unformat()):
                logger.warning("customer %s not deleted: active rental exists", customer_cpf.format())
                raise EntityInUseError("Customer has an active rental and cannot be deleted.")
            return await self.customer_repo.delete(customer_cpf.unformat())

    async def find_customer(self, cpf: str) -> Optional[Customer]:
        customer_cpf = CPF.of(cpf)
        return await self.customer_repo.find_by_cpf(customer_cpf.unformat())

    async def list_customers(self) -> List[Customer]:
        return await self.customer_repo.find_all()


class RentalAdministrationService:
    """Service for back-office maintenance of rental contracts"""

    def __init__(self, rental_repo: RentalContractRepository):
        self.rental_repo = rental_repo

    async def list_rentals(self) -> List[RentalContract]:
        return await self.rental_repo.find_all()

    async def find_rental(self, rental_id: int) -> Optional[RentalContract]:
        return await self.rental_repo.find_by_id(rental_id)

    async def update_status(self, rental_id: int, new_status: RentalStatus) -> Optional[RentalContract]:
        if new_status is None:
            raise InvalidInputError("Status cannot be null.")
        async with self.rental_repo.unit_of_work():
            contract = await self.rental_repo.find_by_id(rental_id)
            if contract is None:
                return None
            contract.change_status(new_status)
            return await self.rental_repo.update(contract)

    async def delete_rental(self, rental_id: int) -> bool:
        async with self.rental_repo.unit_of_work():
            return await self.rental_repo.delete(rental_id)
