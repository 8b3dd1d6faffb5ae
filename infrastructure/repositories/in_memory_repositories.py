"""In-Memory Repository Implementations"""
import asyncio
from contextlib import asynccontextmanager
from itertools import count
from typing import Optional, List, Dict
from datetime import date

from domain.repositories import VehicleRepository, CustomerRepository, RentalContractRepository
from domain.entities import Customer, Vehicle, RentalContract
from domain.enums import RentalStatus


class InMemoryVehicleRepository(VehicleRepository):
    """In-memory implementation of VehicleRepository"""

    def __init__(self):
        self._storage: Dict[str, Vehicle] = {}

    async def save(self, vehicle: Vehicle) -> Vehicle:
        """Save vehicle to memory"""
        self._storage[vehicle.plate()] = vehicle
        return vehicle

    async def find_by_license_plate(self, license_plate: str) -> Optional[Vehicle]:
        """Find vehicle by license plate"""
        return self._storage.get(license_plate)

    async def find_all(self) -> List[Vehicle]:
        """Find all vehicles"""
        return list(self._storage.values())

    async def update(self, vehicle: Vehicle) -> Vehicle:
        """Update vehicle"""
        if vehicle.plate() in self._storage:
            self._storage[vehicle.plate()] = vehicle
            return vehicle
        raise KeyError("Vehicle not found")

    async def delete(self, license_plate: str) -> bool:
        """Delete vehicle"""
        if license_plate in self._storage:
            del self._storage[license_plate]
            return True
        return False


class InMemoryCustomerRepository(CustomerRepository):
    """In-memory implementation of CustomerRepository"""

    def __init__(self):
        self._storage: Dict[str, Customer] = {}

    async def save(self, customer: Customer) -> Customer:
        """Save customer to memory"""
        self._storage[customer.cpf.unformat()] = customer
        return customer

    async def find_by_cpf(self, cpf: str) -> Optional[Customer]:
        """Find customer by CPF digits"""
        return self._storage.get(cpf)

    async def find_all(self) -> List[Customer]:
        """Find all customers"""
        return list(self._storage.values())

    async def update(self, customer: Customer) -> Customer:
        """Update customer"""
        key = customer.cpf.unformat()
        if key in self._storage:
            self._storage[key] = customer
            return customer
        raise KeyError("Customer not found")

    async def delete(self, cpf: str) -> bool:
        """Delete customer"""
        if cpf in self._storage:
            del self._storage[cpf]
            return True
        return False


class InMemoryRentalContractRepository(RentalContractRepository):
    """In-memory implementation of RentalContractRepository

    Contracts are stored and handed out as deep copies, so an aborted
    operation never leaves a half-mutated record behind.
    """

    def __init__(self):
        self._storage: Dict[int, RentalContract] = {}
        self._ids = count(1)
        self._lock = asyncio.Lock()

    @asynccontextmanager
    async def unit_of_work(self):
        async with self._lock:
            yield

    async def save(self, contract: RentalContract) -> RentalContract:
        """Save contract to memory"""
        stored = contract.model_copy(deep=True)
        if stored.rental_id is None:
            stored.rental_id = next(self._ids)
        self._storage[stored.rental_id] = stored
        return stored.model_copy(deep=True)

    async def find_by_id(self, rental_id: int) -> Optional[RentalContract]:
        """Find contract by ID"""
        contract = self._storage.get(rental_id)
        return contract.model_copy(deep=True) if contract else None

    async def find_all(self) -> List[RentalContract]:
        """Find all contracts"""
        return [c.model_copy(deep=True) for c in self._storage.values()]

    async def exists_active_overlap(self, license_plate: str, start_date: date, end_date: date) -> bool:
        """Strict half-open overlap against ACTIVE contracts of the vehicle"""
        for contract in self._storage.values():
            if contract.plate() != license_plate:
                continue
            if contract.status != RentalStatus.ACTIVE:
                continue
            if contract.period.overlaps(start_date, end_date):
                return True
        return False

    async def exists_active_for_vehicle(self, license_plate: str) -> bool:
        return any(
            c.is_active() and c.plate() == license_plate for c in self._storage.values()
        )

    async def exists_active_for_customer(self, cpf: str) -> bool:
        return any(
            c.is_active() and c.cpf.unformat() == cpf for c in self._storage.values()
        )

    async def update(self, contract: RentalContract) -> RentalContract:
        """Update contract"""
        if contract.rental_id in self._storage:
            self._storage[contract.rental_id] = contract.model_copy(deep=True)
            return contract
        raise KeyError("Rental contract not found")

    async def delete(self, rental_id: int) -> bool:
        """Delete contract"""
        if rental_id in self._storage:
            del self._storage[rental_id]
            return True
        return False
