"""Domain Repository Interfaces"""
from abc import ABC, abstractmethod
from typing import AsyncContextManager, Optional, List
from datetime import date

from domain.entities import Customer, Vehicle, RentalContract


class VehicleRepository(ABC):
    """Repository interface for Vehicle"""

    @abstractmethod
    async def save(self, vehicle: Vehicle) -> Vehicle:
        """Save vehicle"""
        pass

    @abstractmethod
    async def find_by_license_plate(self, license_plate: str) -> Optional[Vehicle]:
        """Find vehicle by license plate"""
        pass

    @abstractmethod
    async def find_all(self) -> List[Vehicle]:
        """Find all vehicles"""
        pass

    @abstractmethod
    async def update(self, vehicle: Vehicle) -> Vehicle:
        """Update vehicle"""
        pass

    @abstractmethod
    async def delete(self, license_plate: str) -> bool:
        """Delete vehicle"""
        pass


class CustomerRepository(ABC):
    """Repository interface for Customer"""

    @abstractmethod
    async def save(self, customer: Customer) -> Customer:
        """Save customer"""
        pass

    @abstractmethod
    async def find_by_cpf(self, cpf: str) -> Optional[Customer]:
        """Find customer by unformatted CPF digits"""
        pass

    @abstractmethod
    async def find_all(self) -> List[Customer]:
        """Find all customers"""
        pass

    @abstractmethod
    async def update(self, customer: Customer) -> Customer:
        """Update customer"""
        pass

    @abstractmethod
    async def delete(self, cpf: str) -> bool:
        """Delete customer"""
        pass


class RentalContractRepository(ABC):
    """Repository interface for RentalContract Aggregate"""

    @abstractmethod
    def unit_of_work(self) -> AsyncContextManager[None]:
        """Serialize a check-then-write sequence against concurrent callers"""
        pass

    @abstractmethod
    async def save(self, contract: RentalContract) -> RentalContract:
        """Save contract, assigning its id when new"""
        pass

    @abstractmethod
    async def find_by_id(self, rental_id: int) -> Optional[RentalContract]:
        """Find contract by ID"""
        pass

    @abstractmethod
    async def find_all(self) -> List[RentalContract]:
        """Find all contracts"""
        pass

    @abstractmethod
    async def exists_active_overlap(self, license_plate: str, start_date: date, end_date: date) -> bool:
        """Check for an ACTIVE contract of the vehicle with
        start_date < existing_end and end_date > existing_start"""
        pass

    @abstractmethod
    async def exists_active_for_vehicle(self, license_plate: str) -> bool:
        """Check whether any ACTIVE contract references the vehicle"""
        pass

    @abstractmethod
    async def exists_active_for_customer(self, cpf: str) -> bool:
        """Check whether any ACTIVE contract references the customer (CPF digits)"""
        pass

    @abstractmethod
    async def update(self, contract: RentalContract) -> RentalContract:
        """Update contract"""
        pass

    @abstractmethod
    async def delete(self, rental_id: int) -> bool:
        """Delete contract"""
        pass
