"""API Schemas - Request and Response DTOs"""
from pydantic import BaseModel, Field
from datetime import date, datetime
from decimal import Decimal
from uuid import UUID
from typing import Optional

from domain.enums import RentalStatus


# ============================================================================
# VEHICLE SCHEMAS
# ============================================================================

class CreateVehicleRequest(BaseModel):
    """Create vehicle request DTO"""
    license_plate: str
    brand: str
    model: str
    daily_rate: Decimal


class UpdateVehicleRequest(BaseModel):
    """Update vehicle request DTO"""
    brand: str
    model: str
    daily_rate: Decimal


class VehicleResponse(BaseModel):
    """Vehicle response DTO"""
    license_plate: str
    brand: str
    model: str
    daily_rate: Decimal


# ============================================================================
# CUSTOMER SCHEMAS
# ============================================================================

class CreateCustomerRequest(BaseModel):
    """Create customer request DTO"""
    name: str
    cpf: str


class UpdateCustomerRequest(BaseModel):
    """Update customer request DTO"""
    name: str


class CustomerResponse(BaseModel):
    """Customer response DTO"""
    name: str
    cpf: str


# ============================================================================
# RENTAL SCHEMAS
# ============================================================================

class CreateRentalRequest(BaseModel):
    """Create rental request DTO; fields are optional so the service reports what is missing"""
    license_plate: Optional[str] = None
    cpf: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    with_insurance: bool = False


class QuoteRequest(BaseModel):
    """Price preview request DTO"""
    license_plate: Optional[str] = None
    start_date: Optional[date] = None
    end_date: Optional[date] = None
    with_insurance: bool = False


class UpdateRentalStatusRequest(BaseModel):
    """Administrative status change DTO"""
    status: RentalStatus


class ReturnVehicleRequest(BaseModel):
    """Return vehicle request DTO"""
    rental_id: int
    actual_return_date: date
    needs_maintenance: bool = False
    needs_cleaning: bool = False


class QuoteResponse(BaseModel):
    """Price preview response DTO"""
    license_plate: str
    start_date: date
    end_date: date
    days: int = Field(ge=1)
    with_insurance: bool
    total_price: Decimal


class RentalResponse(BaseModel):
    """Rental contract response DTO"""
    rental_id: int
    license_plate: str
    cpf: str
    # current records, resolved when the response is built
    customer: Optional[CustomerResponse] = None
    vehicle: Optional[VehicleResponse] = None
    start_date: date
    end_date: date
    quoted_total_price: Decimal
    status: str
    actual_return_date: Optional[date] = None
    final_price: Optional[Decimal] = None
    created_at: datetime
    modified_at: datetime
    version: int


# ============================================================================
# AUTH SCHEMAS
# ============================================================================

class Token(BaseModel):
    """Token response DTO"""
    access_token: str
    token_type: str


class TokenData(BaseModel):
    """Token payload DTO"""
    username: Optional[str] = None


class UserResponse(BaseModel):
    """User response DTO"""
    user_id: UUID
    username: str
    full_name: Optional[str] = None
    disabled: bool
