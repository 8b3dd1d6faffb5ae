from fastapi import FastAPI, HTTPException, Depends
from datetime import timedelta
from typing import List
from fastapi.security import OAuth2PasswordRequestForm

from api.schemas import (
    # Vehicles
    CreateVehicleRequest, UpdateVehicleRequest, VehicleResponse,
    # Customers
    CreateCustomerRequest, UpdateCustomerRequest, CustomerResponse,
    # Rentals
    CreateRentalRequest, QuoteRequest, QuoteResponse, UpdateRentalStatusRequest,
    ReturnVehicleRequest, RentalResponse,
    # Auth
    Token, UserResponse
)

from api.dependencies import get_current_active_user, fake_users_db, get_user
from infrastructure.security import verify_password, create_access_token
from infrastructure.config import ACCESS_TOKEN_EXPIRE_MINUTES
from infrastructure.logging_config import configure_logging
from domain.auth import User

from application.services import (
    BookingService, SettlementService, InventoryService, RentalAdministrationService
)
from infrastructure.repositories.in_memory_repositories import (
    InMemoryVehicleRepository, InMemoryCustomerRepository, InMemoryRentalContractRepository
)
from domain.enums import RentalStatus
from domain.exceptions import RentalError, NotFoundError, ConflictError
from domain.value_objects import RentalPeriod, ReturnRequest

configure_logging()

app = FastAPI(
    title="Vehicle Rental API",
    description="Vehicle inventory, customers, rental quotes, bookings and settlements",
    version="1.0.0"
)

# Initialize repositories
vehicle_repo = InMemoryVehicleRepository()
customer_repo = InMemoryCustomerRepository()
rental_repo = InMemoryRentalContractRepository()


# Dependency injection
def get_booking_service() -> BookingService:
    return BookingService(customer_repo, vehicle_repo, rental_repo)


def get_settlement_service() -> SettlementService:
    return SettlementService(rental_repo, vehicle_repo)


def get_inventory_service() -> InventoryService:
    return InventoryService(vehicle_repo, customer_repo, rental_repo)


def get_rental_admin_service() -> RentalAdministrationService:
    return RentalAdministrationService(rental_repo)


def _to_http_exception(error: RentalError) -> HTTPException:
    """Map a domain error category to an HTTP status"""
    if isinstance(error, NotFoundError):
        status_code = 404
    elif isinstance(error, ConflictError):
        status_code = 409
    else:
        status_code = 400
    return HTTPException(status_code=status_code, detail=str(error), headers={"X-Error-Code": error.code})

# ============================================================================
# HEALTH & ENUM REFERENCE ENDPOINTS
# ============================================================================

@app.get("/api/health", tags=["Health"])
async def health_check():
    """Health check endpoint"""
    return {"status": "healthy", "message": "API is running"}

@app.get("/api/enums/rental-status", tags=["Enum Reference"])
async def get_rental_statuses():
    """Get all RentalStatus enum values"""
    return {
        "values": [f"{item.name}" for item in RentalStatus],
        "description": "Rental status values: ACTIVE, FINISHED, CANCELED"
    }

# ============================================================================
# AUTH ENDPOINTS
# ============================================================================

@app.post("/token", response_model=Token, tags=["Auth"])
async def login_for_access_token(form_data: OAuth2PasswordRequestForm = Depends()):
    user = get_user(fake_users_db, form_data.username)
    if not user or not verify_password(form_data.password, user.hashed_password):
        raise HTTPException(
            status_code=401,
            detail="Incorrect username or password",
            headers={"WWW-Authenticate": "Bearer"},
        )
    access_token_expires = timedelta(minutes=ACCESS_TOKEN_EXPIRE_MINUTES)
    access_token = create_access_token(
        data={"sub": user.username}, expires_delta=access_token_expires
    )
    return {"access_token": access_token, "token_type": "bearer"}

@app.get("/users/me", response_model=UserResponse, tags=["Auth"])
async def read_users_me(current_user: User = Depends(get_current_active_user)):
    return current_user

# ============================================================================
# VEHICLE ENDPOINTS
# ============================================================================

@app.post("/api/vehicles", response_model=VehicleResponse, status_code=201, tags=["Vehicles"])
async def create_vehicle(
    request: CreateVehicleRequest,
    service: InventoryService = Depends(get_inventory_service),
    current_user: User = Depends(get_current_active_user)
):
    """Register a vehicle"""
    try:
        vehicle = await service.create_vehicle(
            license_plate=request.license_plate,
            brand=request.brand,
            model=request.model,
            daily_rate=request.daily_rate
        )
        return _vehicle_to_response(vehicle)
    except RentalError as e:
        raise _to_http_exception(e)

@app.get("/api/vehicles", response_model=List[VehicleResponse], tags=["Vehicles"])
async def list_vehicles(
    service: InventoryService = Depends(get_inventory_service),
    current_user: User = Depends(get_current_active_user)
):
    """Get all vehicles"""
    vehicles = await service.list_vehicles()
    return [_vehicle_to_response(v) for v in vehicles]

@app.get("/api/vehicles/{license_plate}", response_model=VehicleResponse, tags=["Vehicles"])
async def get_vehicle(
    license_plate: str,
    service: InventoryService = Depends(get_inventory_service),
    current_user: User = Depends(get_current_active_user)
):
    """Get vehicle by license plate"""
    try:
        vehicle = await service.find_vehicle(license_plate)
    except RentalError as e:
        raise _to_http_exception(e)
    if not vehicle:
        raise HTTPException(status_code=404, detail="Vehicle not found")
    return _vehicle_to_response(vehicle)

@app.put("/api/vehicles/{license_plate}", response_model=VehicleResponse, tags=["Vehicles"])
async def update_vehicle(
    license_plate: str,
    request: UpdateVehicleRequest,
    service: InventoryService = Depends(get_inventory_service),
    current_user: User = Depends(get_current_active_user)
):
    """Update vehicle details"""
    try:
        vehicle = await service.update_vehicle(
            license_plate=license_plate,
            brand=request.brand,
            model=request.model,
            daily_rate=request.daily_rate
        )
    except RentalError as e:
        raise _to_http_exception(e)
    if not vehicle:
        raise HTTPException(status_code=404, detail="Vehicle not found")
    return _vehicle_to_response(vehicle)

@app.delete("/api/vehicles/{license_plate}", status_code=204, tags=["Vehicles"])
async def delete_vehicle(
    license_plate: str,
    service: InventoryService = Depends(get_inventory_service),
    current_user: User = Depends(get_current_active_user)
):
    """Delete vehicle"""
    try:
        deleted = await service.delete_vehicle(license_plate)
    except RentalError as e:
        raise _to_http_exception(e)
    if not deleted:
        raise HTTPException(status_code=404, detail="Vehicle not found")

# ============================================================================
# CUSTOMER ENDPOINTS
# ============================================================================

@app.post("/api/customers", response_model=CustomerResponse, status_code=201, tags=["Customers"])
async def create_customer(
    request: CreateCustomerRequest,
    service: InventoryService = Depends(get_inventory_service),
    current_user: User = Depends(get_current_active_user)
):
    """Register a customer"""
    try:
        customer = await service.create_customer(name=request.name, cpf=request.cpf)
        return _customer_to_response(customer)
    except RentalError as e:
        raise _to_http_exception(e)

@app.get("/api/customers", response_model=List[CustomerResponse], tags=["Customers"])
async def list_customers(
    service: InventoryService = Depends(get_inventory_service),
    current_user: User = Depends(get_current_active_user)
):
    """Get all customers"""
    customers = await service.list_customers()
    return [_customer_to_response(c) for c in customers]

@app.get("/api/customers/{cpf}", response_model=CustomerResponse, tags=["Customers"])
async def get_customer(
    cpf: str,
    service: InventoryService = Depends(get_inventory_service),
    current_user: User = Depends(get_current_active_user)
):
    """Get customer by CPF"""
    try:
        customer = await service.find_customer(cpf)
    except RentalError as e:
        raise _to_http_exception(e)
    if not customer:
        raise HTTPException(status_code=404, detail="Customer not found")
    return _customer_to_response(customer)

@app.put("/api/customers/{cpf}", response_model=CustomerResponse, tags=["Customers"])
async def update_customer(
    cpf: str,
    request: UpdateCustomerRequest,
    service: InventoryService = Depends(get_inventory_service),
    current_user: User = Depends(get_current_active_user)
):
    """Rename customer"""
    try:
        customer = await service.update_customer(cpf, request.name)
    except RentalError as e:
        raise _to_http_exception(e)
    if not customer:
        raise HTTPException(status_code=404, detail="Customer not found")
    return _customer_to_response(customer)

@app.delete("/api/customers/{cpf}", status_code=204, tags=["Customers"])
async def delete_customer(
    cpf: str,
    service: InventoryService = Depends(get_inventory_service),
    current_user: User = Depends(get_current_active_user)
):
    """Delete customer"""
    try:
        deleted = await service.delete_customer(cpf)
    except RentalError as e:
        raise _to_http_exception(e)
    if not deleted:
        raise HTTPException(status_code=404, detail="Customer not found")

# ============================================================================
# RENTAL ENDPOINTS
# ============================================================================

@app.post("/api/rentals/quote", response_model=QuoteResponse, tags=["Rentals"])
async def quote_rental(
    request: QuoteRequest,
    service: BookingService = Depends(get_booking_service),
    current_user: User = Depends(get_current_active_user)
):
    """Price a prospective rental without booking it"""
    try:
        price = await service.quote(
            license_plate=request.license_plate,
            start_date=request.start_date,
            end_date=request.end_date,
            with_insurance=request.with_insurance
        )
    except RentalError as e:
        raise _to_http_exception(e)
    period = RentalPeriod(start_date=request.start_date, end_date=request.end_date)
    return QuoteResponse(
        license_plate=request.license_plate,
        start_date=period.start_date,
        end_date=period.end_date,
        days=period.days(),
        with_insurance=request.with_insurance,
        total_price=price.amount
    )

@app.post("/api/rentals", response_model=RentalResponse, status_code=201, tags=["Rentals"])
async def create_rental(
    request: CreateRentalRequest,
    service: BookingService = Depends(get_booking_service),
    inventory: InventoryService = Depends(get_inventory_service),
    current_user: User = Depends(get_current_active_user)
):
    """Book a vehicle"""
    try:
        contract = await service.book(
            license_plate=request.license_plate,
            cpf=request.cpf,
            start_date=request.start_date,
            end_date=request.end_date,
            with_insurance=request.with_insurance
        )
        return await _rental_to_response(contract, inventory)
    except RentalError as e:
        raise _to_http_exception(e)

@app.get("/api/rentals", response_model=List[RentalResponse], tags=["Rentals"])
async def list_rentals(
    service: RentalAdministrationService = Depends(get_rental_admin_service),
    inventory: InventoryService = Depends(get_inventory_service),
    current_user: User = Depends(get_current_active_user)
):
    """Get all rentals"""
    contracts = await service.list_rentals()
    return [await _rental_to_response(c, inventory) for c in contracts]

@app.get("/api/rentals/{rental_id}", response_model=RentalResponse, tags=["Rentals"])
async def get_rental(
    rental_id: int,
    service: RentalAdministrationService = Depends(get_rental_admin_service),
    inventory: InventoryService = Depends(get_inventory_service),
    current_user: User = Depends(get_current_active_user)
):
    """Get rental by ID"""
    contract = await service.find_rental(rental_id)
    if not contract:
        raise HTTPException(status_code=404, detail="Rental not found")
    return await _rental_to_response(contract, inventory)

@app.put("/api/rentals/{rental_id}/status", response_model=RentalResponse, tags=["Rentals"])
async def update_rental_status(
    rental_id: int,
    request: UpdateRentalStatusRequest,
    service: RentalAdministrationService = Depends(get_rental_admin_service),
    inventory: InventoryService = Depends(get_inventory_service),
    current_user: User = Depends(get_current_active_user)
):
    """Administrative status update"""
    try:
        contract = await service.update_status(rental_id, request.status)
    except RentalError as e:
        raise _to_http_exception(e)
    if not contract:
        raise HTTPException(status_code=404, detail="Rental not found")
    return await _rental_to_response(contract, inventory)

@app.delete("/api/rentals/{rental_id}", status_code=204, tags=["Rentals"])
async def delete_rental(
    rental_id: int,
    service: RentalAdministrationService = Depends(get_rental_admin_service),
    current_user: User = Depends(get_current_active_user)
):
    """Delete rental"""
    deleted = await service.delete_rental(rental_id)
    if not deleted:
        raise HTTPException(status_code=404, detail="Rental not found")

# ============================================================================
# RETURN ENDPOINTS
# ============================================================================

@app.post("/api/returns", response_model=RentalResponse, tags=["Returns"])
async def return_vehicle(
    request: ReturnVehicleRequest,
    service: SettlementService = Depends(get_settlement_service),
    inventory: InventoryService = Depends(get_inventory_service),
    current_user: User = Depends(get_current_active_user)
):
    """Return a vehicle and settle the contract"""
    try:
        contract = await service.settle(ReturnRequest(
            rental_id=request.rental_id,
            actual_return_date=request.actual_return_date,
            needs_maintenance=request.needs_maintenance,
            needs_cleaning=request.needs_cleaning
        ))
        return await _rental_to_response(contract, inventory)
    except RentalError as e:
        raise _to_http_exception(e)

# ============================================================================
# HELPER FUNCTIONS
# ============================================================================

def _vehicle_to_response(vehicle) -> VehicleResponse:
    """Convert Vehicle entity to VehicleResponse"""
    return VehicleResponse(
        license_plate=vehicle.plate(),
        brand=vehicle.brand,
        model=vehicle.model,
        daily_rate=vehicle.daily_rate
    )

def _customer_to_response(customer) -> CustomerResponse:
    """Convert Customer entity to CustomerResponse"""
    return CustomerResponse(
        name=customer.name,
        cpf=customer.cpf.format()
    )

async def _rental_to_response(contract, inventory: InventoryService) -> RentalResponse:
    """Convert RentalContract entity to RentalResponse with the current vehicle and customer"""
    vehicle = await inventory.find_vehicle(contract.plate())
    customer = await inventory.find_customer(contract.cpf.unformat())
    return RentalResponse(
        rental_id=contract.rental_id,
        license_plate=contract.plate(),
        cpf=contract.cpf.format(),
        customer=_customer_to_response(customer) if customer else None,
        vehicle=_vehicle_to_response(vehicle) if vehicle else None,
        start_date=contract.period.start_date,
        end_date=contract.period.end_date,
        quoted_total_price=contract.quoted_total_price.amount,
        status=contract.status.value,
        actual_return_date=contract.actual_return_date,
        final_price=contract.final_price.amount if contract.final_price else None,
        created_at=contract.created_at,
        modified_at=contract.modified_at,
        version=contract.version
    )
