"""
Domain exceptions for the rental engine.

Every error carries a machine-readable ``code`` so the API layer can map it to
an HTTP status without parsing messages. The classes inherit from Exception,
not ValueError, so they bubble out of pydantic validators untouched.

    RentalError
    +-- InvalidInputError
    |   +-- MissingFieldError
    |   +-- MissingRequestError
    |   +-- InvalidIdentifierError
    +-- InvalidPeriodError
    +-- NotFoundError
    |   +-- CustomerNotFoundError
    |   +-- VehicleNotFoundError
    |   +-- ContractNotFoundError
    +-- ConflictError
    |   +-- VehicleUnavailableError
    |   +-- AlreadySettledError
    |   +-- EntityAlreadyExistsError
    |   +-- EntityInUseError
    +-- InvalidStateError
        +-- InvalidReturnDateError
"""


class RentalError(Exception):
    """Base class for every error raised by the rental engine."""

    code: str = "RENTAL_ERROR"
    default_message: str = "Rental operation failed"

    def __init__(self, message: str = None) -> None:
        self.message = message or self.default_message
        super().__init__(self.message)

    def __str__(self) -> str:
        return self.message


# ---------------------------------------------------------------------------
# Caller errors
# ---------------------------------------------------------------------------

class InvalidInputError(RentalError):
    """Raised when arguments are malformed or absent."""

    code = "INVALID_INPUT"
    default_message = "Invalid input"


class MissingFieldError(InvalidInputError):
    """Raised when a mandatory field is absent."""

    code = "MISSING_FIELD"
    default_message = "Mandatory field is missing"


class MissingRequestError(InvalidInputError):
    code = "MISSING_REQUEST"
    default_message = "Request cannot be null"


class InvalidIdentifierError(InvalidInputError):
    """Raised when a license plate or CPF fails its format/checksum rules."""

    code = "INVALID_IDENTIFIER"
    default_message = "Invalid identifier"


class InvalidPeriodError(RentalError):
    """Raised when a rental period violates its invariants."""

    code = "INVALID_PERIOD"
    default_message = "Invalid rental period"


# ---------------------------------------------------------------------------
# Lookup errors
# ---------------------------------------------------------------------------

class NotFoundError(RentalError):
    code = "NOT_FOUND"
    default_message = "Entity not found"


class CustomerNotFoundError(NotFoundError):
    code = "CUSTOMER_NOT_FOUND"
    default_message = "Customer not found"


class VehicleNotFoundError(NotFoundError):
    code = "VEHICLE_NOT_FOUND"
    default_message = "Vehicle not found"


class ContractNotFoundError(NotFoundError):
    code = "CONTRACT_NOT_FOUND"
    default_message = "Rental contract not found"


# ---------------------------------------------------------------------------
# Conflicts
# ---------------------------------------------------------------------------

class ConflictError(RentalError):
    code = "CONFLICT"
    default_message = "Operation conflicts with current state"


class VehicleUnavailableError(ConflictError):
    """Raised when the vehicle has an active rental overlapping the request."""

    code = "VEHICLE_UNAVAILABLE"
    default_message = "Vehicle unavailable for the requested period"


class AlreadySettledError(ConflictError):
    """Raised when a finished contract is settled again."""

    code = "ALREADY_SETTLED"
    default_message = "This rental has already been finished"


class EntityAlreadyExistsError(ConflictError):
    code = "ENTITY_ALREADY_EXISTS"
    default_message = "Entity already exists"


class EntityInUseError(ConflictError):
    """Raised when deleting a vehicle or customer that an ACTIVE contract references."""

    code = "ENTITY_IN_USE"
    default_message = "Entity is referenced by an active rental"


# ---------------------------------------------------------------------------
# State errors
# ---------------------------------------------------------------------------

class InvalidStateError(RentalError):
    code = "INVALID_STATE"
    default_message = "Invalid state for this operation"


class InvalidReturnDateError(InvalidStateError):
    code = "INVALID_RETURN_DATE"
    default_message = "Return date cannot be before the rental start date"
