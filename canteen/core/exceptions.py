from typing import Optional
from fastapi import HTTPException, status

class BaseAppException(HTTPException):
    error_code = "app_error"

    def __init__(self, status_code: int, detail: str):
        super().__init__(status_code=status_code, detail=detail)

class ValidationError(BaseAppException):
    error_code = "validation_error"

    def __init__(self, detail: str = "Validation error"):
        super().__init__(status_code=status.HTTP_422_UNPROCESSABLE_ENTITY, detail=detail)

class NotFoundError(BaseAppException):
    error_code = "not_found"

    def __init__(self, detail: str = "Resource not found"):
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)

# ---------- Employee directory / ledger ----------
class EmployeeNotFoundError(NotFoundError):
    error_code = "employee_not_found"

    def __init__(self, employee_id: str):
        self.employee_id = employee_id
        super().__init__(detail=f"Employee '{employee_id}' not found")

class EmployeeAlreadyExistsError(BaseAppException):
    error_code = "employee_already_exists"

    def __init__(self, employee_id: str):
        self.employee_id = employee_id
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=f"Employee '{employee_id}' already exists")

class InsufficientBalanceError(BaseAppException):
    error_code = "insufficient_balance"

    def __init__(self, detail: str = "Insufficient ticket balance"):
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)

class NoTicketsAvailableError(BaseAppException):
    error_code = "no_tickets_available"

    def __init__(self, employee_id: str):
        self.employee_id = employee_id
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=f"No tickets available for employee '{employee_id}'")

class InvalidAmountError(ValidationError):
    error_code = "invalid_amount"

    def __init__(self, amount, detail: Optional[str] = None):
        self.amount = amount
        super().__init__(detail=detail or f"Amount must be a positive whole number, got {amount!r}")

class ConcurrentUpdateConflict(Exception):
    """A write lost to a competing transaction; ``run_in_transaction`` retries it."""

class TransientFailureError(BaseAppException):
    error_code = "transient_failure"

    def __init__(self, detail: str = "The operation could not be completed, please retry"):
        super().__init__(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=detail)

# ---------- Analysis ----------
class InsufficientDataError(ValidationError):
    error_code = "insufficient_data"

    def __init__(self, detail: str = "Not enough data to perform analysis"):
        super().__init__(detail=detail)

class InvalidAnalysisInputError(ValidationError):
    error_code = "invalid_analysis_input"

class SummarizationFailedError(BaseAppException):
    error_code = "summarization_failed"

    def __init__(self, detail: str = "Could not generate consumption analysis, please try again later"):
        super().__init__(status_code=status.HTTP_502_BAD_GATEWAY, detail=detail)

# ---------- Scanner ----------
class NoMatchError(NotFoundError):
    error_code = "no_match"

    def __init__(self, detail: str = "Fingerprint did not match any employee"):
        super().__init__(detail=detail)

class DeviceError(BaseAppException):
    error_code = "device_error"

    def __init__(self, detail: str = "Biometric device error"):
        super().__init__(status_code=status.HTTP_503_SERVICE_UNAVAILABLE, detail=detail)
