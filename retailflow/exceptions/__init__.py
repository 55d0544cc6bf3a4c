"""Custom exceptions for the RetailFlow application."""

class RetailError(Exception):
    """Base exception for all application errors."""
    def __init__(self, message="An internal error occurred", status_code=500, payload=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.payload = payload

    def to_dict(self):
        rv = dict(self.payload or ())
        rv['message'] = self.message
        rv['status'] = 'error'
        return rv

class ValidationError(RetailError):
    """Raised for missing or invalid request fields."""
    def __init__(self, message, payload=None):
        super().__init__(message, 400, payload)

class UnauthorizedError(RetailError):
    """Raised when credentials or the bearer token are missing or invalid."""
    def __init__(self, message="Unauthorized"):
        super().__init__(message, 401)

class NotFoundError(RetailError):
    """Exception raised when a resource is not found."""
    def __init__(self, message="Resource not found", payload=None):
        super().__init__(message, 404, payload)

class ConflictError(RetailError):
    """Exception raised for business rule conflicts."""
    def __init__(self, message, payload=None):
        super().__init__(message, 409, payload)

class InsufficientStockError(ConflictError):
    """Raised when an inventory deduction finds too little stock."""
    def __init__(self, sku):
        self.sku = sku
        message = f"Product with SKU {sku} not found or insufficient stock."
        super().__init__(message, payload={'sku': sku})

class InternalError(RetailError):
    """Unexpected storage or connectivity failure. Never carries internal detail."""
    def __init__(self, message="An internal error occurred"):
        super().__init__(message, 500)
