"""
Error types raised by the Inventory service operations.

Each error carries the HTTP status it maps to; main.py renders them as
{"detail": message}, the same body FastAPI uses for HTTPException.
"""


class InventoryError(Exception):
    """Base class for every precondition failure surfaced to callers."""
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class NotFoundError(InventoryError):
    """A referenced store or product does not exist."""
    status_code = 404


class ConflictError(InventoryError):
    """Duplicate SKU, stale version, or a store that still owns products."""
    status_code = 409


class InvalidRequestError(InventoryError):
    """The request is well-formed but would break an invariant, e.g. negative stock."""
    status_code = 400
