# storefront/domain/exceptions.py
"""
Wyjatki domenowe.

Dziedzicza po wbudowanych wyjatkach, zeby routery mapowaly je tak samo
jak reszte (ValueError -> 400/404, PermissionError -> 403).
"""


class CartError(ValueError):
    """Invalid cart mutation (e.g. non-positive quantity)."""


class EmptyCartError(CartError):
    """Checkout attempted with an empty cart."""


class CheckoutValidationError(ValueError):
    """A required checkout field is missing."""

    def __init__(self, field: str, label: str):
        self.field = field
        super().__init__(f"{label} is required")


class NotFoundError(ValueError):
    """Requested row does not exist in the backend."""


class InvalidStatusTransition(ValueError):
    """Order status change not allowed from the current state."""


class RemoteStoreError(RuntimeError):
    """Remote tier (hosted tables) could not complete a cart command."""
