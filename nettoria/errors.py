"""
Common Error Constants and Cart Exceptions

Centralized error messages to avoid string duplication.
"""

# Cart errors
ERROR_ITEM_NOT_FOUND = "Item not found in cart"
ERROR_INVALID_PATCH = "Invalid cart item update"
ERROR_NO_SELECTED_SERVICE = "No service selected"
ERROR_NO_EDIT_IN_PROGRESS = "No item is being edited"
ERROR_CART_STORAGE = "Cart storage unavailable"

# Generic errors
ERROR_INVALID_REQUEST = "Invalid request"
ERROR_INTERNAL = "Internal server error"


class CartError(Exception):
    """Base class for cart errors surfaced to callers."""

    status_code = 400
    default_message = ERROR_INVALID_REQUEST

    def __init__(self, message: str | None = None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message


class CartItemNotFoundError(CartError):
    status_code = 404
    default_message = ERROR_ITEM_NOT_FOUND

    def __init__(self, code: str):
        super().__init__(f"{ERROR_ITEM_NOT_FOUND}: {code}")
        self.code = code


class InvalidPatchError(CartError):
    default_message = ERROR_INVALID_PATCH


class NoSelectedServiceError(CartError):
    default_message = ERROR_NO_SELECTED_SERVICE


class NoEditInProgressError(CartError):
    default_message = ERROR_NO_EDIT_IN_PROGRESS


class CartStorageError(CartError):
    """A slot the next request depends on could not be written."""

    status_code = 503
    default_message = ERROR_CART_STORAGE
